"""Tests for StorageService upserts and range queries"""
from datetime import date, datetime

from cp_tracker.models.db import DailyActivity, PlatformStats
from cp_tracker.models.platform import (
    DailyActivityRecord, FetchStatus, Platform, PlatformRecord, RatingEntry
)
from cp_tracker.services.storage import StorageService


def activity(day, total, level=0, **counts):
    breakdown = {platform: 0 for platform in Platform}
    breakdown.update({Platform(name): count for name, count in counts.items()})
    return DailyActivityRecord(date=day, breakdown=breakdown, total_submissions=total, intensity_level=level)


def test_platform_upsert_keeps_one_row(database):
    with database.session() as session:
        storage = StorageService(session)
        storage.upsert_platform_stats(PlatformRecord(platform=Platform.CODEFORCES, username="a", total_solved=10))
        storage.upsert_platform_stats(PlatformRecord(platform=Platform.CODEFORCES, username="a", total_solved=12,
                                                     fetch_status=FetchStatus.PARTIAL))

        assert session.query(PlatformStats).count() == 1
        stored = storage.find_platform_stats(Platform.CODEFORCES)
        assert stored.total_solved == 12
        assert stored.fetch_status == FetchStatus.PARTIAL
        assert stored.last_fetched is not None


def test_rating_history_round_trip(database):
    history = [RatingEntry(rating=1500, date=datetime(2024, 1, 7, 8, 0), contest_id=1900,
                           contest_name="Round 1", ranking=321)]
    with database.session() as session:
        storage = StorageService(session)
        storage.upsert_platform_stats(PlatformRecord(platform=Platform.CODEFORCES, username="a",
                                                     rating_history=history))
        stored = storage.find_platform_stats(Platform.CODEFORCES)

    assert stored.rating_history == history


def test_absent_optional_fields_stay_none(database):
    with database.session() as session:
        storage = StorageService(session)
        storage.upsert_platform_stats(PlatformRecord(platform=Platform.GEEKSFORGEEKS, username="g",
                                                     coding_score=40))
        stored = storage.find_platform_stats(Platform.GEEKSFORGEEKS)

    assert stored.coding_score == 40
    assert stored.rating is None
    assert stored.max_rating is None


def test_find_missing_platform(database):
    with database.session() as session:
        assert StorageService(session).find_platform_stats(Platform.LEETCODE) is None


def test_intensity_level_recomputed_on_write(database):
    with database.session() as session:
        storage = StorageService(session)
        stored = storage.upsert_daily_activity(activity(date(2024, 3, 1), total=7, level=0, leetcode=7))

        assert stored.intensity_level == 3
        assert session.query(DailyActivity).one().intensity_level == 3


def test_daily_upsert_keeps_one_row_per_date(database):
    with database.session() as session:
        storage = StorageService(session)
        storage.upsert_daily_activity(activity(date(2024, 3, 1), total=1, leetcode=1))
        storage.upsert_daily_activity(activity(date(2024, 3, 1), total=12, level=1, codeforces=12))

        rows = session.query(DailyActivity).all()
        assert len(rows) == 1
        assert rows[0].date == datetime(2024, 3, 1)
        assert rows[0].total_submissions == 12
        assert rows[0].intensity_level == 4
        assert rows[0].breakdown == {"leetcode": 0, "codeforces": 12, "codechef": 0, "geeksforgeeks": 0}


def test_range_is_inclusive_and_ascending(database):
    with database.session() as session:
        storage = StorageService(session)
        for day in (date(2024, 1, 3), date(2023, 12, 31), date(2024, 1, 1), date(2025, 1, 1)):
            storage.upsert_daily_activity(activity(day, total=day.day, leetcode=day.day))

        days = storage.find_daily_activity_in_range(date(2024, 1, 1), date(2024, 12, 31))

    assert [d.date for d in days] == [date(2024, 1, 1), date(2024, 1, 3)]
    assert days[1].breakdown[Platform.LEETCODE] == 3


def test_latest_fetch_time(database):
    with database.session() as session:
        storage = StorageService(session)
        assert storage.latest_fetch_time() is None
        storage.upsert_platform_stats(PlatformRecord(platform=Platform.LEETCODE, username="a",
                                                     last_fetched=datetime(2024, 1, 1)))
        storage.upsert_platform_stats(PlatformRecord(platform=Platform.CODECHEF, username="b",
                                                     last_fetched=datetime(2024, 2, 1)))

        assert storage.latest_fetch_time() == datetime(2024, 2, 1)
