"""Tests for intensity banding and daily activity estimation"""
from datetime import date

import pytest

from cp_tracker.activity import (
    ActivityEstimator, calendar_count, day_start_epoch, intensity_level, solved_delta
)
from cp_tracker.models.platform import FetchStatus, Platform, PlatformRecord

TODAY = date(2024, 3, 15)


def record(platform, **kwargs):
    return PlatformRecord(platform=platform, username="someone", **kwargs)


@pytest.mark.parametrize("count,level", [
    (0, 0), (1, 1), (2, 1), (3, 2), (5, 2), (6, 3), (9, 3), (10, 4), (250, 4),
])
def test_intensity_level_bands(count, level):
    assert intensity_level(count) == level


def test_solved_delta_is_never_negative():
    for previous in range(0, 30, 3):
        for current in range(0, 30, 4):
            assert solved_delta(current, previous) == max(0, current - previous)
            assert solved_delta(current, previous) >= 0


def test_calendar_lookup_matches_exact_day_start_only():
    calendar = {1700000000: 3}
    assert calendar_count(calendar, 1700000000) == 3
    assert calendar_count(calendar, 1700000000 + 86400) == 0
    assert calendar_count(calendar, 1700000000 - 86400) == 0


class TestActivityEstimator:

    def setup_method(self):
        self.estimator = ActivityEstimator()

    def test_codechef_delta_from_previous_run(self):
        results = {Platform.CODECHEF: record(Platform.CODECHEF, total_solved=45)}
        previous = {Platform.CODECHEF: record(Platform.CODECHEF, total_solved=40)}

        activity = self.estimator.estimate(results, previous, TODAY)

        assert activity.breakdown[Platform.CODECHEF] == 5
        assert activity.total_submissions == 5
        assert activity.intensity_level == 2

    def test_shrinking_counter_counts_zero(self):
        results = {Platform.GEEKSFORGEEKS: record(Platform.GEEKSFORGEEKS, total_solved=10)}
        previous = {Platform.GEEKSFORGEEKS: record(Platform.GEEKSFORGEEKS, total_solved=12)}

        activity = self.estimator.estimate(results, previous, TODAY)

        assert activity.breakdown[Platform.GEEKSFORGEEKS] == 0

    def test_first_run_has_no_baseline(self):
        results = {
            Platform.CODECHEF: record(Platform.CODECHEF, total_solved=45),
            Platform.GEEKSFORGEEKS: record(Platform.GEEKSFORGEEKS, total_solved=300),
        }

        activity = self.estimator.estimate(results, {}, TODAY)

        assert activity.breakdown[Platform.CODECHEF] == 0
        assert activity.breakdown[Platform.GEEKSFORGEEKS] == 0
        assert activity.total_submissions == 0

    def test_native_signals_for_today(self):
        results = {
            Platform.LEETCODE: record(
                Platform.LEETCODE,
                submission_calendar={day_start_epoch(TODAY): 4, day_start_epoch(date(2024, 3, 14)): 9}
            ),
            Platform.CODEFORCES: record(
                Platform.CODEFORCES,
                submissions_by_date={"2024-03-15": 3, "2024-03-14": 7}
            ),
        }

        activity = self.estimator.estimate(results, {}, TODAY)

        assert activity.breakdown[Platform.LEETCODE] == 4
        assert activity.breakdown[Platform.CODEFORCES] == 3
        assert activity.total_submissions == 7
        assert activity.intensity_level == 3

    def test_missing_day_counts_zero(self):
        results = {
            Platform.LEETCODE: record(Platform.LEETCODE, submission_calendar={1: 5}),
            Platform.CODEFORCES: record(Platform.CODEFORCES, submissions_by_date={"2020-01-01": 2}),
        }

        activity = self.estimator.estimate(results, {}, TODAY)

        assert activity.total_submissions == 0

    def test_all_failed_gives_zero_record(self):
        results = {platform: PlatformRecord.failure(platform, "down") for platform in Platform}
        previous = {Platform.CODECHEF: record(Platform.CODECHEF, total_solved=40)}

        activity = self.estimator.estimate(results, previous, TODAY)

        assert activity.date == TODAY
        assert activity.breakdown == {platform: 0 for platform in Platform}
        assert activity.total_submissions == 0
        assert activity.intensity_level == 0

    def test_breakdown_always_has_every_platform(self):
        activity = self.estimator.estimate({}, {}, TODAY)
        assert set(activity.breakdown) == set(Platform)

    def test_partial_record_still_estimated(self):
        results = {Platform.CODECHEF: record(Platform.CODECHEF, total_solved=41,
                                             fetch_status=FetchStatus.PARTIAL)}
        previous = {Platform.CODECHEF: record(Platform.CODECHEF, total_solved=40)}

        activity = self.estimator.estimate(results, previous, TODAY)

        assert activity.breakdown[Platform.CODECHEF] == 1
