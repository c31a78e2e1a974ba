"""Database storage service for platform stats and daily activity"""
import logging
from datetime import date, datetime, time
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from cp_tracker.activity import intensity_level
from cp_tracker.models.db import PlatformStats, DailyActivity
from cp_tracker.models.platform import (
    DailyActivityRecord, FetchStatus, Platform, PlatformRecord, RatingEntry
)

logger = logging.getLogger(__name__)

# Columns copied one-to-one between PlatformRecord and PlatformStats
STAT_FIELDS = (
    'username', 'total_solved', 'total_submissions', 'easy_solved', 'medium_solved',
    'hard_solved', 'rating', 'max_rating', 'rank', 'ranking', 'global_rank',
    'country_rank', 'institution_rank', 'coding_score', 'monthly_score', 'stars',
    'attended_contests', 'top_percentage', 'acceptance_rate', 'streak',
    'last_fetched', 'error_message'
)

class StorageError(Exception):
    """Base exception for storage service errors"""
    pass

def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)

class StorageService:
    """Handles all database operations"""

    def __init__(self, session: Session):
        if not session:
            raise ValueError("Database session is required")
        self.session = session

    @staticmethod
    def _to_record(row: PlatformStats) -> PlatformRecord:
        record = PlatformRecord(
            platform=Platform(row.platform),
            fetch_status=FetchStatus(row.fetch_status),
            rating_history=[RatingEntry.from_dict(h) for h in row.rating_history or []]
        )
        for name in STAT_FIELDS:
            setattr(record, name, getattr(row, name))
        return record

    @staticmethod
    def _to_activity(row: DailyActivity) -> DailyActivityRecord:
        breakdown = row.breakdown or {}
        return DailyActivityRecord(
            date=row.date.date(),
            breakdown={platform: breakdown.get(platform.value, 0) for platform in Platform},
            total_submissions=row.total_submissions,
            intensity_level=row.intensity_level
        )

    def find_all_platform_stats(self) -> List[PlatformRecord]:
        """All stored platform records"""
        try:
            rows = self.session.query(PlatformStats).order_by(PlatformStats.id).all()
            return [self._to_record(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Database error loading platform stats: {e}")
            raise StorageError(f"Failed to load platform stats: {e}")

    def find_platform_stats(self, platform: Platform) -> Optional[PlatformRecord]:
        """Stored record for one platform, None if never stored"""
        try:
            row = self.session.query(PlatformStats).filter_by(platform=platform.value).first()
            return self._to_record(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"Database error loading {platform.value} stats: {e}")
            raise StorageError(f"Failed to load {platform.value} stats: {e}")

    def load_previous_stats(self) -> Dict[Platform, PlatformRecord]:
        """Stored records keyed by platform"""
        return {record.platform: record for record in self.find_all_platform_stats()}

    def latest_fetch_time(self) -> Optional[datetime]:
        """Most recent last_fetched across platforms"""
        try:
            return self.session.query(func.max(PlatformStats.last_fetched)).scalar()
        except SQLAlchemyError as e:
            logger.error(f"Database error reading last fetch time: {e}")
            raise StorageError(f"Failed to read last fetch time: {e}")

    def upsert_platform_stats(self, record: PlatformRecord) -> None:
        """Create or update the single row for record.platform"""
        try:
            row = self.session.query(PlatformStats).filter_by(platform=record.platform.value).first()
            if not row:
                row = PlatformStats(platform=record.platform.value)
                self.session.add(row)

            for name in STAT_FIELDS:
                setattr(row, name, getattr(record, name))
            row.fetch_status = record.fetch_status.value
            row.rating_history = [entry.to_dict() for entry in record.rating_history]
            row.last_fetched = record.last_fetched or datetime.now()

            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error storing {record.platform.value} stats: {e}")
            raise StorageError(f"Failed to store {record.platform.value} stats: {e}")

    def upsert_daily_activity(self, activity: DailyActivityRecord) -> DailyActivityRecord:
        """
        Create or update the row for activity.date.

        The intensity level is always derived from the total here, whatever
        the caller passed in.

        Returns:
            DailyActivityRecord as stored
        """
        level = intensity_level(activity.total_submissions)
        breakdown = {platform.value: activity.breakdown.get(platform, 0) for platform in Platform}
        day = _midnight(activity.date)

        try:
            row = self.session.query(DailyActivity).filter_by(date=day).first()
            if not row:
                row = DailyActivity(date=day)
                self.session.add(row)

            row.total_submissions = activity.total_submissions
            row.breakdown = breakdown
            row.intensity_level = level

            self.session.commit()
            return self._to_activity(row)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error storing daily activity for {activity.date}: {e}")
            raise StorageError(f"Failed to store daily activity: {e}")

    def find_daily_activity_in_range(self, start: date, end: date) -> List[DailyActivityRecord]:
        """Daily records with start <= date <= end, ascending by date"""
        try:
            rows = (
                self.session.query(DailyActivity)
                .filter(DailyActivity.date >= _midnight(start), DailyActivity.date <= _midnight(end))
                .order_by(DailyActivity.date.asc())
                .all()
            )
            return [self._to_activity(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Database error loading daily activity: {e}")
            raise StorageError(f"Failed to load daily activity: {e}")
