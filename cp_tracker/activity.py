"""Daily activity estimation and heatmap intensity banding"""
import logging
from datetime import date, datetime, time
from typing import Dict, Mapping, Optional

from cp_tracker.models.platform import DailyActivityRecord, Platform, PlatformRecord

logger = logging.getLogger(__name__)

# Platforms without a per-day signal, estimated from total solved growth
DELTA_PLATFORMS = (Platform.CODECHEF, Platform.GEEKSFORGEEKS)

def intensity_level(count: int) -> int:
    """Heatmap color band for a day's submission count"""
    if count <= 0:
        return 0
    elif count <= 2:
        return 1
    elif count <= 5:
        return 2
    elif count <= 9:
        return 3
    return 4

def day_start_epoch(day: date) -> int:
    """Unix timestamp of local midnight starting the given day"""
    return int(datetime.combine(day, time.min).timestamp())

def calendar_count(calendar: Mapping[int, int], day_start: int) -> int:
    """Submissions recorded under a day-start timestamp, 0 when absent"""
    return calendar.get(day_start, 0)

def dated_count(submissions_by_date: Mapping[str, int], day: date) -> int:
    """Submissions recorded under an ISO date, 0 when absent"""
    return submissions_by_date.get(day.isoformat(), 0)

def solved_delta(current: int, previous: int) -> int:
    """Growth of a monotonic solved counter, never negative"""
    return max(0, current - previous)

class ActivityEstimator:
    """Derives the unified daily breakdown from fresh and previous platform records"""

    def count_native(self, record: PlatformRecord, day: date) -> int:
        """Count from a platform's own per-day data"""
        if record.platform == Platform.LEETCODE:
            return calendar_count(record.submission_calendar, day_start_epoch(day))
        if record.platform == Platform.CODEFORCES:
            return dated_count(record.submissions_by_date, day)
        return 0

    def count_delta(self, record: PlatformRecord, previous: Optional[PlatformRecord]) -> int:
        """Count estimated from total solved growth since the previous run"""
        if previous is None:
            logger.info(f"No baseline for {record.platform.value}, counting 0 for today")
            return 0
        return solved_delta(record.total_solved or 0, previous.total_solved or 0)

    def estimate(
            self,
            results: Mapping[Platform, PlatformRecord],
            previous: Mapping[Platform, PlatformRecord],
            today: Optional[date] = None
    ) -> DailyActivityRecord:
        """
        Build today's activity record.

        Args:
            results: Fresh fetch results keyed by platform, skipped platforms absent
            previous: Stored records loaded before the fetch
            today: Calendar date of the run, defaults to the local date

        Returns:
            DailyActivityRecord with all four platforms in the breakdown
        """
        today = today or date.today()
        breakdown: Dict[Platform, int] = {platform: 0 for platform in Platform}

        for platform, record in results.items():
            if record.failed:
                continue
            if platform in DELTA_PLATFORMS:
                breakdown[platform] = self.count_delta(record, previous.get(platform))
            else:
                breakdown[platform] = self.count_native(record, today)

        total = sum(breakdown.values())
        return DailyActivityRecord(
            date=today,
            breakdown=breakdown,
            total_submissions=total,
            intensity_level=intensity_level(total)
        )
