"""Daily aggregation run across all configured platforms"""
import logging
import time
from datetime import date, datetime
from typing import Callable, Dict, Mapping, Optional

from cp_tracker.activity import ActivityEstimator
from cp_tracker.config import Settings
from cp_tracker.db import Database, db
from cp_tracker.models.platform import (
    DailyActivityRecord, Platform, PlatformRecord, RunSummary
)
from cp_tracker.services.base import PlatformClient
from cp_tracker.services.codechef import CodeChefAPI
from cp_tracker.services.codeforces import CodeforcesAPI
from cp_tracker.services.geeksforgeeks import GeeksforGeeksAPI
from cp_tracker.services.leetcode import LeetCodeAPI
from cp_tracker.services.storage import StorageService

logger = logging.getLogger(__name__)

def default_clients() -> Dict[Platform, PlatformClient]:
    """One client per platform, in fetch order"""
    return {
        Platform.LEETCODE: LeetCodeAPI(),
        Platform.CODEFORCES: CodeforcesAPI(),
        Platform.CODECHEF: CodeChefAPI(),
        Platform.GEEKSFORGEEKS: GeeksforGeeksAPI(),
    }

class Aggregator:
    """
    Runs one aggregation pass.

    Platforms are fetched one after another with a fixed pause between
    them; a platform's fetch, fallbacks included, finishes before the next
    one starts. Failed platforms keep their previously stored record.
    """

    def __init__(self, settings: Settings,
                 clients: Optional[Dict[Platform, PlatformClient]] = None,
                 database: Database = db,
                 estimator: Optional[ActivityEstimator] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize aggregator with settings"""
        self.settings = settings
        self.clients = clients if clients is not None else default_clients()
        self.database = database
        self.estimator = estimator or ActivityEstimator()
        self.sleep = sleep

    def load_previous_stats(self) -> Dict[Platform, PlatformRecord]:
        """Stored records from the last run, empty when they cannot be read"""
        try:
            with self.database.session() as session:
                return StorageService(session).load_previous_stats()
        except Exception as e:
            logger.error(f"Could not load previous stats, estimating without a baseline: {e}")
            return {}

    def fetch_all(self, usernames: Mapping[Platform, Optional[str]]) -> Dict[Platform, PlatformRecord]:
        """Fetch every platform that has a username, sequentially"""
        configured = [(platform, username) for platform, username in usernames.items() if username]
        results: Dict[Platform, PlatformRecord] = {}

        for position, (platform, username) in enumerate(configured):
            if position:
                self.sleep(self.settings.PLATFORM_DELAY_SECONDS)

            logger.info(f"Fetching {platform.value} data for {username}")
            try:
                results[platform] = self.clients[platform].fetch(username)
            except Exception as e:
                logger.error(f"Unexpected error fetching {platform.value}: {e}")
                results[platform] = PlatformRecord.failure(platform, str(e))

        return results

    def save_platform_stats(self, results: Mapping[Platform, PlatformRecord], summary: RunSummary) -> None:
        """Upsert successful and partial records, skip failed ones"""
        for platform, record in results.items():
            if record.failed:
                logger.warning(f"Skipping {platform.value} - fetch failed: {record.error_message}")
                summary.errors[platform.value] = record.error_message or ''
                continue

            try:
                with self.database.session() as session:
                    StorageService(session).upsert_platform_stats(record)
                summary.persisted.append(platform)
                logger.info(f"Saved {platform.value} stats")
            except Exception as e:
                logger.error(f"Error saving {platform.value}: {e}")
                summary.errors[f"{platform.value}.save"] = str(e)

    def save_daily_activity(self, activity: DailyActivityRecord, summary: RunSummary) -> None:
        """Upsert today's record regardless of how many platforms succeeded"""
        try:
            with self.database.session() as session:
                summary.activity = StorageService(session).upsert_daily_activity(activity)
            logger.info(f"Saved daily activity for {activity.date}: {activity.total_submissions} submissions")
        except Exception as e:
            logger.error(f"Error saving daily activity: {e}")
            summary.errors['daily_activity.save'] = str(e)
            summary.activity = activity

    def run(self, today: Optional[date] = None) -> RunSummary:
        """
        Run one full pass.

        The baseline is loaded before fetching so delta estimates compare
        against exactly the previous run.

        Args:
            today: Calendar date to record, defaults to the local date

        Returns:
            RunSummary describing fetch outcomes and writes
        """
        summary = RunSummary(started_at=datetime.now())
        logger.info(f"Aggregation run started at {summary.started_at.isoformat()}")

        previous = self.load_previous_stats()
        results = self.fetch_all(self.settings.platform_usernames)
        summary.results = {platform: record.fetch_status for platform, record in results.items()}

        activity = self.estimator.estimate(results, previous, today)

        self.save_platform_stats(results, summary)
        self.save_daily_activity(activity, summary)

        logger.info(
            f"Aggregation run finished: {len(summary.persisted)}/{len(results)} platforms saved, "
            f"{activity.total_submissions} submissions today"
        )
        return summary
