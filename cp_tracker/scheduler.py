"""Daily trigger for the aggregation run"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from cp_tracker.config import ScheduleSettings

logger = logging.getLogger(__name__)

JOB_ID = "daily-aggregation"
MISFIRE_GRACE_SECONDS = 3600

class DailyScheduler:
    """
    Runs a job shortly after start and then daily at a fixed wall-clock time.

    Both runs belong to one job limited to a single instance, so a run
    never starts while the previous one is still going.
    """

    def __init__(self, job: Callable[[], object], schedule: ScheduleSettings,
                 startup_delay: float = 0.0, scheduler: Optional[BackgroundScheduler] = None):
        self.job = job
        self.schedule = schedule
        self.startup_delay = startup_delay
        self.scheduler = scheduler or BackgroundScheduler(timezone=schedule.timezone)

    def trigger(self) -> CronTrigger:
        return CronTrigger(
            hour=self.schedule.hour,
            minute=self.schedule.minute,
            timezone=self.schedule.timezone
        )

    def next_run(self, now: datetime) -> datetime:
        """Next daily fire time at or after now, in the schedule's timezone"""
        return self.trigger().get_next_fire_time(None, now)

    def _run_job(self) -> None:
        try:
            self.job()
        except Exception:
            logger.exception("Scheduled aggregation run failed")

    def start(self) -> None:
        if self.scheduler.running:
            return

        first_run = datetime.now(self.trigger().timezone) + timedelta(seconds=self.startup_delay)
        self.scheduler.add_job(
            self._run_job,
            trigger=self.trigger(),
            id=JOB_ID,
            name="Daily platform aggregation",
            next_run_time=first_run,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
            replace_existing=True
        )
        self.scheduler.start()
        logger.info(
            f"Initial data fetch at {first_run.isoformat()}, then daily at "
            f"{self.schedule.hour:02d}:{self.schedule.minute:02d} {self.schedule.timezone}"
        )

    def stop(self, wait: bool = True) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
