"""Entry point for aggregation runs and the read API"""
import argparse
import json
import logging
import sys
import traceback

from cp_tracker.aggregator import Aggregator
from cp_tracker.config import settings
from cp_tracker.db import db

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)

def init_database() -> None:
    """Connect to storage, nothing works without it"""
    try:
        db.init()
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        traceback.print_exc()
        sys.exit(1)

def run_once() -> None:
    """Run a single aggregation pass and print its summary."""
    init_database()
    summary = Aggregator(settings).run()

    activity = summary.activity
    print(json.dumps({
        'started_at': summary.started_at.isoformat(),
        'results': {platform.value: status.value for platform, status in summary.results.items()},
        'persisted': [platform.value for platform in summary.persisted],
        'errors': summary.errors,
        'activity': {
            'date': activity.date.isoformat(),
            'total_submissions': activity.total_submissions,
            'intensity_level': activity.intensity_level,
            'breakdown': {platform.value: count for platform, count in activity.breakdown.items()},
        } if activity else None,
    }, indent=2))

def serve() -> None:
    """Start the read API with the daily scheduler alongside it."""
    import uvicorn

    from cp_tracker.api import app
    from cp_tracker.scheduler import DailyScheduler

    init_database()

    aggregator = Aggregator(settings)
    scheduler = DailyScheduler(aggregator.run, settings.schedule, settings.STARTUP_DELAY_SECONDS)
    scheduler.start()
    try:
        uvicorn.run(app, host=settings.HOST, port=settings.PORT)
    finally:
        scheduler.stop(wait=False)
        db.dispose()

def main() -> None:
    parser = argparse.ArgumentParser(description='Competitive programming activity tracker')
    parser.add_argument('command', nargs='?', choices=['run', 'serve'], default='serve',
                        help='run: single aggregation pass, serve: API server with daily schedule')
    args = parser.parse_args()

    if args.command == 'run':
        run_once()
    else:
        serve()

if __name__ == "__main__":
    main()
