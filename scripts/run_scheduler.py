import argparse
import logging

from stockwatch.config import get_settings
from stockwatch.core.logging import setup_logging
from stockwatch.database import init_db
from stockwatch.scheduler import build_scan_scheduler
from stockwatch.services.scan_service import run_scan

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Run the periodic scan scheduler.")
    parser.add_argument(
        "--run-once",
        action="store_true",
        help="Run the configured scan once and exit.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    settings = get_settings()

    if not settings.SCHEDULER_ENABLED and not args.run_once:
        logger.info("Scheduler disabled by SCHEDULER_ENABLED.")
        return

    init_db()
    scheduler = build_scan_scheduler(settings, run_scan)

    if args.run_once:
        scheduler.run_pending()
        return

    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping scheduler.")


if __name__ == "__main__":
    main()
