import argparse
import logging
import sys

from stockwatch.core.errors import SourceUnavailable
from stockwatch.core.logging import setup_logging
from stockwatch.core.types import CheckType
from stockwatch.database import init_db
from stockwatch.schemas.scan import ScanRunRead
from stockwatch.services.scan_service import run_scan

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Run one expiry/low-stock scan and dispatch notifications.")
    parser.add_argument(
        "--check-type",
        choices=[item.value for item in CheckType],
        default=CheckType.ALL.value,
        help="Which scan to run.",
    )
    parser.add_argument(
        "--window-days",
        type=int,
        default=None,
        help="Expiry look-ahead window (defaults to SCAN_WINDOW_DAYS).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall scan deadline in seconds (defaults to SCAN_TIMEOUT_SECONDS).",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    init_db()

    try:
        report = run_scan(args.check_type, window_days=args.window_days, timeout_seconds=args.timeout)
    except SourceUnavailable as exc:
        logger.error("Scan aborted: %s", exc)
        return 2

    print(ScanRunRead.model_validate(report, from_attributes=True).model_dump_json(indent=2))
    return 0 if report.status == "completed" else 1


if __name__ == "__main__":
    sys.exit(main())
