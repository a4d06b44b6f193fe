"""
Monthly payout job.

Run once a month after the month has closed:

    python -m src.jobs.monthly_payout --month 2024-05

Without ``--month`` the previous calendar month (UTC) is processed.
Re-running for the same month never changes payouts already written.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

from src.core.database import get_database
from src.middleware.logging import configure_logging
from src.services.events import get_event_publisher
from src.services.payout_service import PayoutRunResult, PayoutService
from src.utils.validators import MonthKeyValidator

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute monthly artist payouts")
    parser.add_argument(
        "--month",
        default=None,
        help="Month to process as YYYY-MM (defaults to the previous month)",
    )
    args = parser.parse_args(argv)
    if args.month is None:
        args.month = MonthKeyValidator.previous_month()
    elif not MonthKeyValidator.is_valid(args.month):
        parser.error(f"invalid month '{args.month}', expected YYYY-MM")
    return args


async def run(month: str) -> PayoutRunResult:
    """Run the payout for ``month`` in its own database session."""
    database = get_database()
    try:
        async with database.get_session() as session:
            service = PayoutService(session, event_publisher=get_event_publisher())
            return await service.run_monthly_payout(month)
    finally:
        await database.disconnect()


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    args = parse_args(argv)

    logger.info(f"Starting monthly payout for {args.month}")
    try:
        result = asyncio.run(run(args.month))
    except Exception:
        logger.exception(f"Monthly payout for {args.month} failed")
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
