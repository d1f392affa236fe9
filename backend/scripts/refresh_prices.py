#!/usr/bin/env python
"""Refresh cached asset prices once, outside the running application.

Runs the same refresh the background scheduler performs on every tick.
Useful after a provider outage or when the scheduler is disabled.

Usage:
    python -m scripts.refresh_prices
    python -m scripts.refresh_prices --symbol BTC --symbol ETH
    python -m scripts.refresh_prices --concurrency 5
"""

import argparse
from typing import Optional

from api.dependencies import get_price_service
from config import settings
from database import get_session_local
from logging_config import setup_logging
from services.price_refresh_scheduler import PriceRefreshScheduler
from services.price_service import PriceService


def refresh_prices(
    symbols: Optional[list[str]] = None,
    concurrency: Optional[int] = None,
    price_service: Optional[PriceService] = None,
    session_factory=None,
) -> int:
    """Refresh the given symbols, or every asset when none are given.

    Returns:
        Number of assets that failed to refresh. A full run that fails as a
        whole counts as one failure.
    """
    scheduler = PriceRefreshScheduler(
        price_service=price_service or get_price_service(),
        session_factory=session_factory or get_session_local(),
        concurrency=concurrency or settings.PRICE_REFRESH_CONCURRENCY,
    )

    if not symbols:
        print("Refreshing all asset prices...")
        summary = scheduler.refresh_all_prices()
        if summary is None:
            print("✗ Refresh run failed")
            return 1
        print(f"\nSummary: {summary.refreshed} refreshed, {summary.failed} failed")
        return summary.failed

    failed = 0
    for symbol in symbols:
        if scheduler.refresh_asset(symbol.upper()):
            print(f"✓ Refreshed {symbol.upper()}")
        else:
            failed += 1
            print(f"✗ Failed to refresh {symbol.upper()}")

    print(f"\nSummary: {len(symbols) - failed} refreshed, {failed} failed")
    return failed


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--symbol",
        action="append",
        dest="symbols",
        help="Symbol to refresh (repeatable). Defaults to every stored asset.",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum refreshes in flight (default: PRICE_REFRESH_CONCURRENCY)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every asset refresh"
    )
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else None)
    failed = refresh_prices(args.symbols, args.concurrency)
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
