#!/usr/bin/env python3
"""Infinytix configuration and reference data health check."""

import os
import sys

# Add project to path
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config import settings
from config.market import DEFAULT_WATCHLIST, MOCK_STOCK_DATA, REAL_STOCK_DATA, initial_holdings
from core.stock_data import TICKER_PATTERN


def check_configuration():
    """Report the runtime settings that change app behaviour."""
    print("\n⚙ Configuration")
    print("=" * 70)

    print(f"  Log directory:      {settings.LOG_DIR}")
    print(f"  Default ticker:     {settings.DEFAULT_TICKER}")
    print(f"  Fetch workers:      {settings.STOCK_FETCH_WORKERS}")
    print(f"  Model:              {settings.GEMINI_MODEL}")

    healthy = True
    if settings.AI_ENABLED and not settings.GEMINI_API_KEY:
        print("  ✗ AI_ENABLED is set but no GEMINI_API_KEY / GOOGLE_API_KEY was found")
        healthy = False
    elif settings.AI_ENABLED:
        print("  ✓ AI generation enabled")
    else:
        print("  ⚠ AI generation disabled; unknown tickers use synthetic series")

    if not os.getenv("SECRET_KEY"):
        print("  ⚠ SECRET_KEY not set; sessions reset on every restart")

    if settings.STOCK_FETCH_WORKERS < 1:
        print("  ✗ STOCK_FETCH_WORKERS must be at least 1")
        healthy = False

    if not os.access(settings.LOG_DIR, os.W_OK):
        print("  ✗ Log directory is not writable")
        healthy = False

    return healthy


def check_mock_series():
    """Each mock chart must end its history at the quoted price."""
    print("\n📊 Mock Series Consistency")
    print("=" * 70)

    problems = 0
    for ticker, data in sorted(MOCK_STOCK_DATA.items()):
        historical = data.historical()
        if not historical:
            print(f"  ✗ {ticker:12} | no historical points")
            problems += 1
            continue

        last = historical[-1]
        if abs(last.price - data.stock.price) > 0.005:
            print(f"  ✗ {ticker:12} | last price {last.price} != quote {data.stock.price}")
            problems += 1
        elif last.prediction is None or abs(last.prediction - last.price) > 0.005:
            print(f"  ✗ {ticker:12} | prediction does not start at the last price")
            problems += 1
        else:
            print(f"  ✓ {ticker:12} | points={len(data.chart_data):2} | price={data.stock.price}")

    return problems == 0


def check_reference_table():
    """Tickers used by the app should be well-formed and resolvable."""
    print("\n📋 Reference Table")
    print("=" * 70)

    healthy = True
    bad_symbols = [t for t in REAL_STOCK_DATA if not TICKER_PATTERN.match(t)]
    if bad_symbols:
        print(f"  ✗ Malformed reference tickers: {', '.join(bad_symbols)}")
        healthy = False
    else:
        print(f"  ✓ {len(REAL_STOCK_DATA)} reference quotes")

    missing_watchlist = [t for t in DEFAULT_WATCHLIST if t not in MOCK_STOCK_DATA]
    if missing_watchlist:
        print(f"  ✗ Watchlist tickers without mock data: {', '.join(missing_watchlist)}")
        healthy = False

    unpriced = [h.ticker for h in initial_holdings() if h.ticker not in REAL_STOCK_DATA]
    if unpriced:
        print(f"  ⚠ Seed holdings without a reference price: {', '.join(unpriced)}")

    return healthy


def main():
    """Run all checks."""
    print("\n" + "=" * 70)
    print("  Infinytix Health Check")
    print("=" * 70)

    checks = [
        ("Configuration", check_configuration),
        ("Mock Series", check_mock_series),
        ("Reference Table", check_reference_table),
    ]

    all_pass = True
    for name, check_func in checks:
        try:
            if not check_func():
                all_pass = False
        except Exception as e:
            print(f"\n❌ {name} check failed: {e}")
            all_pass = False

    print("\n" + "=" * 70)
    if all_pass:
        print("✓ All checks passed. Infinytix is healthy!")
    else:
        print("⚠ Some checks failed. Review above for details.")
    print("=" * 70 + "\n")

    return 0 if all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
