import argparse
import datetime
import json
import logging
import os
import sys

import numpy as np

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config import settings
from config.market import DEFAULT_WATCHLIST
from core.ai_client import build_ai_client
from core.opinion import get_stock_opinion
from core.stock_data import StockDataService


def _configure_logging():
    """Configure file logging for command-line runs."""
    os.makedirs(settings.LOG_DIR, exist_ok=True)

    log_file = os.path.join(settings.LOG_DIR, "generate.log")
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers.clear()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)

    # Model client libraries log every request at INFO.
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def main(argv: list[str] | None = None):
    _configure_logging()
    logger = logging.getLogger("infinytix.generate")

    parser = argparse.ArgumentParser(description="Print stock quote and chart data as JSON")
    parser.add_argument(
        "--tickers",
        help="Comma-separated list of tickers (default: the dashboard watchlist)",
        default=None,
    )
    parser.add_argument(
        "--no-ai",
        action="store_true",
        help="Skip the generative model and use local synthetic series",
    )
    parser.add_argument(
        "--no-mock",
        action="store_true",
        help="Ignore the built-in mock series for the watchlist tickers",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for synthetic series")
    parser.add_argument("--opinion", action="store_true", help="Include an AI opinion per ticker")
    args = parser.parse_args(argv)

    tickers = DEFAULT_WATCHLIST
    if args.tickers:
        tickers = [t.strip().upper() for t in args.tickers.split(",") if t.strip()]

    ai_client = None
    if not args.no_ai:
        ai_client = build_ai_client(
            {
                "AI_ENABLED": settings.AI_ENABLED,
                "GEMINI_API_KEY": settings.GEMINI_API_KEY,
                "GEMINI_MODEL": settings.GEMINI_MODEL,
                "AI_TIMEOUT_SECONDS": settings.AI_TIMEOUT_SECONDS,
            }
        )
        if ai_client is None:
            print("AI generation is disabled or no API key is set; using synthetic series.", file=sys.stderr)

    service = StockDataService(
        ai_client=ai_client,
        rng=np.random.default_rng(args.seed),
        use_mock=not args.no_mock,
        workers=settings.STOCK_FETCH_WORKERS,
    )

    start_time = datetime.datetime.now(datetime.timezone.utc)
    logger.info("Run started at %s for %s", start_time.isoformat(), ",".join(tickers))

    try:
        results = service.get_many(tickers)
    except ValueError as error:
        logger.error("Invalid ticker list: %s", error)
        print(f"Error: {error}", file=sys.stderr)
        return 2

    output = []
    for ticker, data in results.items():
        entry = data.to_dict()
        if args.opinion:
            entry["opinion"] = get_stock_opinion(ai_client, ticker, data.stock.name).to_dict()
        output.append(entry)

    print(json.dumps(output, indent=2, ensure_ascii=False))

    end_time = datetime.datetime.now(datetime.timezone.utc)
    logger.info("Run ended at %s", end_time.isoformat())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
