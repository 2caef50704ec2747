"""Stock quote + chart generation: mock table, then the model, then local synthesis."""

from __future__ import annotations

import logging
import math
import re
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable

import numpy as np

from config.market import MOCK_STOCK_DATA, REAL_STOCK_DATA
from core.models import ChartPoint, Stock, StockData
from core.synthetic import FORECAST_MONTHS, HISTORY_MONTHS, custom_stock_name, generate_stock_data

LOGGER = logging.getLogger("infinytix.stock_data")

CHART_POINTS = HISTORY_MONTHS + FORECAST_MONTHS
TICKER_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9&._-]{0,19}$")

STOCK_DATA_SYSTEM_PROMPT = (
    "You are a helpful financial data API. You will be given a stock ticker and you must return "
    "a valid JSON object that conforms to the requested output schema. The data you generate "
    "should be realistic but can be fictional."
)

_STOCK_DATA_PROMPT_TEMPLATE = """
Generate realistic, fictional stock market data for the given ticker symbol.

Ticker: {ticker}

Return a JSON object with this shape:
{{
  "stock": {{"ticker": str, "name": str, "price": number, "change": number, "change_percent": number}},
  "chart_data": [{{"date": str, "price": number (optional), "prediction": number}}]
}}

Provide the following:
1. Stock Details: full company name, a realistic current price, daily change (absolute and percentage).
2. Chart Data: an array of exactly {points} data points for a chart.
   - The data should represent the last {history} months of historical data and a {horizon}-month future prediction.
   - Use three-letter month abbreviations for the 'date' field.
   - For the first {history} data points (historical), provide values for both 'price' and 'prediction'.
   - For the last {horizon} data points (future), provide a value only for 'prediction'.
   - The data should follow a believable trend.
"""


def stock_data_prompt(ticker: str) -> str:
    """User prompt asking the model for one ticker's quote and chart."""
    return _STOCK_DATA_PROMPT_TEMPLATE.format(
        ticker=ticker,
        points=CHART_POINTS,
        history=HISTORY_MONTHS,
        horizon=FORECAST_MONTHS,
    )


def normalize_ticker(raw_ticker: str | None) -> str:
    """Strip and uppercase a ticker; empty or malformed symbols are rejected."""
    ticker = (raw_ticker or "").strip().upper()
    if not ticker:
        raise ValueError("Ticker is required.")
    if not TICKER_PATTERN.match(ticker):
        raise ValueError(f"Invalid ticker symbol: {ticker}")
    return ticker


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _required_number(source: dict[str, Any], *keys: str) -> float:
    for key in keys:
        if key in source:
            value = source[key]
            if not _is_number(value):
                raise ValueError(f"Field '{key}' must be a number, got {value!r}")
            return float(value)
    raise ValueError(f"Missing required field '{keys[0]}'")


def _optional_number(source: dict[str, Any], key: str) -> float | None:
    value = source.get(key)
    if value is None:
        return None
    if not _is_number(value):
        raise ValueError(f"Field '{key}' must be a number, got {value!r}")
    return float(value)


def parse_stock_payload(payload: dict[str, Any], ticker: str) -> StockData:
    """
    Validate a generated payload and convert it to StockData.

    Accepts snake_case and camelCase keys. The ticker is always the one that
    was requested, whatever the model echoed back.

    Raises:
        ValueError: When the payload does not have the expected shape.
    """
    if not isinstance(payload, dict):
        raise ValueError("Stock payload must be an object")

    raw_stock = payload.get("stock")
    if not isinstance(raw_stock, dict):
        raise ValueError("Stock payload is missing the 'stock' object")

    raw_chart = payload.get("chart_data", payload.get("chartData"))
    if not isinstance(raw_chart, list) or not raw_chart:
        raise ValueError("Stock payload is missing 'chart_data' points")

    ticker = normalize_ticker(ticker)
    name = raw_stock.get("name")
    if not isinstance(name, str) or not name.strip():
        reference = REAL_STOCK_DATA.get(ticker)
        name = reference.name if reference is not None else custom_stock_name(ticker)

    stock = Stock(
        ticker=ticker,
        name=name.strip(),
        price=_required_number(raw_stock, "price"),
        change=_required_number(raw_stock, "change"),
        change_percent=_required_number(raw_stock, "change_percent", "changePercent"),
    )

    chart_data: list[ChartPoint] = []
    for index, item in enumerate(raw_chart):
        if not isinstance(item, dict):
            raise ValueError(f"Chart point {index} is not an object")
        label = item.get("date")
        if not isinstance(label, str) or not label.strip():
            raise ValueError(f"Chart point {index} has no 'date' label")
        chart_data.append(
            ChartPoint(
                date=label.strip(),
                price=_optional_number(item, "price"),
                prediction=_optional_number(item, "prediction"),
            )
        )

    data = StockData(stock=stock, chart_data=chart_data, source="ai")
    historical = data.historical()
    if not historical:
        raise ValueError("Chart data has no historical prices")
    if any(point.price <= 0 for point in historical):
        raise ValueError("Chart data has non-positive historical prices")
    return data


def repair_stock_data(data: StockData) -> StockData:
    """
    Patch the usual inconsistencies of generated series in place.

    The last historical price becomes the quoted price, the percentage move is
    recomputed against the implied previous close, and the prediction line is
    pinned to the last known price so it continues from the historical line.
    """
    historical = data.historical()
    if not historical:
        return data

    last_point = historical[-1]
    if last_point.price <= 0:
        return data
    stock = data.stock
    stock.price = round(float(last_point.price), 2)
    previous_close = stock.price - stock.change
    if previous_close > 0:
        stock.change_percent = round((stock.change / previous_close) * 100.0, 2)

    first_future = next((idx for idx, point in enumerate(data.chart_data) if not point.is_historical), None)
    if first_future is not None and first_future > 0 and data.chart_data[first_future - 1].is_historical:
        anchor = data.chart_data[first_future - 1]
    else:
        anchor = last_point
    anchor.prediction = anchor.price
    return data


class StockDataService:
    """
    Resolve stock data for tickers with a best-effort model call and a local fallback.

    Generated series are cached per ticker so every view of a ticker shows
    the same quote; callers always receive copies.
    """

    def __init__(
        self,
        ai_client: Any = None,
        rng: np.random.Generator | None = None,
        use_mock: bool = True,
        workers: int = 4,
        mock_data: dict[str, StockData] | None = None,
    ) -> None:
        self.ai_client = ai_client
        self.use_mock = use_mock
        self.workers = max(1, int(workers))
        self._mock_data = MOCK_STOCK_DATA if mock_data is None else mock_data
        self._rng = rng if rng is not None else np.random.default_rng()
        self._rng_lock = threading.Lock()
        self._cache: dict[str, StockData] = {}
        self._cache_lock = threading.Lock()

    def synthesize(self, ticker: str) -> StockData:
        """Locally generated series for one ticker."""
        # numpy generators are not safe to share across threads
        with self._rng_lock:
            return generate_stock_data(ticker, rng=self._rng)

    def _generate_with_ai(self, ticker: str) -> StockData:
        payload = self.ai_client.generate_json(STOCK_DATA_SYSTEM_PROMPT, stock_data_prompt(ticker))
        data = parse_stock_payload(payload, ticker)
        return repair_stock_data(data)

    def _resolve(self, ticker: str) -> StockData:
        if self.ai_client is None:
            return self.synthesize(ticker)

        try:
            data = self._generate_with_ai(ticker)
        except Exception as exc:
            LOGGER.warning("Generated stock data failed for %s: %s; using synthetic series", ticker, exc)
            return self.synthesize(ticker)

        LOGGER.info("Generated stock data for %s (%d chart points)", ticker, len(data.chart_data))
        return data

    def get(self, raw_ticker: str) -> StockData:
        """Return stock data for one ticker; never raises for generation failures."""
        ticker = normalize_ticker(raw_ticker)

        if self.use_mock and ticker in self._mock_data:
            return self._mock_data[ticker].copy()

        with self._cache_lock:
            cached = self._cache.get(ticker)
        if cached is not None:
            return cached.copy()

        data = self._resolve(ticker)
        # a concurrent request may have resolved the same ticker first
        with self._cache_lock:
            data = self._cache.setdefault(ticker, data)
        return data.copy()

    def get_many(self, raw_tickers: Iterable[str]) -> dict[str, StockData]:
        """Fetch independent tickers in parallel; result keeps first-seen input order."""
        tickers: list[str] = []
        for raw_ticker in raw_tickers:
            ticker = normalize_ticker(raw_ticker)
            if ticker not in tickers:
                tickers.append(ticker)
        if not tickers:
            return {}

        with ThreadPoolExecutor(max_workers=min(self.workers, len(tickers))) as pool:
            results = list(pool.map(self.get, tickers))
        return dict(zip(tickers, results))
