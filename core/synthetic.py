"""Procedural stock series used whenever generated data is unavailable."""

from __future__ import annotations

import datetime

import numpy as np
import pandas as pd

from config.market import REAL_STOCK_DATA
from core.models import ChartPoint, Stock, StockData

HISTORY_MONTHS = 6
FORECAST_MONTHS = 4
MONTHLY_DRIFT_RANGE = 0.03
MONTHLY_VOLATILITY = 0.04
PREDICTION_TRACKING_PCT = 0.01
DAILY_CHANGE_RANGE_PCT = 3.0
RANDOM_PRICE_RANGE = (100.0, 5000.0)


def custom_stock_name(ticker: str) -> str:
    """Display name for tickers outside the reference table."""
    return f"{ticker} - (Custom)"


def month_labels(
    history: int = HISTORY_MONTHS,
    horizon: int = FORECAST_MONTHS,
    end: datetime.date | None = None,
) -> list[str]:
    """Three-letter month labels: `history` months ending at `end`, then `horizon` months after it."""
    anchor = pd.Timestamp(end or datetime.date.today()).to_period("M")
    periods = pd.period_range(start=anchor - (history - 1), periods=history + horizon, freq="M")
    return [period.strftime("%b") for period in periods]


def _daily_change(price: float, change_percent: float) -> float:
    """Absolute move implied by a percentage move against the previous close."""
    previous_close = price / (1.0 + change_percent / 100.0)
    return price - previous_close


def generate_stock_data(
    ticker: str,
    name: str | None = None,
    base_price: float | None = None,
    rng: np.random.Generator | None = None,
    history: int = HISTORY_MONTHS,
    horizon: int = FORECAST_MONTHS,
    end: datetime.date | None = None,
) -> StockData:
    """
    Fabricate a plausible quote and chart for one ticker.

    The historical walk is built backwards from the current price so the last
    historical point always equals the quoted price, and the prediction line
    starts from that same value.
    """
    if history < 1:
        raise ValueError("At least one historical month is required.")
    rng = rng if rng is not None else np.random.default_rng()
    ticker = ticker.strip().upper()
    reference = REAL_STOCK_DATA.get(ticker)

    if name is None:
        name = reference.name if reference is not None else custom_stock_name(ticker)
    if base_price is None:
        if reference is not None:
            base_price = reference.price
        else:
            base_price = float(rng.uniform(*RANDOM_PRICE_RANGE))
    base_price = round(float(base_price), 2)

    drift = float(rng.uniform(-MONTHLY_DRIFT_RANGE, MONTHLY_DRIFT_RANGE))
    steps = rng.normal(drift, MONTHLY_VOLATILITY, size=history - 1)
    # walk backwards from the anchored last price
    offsets = np.concatenate([np.cumsum(steps[::-1])[::-1], [0.0]])
    prices = base_price * np.exp(-offsets)
    predictions = prices * (1.0 + rng.uniform(-PREDICTION_TRACKING_PCT, PREDICTION_TRACKING_PCT, size=history))

    trend = float(steps.mean()) if len(steps) else drift
    forecast_steps = rng.normal(trend, MONTHLY_VOLATILITY / 2.0, size=horizon)
    forecast = base_price * np.exp(np.cumsum(forecast_steps))

    labels = month_labels(history, horizon, end=end)
    chart_data = [
        ChartPoint(date=labels[idx], price=round(float(prices[idx]), 2), prediction=round(float(predictions[idx]), 2))
        for idx in range(history)
    ]
    chart_data[-1].price = base_price
    chart_data[-1].prediction = base_price
    chart_data.extend(
        ChartPoint(date=labels[history + idx], prediction=round(float(value), 2))
        for idx, value in enumerate(forecast)
    )

    if reference is not None:
        change_percent = reference.change_percent
    else:
        change_percent = float(rng.uniform(-DAILY_CHANGE_RANGE_PCT, DAILY_CHANGE_RANGE_PCT))
    change = _daily_change(base_price, change_percent)

    stock = Stock(
        ticker=ticker,
        name=name,
        price=base_price,
        change=round(change, 2),
        change_percent=round(change_percent, 2),
    )
    return StockData(stock=stock, chart_data=chart_data, source="synthetic")
