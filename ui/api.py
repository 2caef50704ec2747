"""Request parsing and JSON payload helpers for Infinytix API routes."""

from __future__ import annotations

from typing import Any

from core.models import Holding, MarketIndex, PortfolioSummary, StockData

MAX_REQUESTED_TICKERS = 20


def parse_int(raw_value: str | None, default: int, min_value: int, max_value: int) -> int:
    """Parse bounded int from request args."""
    try:
        value = int(raw_value) if raw_value is not None else default
    except (TypeError, ValueError):
        value = default
    return max(min_value, min(max_value, value))


def parse_ticker_list(raw_value: str | None, limit: int = MAX_REQUESTED_TICKERS) -> list[str]:
    """Split a comma-separated ticker query into normalized, unique symbols."""
    cleaned: list[str] = []
    seen: set[str] = set()

    for ticker in (raw_value or "").split(","):
        normalized = ticker.strip().upper()
        if not normalized or normalized in seen:
            continue
        cleaned.append(normalized)
        seen.add(normalized)
        if len(cleaned) >= limit:
            break

    return cleaned


def serialize_stock_data(data: StockData) -> dict[str, Any]:
    """Convert stock data to API payload."""
    payload = data.to_dict()
    payload["stock"]["is_up"] = data.stock.is_up
    return payload


def serialize_holding(holding: Holding) -> dict[str, Any]:
    """Convert one holding, including derived gain/loss, to API payload."""
    return {
        "ticker": holding.ticker,
        "name": holding.name,
        "shares": holding.shares,
        "avg_cost": round(holding.avg_cost, 2),
        "current_price": round(holding.current_price, 2),
        "total_value": round(holding.total_value, 2),
        "total_cost": round(holding.total_cost, 2),
        "gain_loss": round(holding.gain_loss, 2),
        "gain_loss_percent": round(holding.gain_loss_percent, 2),
    }


def serialize_summary(summary: PortfolioSummary) -> dict[str, Any]:
    return {
        "total_value": round(summary.total_value, 2),
        "total_cost": round(summary.total_cost, 2),
        "total_gain_loss": round(summary.total_gain_loss, 2),
        "total_gain_loss_percent": round(summary.total_gain_loss_percent, 2),
        "day_gain_loss": round(summary.day_gain_loss, 2),
        "day_gain_loss_percent": round(summary.day_gain_loss_percent, 2),
    }


def serialize_index(index: MarketIndex) -> dict[str, Any]:
    return {
        "name": index.name,
        "value": index.value,
        "change": index.change,
        "change_percent": round(index.change_percent, 2),
    }
