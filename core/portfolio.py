"""Portfolio holdings and gain/loss arithmetic."""

from __future__ import annotations

import threading
from typing import Any, Callable, Mapping

from config.market import REAL_STOCK_DATA, initial_holdings
from core.models import Holding, PortfolioSummary, ReferenceQuote
from core.synthetic import custom_stock_name

INVALID_INPUT_MESSAGE = "Please fill out all fields with valid numbers."


class InvalidHoldingError(ValueError):
    """Raised when a new holding has missing or non-numeric fields."""


def _parse_number(raw_value: Any) -> float | None:
    if raw_value is None or isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, str):
        raw_value = raw_value.replace(",", "").strip()
        if not raw_value:
            return None
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        return None
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value


class Portfolio:
    """In-memory list of holdings for one user."""

    def __init__(self, holdings: list[Holding] | None = None) -> None:
        self.holdings: list[Holding] = list(holdings or [])

    def add_holding(
        self,
        ticker: Any,
        shares: Any,
        price: Any,
        reference: Mapping[str, ReferenceQuote] = REAL_STOCK_DATA,
    ) -> Holding:
        """
        Append a position from raw form values.

        Known tickers take their name and current price from the reference
        table; unknown tickers are valued at the purchase price.

        Raises:
            InvalidHoldingError: When the ticker is blank, shares are not
                positive or the price is negative.
        """
        symbol = str(ticker or "").strip().upper()
        share_count = _parse_number(shares)
        purchase_price = _parse_number(price)
        if not symbol or share_count is None or purchase_price is None:
            raise InvalidHoldingError(INVALID_INPUT_MESSAGE)
        if share_count <= 0 or purchase_price < 0:
            raise InvalidHoldingError(INVALID_INPUT_MESSAGE)

        quote = reference.get(symbol)
        holding = Holding(
            ticker=symbol,
            name=quote.name if quote is not None else custom_stock_name(symbol),
            shares=share_count,
            avg_cost=purchase_price,
            current_price=quote.price if quote is not None else purchase_price,
        )
        self.holdings.append(holding)
        return holding

    def summary(self, reference: Mapping[str, ReferenceQuote] = REAL_STOCK_DATA) -> PortfolioSummary:
        """Totals for the summary cards; today's move uses the reference percentage change."""
        total_value = sum(item.total_value for item in self.holdings)
        total_cost = sum(item.total_cost for item in self.holdings)
        total_gain_loss = total_value - total_cost
        total_gain_loss_percent = (total_gain_loss / total_cost) * 100.0 if total_cost > 0 else 0.0

        day_gain_loss = 0.0
        for item in self.holdings:
            quote = reference.get(item.ticker)
            if quote is None:
                continue
            day_gain_loss += quote.price * (quote.change_percent / 100.0) * item.shares

        opening_value = total_value - day_gain_loss
        day_gain_loss_percent = (day_gain_loss / opening_value) * 100.0 if opening_value != 0 else 0.0

        return PortfolioSummary(
            total_value=total_value,
            total_cost=total_cost,
            total_gain_loss=total_gain_loss,
            total_gain_loss_percent=total_gain_loss_percent,
            day_gain_loss=day_gain_loss,
            day_gain_loss_percent=day_gain_loss_percent,
        )


class PortfolioStore:
    """Per-user portfolios, created from the seed holdings on first access."""

    def __init__(self, seed: Callable[[], list[Holding]] = initial_holdings) -> None:
        self._seed = seed
        self._portfolios: dict[str, Portfolio] = {}
        self._lock = threading.Lock()

    def for_user(self, user_id: str) -> Portfolio:
        with self._lock:
            portfolio = self._portfolios.get(user_id)
            if portfolio is None:
                portfolio = Portfolio(self._seed())
                self._portfolios[user_id] = portfolio
            return portfolio

    def add_holding(self, user_id: str, ticker: Any, shares: Any, price: Any) -> Holding:
        portfolio = self.for_user(user_id)
        with self._lock:
            return portfolio.add_holding(ticker, shares, price)
