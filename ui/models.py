"""UI view models for dashboard and portfolio pages."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import Holding, PortfolioSummary, Stock, StockData
from core.opinion import StockOpinion


@dataclass
class StockViewModel:
    """Selected-stock payload for the dashboard chart card."""

    data: StockData
    opinion: StockOpinion | None = None
    chart_html: str | None = None

    @property
    def stock(self) -> Stock:
        return self.data.stock

    @property
    def ticker(self) -> str:
        return self.data.stock.ticker

    @property
    def is_simulated(self) -> bool:
        return self.data.source == "synthetic"


@dataclass
class PortfolioViewModel:
    """Holdings table plus summary cards for one user."""

    holdings: list[Holding]
    summary: PortfolioSummary
