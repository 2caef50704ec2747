"""Display records shared by the dashboard, portfolio and API views."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


@dataclass
class Stock:
    """One quote row: price plus the day's move."""

    ticker: str
    name: str
    price: float
    change: float
    change_percent: float

    @property
    def is_up(self) -> bool:
        return self.change_percent >= 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "name": self.name,
            "price": round(self.price, 2),
            "change": round(self.change, 2),
            "change_percent": round(self.change_percent, 2),
        }


@dataclass
class ChartPoint:
    """Monthly chart point; historical months carry a price, future months only a prediction."""

    date: str
    price: float | None = None
    prediction: float | None = None

    @property
    def is_historical(self) -> bool:
        return self.price is not None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ChartPoint":
        return cls(
            date=str(payload["date"]),
            price=_optional_float(payload.get("price")),
            prediction=_optional_float(payload.get("prediction")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "price": round(self.price, 2) if self.price is not None else None,
            "prediction": round(self.prediction, 2) if self.prediction is not None else None,
        }


@dataclass
class StockData:
    """Quote plus chart series, tagged with where it came from."""

    stock: Stock
    chart_data: list[ChartPoint] = field(default_factory=list)
    source: str = "mock"

    def historical(self) -> list[ChartPoint]:
        return [point for point in self.chart_data if point.is_historical]

    def predicted(self) -> list[ChartPoint]:
        return [point for point in self.chart_data if not point.is_historical]

    def copy(self) -> "StockData":
        return StockData(
            stock=replace(self.stock),
            chart_data=[replace(point) for point in self.chart_data],
            source=self.source,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "stock": self.stock.to_dict(),
            "chart_data": [point.to_dict() for point in self.chart_data],
            "source": self.source,
        }


@dataclass
class Holding:
    """A portfolio position; gain/loss is derived on read."""

    ticker: str
    name: str
    shares: float
    avg_cost: float
    current_price: float

    @property
    def total_value(self) -> float:
        return self.shares * self.current_price

    @property
    def total_cost(self) -> float:
        return self.shares * self.avg_cost

    @property
    def gain_loss(self) -> float:
        return self.total_value - self.total_cost

    @property
    def gain_loss_percent(self) -> float:
        if self.total_cost <= 0:
            return 0.0
        return (self.gain_loss / self.total_cost) * 100.0


@dataclass(frozen=True)
class MarketIndex:
    """Named market index card with preformatted display values."""

    name: str
    value: str
    change: str
    change_percent: float


@dataclass(frozen=True)
class ReferenceQuote:
    """Row of the static reference price table."""

    name: str
    price: float
    change_percent: float


@dataclass(frozen=True)
class PortfolioSummary:
    """Aggregate portfolio figures shown in the summary cards."""

    total_value: float
    total_cost: float
    total_gain_loss: float
    total_gain_loss_percent: float
    day_gain_loss: float
    day_gain_loss_percent: float
