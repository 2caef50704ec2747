"""Chart helpers for the Infinytix dashboard."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pandas as pd
import plotly.graph_objects as go
from plotly.offline import plot

from config.settings import CURRENCY_SYMBOL
from core.models import StockData

PRICE_COLOR = "#2563eb"
PREDICTION_COLOR = "#f59e0b"
Y_AXIS_PADDING = 100.0


def chart_frame(data: StockData) -> pd.DataFrame:
    """Tabulate chart points; missing prices/predictions become NaN gaps."""
    frame = pd.DataFrame(
        {
            "Date": [point.date for point in data.chart_data],
            "Price": [point.price for point in data.chart_data],
            "Prediction": [point.prediction for point in data.chart_data],
        }
    )
    frame["Price"] = pd.to_numeric(frame["Price"], errors="coerce")
    frame["Prediction"] = pd.to_numeric(frame["Prediction"], errors="coerce")
    return frame


def y_axis_range(frame: pd.DataFrame) -> list[float] | None:
    """Pad the visible range around the data, like a dataMin/dataMax domain."""
    values = pd.concat([frame["Price"], frame["Prediction"]]).dropna()
    if values.empty:
        return None
    return [max(0.0, float(values.min()) - Y_AXIS_PADDING), float(values.max()) + Y_AXIS_PADDING]


def build_price_figure(data: StockData) -> go.Figure:
    """Historical price area plus dashed prediction area."""
    frame = chart_frame(data)
    figure = go.Figure()

    figure.add_trace(
        go.Scatter(
            x=frame["Date"],
            y=frame["Price"],
            mode="lines+markers",
            name="Price",
            line={"color": PRICE_COLOR, "width": 2},
            fill="tozeroy",
            fillcolor="rgba(37, 99, 235, 0.15)",
            connectgaps=False,
            hovertemplate=f"%{{x}}<br>Price: {CURRENCY_SYMBOL}%{{y:,.2f}}<extra></extra>",
        )
    )
    figure.add_trace(
        go.Scatter(
            x=frame["Date"],
            y=frame["Prediction"],
            mode="lines",
            name="Prediction",
            line={"color": PREDICTION_COLOR, "width": 2, "dash": "dash"},
            fill="tozeroy",
            fillcolor="rgba(245, 158, 11, 0.10)",
            hovertemplate=f"%{{x}}<br>Prediction: {CURRENCY_SYMBOL}%{{y:,.2f}}<extra></extra>",
        )
    )

    figure.update_layout(
        title=f"{data.stock.ticker} - {data.stock.name} Performance",
        template="plotly_white",
        hovermode="x unified",
        legend={"orientation": "h", "y": 1.12},
        margin={"l": 40, "r": 20, "t": 60, "b": 30},
        xaxis={"type": "category"},
        yaxis={"tickprefix": CURRENCY_SYMBOL, "range": y_axis_range(frame)},
    )
    return figure


def build_price_chart(data: StockData) -> str:
    """Render the price chart as an embeddable div; the Plotly bundle is served separately."""
    return plot(
        build_price_figure(data),
        output_type="div",
        include_plotlyjs=False,
        config={"displaylogo": False, "responsive": True},
    )


def cache_busted_static_url(
    static_dir: Path,
    relative_path: str | None,
    url_for_fn: Callable[..., str],
) -> str | None:
    """Return static file URL with cache-busting query parameter."""
    if not relative_path:
        return None
    static_file = static_dir / relative_path
    if not static_file.exists():
        return None
    version = static_file.stat().st_mtime_ns
    return f"{url_for_fn('static', filename=relative_path)}?v={version}"
