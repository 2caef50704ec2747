"""Display formatting for prices and moves, exposed to templates as Jinja filters."""

from __future__ import annotations

from typing import Any

from config.settings import CURRENCY_SYMBOL


def _group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_number(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return "-"
    text = f"{abs(float(value)):.{decimals}f}"
    whole, _, fraction = text.partition(".")
    grouped = _group_indian(whole)
    sign = "-" if float(value) < 0 and float(text) != 0 else ""
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_currency(value: float | None, symbol: str = CURRENCY_SYMBOL) -> str:
    """Two-decimal amount with Indian grouping; the sign goes before the symbol."""
    if value is None:
        return "-"
    number = format_number(value)
    if number.startswith("-"):
        return f"-{symbol}{number[1:]}"
    return f"{symbol}{number}"


def format_shares(value: float | None) -> str:
    """Share counts: whole numbers without decimals, fractional ones with two."""
    if value is None:
        return "-"
    decimals = 0 if float(value).is_integer() else 2
    return format_number(value, decimals)


def format_percent(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{float(value):.2f}%"


def format_change(change: float, change_percent: float) -> str:
    return f"{change:.2f} ({change_percent:.2f}%)"


def trend_class(value: float | None) -> str:
    """CSS class for a signed move; zero counts as positive."""
    if value is None:
        return "neutral"
    return "positive" if float(value) >= 0 else "negative"


def register_filters(app: Any) -> None:
    app.jinja_env.filters["currency"] = format_currency
    app.jinja_env.filters["number"] = format_number
    app.jinja_env.filters["percent"] = format_percent
    app.jinja_env.filters["shares"] = format_shares
    app.jinja_env.filters["trend"] = trend_class
    app.jinja_env.globals["format_change"] = format_change
