"""Short generated investment opinions with a fixed disclaimer."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

LOGGER = logging.getLogger("infinytix.opinion")

DISCLAIMER = "Disclaimer: This is an AI-generated analysis and not financial advice."
FULL_DISCLAIMER = f"{DISCLAIMER} Always conduct your own research."
FALLBACK_OPINION = (
    f"{DISCLAIMER} The AI opinion is currently unavailable due to a technical issue. "
    "Please try again later."
)

OPINION_SYSTEM_PROMPT = f"""You are a financial analyst providing a brief, balanced investment opinion.
You will be given a stock ticker and company name.
Your response MUST be a valid JSON object of the form {{"opinion": "<text>"}}.
Your opinion should start with a clear disclaimer: "{FULL_DISCLAIMER}"
After the disclaimer, provide a concise analysis covering one potential positive and one potential negative aspect of the stock.
Keep the entire text to about 3-4 sentences."""


@dataclass(frozen=True)
class StockOpinion:
    ticker: str
    name: str
    opinion: str
    is_fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "name": self.name,
            "opinion": self.opinion,
            "is_fallback": self.is_fallback,
        }


def opinion_prompt(ticker: str, name: str) -> str:
    return f"Generate an investment opinion for the stock: {name} ({ticker})."


def _with_disclaimer(text: str) -> str:
    text = text.strip()
    if text.lower().startswith("disclaimer"):
        return text
    return f"{FULL_DISCLAIMER} {text}"


def get_stock_opinion(ai_client: Any, ticker: str, name: str) -> StockOpinion:
    """Ask the model for an opinion; any failure yields the static fallback text."""
    if ai_client is None:
        return StockOpinion(ticker=ticker, name=name, opinion=FALLBACK_OPINION, is_fallback=True)

    try:
        payload = ai_client.generate_json(OPINION_SYSTEM_PROMPT, opinion_prompt(ticker, name))
        text = payload.get("opinion")
        if not isinstance(text, str) or not text.strip():
            raise ValueError("AI model failed to generate a stock opinion.")
    except Exception as exc:
        LOGGER.error("Opinion generation failed for %s: %s", ticker, exc)
        return StockOpinion(ticker=ticker, name=name, opinion=FALLBACK_OPINION, is_fallback=True)

    return StockOpinion(ticker=ticker, name=name, opinion=_with_disclaimer(text))


class OpinionService:
    """Per-ticker opinion cache; fallback answers are not cached so a later request can retry."""

    def __init__(self, ai_client: Any = None) -> None:
        self.ai_client = ai_client
        self._cache: dict[str, StockOpinion] = {}
        self._lock = threading.Lock()

    def get(self, ticker: str, name: str) -> StockOpinion:
        with self._lock:
            cached = self._cache.get(ticker)
        if cached is not None:
            return cached

        opinion = get_stock_opinion(self.ai_client, ticker, name)
        if not opinion.is_fallback:
            with self._lock:
                self._cache[ticker] = opinion
        return opinion
