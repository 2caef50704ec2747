import pytest

from conftest import FakeAIClient
from core.opinion import (
    FALLBACK_OPINION,
    FULL_DISCLAIMER,
    OpinionService,
    get_stock_opinion,
    opinion_prompt,
)


def test_prompt_names_stock_and_ticker():
    assert opinion_prompt("TCS", "Tata Consultancy Services") == (
        "Generate an investment opinion for the stock: Tata Consultancy Services (TCS)."
    )


def test_no_client_returns_fallback():
    opinion = get_stock_opinion(None, "TCS", "Tata Consultancy Services")

    assert opinion.is_fallback
    assert opinion.opinion == FALLBACK_OPINION
    assert opinion.opinion.startswith("Disclaimer:")


def test_opinion_without_disclaimer_gets_one():
    client = FakeAIClient(opinion_payload={"opinion": "Strong order book. Margins are under pressure."})

    opinion = get_stock_opinion(client, "TCS", "Tata Consultancy Services")

    assert not opinion.is_fallback
    assert opinion.opinion == f"{FULL_DISCLAIMER} Strong order book. Margins are under pressure."


def test_opinion_with_disclaimer_is_kept():
    text = "Disclaimer: not advice. Upside from exports; risk from rates."
    client = FakeAIClient(opinion_payload={"opinion": text})

    assert get_stock_opinion(client, "INFY", "Infosys").opinion == text


@pytest.mark.parametrize(
    "client",
    [
        FakeAIClient(error=RuntimeError("quota exceeded")),
        FakeAIClient(opinion_payload={"opinion": "   "}),
        FakeAIClient(opinion_payload={"opinion": 42}),
        FakeAIClient(opinion_payload={"text": "wrong key"}),
    ],
)
def test_failures_return_fallback(client):
    opinion = get_stock_opinion(client, "INFY", "Infosys")

    assert opinion.is_fallback
    assert opinion.opinion == FALLBACK_OPINION


def test_service_caches_successful_opinions():
    client = FakeAIClient(opinion_payload={"opinion": "Solid balance sheet."})
    service = OpinionService(client)

    first = service.get("INFY", "Infosys")
    second = service.get("INFY", "Infosys")

    assert first is second
    assert len(client.prompts) == 1


def test_service_retries_after_fallback():
    client = FakeAIClient(error=RuntimeError("temporarily down"))
    service = OpinionService(client)

    assert service.get("INFY", "Infosys").is_fallback

    client.error = None
    client.opinion_payload = {"opinion": "Recovered."}
    opinion = service.get("INFY", "Infosys")

    assert not opinion.is_fallback
    assert len(client.prompts) == 2


def test_to_dict():
    opinion = get_stock_opinion(None, "INFY", "Infosys")

    assert opinion.to_dict() == {
        "ticker": "INFY",
        "name": "Infosys",
        "opinion": FALLBACK_OPINION,
        "is_fallback": True,
    }
