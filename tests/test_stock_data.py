import numpy as np
import pytest

from config.market import MOCK_STOCK_DATA
from conftest import FakeAIClient, stock_payload
from core.ai_client import AIResponseError
from core.models import ChartPoint, Stock, StockData
from core.stock_data import (
    CHART_POINTS,
    StockDataService,
    normalize_ticker,
    parse_stock_payload,
    repair_stock_data,
    stock_data_prompt,
)


def test_normalize_ticker():
    assert normalize_ticker("  infy ") == "INFY"
    assert normalize_ticker("m&m") == "M&M"
    assert normalize_ticker("M_AND_M") == "M_AND_M"


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_normalize_ticker_requires_value(raw):
    with pytest.raises(ValueError, match="Ticker is required"):
        normalize_ticker(raw)


@pytest.mark.parametrize("raw", ["BAD TICKER", "<script>", "-LEAD", "A" * 21])
def test_normalize_ticker_rejects_malformed_symbols(raw):
    with pytest.raises(ValueError, match="Invalid ticker symbol"):
        normalize_ticker(raw)


def test_prompt_mentions_ticker_and_point_count():
    prompt = stock_data_prompt("INFY")

    assert "Ticker: INFY" in prompt
    assert f"exactly {CHART_POINTS} data points" in prompt


def test_parse_accepts_camel_case_and_forces_requested_ticker():
    data = parse_stock_payload(stock_payload(), "abc")

    assert data.stock.ticker == "ABC"
    assert data.stock.name == "Example Corp"
    assert data.stock.change_percent == 5.0
    assert len(data.chart_data) == 10
    assert len(data.historical()) == 6
    assert data.predicted()[0].price is None
    assert data.source == "ai"


def test_parse_falls_back_to_reference_name():
    payload = stock_payload(name="")

    assert parse_stock_payload(payload, "TCS").stock.name == "Tata Consultancy Services Ltd."
    assert parse_stock_payload(payload, "NEWCO").stock.name == "NEWCO - (Custom)"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("stock"),
        lambda p: p.pop("chartData"),
        lambda p: p.update(chartData=[]),
        lambda p: p["stock"].update(price="1,234"),
        lambda p: p["stock"].update(change=True),
        lambda p: p["stock"].pop("changePercent"),
        lambda p: p["chartData"][0].update(prediction="high"),
        lambda p: p["chartData"][0].pop("date"),
        lambda p: p.update(chartData=[{"date": "Jul", "prediction": 10.0}]),
    ],
)
def test_parse_rejects_malformed_payloads(mutate):
    payload = stock_payload()
    mutate(payload)

    with pytest.raises(ValueError):
        parse_stock_payload(payload, "ABC")


def test_repair_anchors_quote_to_last_historical_price():
    data = parse_stock_payload(stock_payload(price=100.0, change=5.0, last_price=120.0), "ABC")

    repair_stock_data(data)

    assert data.stock.price == 120.0
    # 5 / (120 - 5)
    assert data.stock.change_percent == pytest.approx(4.35)
    last = data.historical()[-1]
    assert last.prediction == last.price == 120.0


def test_repair_keeps_percent_when_previous_close_not_positive():
    data = StockData(
        stock=Stock("ABC", "Example", 10.0, 50.0, 12.5),
        chart_data=[ChartPoint("Jan", 10.0, 11.0), ChartPoint("Feb", prediction=12.0)],
    )

    repair_stock_data(data)

    assert data.stock.change_percent == 12.5
    assert data.chart_data[0].prediction == 10.0


def test_mock_ticker_returns_independent_copy():
    service = StockDataService()

    data = service.get("reliance")
    data.stock.price = 1.0
    data.chart_data[0].price = 1.0

    assert data.source == "mock"
    assert MOCK_STOCK_DATA["RELIANCE"].stock.price == 2960.55
    assert MOCK_STOCK_DATA["RELIANCE"].chart_data[0].price == 2700


def test_without_ai_client_unknown_ticker_is_synthesized():
    service = StockDataService(rng=np.random.default_rng(5))

    data = service.get("newco")

    assert data.source == "synthetic"
    assert data.stock.ticker == "NEWCO"
    assert data.historical()[-1].price == data.stock.price


def test_ai_data_is_parsed_and_repaired():
    client = FakeAIClient(stock_payload=stock_payload(last_price=130.0))
    service = StockDataService(ai_client=client)

    data = service.get("zzz")

    assert data.source == "ai"
    assert data.stock.ticker == "ZZZ"
    assert data.stock.price == 130.0
    assert len(client.prompts) == 1
    assert "Ticker: ZZZ" in client.prompts[0]


def test_mock_ticker_skips_ai_client():
    client = FakeAIClient(stock_payload=stock_payload())
    service = StockDataService(ai_client=client)

    assert service.get("TCS").source == "mock"
    assert client.prompts == []


def test_use_mock_false_goes_to_ai_for_every_ticker():
    client = FakeAIClient(stock_payload=stock_payload())
    service = StockDataService(ai_client=client, use_mock=False)

    assert service.get("TCS").source == "ai"


@pytest.mark.parametrize(
    "client",
    [
        FakeAIClient(error=AIResponseError("Model response did not contain JSON.")),
        FakeAIClient(error=TimeoutError("deadline exceeded")),
        FakeAIClient(stock_payload={"stock": {"ticker": "X"}}),
    ],
)
def test_ai_failure_falls_back_to_synthetic(client):
    service = StockDataService(ai_client=client, rng=np.random.default_rng(9))

    data = service.get("NEWCO")

    assert data.source == "synthetic"
    assert data.stock.ticker == "NEWCO"


def test_invalid_ticker_raises_before_any_generation():
    client = FakeAIClient(stock_payload=stock_payload())
    service = StockDataService(ai_client=client)

    with pytest.raises(ValueError):
        service.get("not valid")
    assert client.prompts == []


def test_get_many_keeps_order_and_removes_duplicates():
    client = FakeAIClient(stock_payload=stock_payload())
    service = StockDataService(ai_client=client, workers=3)

    results = service.get_many(["infy", "NEWA", "tcs", "INFY", "newb"])

    assert list(results) == ["INFY", "NEWA", "TCS", "NEWB"]
    assert results["INFY"].source == "mock"
    assert results["NEWA"].source == "ai"
    assert results["NEWB"].stock.ticker == "NEWB"
    assert len(client.prompts) == 2


def test_get_many_empty_input():
    assert StockDataService().get_many([]) == {}


def test_get_many_rejects_malformed_ticker():
    with pytest.raises(ValueError):
        StockDataService().get_many(["INFY", "no way"])


@pytest.mark.parametrize("bad_price", [0, -12.5])
def test_parse_rejects_non_positive_historical_prices(bad_price):
    payload = stock_payload()
    payload["chartData"][5]["price"] = bad_price

    with pytest.raises(ValueError, match="non-positive"):
        parse_stock_payload(payload, "ABC")


def test_zero_priced_payload_falls_back_to_synthetic():
    payload = stock_payload(last_price=0.0)
    service = StockDataService(ai_client=FakeAIClient(stock_payload=payload), rng=np.random.default_rng(2))

    data = service.get("NEWCO")

    assert data.source == "synthetic"
    assert data.stock.price > 0


def test_repair_leaves_zero_last_price_alone():
    data = StockData(
        stock=Stock("ABC", "Example", 50.0, 1.0, 2.0),
        chart_data=[ChartPoint("Jan", 40.0, 41.0), ChartPoint("Feb", 0.0, 5.0)],
    )

    repair_stock_data(data)

    assert data.stock.price == 50.0
    assert data.stock.change_percent == 2.0
    assert data.chart_data[1].prediction == 5.0


def test_generated_ticker_is_resolved_once_and_stays_stable():
    service = StockDataService(rng=np.random.default_rng(21))

    first = service.get("NEWCO")
    second = service.get("newco")
    from_many = service.get_many(["NEWCO"])["NEWCO"]

    assert first.to_dict() == second.to_dict() == from_many.to_dict()


def test_cached_data_is_handed_out_as_copies():
    service = StockDataService(rng=np.random.default_rng(21))

    first = service.get("NEWCO")
    first.stock.price = -1.0
    first.chart_data[0].price = -1.0

    again = service.get("NEWCO")
    assert again.stock.price > 0
    assert again.chart_data[0].price > 0


def test_ai_client_called_once_per_ticker():
    client = FakeAIClient(stock_payload=stock_payload())
    service = StockDataService(ai_client=client)

    service.get("NEWCO")
    service.get_many(["NEWCO", "OTHER"])
    service.get("OTHER")

    assert len(client.prompts) == 2
