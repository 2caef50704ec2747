import pytest

from config.market import REAL_STOCK_DATA, initial_holdings
from core.models import Holding, ReferenceQuote
from core.portfolio import INVALID_INPUT_MESSAGE, InvalidHoldingError, Portfolio, PortfolioStore


def test_holding_derived_values():
    holding = Holding("RELIANCE", "Reliance Industries Ltd.", 20, 1450.0, 1516.0)

    assert holding.total_value == 30320.0
    assert holding.total_cost == 29000.0
    assert holding.gain_loss == 1320.0
    assert holding.gain_loss_percent == pytest.approx(4.5517, abs=1e-4)


def test_zero_cost_holding_has_zero_percent():
    holding = Holding("FREE", "Gifted", 10, 0.0, 5.0)

    assert holding.gain_loss == 50.0
    assert holding.gain_loss_percent == 0.0


def test_seed_holdings_are_fresh_copies():
    first = initial_holdings()
    first[0].shares = 999

    second = initial_holdings()
    assert [h.ticker for h in second] == ["RELIANCE", "ADANIENT", "TCS", "WIPRO"]
    assert second[0].shares == 20
    assert second[3].current_price == REAL_STOCK_DATA["WIPRO"].price


def test_add_known_ticker_uses_reference_quote():
    portfolio = Portfolio()

    holding = portfolio.add_holding(" infy ", "10", "1500")

    assert holding.ticker == "INFY"
    assert holding.name == "Infosys Ltd."
    assert holding.shares == 10
    assert holding.avg_cost == 1500
    assert holding.current_price == REAL_STOCK_DATA["INFY"].price
    assert portfolio.holdings == [holding]


def test_add_unknown_ticker_is_valued_at_purchase_price():
    holding = Portfolio().add_holding("NEWCO", "1,000", "12.5")

    assert holding.name == "NEWCO - (Custom)"
    assert holding.shares == 1000
    assert holding.current_price == 12.5
    assert holding.gain_loss == 0


def test_duplicate_tickers_are_separate_rows():
    portfolio = Portfolio()
    portfolio.add_holding("TCS", 1, 3000)
    portfolio.add_holding("TCS", 2, 3100)

    assert len(portfolio.holdings) == 2


@pytest.mark.parametrize(
    "ticker, shares, price",
    [
        ("", "10", "100"),
        ("TCS", "", "100"),
        ("TCS", "ten", "100"),
        ("TCS", "10", None),
        ("TCS", "0", "100"),
        ("TCS", "-5", "100"),
        ("TCS", "10", "-1"),
        ("TCS", "nan", "100"),
        ("TCS", "10", "inf"),
        ("TCS", True, "100"),
    ],
)
def test_invalid_input_is_rejected(ticker, shares, price):
    portfolio = Portfolio()

    with pytest.raises(InvalidHoldingError, match=INVALID_INPUT_MESSAGE):
        portfolio.add_holding(ticker, shares, price)
    assert portfolio.holdings == []


def test_summary_totals_and_day_move():
    reference = {
        "AAA": ReferenceQuote("Alpha", 110.0, 10.0),
        "BBB": ReferenceQuote("Beta", 50.0, -2.0),
    }
    portfolio = Portfolio(
        [
            Holding("AAA", "Alpha", 10, 100.0, 110.0),
            Holding("BBB", "Beta", 4, 50.0, 50.0),
            Holding("CCC", "Custom", 1, 20.0, 20.0),
        ]
    )

    summary = portfolio.summary(reference)

    assert summary.total_value == 1320.0
    assert summary.total_cost == 1220.0
    assert summary.total_gain_loss == 100.0
    assert summary.total_gain_loss_percent == pytest.approx(100.0 / 1220.0 * 100)
    # 110 * 10% * 10 + 50 * -2% * 4
    assert summary.day_gain_loss == pytest.approx(106.0)
    assert summary.day_gain_loss_percent == pytest.approx(106.0 / 1214.0 * 100)


def test_empty_portfolio_summary_is_zero():
    summary = Portfolio().summary()

    assert summary.total_value == 0
    assert summary.total_gain_loss_percent == 0
    assert summary.day_gain_loss_percent == 0


def test_store_isolates_users():
    store = PortfolioStore()

    store.add_holding("alice", "INFY", 5, 1500)

    assert len(store.for_user("alice").holdings) == 5
    assert len(store.for_user("bob").holdings) == 4
    assert store.for_user("alice") is store.for_user("alice")
