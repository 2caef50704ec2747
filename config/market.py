"""Static NSE reference data used by the dashboard, portfolio and fallbacks."""

from __future__ import annotations

from core.models import ChartPoint, Holding, MarketIndex, ReferenceQuote, Stock, StockData

# Last known quotes for large NSE listings.
REAL_STOCK_DATA: dict[str, ReferenceQuote] = {
    "RELIANCE": ReferenceQuote("Reliance Industries Ltd.", 1516.00, -0.20),
    "HDFCBANK": ReferenceQuote("HDFC Bank Ltd.", 2013.60, 0.12),
    "TCS": ReferenceQuote("Tata Consultancy Services Ltd.", 3369.60, -0.42),
    "BHARTIARTL": ReferenceQuote("Bharti Airtel Ltd.", 1970.20, -2.45),
    "ICICIBANK": ReferenceQuote("ICICI Bank Ltd.", 1425.60, -0.44),
    "SBIN": ReferenceQuote("State Bank of India", 809.05, -0.23),
    "INFY": ReferenceQuote("Infosys Ltd.", 1611.60, -1.35),
    "BAJFINANCE": ReferenceQuote("Bajaj Finance Ltd.", 947.30, 0.71),
    "LICI": ReferenceQuote("Life Insurance Corporation of India", 928.75, -1.82),
    "HINDUNILVR": ReferenceQuote("Hindustan Unilever Ltd.", 2410.70, -0.52),
    "ITC": ReferenceQuote("ITC Ltd.", 418.05, -0.33),
    "LT": ReferenceQuote("Larsen & Toubro Ltd.", 3578.70, -0.03),
    "HCLTECH": ReferenceQuote("HCL Technologies Ltd.", 1663.70, -0.62),
    "KOTAKBANK": ReferenceQuote("Kotak Mahindra Bank Ltd.", 2223.70, -0.25),
    "SUNPHARMA": ReferenceQuote("Sun Pharmaceutical Industries Ltd.", 1662.20, -0.43),
    "MARUTI": ReferenceQuote("Maruti Suzuki India Ltd.", 12646.00, 1.41),
    "M_AND_M": ReferenceQuote("Mahindra & Mahindra Ltd.", 3162.90, -0.42),
    "ULTRACEMCO": ReferenceQuote("UltraTech Cement Ltd.", 12573.00, 0.09),
    "AXISBANK": ReferenceQuote("Axis Bank Ltd.", 1167.70, 0.26),
    "NTPC": ReferenceQuote("NTPC Ltd.", 342.20, -0.52),
    "HAL": ReferenceQuote("Hindustan Aeronautics Ltd.", 4906.20, -2.02),
    "BAJAJFINSV": ReferenceQuote("Bajaj Finserv Ltd.", 2040.90, 0.72),
    "ADANIPORTS": ReferenceQuote("Adani Ports & Special Economic Zone Ltd.", 1442.80, -0.01),
    "ONGC": ReferenceQuote("Oil And Natural Gas Corporation Ltd.", 243.28, -0.03),
    "TITAN": ReferenceQuote("Titan Company Ltd.", 3426.90, -0.15),
    "BEL": ReferenceQuote("Bharat Electronics Ltd.", 412.65, -1.20),
    "ADANIENT": ReferenceQuote("Adani Enterprises Ltd.", 2581.20, -0.07),
    "POWERGRID": ReferenceQuote("Power Grid Corporation of India Ltd.", 298.40, -0.42),
    "WIPRO": ReferenceQuote("Wipro Ltd.", 264.30, -1.31),
    "DMART": ReferenceQuote("Avenue Supermarts Ltd.", 4183.00, -0.19),
    "TATAMOTORS": ReferenceQuote("Tata Motors Ltd.", 692.50, -0.04),
    "JSWSTEEL": ReferenceQuote("JSW Steel Ltd.", 1041.00, 0.06),
    "ETERNAL": ReferenceQuote("Eternal Ltd.", 263.00, -0.59),
    "ASIANPAINT": ReferenceQuote("Asian Paints Ltd.", 2478.20, -0.83),
    "COALINDIA": ReferenceQuote("Coal India Ltd.", 383.70, -0.97),
}

MARKET_INDICES: list[MarketIndex] = [
    MarketIndex("NIFTY 50", "23,537.85", "+66.70", 0.28),
    MarketIndex("BSE SENSEX", "77,337.59", "+131.18", 0.17),
    MarketIndex("NIFTY BANK", "51,703.95", "+385.20", 0.75),
]

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _mock(
    ticker: str,
    name: str,
    price: float,
    change: float,
    change_percent: float,
    history: list[tuple[float, float]],
    forecast: list[float],
) -> StockData:
    """Lay out six historical (price, prediction) pairs from Jan and four forecasts after them."""
    points = [
        ChartPoint(date=MONTHS[idx], price=hist_price, prediction=hist_prediction)
        for idx, (hist_price, hist_prediction) in enumerate(history)
    ]
    points.extend(
        ChartPoint(date=MONTHS[len(history) + idx], prediction=value)
        for idx, value in enumerate(forecast)
    )
    return StockData(
        stock=Stock(ticker=ticker, name=name, price=price, change=change, change_percent=change_percent),
        chart_data=points,
        source="mock",
    )


MOCK_STOCK_DATA: dict[str, StockData] = {
    "RELIANCE": _mock(
        "RELIANCE",
        "Reliance Industries Ltd.",
        2960.55,
        55.15,
        1.90,
        [(2700, 2710), (2750, 2760), (2800, 2810), (2850, 2860), (2900, 2910), (2960.55, 2960.55)],
        [3010, 3050, 3100, 3150],
    ),
    "ADANIENT": _mock(
        "ADANIENT",
        "Adani Enterprises Ltd.",
        3185.00,
        -65.00,
        -2.00,
        [(3400, 3410), (3350, 3360), (3300, 3310), (3250, 3260), (3200, 3210), (3185.00, 3185.00)],
        [3150, 3120, 3100, 3080],
    ),
    "TCS": _mock(
        "TCS",
        "Tata Consultancy Services",
        3820.75,
        20.25,
        0.53,
        [(3600, 3610), (3650, 3660), (3700, 3710), (3750, 3760), (3800, 3810), (3820.75, 3820.75)],
        [3850, 3880, 3910, 3940],
    ),
    "HDFCBANK": _mock(
        "HDFCBANK",
        "HDFC Bank Ltd.",
        1650.45,
        15.80,
        0.97,
        [(1500, 1510), (1550, 1560), (1600, 1610), (1620, 1630), (1640, 1645), (1650.45, 1650.45)],
        [1670, 1690, 1710, 1730],
    ),
    "INFY": _mock(
        "INFY",
        "Infosys Ltd.",
        1550.80,
        12.10,
        0.79,
        [(1400, 1410), (1420, 1430), (1450, 1460), (1480, 1490), (1520, 1525), (1550.80, 1550.80)],
        [1570, 1590, 1610, 1630],
    ),
}

DEFAULT_WATCHLIST: list[str] = list(MOCK_STOCK_DATA)

# (ticker, display name, shares, average cost)
_SEED_POSITIONS = [
    ("RELIANCE", "Reliance Industries Ltd.", 20, 1450.00),
    ("ADANIENT", "Adani Enterprises Ltd.", 15, 2500.00),
    ("TCS", "Tata Consultancy Services", 30, 3300.75),
    ("WIPRO", "Wipro Ltd.", 100, 250.00),
]


def initial_holdings() -> list[Holding]:
    """Fresh copy of the seed holdings priced from the reference table."""
    return [
        Holding(
            ticker=ticker,
            name=name,
            shares=float(shares),
            avg_cost=avg_cost,
            current_price=REAL_STOCK_DATA[ticker].price,
        )
        for ticker, name, shares, avg_cost in _SEED_POSITIONS
    ]
