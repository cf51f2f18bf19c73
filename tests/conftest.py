"""
Pytest fixtures for testing yfkit.
"""

import copy

import httpx
import pytest
from fastapi.testclient import TestClient

from yfkit.core.models import Quote
from yfkit.data_sources.yahoo_client import YahooFinanceClient

BASE_URL = "https://yahoo.test"


CHART_PAYLOAD = {
    "chart": {
        "result": [
            {
                "meta": {
                    "symbol": "AAPL",
                    "currency": "USD",
                    "exchangeName": "NMS",
                    "instrumentType": "EQUITY",
                    "exchangeTimezoneName": "America/New_York",
                    "regularMarketPrice": 187.5,
                },
                "timestamp": [1704205800, 1704292200, 1704378600],
                "indicators": {
                    "quote": [
                        {
                            "open": [187.15, 184.22, None],
                            "high": [188.44, 185.88, None],
                            "low": [183.89, 183.43, None],
                            "close": [185.64, 184.25, None],
                            "volume": [82488700, 58414500, None],
                        }
                    ],
                    "adjclose": [{"adjclose": [184.9, 183.52, None]}],
                },
                "events": {
                    "dividends": {
                        "1699626600": {"amount": 0.24, "date": 1699626600},
                        "1691760600": {"amount": 0.24, "date": 1691760600},
                    },
                    "splits": {
                        "1598880600": {
                            "date": 1598880600,
                            "numerator": 4,
                            "denominator": 1,
                            "splitRatio": "4:1",
                        }
                    },
                },
            }
        ],
        "error": None,
    }
}


QUOTE_SUMMARY_PAYLOAD = {
    "quoteSummary": {
        "result": [
            {
                "assetProfile": {
                    "city": "Cupertino",
                    "country": "United States",
                    "industry": "Consumer Electronics",
                    "sector": "Technology",
                    "fullTimeEmployees": 161000,
                    "longBusinessSummary": "Apple Inc. designs smartphones.",
                    "companyOfficers": [
                        {"name": "Mr. Luca Maestri", "title": "CFO & Senior VP"},
                        {"name": "Mr. Timothy D. Cook", "title": "CEO & Director"},
                    ],
                },
                "price": {
                    "shortName": "Apple Inc.",
                    "longName": "Apple Inc.",
                    "currency": "USD",
                    "exchange": "NMS",
                    "quoteType": "EQUITY",
                    "regularMarketPrice": {"raw": 187.5, "fmt": "187.50"},
                    "regularMarketVolume": {"raw": 52000000, "fmt": "52M"},
                    "marketCap": {"raw": 2900000000000, "fmt": "2.9T"},
                },
                "summaryDetail": {
                    "previousClose": {"raw": 185.0, "fmt": "185.00"},
                    "open": {"raw": 186.0, "fmt": "186.00"},
                    "dayLow": {"raw": 184.5, "fmt": "184.50"},
                    "dayHigh": {"raw": 188.0, "fmt": "188.00"},
                    "fiftyTwoWeekLow": {"raw": 164.08, "fmt": "164.08"},
                    "fiftyTwoWeekHigh": {"raw": 199.62, "fmt": "199.62"},
                    "trailingPE": {"raw": 29.1, "fmt": "29.10"},
                    "dividendYield": {"raw": 0.0051, "fmt": "0.51%"},
                    "beta": {},
                },
                "defaultKeyStatistics": {
                    "sharesOutstanding": {"raw": 15460000000, "fmt": "15.46B"},
                    "mostRecentQuarter": {"raw": 1703894400, "fmt": "2023-12-30"},
                },
                "financialData": {
                    "currentPrice": {"raw": 187.5, "fmt": "187.50"},
                    "targetMeanPrice": {"raw": 200.0, "fmt": "200.00"},
                    "targetHighPrice": {"raw": 250.0, "fmt": "250.00"},
                    "targetLowPrice": {"raw": 158.0, "fmt": "158.00"},
                    "numberOfAnalystOpinions": {"raw": 38, "fmt": "38"},
                    "recommendationKey": "buy",
                    "financialCurrency": "USD",
                },
                "incomeStatementHistory": {
                    "incomeStatementHistory": [
                        {
                            "maxAge": 1,
                            "endDate": {"raw": 1696032000, "fmt": "2023-09-30"},
                            "totalRevenue": {"raw": 383285000000, "fmt": "383.29B"},
                            "netIncome": {"raw": 96995000000, "fmt": "97B"},
                            "researchDevelopment": {"raw": None},
                            "discontinuedOperations": {},
                        },
                        {
                            "maxAge": 1,
                            "endDate": {"raw": 1664496000, "fmt": "2022-09-30"},
                            "totalRevenue": {"raw": 394328000000, "fmt": "394.33B"},
                            "netIncome": {"raw": 99803000000, "fmt": "99.8B"},
                        },
                    ]
                },
            }
        ],
        "error": None,
    }
}


OPTIONS_PAYLOAD = {
    "optionChain": {
        "result": [
            {
                "underlyingSymbol": "AAPL",
                "expirationDates": [1705622400, 1706227200],
                "strikes": [180.0, 185.0, 190.0],
                "quote": {"regularMarketPrice": 187.5, "currency": "USD"},
                "options": [
                    {
                        "expirationDate": 1705622400,
                        "calls": [
                            {
                                "contractSymbol": "AAPL240119C00185000",
                                "strike": 185.0,
                                "expiration": 1705622400,
                                "bid": 3.1,
                                "ask": 3.3,
                                "inTheMoney": True,
                            }
                        ],
                        "puts": [
                            {
                                "contractSymbol": "AAPL240119P00190000",
                                "strike": 190.0,
                                "currency": "USD",
                                "expiration": 1705622400,
                                "bid": 3.9,
                                "ask": 4.1,
                                "inTheMoney": True,
                            }
                        ],
                    }
                ],
            }
        ],
        "error": None,
    }
}


NEWS_PAYLOAD = {
    "count": 1,
    "quotes": [],
    "news": [
        {
            "uuid": "a1b2c3",
            "title": "Apple unveils new product",
            "publisher": "Reuters",
            "link": "https://example.com/apple",
            "providerPublishTime": 1704300000,
            "type": "STORY",
            "thumbnail": {"resolutions": [{"url": "https://example.com/thumb.jpg"}]},
            "relatedTickers": ["AAPL"],
        }
    ],
}


@pytest.fixture
def chart_payload():
    """Chart response for AAPL with three bars (the last one a gap), dividends and a split."""
    return copy.deepcopy(CHART_PAYLOAD)


@pytest.fixture
def quote_summary_payload():
    """Quote summary response with profile, price, statistics and an income statement."""
    return copy.deepcopy(QUOTE_SUMMARY_PAYLOAD)


@pytest.fixture
def options_payload():
    """Options response with one expiration block."""
    return copy.deepcopy(OPTIONS_PAYLOAD)


@pytest.fixture
def news_payload():
    """Search response with one news article."""
    return copy.deepcopy(NEWS_PAYLOAD)


@pytest.fixture
def respond():
    """
    Build an httpx.MockTransport handler that answers every request the same way.

    The handler records the requests it receives on ``handler.requests``.
    """
    def factory(payload=None, status=200, text=None, exc=None):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if exc is not None:
                raise exc
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=payload)

        handler.requests = requests
        return handler

    return factory


@pytest.fixture
def make_client():
    """Create a YahooFinanceClient whose requests go to a mock handler."""
    def factory(handler) -> YahooFinanceClient:
        return YahooFinanceClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def sample_quotes():
    """Five bars with timestamps 1..5."""
    return [
        Quote(timestamp=1, open=10.0, high=11.0, low=9.5, close=10.5, volume=100),
        Quote(timestamp=2, open=10.5, high=12.0, low=10.0, close=11.5, volume=200),
        Quote(timestamp=3, open=11.5, high=12.5, low=11.0, close=None, volume=None),
        Quote(timestamp=4, open=12.0, high=13.0, low=11.5, close=12.5, volume=300),
        Quote(timestamp=5, open=12.5, high=14.0, low=12.0, close=13.5, volume=400),
    ]


@pytest.fixture
def test_client():
    """Create a test client for the FastAPI app."""
    from yfkit.app.api import app
    return TestClient(app)
