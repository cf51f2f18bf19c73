"""
Request-target construction for the Yahoo Finance JSON endpoints.
"""

from typing import Iterable, Optional
from urllib.parse import quote, urlencode

from yfkit.core.config import settings
from yfkit.core.models import Interval, Period

CHART_PATH = "/v8/finance/chart/{symbol}"
QUOTE_SUMMARY_PATH = "/v10/finance/quoteSummary/{symbol}"
OPTIONS_PATH = "/v7/finance/options/{symbol}"
SEARCH_PATH = "/v1/finance/search"

PRICE_EVENTS = "div,splits"
CAPITAL_GAIN_EVENTS = "capitalGains"


def _base(base_url: Optional[str]) -> str:
    return (base_url or settings.base_url).rstrip("/")


def chart_url(
    symbol: str,
    period: Period,
    interval: Interval,
    events: str = PRICE_EVENTS,
    base_url: Optional[str] = None,
) -> str:
    """
    Build a chart request for one symbol.

    Args:
        symbol: Normalised ticker symbol
        period: Relative window (sent as ``range``)
        interval: Bar granularity
        events: Comma-separated event kinds to include
        base_url: Override for the configured host

    Returns:
        Absolute URL
    """
    params = urlencode({
        "range": period.value,
        "interval": interval.value,
        "events": events,
        "includeAdjustedClose": "true",
    })
    return f"{_base(base_url)}{CHART_PATH.format(symbol=quote(symbol))}?{params}"


def quote_summary_url(
    symbol: str,
    modules: Iterable[str],
    base_url: Optional[str] = None,
) -> str:
    params = urlencode({"modules": ",".join(modules)})
    return f"{_base(base_url)}{QUOTE_SUMMARY_PATH.format(symbol=quote(symbol))}?{params}"


def options_url(
    symbol: str,
    expiration: Optional[int] = None,
    base_url: Optional[str] = None,
) -> str:
    url = f"{_base(base_url)}{OPTIONS_PATH.format(symbol=quote(symbol))}"
    if expiration is not None:
        url += f"?{urlencode({'date': expiration})}"
    return url


def search_url(
    symbol: str,
    news_count: int,
    base_url: Optional[str] = None,
) -> str:
    params = urlencode({"q": symbol, "quotesCount": 0, "newsCount": news_count})
    return f"{_base(base_url)}{SEARCH_PATH}?{params}"
