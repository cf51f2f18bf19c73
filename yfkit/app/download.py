"""
Multi-symbol fan-out.
Runs one independent operation per symbol concurrently and collects every outcome.
"""

import asyncio
import re
from typing import Awaitable, Callable, Iterable, Iterator, Optional, TypeVar, Union

from loguru import logger

from yfkit.app.ticker import Ticker, default_client
from yfkit.core.logging import get_logger
from yfkit.core.models import (
    DividendData,
    FastInfo,
    HistoricalSeries,
    Interval,
    NewsData,
    Period,
    TickerInfo,
)
from yfkit.core.outcome import Outcome, failure_from_exception
from yfkit.data_sources.yahoo_client import YahooFinanceClient, normalize_symbol

T = TypeVar("T")

Symbols = Union[str, Iterable[str]]


def parse_symbols(symbols: Symbols) -> list[str]:
    """
    Normalise and de-duplicate symbols, keeping first-seen order.

    A single string may hold several symbols separated by commas or spaces.
    """
    if isinstance(symbols, str):
        symbols = re.split(r"[,\s]+", symbols)
    return list(dict.fromkeys(normalize_symbol(s) for s in symbols if s and s.strip()))


def as_symbol_list(symbols: Symbols) -> list[str]:
    """
    Split a single string into symbols; keep any other iterable exactly as given.

    Results are keyed by these entries, so caller-supplied symbols are not
    normalised and blank entries are kept to be reported as failures.
    """
    if isinstance(symbols, str):
        return parse_symbols(symbols)
    return list(symbols)


async def _settle(
    symbol: str, operation: Callable[[str], Awaitable[Outcome[T]]]
) -> Outcome[T]:
    """Run one symbol's operation; anything it raises becomes that symbol's Failure."""
    try:
        return await operation(symbol)
    except Exception as e:
        failure = failure_from_exception(e, symbol)
        get_logger("download", symbol=symbol).warning(
            f"[{failure.kind.value}] {failure.message}"
        )
        return failure


async def fan_out(
    symbols: Iterable[str],
    operation: Callable[[str], Awaitable[Outcome[T]]],
) -> dict[str, Outcome[T]]:
    """
    Run ``operation`` for every distinct symbol concurrently.

    Every symbol gets exactly one entry. One symbol failing (or raising) never
    affects another's outcome. Cancelling the caller cancels all pending
    per-symbol work.

    Args:
        symbols: Symbols to fetch; duplicates are collapsed
        operation: Coroutine function taking one symbol

    Returns:
        Mapping of symbol to its Outcome; empty for empty input
    """
    unique = list(dict.fromkeys(symbols))
    if not unique:
        return {}

    logger.debug(f"Fanning out over {len(unique)} symbols")
    outcomes = await asyncio.gather(*(_settle(s, operation) for s in unique))
    results = dict(zip(unique, outcomes))

    failed = [s for s, o in results.items() if o.is_error()]
    logger.info(f"Fetched {len(unique) - len(failed)}/{len(unique)} symbols")
    return results


async def download(
    symbols: Symbols,
    period: Union[Period, str] = Period.ONE_MONTH,
    interval: Union[Interval, str] = Interval.ONE_DAY,
    client: Optional[YahooFinanceClient] = None,
) -> dict[str, Outcome[HistoricalSeries]]:
    """
    Download price history for several symbols at once.

    Args:
        symbols: Iterable of symbols (used as result keys unchanged) or a
            comma/space separated string
        period: Relative window
        interval: Bar granularity
        client: Client to use (defaults to the shared client)

    Returns:
        Mapping of symbol to its history Outcome
    """
    client = client or default_client
    return await fan_out(
        as_symbol_list(symbols), lambda s: client.history(s, period, interval)
    )


class Tickers:
    """
    A collection of tickers sharing one client.

    Example:
        tickers = Tickers("AAPL MSFT GOOGL")
        histories = await tickers.history(Period.FIVE_DAYS)
    """

    def __init__(self, symbols: Symbols, client: Optional[YahooFinanceClient] = None):
        self.client = client or default_client
        self.symbols = list(dict.fromkeys(as_symbol_list(symbols)))
        self._tickers = {s: Ticker(s, self.client) for s in self.symbols}

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[Ticker]:
        return iter(self._tickers.values())

    def __getitem__(self, key: Union[int, str]) -> Ticker:
        if isinstance(key, int):
            return self._tickers[self.symbols[key]]
        if key in self._tickers:
            return self._tickers[key]
        for ticker in self._tickers.values():
            if ticker.symbol == normalize_symbol(key):
                return ticker
        raise KeyError(key)

    def __repr__(self) -> str:
        return f"Tickers({self.symbols!r})"

    async def map(
        self, operation: Callable[[Ticker], Awaitable[Outcome[T]]]
    ) -> dict[str, Outcome[T]]:
        """Run any Ticker operation across every symbol."""
        return await fan_out(self.symbols, lambda s: operation(self._tickers[s]))

    async def history(
        self,
        period: Union[Period, str] = Period.ONE_MONTH,
        interval: Union[Interval, str] = Interval.ONE_DAY,
    ) -> dict[str, Outcome[HistoricalSeries]]:
        return await self.map(lambda t: t.history(period, interval))

    async def info(self) -> dict[str, Outcome[TickerInfo]]:
        return await self.map(lambda t: t.info())

    async def fast_info(self) -> dict[str, Outcome[FastInfo]]:
        return await self.map(lambda t: t.fast_info())

    async def dividends(
        self, period: Union[Period, str] = Period.MAX
    ) -> dict[str, Outcome[DividendData]]:
        return await self.map(lambda t: t.dividends(period))

    async def news(self, count: Optional[int] = None) -> dict[str, Outcome[NewsData]]:
        return await self.map(lambda t: t.news(count))
