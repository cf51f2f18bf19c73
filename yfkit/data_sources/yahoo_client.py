"""
Async Yahoo Finance client.
One coroutine per data kind; each returns an Outcome and never raises.
"""

import asyncio
import re
import time
from datetime import date, datetime, time as dt_time, timezone
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional, Type, TypeVar, Union

import httpx
from loguru import logger

from yfkit.core.config import settings
from yfkit.core.fundamentals import (
    AnalystPriceTargets,
    Calendar,
    EarningsHistory,
    FinancialStatement,
    Frequency,
    FullEarnings,
    InsiderRosterData,
    InsiderTransactionsData,
    InstitutionalHoldersData,
    MajorHolders,
    MutualFundHoldersData,
    RecommendationsData,
    RecommendationsSummary,
    SecFilingsData,
    SharesData,
    StatementType,
    Sustainability,
)
from yfkit.core.models import (
    ActionsData,
    CapitalGainsData,
    DividendAction,
    DividendData,
    FastInfo,
    HistoricalSeries,
    Interval,
    NewsData,
    OptionChain,
    OptionExpirations,
    Period,
    SplitAction,
    SplitData,
    TickerInfo,
)
from yfkit.core.outcome import (
    ErrorKind,
    Failure,
    Outcome,
    Success,
    YahooFinanceError,
    failure_from_exception,
)
from yfkit.core.views import filter_by_inclusive_range, sort_ascending_by_timestamp
from yfkit.data_sources import mappers
from yfkit.data_sources.payloads import (
    ChartEnvelope,
    OptionChainEnvelope,
    Payload,
    QuoteSummaryEnvelope,
    SearchEnvelope,
    decode,
)
from yfkit.data_sources.transport import HttpTransport
from yfkit.data_sources.urls import (
    CAPITAL_GAIN_EVENTS,
    chart_url,
    options_url,
    quote_summary_url,
    search_url,
)

E = TypeVar("E", bound=Enum)

SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.^=\-]{1,32}$")

INFO_MODULES = [
    "assetProfile",
    "price",
    "summaryDetail",
    "defaultKeyStatistics",
    "financialData",
]

DateLike = Union[int, float, date, datetime]


def normalize_symbol(symbol: str) -> str:
    """Trim and upper-case a ticker symbol."""
    return symbol.strip().upper()


def is_valid_symbol(symbol: str) -> bool:
    """Check a normalised symbol against the characters Yahoo tickers use."""
    return bool(SYMBOL_PATTERN.match(symbol))


def _coerce(enum_cls: Type[E], value: Any) -> E:
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise YahooFinanceError(
            f"Invalid {enum_cls.__name__.lower()} {value!r} (expected one of: {allowed})",
            ErrorKind.INVALID_PARAMETERS,
            e,
        ) from e


def to_epoch(value: DateLike, end_of_day: bool = False) -> int:
    """
    Convert a timestamp, date or datetime to epoch seconds (UTC).

    A bare date maps to midnight UTC, or to 23:59:59 UTC when
    ``end_of_day`` is set so inclusive ranges cover the whole day.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    if isinstance(value, date):
        moment = dt_time(23, 59, 59) if end_of_day else dt_time(0, 0)
        return int(datetime.combine(value, moment, tzinfo=timezone.utc).timestamp())
    return int(value)


class YahooFinanceClient:
    """
    Async client for the Yahoo Finance JSON API.

    Every operation follows the same template: validate inputs locally, build
    the request URL, make one GET, turn non-2xx statuses into failures, then
    decode and map the body. Nothing raises across the public boundary.

    Usage:
        async with YahooFinanceClient() as client:
            outcome = await client.history("AAPL", Period.ONE_MONTH)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.base_url
        self.http = HttpTransport(timeout=timeout, user_agent=user_agent, transport=transport)

    async def __aenter__(self) -> "YahooFinanceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    # ------------------------------------------------------------------
    # Fetch template
    # ------------------------------------------------------------------

    async def _fetch(
        self,
        operation: str,
        symbol: str,
        build_url: Callable[[str], str],
        envelope: Type[Payload],
        mapper: Callable[[Any, str], Outcome],
    ) -> Outcome:
        """
        Run one single-symbol operation.

        Args:
            operation: Name used in log lines and failure messages
            symbol: Raw symbol as passed by the caller
            build_url: Builds the request URL from the normalised symbol;
                may raise YahooFinanceError(INVALID_PARAMETERS)
            envelope: Decoder model for the response body
            mapper: Maps the decoded envelope and symbol to an Outcome

        Returns:
            Outcome of the mapper, or a Failure from any earlier stage
        """
        normalized = normalize_symbol(symbol) if isinstance(symbol, str) else ""
        if not is_valid_symbol(normalized):
            failure = Failure(
                f"{operation}: invalid symbol {symbol!r}", ErrorKind.INVALID_PARAMETERS
            )
            self._log_failure(failure)
            return failure

        context = f"{operation} {normalized}"
        try:
            url = build_url(normalized)
            logger.debug(f"{context}: GET {url}")
            response = await self.http.get(url)

            if not 200 <= response.status < 300:
                outcome = mappers.failure_for_status(response.status, url)
            else:
                outcome = mapper(decode(envelope, response.body), normalized)
        except Exception as e:
            outcome = failure_from_exception(e, context)

        if outcome.is_error():
            self._log_failure(outcome)
        else:
            logger.info(f"Retrieved {context}")
        return outcome

    async def _summary(
        self,
        operation: str,
        symbol: str,
        modules: list[str],
        mapper: Callable[[Any, str], Outcome],
    ) -> Outcome:
        return await self._fetch(
            operation,
            symbol,
            lambda s: quote_summary_url(s, modules, base_url=self.base_url),
            QuoteSummaryEnvelope,
            mapper,
        )

    @staticmethod
    def _log_failure(failure: Failure) -> None:
        if failure.kind in (ErrorKind.NETWORK_ERROR, ErrorKind.UNKNOWN):
            logger.error(f"[{failure.kind.value}] {failure.message}")
        else:
            logger.warning(f"[{failure.kind.value}] {failure.message}")

    # ------------------------------------------------------------------
    # Price history and corporate actions
    # ------------------------------------------------------------------

    async def history(
        self,
        symbol: str,
        period: Union[Period, str] = Period.ONE_MONTH,
        interval: Union[Interval, str] = Interval.ONE_DAY,
    ) -> Outcome[HistoricalSeries]:
        """
        Get OHLCV bars for a symbol.

        Args:
            symbol: Ticker symbol (e.g. 'AAPL')
            period: Relative window
            interval: Bar granularity

        Returns:
            Outcome holding a HistoricalSeries (possibly with no bars)
        """
        return await self._fetch(
            "history",
            symbol,
            lambda s: chart_url(
                s, _coerce(Period, period), _coerce(Interval, interval), base_url=self.base_url
            ),
            ChartEnvelope,
            mappers.map_history,
        )

    async def history_by_range(
        self,
        symbol: str,
        start: DateLike,
        end: DateLike,
        interval: Union[Interval, str] = Interval.ONE_DAY,
    ) -> Outcome[HistoricalSeries]:
        """
        Get bars with start <= timestamp <= end.

        Fetches the maximum period and filters locally, keeping upstream order.
        Dates are taken as whole UTC days.
        """
        try:
            start_ts = to_epoch(start)
            end_ts = to_epoch(end, end_of_day=True)
        except (TypeError, ValueError, OverflowError) as e:
            return Failure(f"history_by_range: invalid bounds: {e}", ErrorKind.INVALID_PARAMETERS, e)
        if start_ts > end_ts:
            return Failure(
                f"history_by_range: start {start_ts} is after end {end_ts}",
                ErrorKind.INVALID_PARAMETERS,
            )

        outcome = await self.history(symbol, Period.MAX, interval)
        return outcome.map_success(
            lambda series: series.model_copy(
                update={"quotes": filter_by_inclusive_range(series.quotes, start_ts, end_ts)}
            )
        )

    async def dividends(
        self, symbol: str, period: Union[Period, str] = Period.MAX
    ) -> Outcome[DividendData]:
        return await self._fetch(
            "dividends",
            symbol,
            lambda s: chart_url(
                s, _coerce(Period, period), Interval.ONE_DAY, base_url=self.base_url
            ),
            ChartEnvelope,
            mappers.map_dividends,
        )

    async def splits(
        self, symbol: str, period: Union[Period, str] = Period.MAX
    ) -> Outcome[SplitData]:
        return await self._fetch(
            "splits",
            symbol,
            lambda s: chart_url(
                s, _coerce(Period, period), Interval.ONE_DAY, base_url=self.base_url
            ),
            ChartEnvelope,
            mappers.map_splits,
        )

    async def capital_gains(
        self, symbol: str, period: Union[Period, str] = Period.MAX
    ) -> Outcome[CapitalGainsData]:
        """Capital gain distributions (mostly funds) from the chart events."""
        return await self._fetch(
            "capital_gains",
            symbol,
            lambda s: chart_url(
                s,
                _coerce(Period, period),
                Interval.ONE_DAY,
                events=CAPITAL_GAIN_EVENTS,
                base_url=self.base_url,
            ),
            ChartEnvelope,
            mappers.map_capital_gains,
        )

    async def actions(
        self, symbol: str, period: Union[Period, str] = Period.MAX
    ) -> Outcome[ActionsData]:
        """
        Dividends and splits merged into one list, oldest first.

        Both lookups run concurrently. If either fails the dividends failure
        is returned first, otherwise the splits failure, unchanged.
        """
        dividends, splits = await asyncio.gather(
            self.dividends(symbol, period),
            self.splits(symbol, period),
        )
        if dividends.is_error():
            return dividends
        if splits.is_error():
            return splits

        merged = [
            DividendAction(timestamp=d.timestamp, amount=d.amount)
            for d in dividends.value.dividends
        ] + [
            SplitAction(timestamp=s.timestamp, ratio=s.ratio)
            for s in splits.value.splits
        ]
        return Success(
            ActionsData(
                symbol=dividends.value.symbol,
                actions=sort_ascending_by_timestamp(merged),
            )
        )

    # ------------------------------------------------------------------
    # Quote summary
    # ------------------------------------------------------------------

    async def info(self, symbol: str) -> Outcome[TickerInfo]:
        """Company profile, price snapshot and key statistics."""
        return await self._summary("info", symbol, INFO_MODULES, mappers.map_info)

    async def fast_info(self, symbol: str) -> Outcome[FastInfo]:
        """Projection of info(); no separate endpoint."""
        return (await self.info(symbol)).map_success(mappers.project_fast_info)

    async def calendar(self, symbol: str) -> Outcome[Calendar]:
        return await self._summary("calendar", symbol, ["calendarEvents"], mappers.map_calendar)

    async def _statement(
        self,
        symbol: str,
        statement: StatementType,
        frequency: Union[Frequency, str],
    ) -> Outcome[FinancialStatement]:
        try:
            frequency = _coerce(Frequency, frequency)
        except YahooFinanceError as e:
            return failure_from_exception(e, f"{statement.value} statement")
        module = mappers.statement_module(statement, frequency)
        return await self._summary(
            f"{statement.value} statement",
            symbol,
            [module, "financialData"],
            partial(mappers.map_statement, statement=statement, frequency=frequency),
        )

    async def income_statement(
        self, symbol: str, frequency: Union[Frequency, str] = Frequency.ANNUAL
    ) -> Outcome[FinancialStatement]:
        return await self._statement(symbol, StatementType.INCOME, frequency)

    async def balance_sheet(
        self, symbol: str, frequency: Union[Frequency, str] = Frequency.ANNUAL
    ) -> Outcome[FinancialStatement]:
        return await self._statement(symbol, StatementType.BALANCE_SHEET, frequency)

    async def cash_flow(
        self, symbol: str, frequency: Union[Frequency, str] = Frequency.ANNUAL
    ) -> Outcome[FinancialStatement]:
        return await self._statement(symbol, StatementType.CASH_FLOW, frequency)

    async def earnings(self, symbol: str) -> Outcome[FullEarnings]:
        return await self._summary("earnings", symbol, ["earnings"], mappers.map_earnings)

    async def earnings_history(self, symbol: str) -> Outcome[EarningsHistory]:
        return await self._summary(
            "earnings_history", symbol, ["earningsHistory"], mappers.map_earnings_history
        )

    async def recommendations(self, symbol: str) -> Outcome[RecommendationsData]:
        """Analyst upgrades and downgrades."""
        return await self._summary(
            "recommendations", symbol, ["upgradeDowngradeHistory"], mappers.map_recommendations
        )

    async def recommendations_summary(self, symbol: str) -> Outcome[RecommendationsSummary]:
        return await self._summary(
            "recommendations_summary",
            symbol,
            ["recommendationTrend"],
            mappers.map_recommendations_summary,
        )

    async def analyst_price_targets(self, symbol: str) -> Outcome[AnalystPriceTargets]:
        return await self._summary(
            "analyst_price_targets", symbol, ["financialData"], mappers.map_price_targets
        )

    async def major_holders(self, symbol: str) -> Outcome[MajorHolders]:
        return await self._summary(
            "major_holders", symbol, ["majorHoldersBreakdown"], mappers.map_major_holders
        )

    async def institutional_holders(self, symbol: str) -> Outcome[InstitutionalHoldersData]:
        return await self._summary(
            "institutional_holders",
            symbol,
            ["institutionOwnership"],
            mappers.map_institutional_holders,
        )

    async def mutual_fund_holders(self, symbol: str) -> Outcome[MutualFundHoldersData]:
        return await self._summary(
            "mutual_fund_holders", symbol, ["fundOwnership"], mappers.map_mutual_fund_holders
        )

    async def insider_transactions(self, symbol: str) -> Outcome[InsiderTransactionsData]:
        return await self._summary(
            "insider_transactions",
            symbol,
            ["insiderTransactions"],
            mappers.map_insider_transactions,
        )

    async def insider_roster_holders(self, symbol: str) -> Outcome[InsiderRosterData]:
        return await self._summary(
            "insider_roster_holders", symbol, ["insiderHolders"], mappers.map_insider_roster
        )

    async def sustainability(self, symbol: str) -> Outcome[Sustainability]:
        return await self._summary(
            "sustainability", symbol, ["esgScores"], mappers.map_sustainability
        )

    async def sec_filings(self, symbol: str) -> Outcome[SecFilingsData]:
        return await self._summary(
            "sec_filings", symbol, ["secFilings"], mappers.map_sec_filings
        )

    async def shares(self, symbol: str) -> Outcome[SharesData]:
        """Current shares outstanding, keyed by the most recent quarter end."""
        fetched_at = int(time.time())
        return await self._summary(
            "shares",
            symbol,
            ["defaultKeyStatistics"],
            partial(mappers.map_shares, fetched_at=fetched_at),
        )

    # ------------------------------------------------------------------
    # Options and news
    # ------------------------------------------------------------------

    async def options(self, symbol: str) -> Outcome[OptionExpirations]:
        """Available option expirations and strikes."""
        return await self._fetch(
            "options",
            symbol,
            lambda s: options_url(s, base_url=self.base_url),
            OptionChainEnvelope,
            mappers.map_option_expirations,
        )

    async def option_chain(
        self, symbol: str, expiration: Optional[DateLike] = None
    ) -> Outcome[OptionChain]:
        """
        Calls and puts for one expiration.

        Args:
            symbol: Underlying ticker symbol
            expiration: Expiration (epoch seconds or date); None picks the
                nearest expiration

        Returns:
            Outcome holding an OptionChain
        """
        if expiration is not None:
            try:
                expiration = to_epoch(expiration)
            except (TypeError, ValueError, OverflowError) as e:
                return Failure(
                    f"option_chain: invalid expiration {expiration!r}",
                    ErrorKind.INVALID_PARAMETERS,
                    e,
                )
            if expiration < 0:
                return Failure(
                    f"option_chain: expiration must be non-negative, got {expiration}",
                    ErrorKind.INVALID_PARAMETERS,
                )

        return await self._fetch(
            "option_chain",
            symbol,
            lambda s: options_url(s, expiration, base_url=self.base_url),
            OptionChainEnvelope,
            partial(mappers.map_option_chain, expiration=expiration),
        )

    async def news(self, symbol: str, count: Optional[int] = None) -> Outcome[NewsData]:
        """Recent news articles mentioning the symbol."""
        count = settings.news_count if count is None else count
        if not isinstance(count, int) or count < 1:
            return Failure(
                f"news: count must be a positive integer, got {count!r}",
                ErrorKind.INVALID_PARAMETERS,
            )
        return await self._fetch(
            "news",
            symbol,
            lambda s: search_url(s, count, base_url=self.base_url),
            SearchEnvelope,
            mappers.map_news,
        )

