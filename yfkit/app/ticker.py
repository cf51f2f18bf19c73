"""
Per-symbol facade over the Yahoo Finance client.
Groups every operation for one ticker by data kind.
"""

from typing import Optional, Union

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
    Sustainability,
)
from yfkit.core.models import (
    ActionsData,
    CapitalGainsData,
    DividendData,
    FastInfo,
    HistoricalSeries,
    Interval,
    NewsData,
    OptionChain,
    OptionExpirations,
    Period,
    SplitData,
    TickerInfo,
)
from yfkit.core.outcome import Outcome
from yfkit.data_sources.yahoo_client import DateLike, YahooFinanceClient, normalize_symbol


class Ticker:
    """
    All operations for a single ticker symbol.

    Example:
        ticker = Ticker("AAPL")
        outcome = await ticker.history(Period.ONE_MONTH)
        if outcome.is_success():
            print(len(outcome.value.quotes))
    """

    def __init__(self, symbol: str, client: Optional[YahooFinanceClient] = None):
        self.symbol = normalize_symbol(symbol) if isinstance(symbol, str) else symbol
        self.client = client or default_client

    def __repr__(self) -> str:
        return f"Ticker({self.symbol!r})"

    # Prices and corporate actions

    async def history(
        self,
        period: Union[Period, str] = Period.ONE_MONTH,
        interval: Union[Interval, str] = Interval.ONE_DAY,
    ) -> Outcome[HistoricalSeries]:
        return await self.client.history(self.symbol, period, interval)

    async def history_by_range(
        self,
        start: DateLike,
        end: DateLike,
        interval: Union[Interval, str] = Interval.ONE_DAY,
    ) -> Outcome[HistoricalSeries]:
        return await self.client.history_by_range(self.symbol, start, end, interval)

    async def dividends(self, period: Union[Period, str] = Period.MAX) -> Outcome[DividendData]:
        return await self.client.dividends(self.symbol, period)

    async def splits(self, period: Union[Period, str] = Period.MAX) -> Outcome[SplitData]:
        return await self.client.splits(self.symbol, period)

    async def capital_gains(
        self, period: Union[Period, str] = Period.MAX
    ) -> Outcome[CapitalGainsData]:
        return await self.client.capital_gains(self.symbol, period)

    async def actions(self, period: Union[Period, str] = Period.MAX) -> Outcome[ActionsData]:
        return await self.client.actions(self.symbol, period)

    # Profile

    async def info(self) -> Outcome[TickerInfo]:
        return await self.client.info(self.symbol)

    async def fast_info(self) -> Outcome[FastInfo]:
        return await self.client.fast_info(self.symbol)

    async def calendar(self) -> Outcome[Calendar]:
        return await self.client.calendar(self.symbol)

    # Financial statements

    async def income_statement(
        self, frequency: Union[Frequency, str] = Frequency.ANNUAL
    ) -> Outcome[FinancialStatement]:
        return await self.client.income_statement(self.symbol, frequency)

    async def quarterly_income_statement(self) -> Outcome[FinancialStatement]:
        return await self.client.income_statement(self.symbol, Frequency.QUARTERLY)

    async def balance_sheet(
        self, frequency: Union[Frequency, str] = Frequency.ANNUAL
    ) -> Outcome[FinancialStatement]:
        return await self.client.balance_sheet(self.symbol, frequency)

    async def quarterly_balance_sheet(self) -> Outcome[FinancialStatement]:
        return await self.client.balance_sheet(self.symbol, Frequency.QUARTERLY)

    async def cash_flow(
        self, frequency: Union[Frequency, str] = Frequency.ANNUAL
    ) -> Outcome[FinancialStatement]:
        return await self.client.cash_flow(self.symbol, frequency)

    async def quarterly_cash_flow(self) -> Outcome[FinancialStatement]:
        return await self.client.cash_flow(self.symbol, Frequency.QUARTERLY)

    async def earnings(self) -> Outcome[FullEarnings]:
        return await self.client.earnings(self.symbol)

    async def earnings_history(self) -> Outcome[EarningsHistory]:
        return await self.client.earnings_history(self.symbol)

    # Analysts

    async def recommendations(self) -> Outcome[RecommendationsData]:
        return await self.client.recommendations(self.symbol)

    async def recommendations_summary(self) -> Outcome[RecommendationsSummary]:
        return await self.client.recommendations_summary(self.symbol)

    async def analyst_price_targets(self) -> Outcome[AnalystPriceTargets]:
        return await self.client.analyst_price_targets(self.symbol)

    # Holders

    async def major_holders(self) -> Outcome[MajorHolders]:
        return await self.client.major_holders(self.symbol)

    async def institutional_holders(self) -> Outcome[InstitutionalHoldersData]:
        return await self.client.institutional_holders(self.symbol)

    async def mutual_fund_holders(self) -> Outcome[MutualFundHoldersData]:
        return await self.client.mutual_fund_holders(self.symbol)

    async def insider_transactions(self) -> Outcome[InsiderTransactionsData]:
        return await self.client.insider_transactions(self.symbol)

    async def insider_purchases(self) -> Outcome[InsiderTransactionsData]:
        """Insider transactions narrowed to purchases."""
        outcome = await self.client.insider_transactions(self.symbol)
        return outcome.map_success(
            lambda data: data.model_copy(update={"transactions": data.purchases()})
        )

    async def insider_roster_holders(self) -> Outcome[InsiderRosterData]:
        return await self.client.insider_roster_holders(self.symbol)

    # Options

    async def options(self) -> Outcome[OptionExpirations]:
        return await self.client.options(self.symbol)

    async def option_chain(self, expiration: Optional[DateLike] = None) -> Outcome[OptionChain]:
        return await self.client.option_chain(self.symbol, expiration)

    # Other

    async def news(self, count: Optional[int] = None) -> Outcome[NewsData]:
        return await self.client.news(self.symbol, count)

    async def sustainability(self) -> Outcome[Sustainability]:
        return await self.client.sustainability(self.symbol)

    async def sec_filings(self) -> Outcome[SecFilingsData]:
        return await self.client.sec_filings(self.symbol)

    async def shares(self) -> Outcome[SharesData]:
        return await self.client.shares(self.symbol)


# Module-level instance
default_client = YahooFinanceClient()


def ticker(symbol: str) -> Ticker:
    """Convenience function to get a Ticker on the shared client."""
    return Ticker(symbol)


async def get_history(
    symbol: str,
    period: Union[Period, str] = Period.ONE_MONTH,
    interval: Union[Interval, str] = Interval.ONE_DAY,
) -> Outcome[HistoricalSeries]:
    """Convenience function to get history."""
    return await default_client.history(symbol, period, interval)


async def get_info(symbol: str) -> Outcome[TickerInfo]:
    """Convenience function to get ticker info."""
    return await default_client.info(symbol)
