"""
Pydantic models for market data.
Defines price history, corporate actions, options, ticker info and news entities.

All entities are immutable; timestamps are integer seconds since the Unix epoch.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DomainModel(BaseModel):
    """Base class for immutable domain entities."""

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Request enumerations
# ============================================================================

class Period(str, Enum):
    """Relative time window for chart requests."""

    ONE_DAY = "1d"
    FIVE_DAYS = "5d"
    ONE_MONTH = "1mo"
    THREE_MONTHS = "3mo"
    SIX_MONTHS = "6mo"
    ONE_YEAR = "1y"
    TWO_YEARS = "2y"
    FIVE_YEARS = "5y"
    TEN_YEARS = "10y"
    YEAR_TO_DATE = "ytd"
    MAX = "max"


class Interval(str, Enum):
    """Sampling granularity for chart requests."""

    ONE_MINUTE = "1m"
    TWO_MINUTES = "2m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    SIXTY_MINUTES = "60m"
    NINETY_MINUTES = "90m"
    ONE_HOUR = "1h"
    ONE_DAY = "1d"
    FIVE_DAYS = "5d"
    ONE_WEEK = "1wk"
    ONE_MONTH = "1mo"
    THREE_MONTHS = "3mo"


# ============================================================================
# Price history
# ============================================================================

class Quote(DomainModel):
    """One OHLCV bar. Every numeric field may be absent for gap bars."""

    timestamp: int = Field(..., description="Bar timestamp (epoch seconds)")
    open: Optional[float] = Field(default=None, description="Opening price")
    high: Optional[float] = Field(default=None, description="Highest price")
    low: Optional[float] = Field(default=None, description="Lowest price")
    close: Optional[float] = Field(default=None, description="Closing price")
    adj_close: Optional[float] = Field(default=None, description="Adjusted closing price")
    volume: Optional[int] = Field(default=None, description="Trading volume")


class HistoricalSeries(DomainModel):
    """Bars for one symbol in upstream arrival order."""

    symbol: str = Field(..., description="Ticker symbol")
    quotes: list[Quote] = Field(default_factory=list, description="Bars, possibly empty")
    currency: Optional[str] = Field(default=None, description="Price currency")
    exchange_name: Optional[str] = None
    instrument_type: Optional[str] = None
    timezone: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.quotes


# ============================================================================
# Corporate actions
# ============================================================================

class Dividend(DomainModel):
    timestamp: int = Field(..., description="Payment timestamp (epoch seconds)")
    amount: float = Field(..., description="Dividend per share")


class DividendData(DomainModel):
    symbol: str
    dividends: list[Dividend] = Field(default_factory=list)


class Split(DomainModel):
    """Stock split; ratio is numerator / denominator."""

    timestamp: int = Field(..., description="Split timestamp (epoch seconds)")
    numerator: float
    denominator: float
    ratio: float = Field(..., description="numerator / denominator")

    def is_forward_split(self) -> bool:
        return self.ratio > 1

    def is_reverse_split(self) -> bool:
        return self.ratio < 1


class SplitData(DomainModel):
    symbol: str
    splits: list[Split] = Field(default_factory=list)


class CapitalGain(DomainModel):
    timestamp: int
    amount: float


class CapitalGainsData(DomainModel):
    symbol: str
    capital_gains: list[CapitalGain] = Field(default_factory=list)


class DividendAction(DomainModel):
    kind: Literal["dividend"] = "dividend"
    timestamp: int
    amount: float


class SplitAction(DomainModel):
    kind: Literal["split"] = "split"
    timestamp: int
    ratio: float


class CapitalGainAction(DomainModel):
    kind: Literal["capital_gain"] = "capital_gain"
    timestamp: int
    amount: float


CorporateAction = Annotated[
    Union[DividendAction, SplitAction, CapitalGainAction],
    Field(discriminator="kind"),
]


class ActionsData(DomainModel):
    """Dividends and splits merged into one list sorted by timestamp."""

    symbol: str
    actions: list[CorporateAction] = Field(default_factory=list)

    @property
    def dividends(self) -> list[DividendAction]:
        return [a for a in self.actions if isinstance(a, DividendAction)]

    @property
    def splits(self) -> list[SplitAction]:
        return [a for a in self.actions if isinstance(a, SplitAction)]


# ============================================================================
# Options
# ============================================================================

class OptionContract(DomainModel):
    """A single call or put contract."""

    contract_symbol: str = Field(..., description="OCC contract symbol")
    strike: float = Field(..., description="Strike price")
    expiration: int = Field(..., description="Expiration (epoch seconds)")
    currency: Optional[str] = None
    last_price: Optional[float] = None
    change: Optional[float] = None
    percent_change: Optional[float] = None
    volume: Optional[int] = None
    open_interest: Optional[int] = None
    bid: Optional[float] = None
    ask: Optional[float] = None
    contract_size: Optional[str] = None
    last_trade_date: Optional[int] = None
    implied_volatility: Optional[float] = None
    in_the_money: Optional[bool] = None

    @property
    def bid_ask_spread(self) -> Optional[float]:
        if self.bid is None or self.ask is None:
            return None
        return self.ask - self.bid


class OptionChain(DomainModel):
    """Calls and puts for one expiration."""

    symbol: str
    expiration: int
    calls: list[OptionContract] = Field(default_factory=list)
    puts: list[OptionContract] = Field(default_factory=list)
    underlying_price: Optional[float] = None
    underlying_symbol: Optional[str] = None

    def strikes(self) -> list[float]:
        """Distinct strikes across calls and puts, ascending."""
        return sorted({c.strike for c in self.calls} | {p.strike for p in self.puts})

    def call_at(self, strike: float) -> Optional[OptionContract]:
        return next((c for c in self.calls if c.strike == strike), None)

    def put_at(self, strike: float) -> Optional[OptionContract]:
        return next((p for p in self.puts if p.strike == strike), None)

    def in_the_money_calls(self) -> list[OptionContract]:
        return [c for c in self.calls if c.in_the_money]

    def in_the_money_puts(self) -> list[OptionContract]:
        return [p for p in self.puts if p.in_the_money]


class OptionExpirations(DomainModel):
    symbol: str
    expirations: list[int] = Field(default_factory=list)
    strikes: list[float] = Field(default_factory=list)


# ============================================================================
# Ticker info
# ============================================================================

class TickerInfo(DomainModel):
    """Company profile, price snapshot and key statistics."""

    symbol: str = Field(..., description="Ticker symbol")

    # Identity
    short_name: Optional[str] = None
    long_name: Optional[str] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None
    quote_type: Optional[str] = None

    # Profile
    sector: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    employees: Optional[int] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    ceo: Optional[str] = None

    # Price snapshot
    current_price: Optional[float] = None
    previous_close: Optional[float] = None
    open: Optional[float] = None
    day_low: Optional[float] = None
    day_high: Optional[float] = None
    regular_market_volume: Optional[int] = None
    average_volume: Optional[int] = None
    fifty_two_week_low: Optional[float] = None
    fifty_two_week_high: Optional[float] = None
    market_cap: Optional[int] = None
    shares_outstanding: Optional[int] = None

    # Valuation and dividends
    beta: Optional[float] = None
    trailing_pe: Optional[float] = None
    forward_pe: Optional[float] = None
    book_value: Optional[float] = None
    price_to_book: Optional[float] = None
    trailing_eps: Optional[float] = None
    forward_eps: Optional[float] = None
    dividend_rate: Optional[float] = None
    dividend_yield: Optional[float] = None
    ex_dividend_date: Optional[int] = None

    # Financial data
    revenue_per_share: Optional[float] = None
    return_on_assets: Optional[float] = None
    return_on_equity: Optional[float] = None
    free_cashflow: Optional[int] = None
    operating_cashflow: Optional[int] = None
    revenue_growth: Optional[float] = None
    earnings_growth: Optional[float] = None
    profit_margins: Optional[float] = None
    recommendation_key: Optional[str] = None


class FastInfo(DomainModel):
    """Lightweight projection of TickerInfo."""

    symbol: str
    last_price: Optional[float] = None
    previous_close: Optional[float] = None
    open: Optional[float] = None
    day_high: Optional[float] = None
    day_low: Optional[float] = None
    year_high: Optional[float] = None
    year_low: Optional[float] = None
    volume: Optional[int] = None
    market_cap: Optional[int] = None
    shares: Optional[int] = None
    currency: Optional[str] = None

    @property
    def day_range(self) -> Optional[float]:
        if self.day_high is None or self.day_low is None:
            return None
        return self.day_high - self.day_low

    @property
    def price_change(self) -> Optional[float]:
        if self.last_price is None or self.previous_close is None:
            return None
        return self.last_price - self.previous_close

    @property
    def percent_change(self) -> Optional[float]:
        change = self.price_change
        if change is None or not self.previous_close:
            return None
        return change / self.previous_close * 100.0


# ============================================================================
# News
# ============================================================================

class NewsArticle(DomainModel):
    uuid: str
    title: str
    link: str
    publish_time: int = Field(..., description="Publish time (epoch seconds)")
    publisher: Optional[str] = None
    type: Optional[str] = None
    thumbnail: Optional[str] = None
    related_tickers: list[str] = Field(default_factory=list)


class NewsData(DomainModel):
    symbol: str
    articles: list[NewsArticle] = Field(default_factory=list)
