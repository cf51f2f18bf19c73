"""
Decoder models for raw Yahoo Finance responses.

These mirror the upstream JSON loosely: unknown keys are ignored, optional
leaves decode to None and ``{"raw": ..., "fmt": ...}`` pairs collapse to the
raw number. Only the envelope objects and a handful of required leaves make
decoding fail.
"""

from typing import Annotated, Any, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _unwrap_raw(value: Any) -> Any:
    """Collapse a {raw, fmt} pair to raw; an empty {} means absent."""
    if isinstance(value, dict):
        return value.get("raw")
    return value


def _unwrap_int(value: Any) -> Any:
    value = _unwrap_raw(value)
    if isinstance(value, float):
        return int(value)
    return value


def _as_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


RawFloat = Annotated[Optional[float], BeforeValidator(_unwrap_raw)]
RawInt = Annotated[Optional[int], BeforeValidator(_unwrap_int)]
RequiredFloat = Annotated[float, BeforeValidator(_unwrap_raw)]
RequiredInt = Annotated[int, BeforeValidator(_unwrap_int)]
Label = Annotated[str, BeforeValidator(_as_text)]


class Payload(BaseModel):
    """Base decoder: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ApiError(Payload):
    code: Optional[str] = None
    description: Optional[str] = None


# ============================================================================
# Chart (/v8/finance/chart)
# ============================================================================

class ChartMeta(Payload):
    symbol: str
    currency: Optional[str] = None
    exchange_name: Optional[str] = None
    instrument_type: Optional[str] = None
    exchange_timezone_name: Optional[str] = None
    regular_market_price: RawFloat = None


class QuoteIndicator(Payload):
    open: Optional[list[Optional[float]]] = None
    high: Optional[list[Optional[float]]] = None
    low: Optional[list[Optional[float]]] = None
    close: Optional[list[Optional[float]]] = None
    volume: Optional[list[Optional[float]]] = None


class AdjCloseIndicator(Payload):
    adjclose: Optional[list[Optional[float]]] = None


class Indicators(Payload):
    quote: Optional[list[QuoteIndicator]] = None
    adjclose: Optional[list[AdjCloseIndicator]] = None


class DividendEvent(Payload):
    amount: float
    date: int


class SplitEvent(Payload):
    date: int
    numerator: float
    denominator: float
    split_ratio: Optional[str] = None


class CapitalGainEvent(Payload):
    amount: float
    date: int


class ChartEvents(Payload):
    dividends: Optional[dict[str, DividendEvent]] = None
    splits: Optional[dict[str, SplitEvent]] = None
    capital_gains: Optional[dict[str, CapitalGainEvent]] = None


class ChartResult(Payload):
    meta: ChartMeta
    timestamp: Optional[list[int]] = None
    indicators: Optional[Indicators] = None
    events: Optional[ChartEvents] = None


class ChartBody(Payload):
    result: Optional[list[ChartResult]] = None
    error: Optional[ApiError] = None


class ChartEnvelope(Payload):
    chart: ChartBody


# ============================================================================
# Quote summary (/v10/finance/quoteSummary) modules
# ============================================================================

class CompanyOfficer(Payload):
    name: Optional[str] = None
    title: Optional[str] = None


class AssetProfile(Payload):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    sector: Optional[str] = None
    long_business_summary: Optional[str] = None
    full_time_employees: RawInt = None
    company_officers: Optional[list[CompanyOfficer]] = None


class PriceModule(Payload):
    short_name: Optional[str] = None
    long_name: Optional[str] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None
    exchange_name: Optional[str] = None
    quote_type: Optional[str] = None
    regular_market_price: RawFloat = None
    regular_market_open: RawFloat = None
    regular_market_day_high: RawFloat = None
    regular_market_day_low: RawFloat = None
    regular_market_previous_close: RawFloat = None
    regular_market_volume: RawInt = None
    market_cap: RawInt = None


class SummaryDetail(Payload):
    currency: Optional[str] = None
    previous_close: RawFloat = None
    open: RawFloat = None
    day_low: RawFloat = None
    day_high: RawFloat = None
    volume: RawInt = None
    regular_market_volume: RawInt = None
    average_volume: RawInt = None
    fifty_two_week_low: RawFloat = None
    fifty_two_week_high: RawFloat = None
    market_cap: RawInt = None
    dividend_rate: RawFloat = None
    dividend_yield: RawFloat = None
    ex_dividend_date: RawInt = None
    beta: RawFloat = None
    trailing_pe: RawFloat = Field(default=None, alias="trailingPE")
    forward_pe: RawFloat = Field(default=None, alias="forwardPE")


class DefaultKeyStatistics(Payload):
    shares_outstanding: RawInt = None
    implied_shares_outstanding: RawInt = None
    float_shares: RawInt = None
    book_value: RawFloat = None
    price_to_book: RawFloat = None
    trailing_eps: RawFloat = None
    forward_eps: RawFloat = None
    most_recent_quarter: RawInt = None


class FinancialDataModule(Payload):
    financial_currency: Optional[str] = None
    current_price: RawFloat = None
    target_high_price: RawFloat = None
    target_low_price: RawFloat = None
    target_mean_price: RawFloat = None
    target_median_price: RawFloat = None
    number_of_analyst_opinions: RawInt = None
    recommendation_key: Optional[str] = None
    revenue_per_share: RawFloat = None
    return_on_assets: RawFloat = None
    return_on_equity: RawFloat = None
    free_cashflow: RawInt = None
    operating_cashflow: RawInt = None
    revenue_growth: RawFloat = None
    earnings_growth: RawFloat = None
    profit_margins: RawFloat = None


class CalendarEarnings(Payload):
    earnings_date: Optional[list[RawInt]] = None
    earnings_average: RawFloat = None
    earnings_low: RawFloat = None
    earnings_high: RawFloat = None
    revenue_average: RawInt = None
    revenue_low: RawInt = None
    revenue_high: RawInt = None


class CalendarEvents(Payload):
    earnings: Optional[CalendarEarnings] = None
    ex_dividend_date: RawInt = None
    dividend_date: RawInt = None


# Statement entries carry arbitrary line items, so they stay as plain dicts.
StatementEntries = Optional[list[dict[str, Any]]]


class IncomeStatementHistory(Payload):
    income_statement_history: StatementEntries = None


class BalanceSheetHistory(Payload):
    balance_sheet_statements: StatementEntries = None


class CashflowStatementHistory(Payload):
    cashflow_statements: StatementEntries = None


class EarningsChartQuarter(Payload):
    date: Label
    actual: RawFloat = None
    estimate: RawFloat = None


class EarningsChart(Payload):
    quarterly: Optional[list[EarningsChartQuarter]] = None
    current_quarter_estimate: RawFloat = None


class FinancialsChartPoint(Payload):
    date: Label
    revenue: RawInt = None
    earnings: RawInt = None


class FinancialsChart(Payload):
    yearly: Optional[list[FinancialsChartPoint]] = None
    quarterly: Optional[list[FinancialsChartPoint]] = None


class EarningsModule(Payload):
    financial_currency: Optional[str] = None
    earnings_chart: Optional[EarningsChart] = None
    financials_chart: Optional[FinancialsChart] = None


class EarningsHistoryEntry(Payload):
    quarter: RawInt = None
    period: Optional[str] = None
    eps_actual: RawFloat = None
    eps_estimate: RawFloat = None
    eps_difference: RawFloat = None
    surprise_percent: RawFloat = None


class EarningsHistoryModule(Payload):
    history: Optional[list[EarningsHistoryEntry]] = None


class UpgradeDowngradeEntry(Payload):
    epoch_grade_date: int
    firm: str
    to_grade: Optional[str] = None
    from_grade: Optional[str] = None
    action: Optional[str] = None


class UpgradeDowngradeHistory(Payload):
    history: Optional[list[UpgradeDowngradeEntry]] = None


class TrendEntry(Payload):
    period: str
    strong_buy: Optional[int] = None
    buy: Optional[int] = None
    hold: Optional[int] = None
    sell: Optional[int] = None
    strong_sell: Optional[int] = None


class RecommendationTrendModule(Payload):
    trend: Optional[list[TrendEntry]] = None


class MajorHoldersBreakdown(Payload):
    insiders_percent_held: RawFloat = None
    institutions_percent_held: RawFloat = None
    institutions_float_percent_held: RawFloat = None
    institutions_count: RawInt = None


class OwnershipEntry(Payload):
    organization: Optional[str] = None
    report_date: RawInt = None
    pct_held: RawFloat = None
    position: RawInt = None
    value: RawInt = None


class OwnershipModule(Payload):
    ownership_list: Optional[list[OwnershipEntry]] = None


class InsiderTransactionEntry(Payload):
    filer_name: Optional[str] = None
    filer_relation: Optional[str] = None
    start_date: RawInt = None
    transaction_text: Optional[str] = None
    ownership: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("ownership", "ownershipNature")
    )
    shares: RawInt = None
    value: RawInt = None


class InsiderTransactionsModule(Payload):
    transactions: Optional[list[InsiderTransactionEntry]] = None


class InsiderHolderEntry(Payload):
    name: Optional[str] = None
    relation: Optional[str] = None
    url: Optional[str] = None
    latest_trans_date: RawInt = None
    position_direct_date: RawInt = None
    position_direct: RawInt = None


class InsiderHoldersModule(Payload):
    holders: Optional[list[InsiderHolderEntry]] = None


class EsgScores(Payload):
    total_esg: RawFloat = None
    environment_score: RawFloat = None
    social_score: RawFloat = None
    governance_score: RawFloat = None
    percentile: RawFloat = None
    esg_performance: Optional[str] = None
    peer_group: Optional[str] = None
    peer_count: RawInt = None
    highest_controversy: RawInt = None


class SecFilingEntry(Payload):
    date: str
    epoch_date: int
    type: str
    title: str
    edgar_url: Optional[str] = None


class SecFilingsModule(Payload):
    filings: Optional[list[SecFilingEntry]] = None


class QuoteSummaryResult(Payload):
    asset_profile: Optional[AssetProfile] = None
    price: Optional[PriceModule] = None
    summary_detail: Optional[SummaryDetail] = None
    default_key_statistics: Optional[DefaultKeyStatistics] = None
    financial_data: Optional[FinancialDataModule] = None
    calendar_events: Optional[CalendarEvents] = None
    income_statement_history: Optional[IncomeStatementHistory] = None
    income_statement_history_quarterly: Optional[IncomeStatementHistory] = None
    balance_sheet_history: Optional[BalanceSheetHistory] = None
    balance_sheet_history_quarterly: Optional[BalanceSheetHistory] = None
    cashflow_statement_history: Optional[CashflowStatementHistory] = None
    cashflow_statement_history_quarterly: Optional[CashflowStatementHistory] = None
    earnings: Optional[EarningsModule] = None
    earnings_history: Optional[EarningsHistoryModule] = None
    upgrade_downgrade_history: Optional[UpgradeDowngradeHistory] = None
    recommendation_trend: Optional[RecommendationTrendModule] = None
    major_holders_breakdown: Optional[MajorHoldersBreakdown] = None
    institution_ownership: Optional[OwnershipModule] = None
    fund_ownership: Optional[OwnershipModule] = None
    insider_transactions: Optional[InsiderTransactionsModule] = None
    insider_holders: Optional[InsiderHoldersModule] = None
    esg_scores: Optional[EsgScores] = None
    sec_filings: Optional[SecFilingsModule] = None


class QuoteSummaryBody(Payload):
    result: Optional[list[QuoteSummaryResult]] = None
    error: Optional[ApiError] = None


class QuoteSummaryEnvelope(Payload):
    quote_summary: QuoteSummaryBody


# ============================================================================
# Options (/v7/finance/options)
# ============================================================================

class OptionContractPayload(Payload):
    contract_symbol: str
    strike: RequiredFloat
    expiration: RequiredInt
    currency: Optional[str] = None
    last_price: RawFloat = None
    change: RawFloat = None
    percent_change: RawFloat = None
    volume: RawInt = None
    open_interest: RawInt = None
    bid: RawFloat = None
    ask: RawFloat = None
    contract_size: Optional[str] = None
    last_trade_date: RawInt = None
    implied_volatility: RawFloat = None
    in_the_money: Optional[bool] = None


class OptionsBlock(Payload):
    expiration_date: int
    calls: Optional[list[OptionContractPayload]] = None
    puts: Optional[list[OptionContractPayload]] = None


class OptionUnderlyingQuote(Payload):
    regular_market_price: RawFloat = None
    currency: Optional[str] = None


class OptionChainResult(Payload):
    underlying_symbol: Optional[str] = None
    expiration_dates: Optional[list[int]] = None
    strikes: Optional[list[float]] = None
    quote: Optional[OptionUnderlyingQuote] = None
    options: Optional[list[OptionsBlock]] = None


class OptionChainBody(Payload):
    result: Optional[list[OptionChainResult]] = None
    error: Optional[ApiError] = None


class OptionChainEnvelope(Payload):
    option_chain: OptionChainBody


# ============================================================================
# Search (/v1/finance/search)
# ============================================================================

class ThumbnailResolution(Payload):
    url: Optional[str] = None


class Thumbnail(Payload):
    resolutions: Optional[list[ThumbnailResolution]] = None


class NewsItem(Payload):
    uuid: str
    title: str
    link: str
    provider_publish_time: int
    publisher: Optional[str] = None
    type: Optional[str] = None
    thumbnail: Optional[Thumbnail] = None
    related_tickers: Optional[list[str]] = None


class SearchEnvelope(Payload):
    news: list[NewsItem]


E = TypeVar("E", bound=Payload)


def decode(envelope: type[E], body: str) -> E:
    """
    Decode a response body into an envelope model.

    Raises:
        pydantic.ValidationError: If the body is not JSON or the envelope
            (or a required leaf) is missing or mistyped
    """
    return envelope.model_validate_json(body)
