"""
Mapping from decoded Yahoo Finance payloads to domain entities.

Every public mapper is pure and returns an Outcome:

- an explicit upstream error object becomes ``Failure(UPSTREAM_ERROR)``
- ``result: null`` without an error becomes ``Failure(INVALID_SYMBOL)``
- ``result: []`` becomes a success holding an empty entity
- an impossible derived value (e.g. a zero split denominator) becomes
  ``Failure(PARSING_ERROR)``
"""

from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Optional, Sequence, TypeVar

from yfkit.core.fundamentals import (
    AnalystPriceTargets,
    Calendar,
    EarningsHistory,
    EarningsHistoryItem,
    FinancialsPoint,
    FinancialStatement,
    Frequency,
    FullEarnings,
    InsiderRosterData,
    InsiderRosterHolder,
    InsiderTransaction,
    InsiderTransactionsData,
    InstitutionalHolder,
    InstitutionalHoldersData,
    MajorHolders,
    MutualFundHolder,
    MutualFundHoldersData,
    QuarterlyEarnings,
    Recommendation,
    RecommendationsData,
    RecommendationsSummary,
    RecommendationTrend,
    SecFiling,
    SecFilingsData,
    SharesData,
    StatementType,
    Sustainability,
)
from yfkit.core.models import (
    CapitalGain,
    CapitalGainsData,
    Dividend,
    DividendData,
    FastInfo,
    HistoricalSeries,
    NewsArticle,
    NewsData,
    OptionChain,
    OptionContract,
    OptionExpirations,
    Quote,
    Split,
    SplitData,
    TickerInfo,
)
from yfkit.core.outcome import (
    ErrorKind,
    Failure,
    Outcome,
    ParsingError,
    Success,
    YahooFinanceError,
    failure_from_exception,
)
from yfkit.data_sources.payloads import (
    ChartEnvelope,
    ChartResult,
    OptionChainEnvelope,
    OptionContractPayload,
    QuoteIndicator,
    QuoteSummaryEnvelope,
    QuoteSummaryResult,
    SearchEnvelope,
)

T = TypeVar("T")

# (annual quote-summary module, decoded attribute, key of the entry list in the module).
# Quarterly modules append "Quarterly" to the module name.
STATEMENT_MODULES = {
    StatementType.INCOME: (
        "incomeStatementHistory", "income_statement_history", "income_statement_history",
    ),
    StatementType.BALANCE_SHEET: (
        "balanceSheetHistory", "balance_sheet_history", "balance_sheet_statements",
    ),
    StatementType.CASH_FLOW: (
        "cashflowStatementHistory", "cashflow_statement_history", "cashflow_statements",
    ),
}

_STATEMENT_META_KEYS = {"endDate", "maxAge"}


def statement_module(statement: StatementType, frequency: Frequency) -> str:
    """Quote-summary module for a statement; trailing reuses the annual module."""
    module, _, _ = STATEMENT_MODULES[statement]
    return module + "Quarterly" if frequency == Frequency.QUARTERLY else module


def returns_outcome(fn: Callable[..., T]) -> Callable[..., Outcome[T]]:
    """Wrap a mapper so mapping errors come back as a Failure."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return Success(fn(*args, **kwargs))
        except (YahooFinanceError, ParsingError) as e:
            return failure_from_exception(e)

    return wrapper


# ============================================================================
# Helpers
# ============================================================================

def _single_result(body: Any, symbol: str, endpoint: str) -> Optional[Any]:
    """First element of ``body.result``; None when the result list is empty."""
    if body.error is not None:
        detail = body.error.description or body.error.code or "unknown error"
        raise YahooFinanceError(
            f"Yahoo {endpoint} error for {symbol}: {detail}",
            ErrorKind.UPSTREAM_ERROR,
        )
    if body.result is None:
        raise YahooFinanceError(
            f"No {endpoint} data for symbol {symbol}",
            ErrorKind.INVALID_SYMBOL,
        )
    return body.result[0] if body.result else None


def _at(values: Optional[Sequence[Any]], index: int) -> Any:
    if values is None or index >= len(values):
        return None
    return values[index]


def _to_int(value: Optional[float]) -> Optional[int]:
    return None if value is None else int(value)


def _first(*values: Any) -> Any:
    """First value that is not None."""
    return next((v for v in values if v is not None), None)


def _period_key(end_date: Any) -> Optional[str]:
    """ISO date for a statement's endDate ({raw, fmt} pair or plain value)."""
    if isinstance(end_date, dict):
        raw = end_date.get("raw")
        if isinstance(raw, (int, float)):
            return datetime.fromtimestamp(raw, tz=timezone.utc).date().isoformat()
        return end_date.get("fmt")
    if isinstance(end_date, (int, float)):
        return datetime.fromtimestamp(end_date, tz=timezone.utc).date().isoformat()
    return end_date


def _line_items(entry: dict[str, Any]) -> dict[str, float]:
    items = {}
    for key, value in entry.items():
        if key in _STATEMENT_META_KEYS or not isinstance(value, dict):
            continue
        raw = value.get("raw")
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            items[key] = float(raw)
    return items


def _summary_result(envelope: QuoteSummaryEnvelope, symbol: str) -> QuoteSummaryResult:
    """Quote-summary result, or an all-empty result when upstream returned []."""
    result = _single_result(envelope.quote_summary, symbol, "quoteSummary")
    return result if result is not None else QuoteSummaryResult()


# ============================================================================
# Chart
# ============================================================================

@returns_outcome
def map_history(envelope: ChartEnvelope, symbol: str) -> HistoricalSeries:
    """
    Map a chart response to a HistoricalSeries.

    Bar i takes element i of every indicator array; missing arrays or
    elements leave the field absent.
    """
    result: Optional[ChartResult] = _single_result(envelope.chart, symbol, "chart")
    if result is None:
        return HistoricalSeries(symbol=symbol)

    indicators = result.indicators
    quote = indicators.quote[0] if indicators and indicators.quote else QuoteIndicator()
    adjclose = (
        indicators.adjclose[0].adjclose
        if indicators and indicators.adjclose
        else None
    )

    quotes = [
        Quote(
            timestamp=ts,
            open=_at(quote.open, i),
            high=_at(quote.high, i),
            low=_at(quote.low, i),
            close=_at(quote.close, i),
            adj_close=_at(adjclose, i),
            volume=_to_int(_at(quote.volume, i)),
        )
        for i, ts in enumerate(result.timestamp or [])
    ]

    meta = result.meta
    return HistoricalSeries(
        symbol=symbol,
        quotes=quotes,
        currency=meta.currency,
        exchange_name=meta.exchange_name,
        instrument_type=meta.instrument_type,
        timezone=meta.exchange_timezone_name,
    )


@returns_outcome
def map_dividends(envelope: ChartEnvelope, symbol: str) -> DividendData:
    result = _single_result(envelope.chart, symbol, "chart")
    events = result.events.dividends if result and result.events else None
    dividends = [
        Dividend(timestamp=event.date, amount=event.amount)
        for event in (events or {}).values()
    ]
    return DividendData(symbol=symbol, dividends=dividends)


@returns_outcome
def map_splits(envelope: ChartEnvelope, symbol: str) -> SplitData:
    result = _single_result(envelope.chart, symbol, "chart")
    events = result.events.splits if result and result.events else None

    splits = []
    for event in (events or {}).values():
        if event.denominator == 0:
            raise ParsingError(
                f"Split for {symbol} at {event.date} has a zero denominator"
            )
        splits.append(
            Split(
                timestamp=event.date,
                numerator=event.numerator,
                denominator=event.denominator,
                ratio=event.numerator / event.denominator,
            )
        )
    return SplitData(symbol=symbol, splits=splits)


@returns_outcome
def map_capital_gains(envelope: ChartEnvelope, symbol: str) -> CapitalGainsData:
    result = _single_result(envelope.chart, symbol, "chart")
    events = result.events.capital_gains if result and result.events else None
    gains = [
        CapitalGain(timestamp=event.date, amount=event.amount)
        for event in (events or {}).values()
    ]
    return CapitalGainsData(symbol=symbol, capital_gains=gains)


# ============================================================================
# Quote summary
# ============================================================================

@returns_outcome
def map_info(envelope: QuoteSummaryEnvelope, symbol: str) -> TickerInfo:
    """Merge profile, price, summary, key-statistics and financial-data modules."""
    result = _summary_result(envelope, symbol)
    profile = result.asset_profile
    price = result.price
    summary = result.summary_detail
    stats = result.default_key_statistics
    financial = result.financial_data

    def get(module: Any, attr: str) -> Any:
        return getattr(module, attr) if module is not None else None

    ceo = None
    for officer in get(profile, "company_officers") or []:
        if officer.title and "CEO" in officer.title:
            ceo = officer.name
            break

    return TickerInfo(
        symbol=symbol,
        short_name=get(price, "short_name"),
        long_name=get(price, "long_name"),
        currency=_first(get(price, "currency"), get(summary, "currency")),
        exchange=_first(get(price, "exchange"), get(price, "exchange_name")),
        quote_type=get(price, "quote_type"),
        sector=get(profile, "sector"),
        industry=get(profile, "industry"),
        website=get(profile, "website"),
        description=get(profile, "long_business_summary"),
        employees=get(profile, "full_time_employees"),
        city=get(profile, "city"),
        state=get(profile, "state"),
        country=get(profile, "country"),
        phone=get(profile, "phone"),
        ceo=ceo,
        current_price=_first(
            get(financial, "current_price"), get(price, "regular_market_price")
        ),
        previous_close=_first(
            get(summary, "previous_close"), get(price, "regular_market_previous_close")
        ),
        open=_first(get(summary, "open"), get(price, "regular_market_open")),
        day_low=_first(get(summary, "day_low"), get(price, "regular_market_day_low")),
        day_high=_first(get(summary, "day_high"), get(price, "regular_market_day_high")),
        regular_market_volume=_first(
            get(price, "regular_market_volume"), get(summary, "regular_market_volume")
        ),
        average_volume=get(summary, "average_volume"),
        fifty_two_week_low=get(summary, "fifty_two_week_low"),
        fifty_two_week_high=get(summary, "fifty_two_week_high"),
        market_cap=_first(get(price, "market_cap"), get(summary, "market_cap")),
        shares_outstanding=get(stats, "shares_outstanding"),
        beta=get(summary, "beta"),
        trailing_pe=get(summary, "trailing_pe"),
        forward_pe=get(summary, "forward_pe"),
        book_value=get(stats, "book_value"),
        price_to_book=get(stats, "price_to_book"),
        trailing_eps=get(stats, "trailing_eps"),
        forward_eps=get(stats, "forward_eps"),
        dividend_rate=get(summary, "dividend_rate"),
        dividend_yield=get(summary, "dividend_yield"),
        ex_dividend_date=get(summary, "ex_dividend_date"),
        revenue_per_share=get(financial, "revenue_per_share"),
        return_on_assets=get(financial, "return_on_assets"),
        return_on_equity=get(financial, "return_on_equity"),
        free_cashflow=get(financial, "free_cashflow"),
        operating_cashflow=get(financial, "operating_cashflow"),
        revenue_growth=get(financial, "revenue_growth"),
        earnings_growth=get(financial, "earnings_growth"),
        profit_margins=get(financial, "profit_margins"),
        recommendation_key=get(financial, "recommendation_key"),
    )


def project_fast_info(info: TickerInfo) -> FastInfo:
    """Project the handful of price fields FastInfo exposes out of TickerInfo."""
    return FastInfo(
        symbol=info.symbol,
        last_price=info.current_price,
        previous_close=info.previous_close,
        open=info.open,
        day_high=info.day_high,
        day_low=info.day_low,
        year_high=info.fifty_two_week_high,
        year_low=info.fifty_two_week_low,
        volume=info.regular_market_volume,
        market_cap=info.market_cap,
        shares=info.shares_outstanding,
        currency=info.currency,
    )


@returns_outcome
def map_calendar(envelope: QuoteSummaryEnvelope, symbol: str) -> Calendar:
    events = _summary_result(envelope, symbol).calendar_events
    if events is None:
        return Calendar(symbol=symbol)

    earnings = events.earnings
    dates = earnings.earnings_date if earnings else None
    return Calendar(
        symbol=symbol,
        earnings_dates=[d for d in dates or [] if d is not None],
        ex_dividend_date=events.ex_dividend_date,
        dividend_date=events.dividend_date,
        earnings_average=earnings.earnings_average if earnings else None,
        earnings_low=earnings.earnings_low if earnings else None,
        earnings_high=earnings.earnings_high if earnings else None,
        revenue_average=earnings.revenue_average if earnings else None,
        revenue_low=earnings.revenue_low if earnings else None,
        revenue_high=earnings.revenue_high if earnings else None,
    )


@returns_outcome
def map_statement(
    envelope: QuoteSummaryEnvelope,
    symbol: str,
    statement: StatementType,
    frequency: Frequency,
) -> FinancialStatement:
    """
    Map a statement module to a FinancialStatement.

    Entries without an end date are skipped; line items whose raw value is
    null or missing are omitted from their period.
    The reporting currency comes from the financialData module when present.
    """
    result = _summary_result(envelope, symbol)
    _, module_attr, entries_key = STATEMENT_MODULES[statement]
    if frequency == Frequency.QUARTERLY:
        module_attr += "_quarterly"

    module = getattr(result, module_attr)
    entries = getattr(module, entries_key) if module is not None else None

    data = {}
    for entry in entries or []:
        period = _period_key(entry.get("endDate"))
        if not period:
            continue
        data[period] = _line_items(entry)

    financial = result.financial_data
    return FinancialStatement(
        symbol=symbol,
        statement=statement,
        frequency=frequency,
        data=data,
        currency=financial.financial_currency if financial is not None else None,
    )


@returns_outcome
def map_earnings(envelope: QuoteSummaryEnvelope, symbol: str) -> FullEarnings:
    module = _summary_result(envelope, symbol).earnings
    if module is None:
        return FullEarnings(symbol=symbol)

    chart = module.earnings_chart
    financials = module.financials_chart

    def points(items) -> list[FinancialsPoint]:
        return [
            FinancialsPoint(period=p.date, revenue=p.revenue, earnings=p.earnings)
            for p in items or []
        ]

    return FullEarnings(
        symbol=symbol,
        quarterly_eps=[
            QuarterlyEarnings(quarter=q.date, actual=q.actual, estimate=q.estimate)
            for q in (chart.quarterly if chart else None) or []
        ],
        current_quarter_estimate=chart.current_quarter_estimate if chart else None,
        yearly=points(financials.yearly if financials else None),
        quarterly=points(financials.quarterly if financials else None),
    )


@returns_outcome
def map_earnings_history(envelope: QuoteSummaryEnvelope, symbol: str) -> EarningsHistory:
    """
    Map earningsHistory. A missing difference or surprise is derived from
    actual and estimate; the surprise is a fraction, as upstream reports it.
    """
    module = _summary_result(envelope, symbol).earnings_history

    history = []
    for entry in (module.history if module else None) or []:
        difference = entry.eps_difference
        surprise = entry.surprise_percent
        if entry.eps_actual is not None and entry.eps_estimate is not None:
            if difference is None:
                difference = entry.eps_actual - entry.eps_estimate
            if surprise is None and entry.eps_estimate != 0:
                surprise = (entry.eps_actual - entry.eps_estimate) / abs(entry.eps_estimate)
        history.append(
            EarningsHistoryItem(
                quarter=entry.quarter,
                period=entry.period,
                eps_actual=entry.eps_actual,
                eps_estimate=entry.eps_estimate,
                eps_difference=difference,
                surprise_percent=surprise,
            )
        )
    return EarningsHistory(symbol=symbol, history=history)


@returns_outcome
def map_recommendations(envelope: QuoteSummaryEnvelope, symbol: str) -> RecommendationsData:
    module = _summary_result(envelope, symbol).upgrade_downgrade_history
    recommendations = [
        Recommendation(
            timestamp=entry.epoch_grade_date,
            firm=entry.firm,
            to_grade=entry.to_grade,
            from_grade=entry.from_grade,
            action=entry.action,
        )
        for entry in (module.history if module else None) or []
    ]
    return RecommendationsData(symbol=symbol, recommendations=recommendations)


@returns_outcome
def map_recommendations_summary(
    envelope: QuoteSummaryEnvelope, symbol: str
) -> RecommendationsSummary:
    module = _summary_result(envelope, symbol).recommendation_trend
    trend = [
        RecommendationTrend(
            period=entry.period,
            strong_buy=entry.strong_buy or 0,
            buy=entry.buy or 0,
            hold=entry.hold or 0,
            sell=entry.sell or 0,
            strong_sell=entry.strong_sell or 0,
        )
        for entry in (module.trend if module else None) or []
    ]
    return RecommendationsSummary(symbol=symbol, trend=trend)


@returns_outcome
def map_price_targets(envelope: QuoteSummaryEnvelope, symbol: str) -> AnalystPriceTargets:
    financial = _summary_result(envelope, symbol).financial_data
    if financial is None:
        return AnalystPriceTargets(symbol=symbol)
    return AnalystPriceTargets(
        symbol=symbol,
        current=financial.current_price,
        high=financial.target_high_price,
        low=financial.target_low_price,
        mean=financial.target_mean_price,
        median=financial.target_median_price,
        number_of_analysts=financial.number_of_analyst_opinions,
    )


@returns_outcome
def map_major_holders(envelope: QuoteSummaryEnvelope, symbol: str) -> MajorHolders:
    breakdown = _summary_result(envelope, symbol).major_holders_breakdown
    if breakdown is None:
        return MajorHolders(symbol=symbol)
    return MajorHolders(
        symbol=symbol,
        insiders_percent_held=breakdown.insiders_percent_held,
        institutions_percent_held=breakdown.institutions_percent_held,
        institutions_float_percent_held=breakdown.institutions_float_percent_held,
        institutions_count=breakdown.institutions_count,
    )


@returns_outcome
def map_institutional_holders(
    envelope: QuoteSummaryEnvelope, symbol: str
) -> InstitutionalHoldersData:
    module = _summary_result(envelope, symbol).institution_ownership
    holders = [
        InstitutionalHolder(
            holder=entry.organization,
            shares=entry.position,
            date_reported=entry.report_date,
            percent_held=entry.pct_held,
            value=entry.value,
        )
        for entry in (module.ownership_list if module else None) or []
        if entry.organization
    ]
    return InstitutionalHoldersData(symbol=symbol, holders=holders)


@returns_outcome
def map_mutual_fund_holders(
    envelope: QuoteSummaryEnvelope, symbol: str
) -> MutualFundHoldersData:
    module = _summary_result(envelope, symbol).fund_ownership
    holders = [
        MutualFundHolder(
            holder=entry.organization,
            shares=entry.position,
            date_reported=entry.report_date,
            percent_held=entry.pct_held,
            value=entry.value,
        )
        for entry in (module.ownership_list if module else None) or []
        if entry.organization
    ]
    return MutualFundHoldersData(symbol=symbol, holders=holders)


@returns_outcome
def map_insider_transactions(
    envelope: QuoteSummaryEnvelope, symbol: str
) -> InsiderTransactionsData:
    module = _summary_result(envelope, symbol).insider_transactions
    transactions = [
        InsiderTransaction(
            insider=entry.filer_name,
            relation=entry.filer_relation,
            start_date=entry.start_date,
            transaction_text=entry.transaction_text,
            ownership=entry.ownership,
            shares=entry.shares,
            value=entry.value,
        )
        for entry in (module.transactions if module else None) or []
        if entry.filer_name
    ]
    return InsiderTransactionsData(symbol=symbol, transactions=transactions)


@returns_outcome
def map_insider_roster(envelope: QuoteSummaryEnvelope, symbol: str) -> InsiderRosterData:
    module = _summary_result(envelope, symbol).insider_holders
    holders = [
        InsiderRosterHolder(
            name=entry.name,
            relation=entry.relation,
            url=entry.url,
            latest_transaction_date=entry.latest_trans_date,
            position_direct_date=entry.position_direct_date,
            shares_direct=entry.position_direct,
        )
        for entry in (module.holders if module else None) or []
        if entry.name
    ]
    return InsiderRosterData(symbol=symbol, holders=holders)


@returns_outcome
def map_sustainability(envelope: QuoteSummaryEnvelope, symbol: str) -> Sustainability:
    scores = _summary_result(envelope, symbol).esg_scores
    if scores is None:
        return Sustainability(symbol=symbol)
    return Sustainability(
        symbol=symbol,
        total_esg=scores.total_esg,
        environment_score=scores.environment_score,
        social_score=scores.social_score,
        governance_score=scores.governance_score,
        percentile=scores.percentile,
        esg_performance=scores.esg_performance,
        peer_group=scores.peer_group,
        peer_count=scores.peer_count,
        highest_controversy=scores.highest_controversy,
    )


@returns_outcome
def map_sec_filings(envelope: QuoteSummaryEnvelope, symbol: str) -> SecFilingsData:
    module = _summary_result(envelope, symbol).sec_filings
    filings = [
        SecFiling(
            date=entry.date,
            timestamp=entry.epoch_date,
            type=entry.type,
            title=entry.title,
            edgar_url=entry.edgar_url,
        )
        for entry in (module.filings if module else None) or []
    ]
    return SecFilingsData(symbol=symbol, filings=filings)


@returns_outcome
def map_shares(envelope: QuoteSummaryEnvelope, symbol: str, fetched_at: int) -> SharesData:
    """
    Snapshot of shares outstanding, keyed by the most recent quarter end
    when upstream reports one and by ``fetched_at`` otherwise.
    """
    stats = _summary_result(envelope, symbol).default_key_statistics
    if stats is None or stats.shares_outstanding is None:
        return SharesData(symbol=symbol)
    as_of = _first(stats.most_recent_quarter, fetched_at)
    return SharesData(symbol=symbol, counts={as_of: stats.shares_outstanding})


# ============================================================================
# Options
# ============================================================================

def _contract(payload: OptionContractPayload, currency: Optional[str]) -> OptionContract:
    return OptionContract(
        contract_symbol=payload.contract_symbol,
        strike=payload.strike,
        expiration=payload.expiration,
        currency=_first(payload.currency, currency),
        last_price=payload.last_price,
        change=payload.change,
        percent_change=payload.percent_change,
        volume=payload.volume,
        open_interest=payload.open_interest,
        bid=payload.bid,
        ask=payload.ask,
        contract_size=payload.contract_size,
        last_trade_date=payload.last_trade_date,
        implied_volatility=payload.implied_volatility,
        in_the_money=payload.in_the_money,
    )


@returns_outcome
def map_option_expirations(envelope: OptionChainEnvelope, symbol: str) -> OptionExpirations:
    result = _single_result(envelope.option_chain, symbol, "options")
    if result is None:
        return OptionExpirations(symbol=symbol)
    return OptionExpirations(
        symbol=symbol,
        expirations=result.expiration_dates or [],
        strikes=result.strikes or [],
    )


@returns_outcome
def map_option_chain(
    envelope: OptionChainEnvelope,
    symbol: str,
    expiration: Optional[int] = None,
) -> OptionChain:
    """
    Map the first options block of an options response.

    Without an options block, a requested expiration yields an empty chain at
    that expiration; with no expiration requested there is nothing to return
    and the symbol is reported as having no option chain.
    """
    result = _single_result(envelope.option_chain, symbol, "options")
    block = result.options[0] if result is not None and result.options else None

    underlying_price = None
    underlying_symbol = None
    currency = None
    if result is not None:
        underlying_symbol = result.underlying_symbol
        if result.quote is not None:
            underlying_price = result.quote.regular_market_price
            currency = result.quote.currency

    if block is None:
        if expiration is None:
            raise YahooFinanceError(
                f"No option chain available for {symbol}", ErrorKind.INVALID_SYMBOL
            )
        return OptionChain(
            symbol=symbol,
            expiration=expiration,
            underlying_price=underlying_price,
            underlying_symbol=underlying_symbol,
        )

    return OptionChain(
        symbol=symbol,
        expiration=block.expiration_date,
        calls=[_contract(c, currency) for c in block.calls or []],
        puts=[_contract(p, currency) for p in block.puts or []],
        underlying_price=underlying_price,
        underlying_symbol=underlying_symbol,
    )


# ============================================================================
# News
# ============================================================================

@returns_outcome
def map_news(envelope: SearchEnvelope, symbol: str) -> NewsData:
    articles = []
    for item in envelope.news:
        thumbnail = None
        if item.thumbnail and item.thumbnail.resolutions:
            thumbnail = item.thumbnail.resolutions[0].url
        articles.append(
            NewsArticle(
                uuid=item.uuid,
                title=item.title,
                link=item.link,
                publish_time=item.provider_publish_time,
                publisher=item.publisher,
                type=item.type,
                thumbnail=thumbnail,
                related_tickers=item.related_tickers or [],
            )
        )
    return NewsData(symbol=symbol, articles=articles)


def failure_for_status(status: int, url: str) -> Failure:
    """Failure for a non-success HTTP status."""
    if status == 429:
        return Failure(
            f"Rate limited by Yahoo Finance (HTTP 429) for {url}",
            ErrorKind.RATE_LIMITED,
            status=status,
        )
    return Failure(
        f"Yahoo Finance returned HTTP {status} for {url}",
        ErrorKind.UPSTREAM_ERROR,
        status=status,
    )
