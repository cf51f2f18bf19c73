"""
FastAPI REST API for yfkit.
Exposes history, profile, corporate actions, financials, options, holders and news over HTTP.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from loguru import logger

from yfkit.app.download import download, parse_symbols
from yfkit.core.config import settings
from yfkit.core.fundamentals import (
    FinancialStatement,
    Frequency,
    InstitutionalHoldersData,
    MajorHolders,
    MutualFundHoldersData,
    RecommendationsData,
    RecommendationsSummary,
    StatementType,
)
from yfkit.core.logging import configure_logging
from yfkit.core.models import (
    ActionsData,
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
from yfkit.core.outcome import ErrorKind, Failure, Outcome
from yfkit.data_sources.yahoo_client import YahooFinanceClient


# ============================================================================
# API Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    upstream: Optional[bool] = None
    base_url: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
    kind: str
    symbol: Optional[str] = None


class HoldersResponse(BaseModel):
    """Major, institutional and mutual fund holders for one symbol."""
    symbol: str
    major: MajorHolders
    institutional: InstitutionalHoldersData
    mutual_funds: MutualFundHoldersData


class RecommendationsResponse(BaseModel):
    """Rating changes plus the monthly trend."""
    symbol: str
    history: RecommendationsData
    summary: RecommendationsSummary


class DownloadResponse(BaseModel):
    """API response for a multi-symbol history download."""
    series: Dict[str, HistoricalSeries]
    errors: Dict[str, ErrorResponse]
    success_count: int
    failed_tickers: List[str]


# ============================================================================
# FastAPI App
# ============================================================================

configure_logging()

client = YahooFinanceClient()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the shared client's connection pool on shutdown."""
    logger.info(f"Starting yfkit API against {settings.base_url}")
    yield
    logger.info("Shutting down yfkit API")
    await client.aclose()


app = FastAPI(
    title="yfkit",
    description="Typed REST API over the Yahoo Finance JSON endpoints",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

STATUS_BY_KIND = {
    ErrorKind.INVALID_PARAMETERS: 400,
    ErrorKind.INVALID_SYMBOL: 404,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.NETWORK_ERROR: 503,
    ErrorKind.UPSTREAM_ERROR: 502,
    ErrorKind.PARSING_ERROR: 502,
    ErrorKind.UNKNOWN: 500,
}


def error_body(failure: Failure, symbol: Optional[str] = None) -> ErrorResponse:
    return ErrorResponse(detail=failure.message, kind=failure.kind.value, symbol=symbol)


def unwrap(outcome: Outcome, symbol: str):
    """Return the Success value or raise the HTTPException matching the failure kind."""
    if outcome.is_success():
        return outcome.value
    status = STATUS_BY_KIND.get(outcome.kind, 500)
    logger.warning(f"Request for {symbol} failed with {status}: {outcome.message}")
    raise HTTPException(status_code=status, detail=error_body(outcome, symbol).model_dump())


def parse_date(value: str, name: str):
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name} date: {value} (expected YYYY-MM-DD)")


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API info."""
    return {
        "name": "yfkit API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(
    probe: bool = Query(default=False, description="Also fetch AAPL to check the upstream"),
):
    """Check API health and, optionally, upstream reachability."""
    upstream = None
    if probe:
        outcome = await client.fast_info("AAPL")
        upstream = outcome.is_success()

    return HealthResponse(
        status="degraded" if upstream is False else "healthy",
        upstream=upstream,
        base_url=settings.base_url,
        timestamp=datetime.now(timezone.utc),
    )


@app.get(
    "/history/{symbol}",
    response_model=HistoricalSeries,
    responses=ERROR_RESPONSES,
    tags=["History"],
)
async def get_history(
    symbol: str,
    period: Period = Query(default=Period.ONE_MONTH, description="Relative window, ignored when start/end are set"),
    interval: Interval = Query(default=Interval.ONE_DAY, description="Bar granularity"),
    start: Optional[str] = Query(default=None, description="Start date (YYYY-MM-DD)"),
    end: Optional[str] = Query(default=None, description="End date (YYYY-MM-DD)"),
):
    """
    Get OHLCV bars for a symbol.

    - **symbol**: Stock symbol (e.g., AAPL)
    - **period**: Relative window (1d, 5d, 1mo, ... max)
    - **start** / **end**: Optional inclusive date range; both must be given
    """
    if (start is None) != (end is None):
        raise HTTPException(status_code=400, detail="Both start and end are required for a date range")

    if start and end:
        outcome = await client.history_by_range(
            symbol, parse_date(start, "start"), parse_date(end, "end"), interval
        )
    else:
        outcome = await client.history(symbol, period, interval)
    return unwrap(outcome, symbol)


@app.get("/info/{symbol}", response_model=TickerInfo, responses=ERROR_RESPONSES, tags=["Profile"])
async def get_info(symbol: str):
    """Company profile, price snapshot and key statistics."""
    return unwrap(await client.info(symbol), symbol)


@app.get("/fast-info/{symbol}", response_model=FastInfo, responses=ERROR_RESPONSES, tags=["Profile"])
async def get_fast_info(symbol: str):
    """Lightweight price snapshot."""
    return unwrap(await client.fast_info(symbol), symbol)


@app.get("/actions/{symbol}", response_model=ActionsData, responses=ERROR_RESPONSES, tags=["Actions"])
async def get_actions(symbol: str, period: Period = Query(default=Period.MAX)):
    """Dividends and splits merged in ascending time order."""
    return unwrap(await client.actions(symbol, period), symbol)


@app.get("/dividends/{symbol}", response_model=DividendData, responses=ERROR_RESPONSES, tags=["Actions"])
async def get_dividends(symbol: str, period: Period = Query(default=Period.MAX)):
    return unwrap(await client.dividends(symbol, period), symbol)


@app.get("/splits/{symbol}", response_model=SplitData, responses=ERROR_RESPONSES, tags=["Actions"])
async def get_splits(symbol: str, period: Period = Query(default=Period.MAX)):
    return unwrap(await client.splits(symbol, period), symbol)


@app.get(
    "/financials/{symbol}/{statement}",
    response_model=FinancialStatement,
    responses=ERROR_RESPONSES,
    tags=["Financials"],
)
async def get_financials(
    symbol: str,
    statement: StatementType,
    frequency: Frequency = Query(default=Frequency.ANNUAL),
):
    """
    Get a financial statement.

    - **statement**: income, balance or cashflow
    - **frequency**: annual, quarterly or trailing
    """
    operations = {
        StatementType.INCOME: client.income_statement,
        StatementType.BALANCE_SHEET: client.balance_sheet,
        StatementType.CASH_FLOW: client.cash_flow,
    }
    return unwrap(await operations[statement](symbol, frequency), symbol)


@app.get("/options/{symbol}", response_model=OptionExpirations, responses=ERROR_RESPONSES, tags=["Options"])
async def get_option_expirations(symbol: str):
    """Available expirations and strikes."""
    return unwrap(await client.options(symbol), symbol)


@app.get(
    "/options/{symbol}/{expiration}",
    response_model=OptionChain,
    responses=ERROR_RESPONSES,
    tags=["Options"],
)
async def get_option_chain(symbol: str, expiration: str):
    """
    Calls and puts for one expiration.

    - **expiration**: Epoch seconds or YYYY-MM-DD
    """
    when = int(expiration) if expiration.isdigit() else parse_date(expiration, "expiration")
    return unwrap(await client.option_chain(symbol, when), symbol)


@app.get(
    "/recommendations/{symbol}",
    response_model=RecommendationsResponse,
    responses=ERROR_RESPONSES,
    tags=["Analysts"],
)
async def get_recommendations(symbol: str):
    """Rating changes and the monthly recommendation trend."""
    history, summary = await asyncio.gather(
        client.recommendations(symbol), client.recommendations_summary(symbol)
    )
    return RecommendationsResponse(
        symbol=symbol.upper(),
        history=unwrap(history, symbol),
        summary=unwrap(summary, symbol),
    )


@app.get("/holders/{symbol}", response_model=HoldersResponse, responses=ERROR_RESPONSES, tags=["Holders"])
async def get_holders(symbol: str):
    """Ownership breakdown plus top institutional and mutual fund holders."""
    major, institutional, funds = await asyncio.gather(
        client.major_holders(symbol),
        client.institutional_holders(symbol),
        client.mutual_fund_holders(symbol),
    )
    return HoldersResponse(
        symbol=symbol.upper(),
        major=unwrap(major, symbol),
        institutional=unwrap(institutional, symbol),
        mutual_funds=unwrap(funds, symbol),
    )


@app.get("/news/{symbol}", response_model=NewsData, responses=ERROR_RESPONSES, tags=["News"])
async def get_news(symbol: str, count: Optional[int] = Query(default=None, description="Number of articles")):
    return unwrap(await client.news(symbol, count), symbol)


@app.get("/download", response_model=DownloadResponse, tags=["History"])
async def get_download(
    symbols: str = Query(..., description="Comma-separated list of symbols (e.g., AAPL,MSFT,GOOGL)"),
    period: Period = Query(default=Period.ONE_MONTH),
    interval: Interval = Query(default=Interval.ONE_DAY),
):
    """
    Get history for several symbols in one request.

    Every symbol is reported, either under series or under errors.
    """
    symbol_list = parse_symbols(symbols)

    if not symbol_list:
        raise HTTPException(status_code=400, detail="No valid symbols provided")

    if len(symbol_list) > settings.max_download_symbols:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_download_symbols} symbols per request",
        )

    results = await download(symbol_list, period, interval, client=client)

    series = {s: o.value for s, o in results.items() if o.is_success()}
    errors = {s: error_body(o, s) for s, o in results.items() if o.is_error()}

    return DownloadResponse(
        series=series,
        errors=errors,
        success_count=len(series),
        failed_tickers=list(errors),
    )


# ============================================================================
# Run with: uvicorn yfkit.app.api:app --reload
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
