"""
Command-line interface for yfkit.
Provides commands for history, info, corporate actions, options, financials, news and batch downloads.
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from loguru import logger

from yfkit.core.logging import configure_logging
from yfkit.core.models import Interval, Period
from yfkit.core.outcome import Outcome
from yfkit.data_sources.yahoo_client import YahooFinanceClient


def setup_logging(verbose: bool = False):
    """Configure logging based on verbosity."""
    configure_logging(level="DEBUG" if verbose else "WARNING")


def make_client() -> YahooFinanceClient:
    return YahooFinanceClient()


def run(operation: Callable[[YahooFinanceClient], Awaitable[Any]]) -> Any:
    """Run one async operation on a fresh client and close it afterwards."""

    async def runner():
        async with make_client() as client:
            return await operation(client)

    return asyncio.run(runner())


def unwrap(outcome: Outcome, what: str):
    """Return the value of a Success, or report the Failure and exit 1."""
    if outcome.is_error():
        logger.error(f"Failed to get {what}: {outcome.message}")
        print(f"Error ({outcome.kind.value}): {outcome.message}", file=sys.stderr)
        sys.exit(1)
    return outcome.value


def fmt_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


def fmt_num(value, spec: str = ",.2f") -> str:
    return "-" if value is None else format(value, spec)


def parse_date_arg(value: str):
    """Accept an epoch timestamp or YYYY-MM-DD."""
    if value.isdigit():
        return int(value)
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD or epoch seconds)")


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def print_json(model) -> None:
    print(model.model_dump_json(indent=2))


def cmd_history(args):
    """Handle history command."""
    from yfkit.core.frames import series_to_frame
    from yfkit.core.views import average_volume, highest_high, lowest_low, simple_moving_average

    ticker = args.ticker.upper()

    if args.start is not None or args.end is not None:
        if args.start is None or args.end is None:
            print("Both --start and --end are required for a date range", file=sys.stderr)
            sys.exit(2)
        outcome = run(lambda c: c.history_by_range(ticker, args.start, args.end, args.interval))
    else:
        outcome = run(lambda c: c.history(ticker, args.period, args.interval))

    series = unwrap(outcome, f"history for {ticker}")

    if args.json:
        print_json(series)
        return

    bars = series.quotes
    if not bars:
        print(f"No history data found for {ticker}")
        return

    print(f"\n{'='*60}")
    print(f"  {ticker} Historical Data ({len(bars)} bars, {series.currency or 'n/a'})")
    print(f"{'='*60}")
    print(f"  Period: {fmt_date(bars[0].timestamp)} to {fmt_date(bars[-1].timestamp)}")
    print(f"  High:   {fmt_num(highest_high(bars))}   Low: {fmt_num(lowest_low(bars))}")
    print(f"  Avg volume: {fmt_num(average_volume(bars), ',.0f')}")

    if args.sma:
        averages = simple_moving_average(bars, args.sma)
        latest = averages[-1] if averages else None
        print(f"  SMA({args.sma}): {fmt_num(latest)}")

    print("\n  Latest bars:")
    print(f"  {'Date':<12} {'Open':>10} {'High':>10} {'Low':>10} {'Close':>10} {'Volume':>14}")
    print(f"  {'-'*12} {'-'*10} {'-'*10} {'-'*10} {'-'*10} {'-'*14}")
    for bar in bars[-5:]:
        print(
            f"  {fmt_date(bar.timestamp):<12} {fmt_num(bar.open):>10} {fmt_num(bar.high):>10} "
            f"{fmt_num(bar.low):>10} {fmt_num(bar.close):>10} {fmt_num(bar.volume, ',d'):>14}"
        )
    print(f"{'='*60}\n")

    if args.csv:
        series_to_frame(series).to_csv(args.csv)
        print(f"Saved to: {args.csv}")


def cmd_info(args):
    """Handle info command."""
    ticker = args.ticker.upper()

    if args.fast:
        fast = unwrap(run(lambda c: c.fast_info(ticker)), f"fast info for {ticker}")
        if args.json:
            print_json(fast)
            return
        print(f"\n{'='*50}")
        print(f"  {ticker} Fast Info")
        print(f"{'='*50}")
        print(f"  Last price:  {fmt_num(fast.last_price)} {fast.currency or ''}")
        print(f"  Prev close:  {fmt_num(fast.previous_close)}")
        print(f"  Change %:    {fmt_num(fast.percent_change)}")
        print(f"  Day range:   {fmt_num(fast.day_low)} - {fmt_num(fast.day_high)}")
        print(f"  52w range:   {fmt_num(fast.year_low)} - {fmt_num(fast.year_high)}")
        print(f"  Market cap:  {fmt_num(fast.market_cap, ',d')}")
        print(f"{'='*50}\n")
        return

    info = unwrap(run(lambda c: c.info(ticker)), f"info for {ticker}")
    if args.json:
        print_json(info)
        return

    print(f"\n{'='*50}")
    print(f"  {info.long_name or info.short_name or ticker} ({ticker})")
    print(f"{'='*50}")
    print(f"  Exchange:   {info.exchange or '-'}  ({info.quote_type or '-'})")
    print(f"  Sector:     {info.sector or '-'} / {info.industry or '-'}")
    print(f"  Price:      {fmt_num(info.current_price)} {info.currency or ''}")
    print(f"  Market cap: {fmt_num(info.market_cap, ',d')}")
    print(f"  P/E:        {fmt_num(info.trailing_pe)} (fwd {fmt_num(info.forward_pe)})")
    print(f"  Dividend:   {fmt_num(info.dividend_rate)} ({fmt_num(info.dividend_yield, '.2%')})")
    print(f"  Employees:  {fmt_num(info.employees, ',d')}")
    print(f"{'='*50}\n")


def cmd_actions(args):
    """Handle actions command."""
    from yfkit.core.frames import actions_to_frame

    ticker = args.ticker.upper()
    actions = unwrap(run(lambda c: c.actions(ticker, args.period)), f"actions for {ticker}")

    if args.json:
        print_json(actions)
        return

    print(f"\n  {ticker} corporate actions ({len(actions.actions)})")
    for action in actions.actions:
        if action.kind == "split":
            print(f"  {fmt_date(action.timestamp)}  split     {action.ratio:g}:1")
        else:
            print(f"  {fmt_date(action.timestamp)}  {action.kind:<9} {action.amount:.4f}")
    print()

    if args.csv:
        actions_to_frame(actions).to_csv(args.csv)
        print(f"Saved to: {args.csv}")


def cmd_options(args):
    """Handle options command."""
    ticker = args.ticker.upper()

    if args.expiration is None:
        expirations = unwrap(run(lambda c: c.options(ticker)), f"options for {ticker}")
        if args.json:
            print_json(expirations)
            return
        print(f"\n  {ticker} option expirations ({len(expirations.expirations)})")
        for ts in expirations.expirations:
            print(f"  {fmt_date(ts)}  ({ts})")
        print()
        return

    chain = unwrap(
        run(lambda c: c.option_chain(ticker, args.expiration)), f"option chain for {ticker}"
    )
    if args.json:
        print_json(chain)
        return

    print(f"\n{'='*60}")
    print(f"  {ticker} options expiring {fmt_date(chain.expiration)}")
    print(f"  Underlying: {fmt_num(chain.underlying_price)}")
    print(f"{'='*60}")
    print(f"  {'Strike':>10} {'Call bid':>10} {'Call ask':>10} {'Put bid':>10} {'Put ask':>10}")
    for strike in chain.strikes():
        call, put = chain.call_at(strike), chain.put_at(strike)
        print(
            f"  {strike:>10.2f} {fmt_num(call and call.bid):>10} {fmt_num(call and call.ask):>10} "
            f"{fmt_num(put and put.bid):>10} {fmt_num(put and put.ask):>10}"
        )
    print(f"{'='*60}\n")


def cmd_financials(args):
    """Handle financials command."""
    from yfkit.core.frames import statement_to_frame

    ticker = args.ticker.upper()
    operations = {
        "income": lambda c: c.income_statement(ticker, args.frequency),
        "balance": lambda c: c.balance_sheet(ticker, args.frequency),
        "cashflow": lambda c: c.cash_flow(ticker, args.frequency),
    }
    statement = unwrap(
        run(operations[args.statement]), f"{args.statement} statement for {ticker}"
    )

    if args.json:
        print_json(statement)
        return

    df = statement_to_frame(statement)
    if df.empty:
        print(f"No {args.statement} statement data for {ticker}")
        return
    print(df.to_string())

    if args.csv:
        df.to_csv(args.csv)
        print(f"Saved to: {args.csv}")


def cmd_news(args):
    """Handle news command."""
    ticker = args.ticker.upper()
    news = unwrap(run(lambda c: c.news(ticker, args.count)), f"news for {ticker}")

    if args.json:
        print_json(news)
        return

    print(f"\n  {ticker} news ({len(news.articles)})")
    for article in news.articles:
        print(f"  {fmt_date(article.publish_time)}  {article.title}")
        print(f"              {article.publisher or ''} {article.link}")
    print()


def cmd_download(args):
    """Handle download command."""
    from yfkit.app.download import download, parse_symbols

    tickers = parse_symbols(args.tickers)

    print(f"\nDownloading history for {len(tickers)} tickers...")
    print(f"{'='*60}")

    results = run(lambda c: download(tickers, args.period, args.interval, client=c))

    succeeded = 0
    for symbol, outcome in results.items():
        if outcome.is_success():
            succeeded += 1
            bars = outcome.value.quotes
            last = bars[-1].close if bars else None
            print(f"  {symbol:<8} {len(bars):>5} bars  last close {fmt_num(last):>12}")
        else:
            print(f"  {symbol:<8} FAILED ({outcome.kind.value}): {outcome.message}")

    print(f"{'='*60}")
    print(f"Successfully fetched {succeeded}/{len(tickers)} tickers\n")

    if args.json:
        data = {
            symbol: outcome.value.model_dump() if outcome.is_success()
            else {"error": outcome.message, "kind": outcome.kind.value}
            for symbol, outcome in results.items()
        }
        print(json.dumps(data, default=str, indent=2))


def cmd_test(args):
    """Test connection and configuration."""
    from yfkit.core.config import settings

    print(f"\n{'='*50}")
    print("  Configuration Test")
    print(f"{'='*50}")

    print("\n  Settings:")
    print(f"    YF_BASE_URL:        {settings.base_url}")
    print(f"    YF_REQUEST_TIMEOUT: {settings.request_timeout}s")
    print(f"    YF_USER_AGENT:      {settings.user_agent}")
    print(f"    LOG_LEVEL:          {settings.log_level}")

    print("\n  Testing Yahoo Finance...")
    outcome = run(lambda c: c.fast_info("AAPL"))
    if outcome.is_success():
        print(f"    ✓ Yahoo Finance reachable - AAPL: {fmt_num(outcome.value.last_price)}")
    else:
        print(f"    ✗ Yahoo Finance error ({outcome.kind.value}): {outcome.message}")

    print(f"\n{'='*50}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Typed Yahoo Finance client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  yfkit history AAPL --period 1mo
  yfkit history TSLA --start 2024-01-01 --end 2024-06-01 --csv tsla.csv
  yfkit info MSFT --fast
  yfkit actions AAPL --json
  yfkit options AAPL --expiration 2025-01-17
  yfkit financials AAPL --statement balance --frequency quarterly
  yfkit news NVDA --count 5
  yfkit download --tickers AAPL,MSFT,GOOGL --period 5d
  yfkit test
        """
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    periods = [p.value for p in Period]
    intervals = [i.value for i in Interval]

    # History command
    history_parser = subparsers.add_parser("history", help="Get historical data for a ticker")
    history_parser.add_argument("ticker", help="Stock ticker symbol")
    history_parser.add_argument("--period", default="1mo", choices=periods, help="Period")
    history_parser.add_argument("--interval", default="1d", choices=intervals, help="Interval")
    history_parser.add_argument("--start", type=parse_date_arg, help="Start date (YYYY-MM-DD or epoch)")
    history_parser.add_argument("--end", type=parse_date_arg, help="End date (YYYY-MM-DD or epoch)")
    history_parser.add_argument("--sma", type=positive_int, help="Show the latest N-bar moving average")
    history_parser.add_argument("--csv", help="Write bars to this CSV file")
    history_parser.add_argument("--json", action="store_true", help="Output as JSON")
    history_parser.set_defaults(func=cmd_history)

    # Info command
    info_parser = subparsers.add_parser("info", help="Get company info for a ticker")
    info_parser.add_argument("ticker", help="Stock ticker symbol")
    info_parser.add_argument("--fast", action="store_true", help="Only the fast price snapshot")
    info_parser.add_argument("--json", action="store_true", help="Output as JSON")
    info_parser.set_defaults(func=cmd_info)

    # Actions command
    actions_parser = subparsers.add_parser("actions", help="Get dividends and splits")
    actions_parser.add_argument("ticker", help="Stock ticker symbol")
    actions_parser.add_argument("--period", default="max", choices=periods, help="Period")
    actions_parser.add_argument("--csv", help="Write actions to this CSV file")
    actions_parser.add_argument("--json", action="store_true", help="Output as JSON")
    actions_parser.set_defaults(func=cmd_actions)

    # Options command
    options_parser = subparsers.add_parser("options", help="List expirations or show a chain")
    options_parser.add_argument("ticker", help="Underlying ticker symbol")
    options_parser.add_argument("--expiration", type=parse_date_arg, help="Expiration (YYYY-MM-DD or epoch)")
    options_parser.add_argument("--json", action="store_true", help="Output as JSON")
    options_parser.set_defaults(func=cmd_options)

    # Financials command
    financials_parser = subparsers.add_parser("financials", help="Get a financial statement")
    financials_parser.add_argument("ticker", help="Stock ticker symbol")
    financials_parser.add_argument("--statement", default="income",
                                   choices=["income", "balance", "cashflow"])
    financials_parser.add_argument("--frequency", default="annual",
                                   choices=["annual", "quarterly", "trailing"])
    financials_parser.add_argument("--csv", help="Write the statement to this CSV file")
    financials_parser.add_argument("--json", action="store_true", help="Output as JSON")
    financials_parser.set_defaults(func=cmd_financials)

    # News command
    news_parser = subparsers.add_parser("news", help="Get recent news for a ticker")
    news_parser.add_argument("ticker", help="Stock ticker symbol")
    news_parser.add_argument("--count", type=int, default=None, help="Number of articles")
    news_parser.add_argument("--json", action="store_true", help="Output as JSON")
    news_parser.set_defaults(func=cmd_news)

    # Download command
    download_parser = subparsers.add_parser("download", help="Get history for multiple tickers")
    download_parser.add_argument("--tickers", required=True,
                                 help="Comma-separated list of tickers (e.g., AAPL,MSFT,GOOGL)")
    download_parser.add_argument("--period", default="1mo", choices=periods, help="Period")
    download_parser.add_argument("--interval", default="1d", choices=intervals, help="Interval")
    download_parser.add_argument("--json", action="store_true", help="Output as JSON")
    download_parser.set_defaults(func=cmd_download)

    # Test command
    test_parser = subparsers.add_parser("test", help="Test configuration and connectivity")
    test_parser.set_defaults(func=cmd_test)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    args.func(args)


if __name__ == "__main__":
    main()
