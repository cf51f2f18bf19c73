"""
Unit tests for the async Yahoo Finance client, using a mocked HTTP transport.
"""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from yfkit.core.fundamentals import Frequency
from yfkit.core.models import DividendData, SplitData, Split
from yfkit.core.outcome import ErrorKind, Failure, Success
from yfkit.data_sources.transport import HttpTransport
from yfkit.data_sources.yahoo_client import is_valid_symbol, normalize_symbol, to_epoch


class TestSymbols:
    """Tests for symbol normalisation and validation."""

    def test_normalize(self):
        """Test symbols are trimmed and upper-cased."""
        assert normalize_symbol("  aapl ") == "AAPL"

    @pytest.mark.parametrize("symbol", ["AAPL", "BRK.B", "^GSPC", "EURUSD=X", "BTC-USD"])
    def test_valid_symbols(self, symbol):
        """Test common Yahoo symbol shapes are accepted."""
        assert is_valid_symbol(symbol)

    @pytest.mark.parametrize("symbol", ["", "AA PL", "AAPL@#$", "A" * 33])
    def test_invalid_symbols(self, symbol):
        """Test blank or malformed symbols are rejected."""
        assert not is_valid_symbol(symbol)

    def test_to_epoch(self):
        """Test dates map to the start or end of the UTC day."""
        assert to_epoch(date(2024, 1, 2)) == 1704153600
        assert to_epoch(date(2024, 1, 2), end_of_day=True) == 1704153600 + 86399
        assert to_epoch(1704153600.9) == 1704153600


class TestFetchTemplate:
    """Tests for the shared request pipeline."""

    def test_history_success(self, make_client, respond, chart_payload):
        """Test a 200 response is decoded and mapped."""
        handler = respond(chart_payload)
        client = make_client(handler)

        outcome = asyncio.run(client.history("aapl", "5d", "1d"))

        assert outcome.is_success()
        assert len(outcome.value.quotes) == 3
        request = handler.requests[0]
        assert request.url.path == "/v8/finance/chart/AAPL"
        assert request.url.params["range"] == "5d"
        assert request.headers["User-Agent"]

    def test_blank_symbol_sends_no_request(self, make_client, respond):
        """Test an invalid symbol fails locally without any HTTP request."""
        handler = respond({})
        client = make_client(handler)

        outcome = asyncio.run(client.history("   "))

        assert outcome.kind == ErrorKind.INVALID_PARAMETERS
        assert handler.requests == []

    def test_invalid_period(self, make_client, respond, chart_payload):
        """Test an unknown period is an invalid parameter and sends no request."""
        handler = respond(chart_payload)
        client = make_client(handler)

        outcome = asyncio.run(client.history("AAPL", period="7w"))

        assert outcome.kind == ErrorKind.INVALID_PARAMETERS
        assert handler.requests == []

    def test_rate_limited(self, make_client, respond):
        """Test HTTP 429 maps to rate limited."""
        client = make_client(respond(text="Too Many Requests", status=429))
        outcome = asyncio.run(client.info("AAPL"))
        assert outcome.kind == ErrorKind.RATE_LIMITED

    def test_server_error(self, make_client, respond):
        """Test HTTP 500 maps to an upstream error carrying the status."""
        client = make_client(respond(text="oops", status=500))
        outcome = asyncio.run(client.history("AAPL"))
        assert outcome.kind == ErrorKind.UPSTREAM_ERROR
        assert outcome.status == 500

    def test_not_found(self, make_client, respond):
        """Test HTTP 404 is an upstream error, not an invalid symbol."""
        client = make_client(respond({"chart": {"result": None, "error": {"code": "Not Found"}}}, status=404))
        outcome = asyncio.run(client.history("ZZZZZZ"))
        assert outcome.kind == ErrorKind.UPSTREAM_ERROR
        assert outcome.status == 404

    def test_timeout(self, make_client, respond):
        """Test a transport timeout maps to a network error."""
        client = make_client(respond(exc=httpx.ReadTimeout("timed out")))
        outcome = asyncio.run(client.history("AAPL"))
        assert outcome.kind == ErrorKind.NETWORK_ERROR
        assert isinstance(outcome.cause, httpx.ReadTimeout)

    def test_connection_error(self, make_client, respond):
        """Test a connection failure maps to a network error."""
        client = make_client(respond(exc=httpx.ConnectError("refused")))
        outcome = asyncio.run(client.news("AAPL"))
        assert outcome.kind == ErrorKind.NETWORK_ERROR

    def test_non_json_body(self, make_client, respond):
        """Test a 200 with a non-JSON body maps to a parsing error."""
        client = make_client(respond(text="<html>maintenance</html>"))
        outcome = asyncio.run(client.history("AAPL"))
        assert outcome.kind == ErrorKind.PARSING_ERROR

    def test_null_result(self, make_client, respond):
        """Test result null maps to an invalid symbol."""
        client = make_client(respond({"quoteSummary": {"result": None, "error": None}}))
        outcome = asyncio.run(client.info("NOPE"))
        assert outcome.kind == ErrorKind.INVALID_SYMBOL


class TestOperations:
    """Tests for individual client operations."""

    def test_history_by_range(self, make_client, respond, chart_payload):
        """Test a date range fetches the max period and filters inclusively."""
        handler = respond(chart_payload)
        client = make_client(handler)

        outcome = asyncio.run(client.history_by_range("AAPL", date(2024, 1, 3), date(2024, 1, 3)))

        assert handler.requests[0].url.params["range"] == "max"
        assert [q.timestamp for q in outcome.value.quotes] == [1704292200]

    def test_history_by_range_reversed(self, make_client, respond):
        """Test start after end is an invalid parameter and sends no request."""
        handler = respond({})
        client = make_client(handler)

        outcome = asyncio.run(client.history_by_range("AAPL", 200, 100))

        assert outcome.kind == ErrorKind.INVALID_PARAMETERS
        assert handler.requests == []

    def test_fast_info(self, make_client, respond, quote_summary_payload):
        """Test fast_info is projected from a single info request."""
        handler = respond(quote_summary_payload)
        client = make_client(handler)

        outcome = asyncio.run(client.fast_info("AAPL"))

        assert outcome.value.last_price == 187.5
        assert outcome.value.previous_close == 185.0
        assert len(handler.requests) == 1
        assert "price" in handler.requests[0].url.params["modules"].split(",")

    def test_quarterly_statement_module(self, make_client, respond, quote_summary_payload):
        """Test quarterly statements request the quarterly module."""
        handler = respond(quote_summary_payload)
        client = make_client(handler)

        asyncio.run(client.balance_sheet("AAPL", Frequency.QUARTERLY))

        assert handler.requests[0].url.params["modules"] == "balanceSheetHistoryQuarterly,financialData"

    def test_invalid_frequency(self, make_client, respond):
        """Test an unknown frequency is an invalid parameter."""
        client = make_client(respond({}))
        outcome = asyncio.run(client.income_statement("AAPL", "monthly"))
        assert outcome.kind == ErrorKind.INVALID_PARAMETERS

    def test_capital_gains_events(self, make_client, respond, chart_payload):
        """Test capital gains ask for the capitalGains events."""
        handler = respond(chart_payload)
        client = make_client(handler)

        outcome = asyncio.run(client.capital_gains("VFIAX"))

        assert outcome.is_success()
        assert handler.requests[0].url.params["events"] == "capitalGains"

    def test_option_chain_with_date(self, make_client, respond, options_payload):
        """Test a date expiration is sent as epoch seconds."""
        handler = respond(options_payload)
        client = make_client(handler)

        outcome = asyncio.run(client.option_chain("AAPL", date(2024, 1, 19)))

        assert outcome.is_success()
        assert handler.requests[0].url.params["date"] == "1705622400"

    def test_option_chain_negative_expiration(self, make_client, respond):
        """Test a negative expiration is rejected locally."""
        handler = respond({})
        client = make_client(handler)

        outcome = asyncio.run(client.option_chain("AAPL", -1))

        assert outcome.kind == ErrorKind.INVALID_PARAMETERS
        assert handler.requests == []

    def test_news(self, make_client, respond, news_payload):
        """Test news uses the search endpoint with the requested count."""
        handler = respond(news_payload)
        client = make_client(handler)

        outcome = asyncio.run(client.news("AAPL", count=3))

        assert len(outcome.value.articles) == 1
        assert handler.requests[0].url.path == "/v1/finance/search"
        assert handler.requests[0].url.params["newsCount"] == "3"

    def test_news_invalid_count(self, make_client, respond):
        """Test a non-positive count is an invalid parameter."""
        client = make_client(respond({}))
        outcome = asyncio.run(client.news("AAPL", count=0))
        assert outcome.kind == ErrorKind.INVALID_PARAMETERS


class TestActions:
    """Tests for merged corporate actions."""

    def test_merged_and_sorted(self, make_client, respond, chart_payload):
        """Test dividends and splits are merged oldest first."""
        client = make_client(respond(chart_payload))

        outcome = asyncio.run(client.actions("AAPL"))

        actions = outcome.value.actions
        assert [a.timestamp for a in actions] == [1598880600, 1691760600, 1699626600]
        assert [a.kind for a in actions] == ["split", "dividend", "dividend"]

    def test_dividends_failure_takes_priority(self, make_client, respond):
        """Test the dividends failure is returned when both lookups fail."""
        client = make_client(respond({}))
        dividends_failure = Failure("dividends down", ErrorKind.NETWORK_ERROR)
        splits_failure = Failure("splits down", ErrorKind.RATE_LIMITED)

        with patch.object(client, "dividends", AsyncMock(return_value=dividends_failure)), \
                patch.object(client, "splits", AsyncMock(return_value=splits_failure)):
            outcome = asyncio.run(client.actions("AAPL"))

        assert outcome is dividends_failure

    def test_splits_failure_returned_unchanged(self, make_client, respond):
        """Test the splits failure is returned when only splits fail."""
        client = make_client(respond({}))
        splits_failure = Failure("bad split", ErrorKind.PARSING_ERROR)

        with patch.object(client, "dividends", AsyncMock(return_value=Success(DividendData(symbol="AAPL")))), \
                patch.object(client, "splits", AsyncMock(return_value=splits_failure)):
            outcome = asyncio.run(client.actions("AAPL"))

        assert outcome is splits_failure

    def test_stable_order_for_equal_timestamps(self, make_client, respond):
        """Test dividends stay ahead of splits on the same timestamp."""
        client = make_client(respond({}))
        splits = SplitData(symbol="AAPL", splits=[Split(timestamp=5, numerator=2, denominator=1, ratio=2.0)])
        dividends = DividendData.model_validate({"symbol": "AAPL", "dividends": [{"timestamp": 5, "amount": 0.1}]})

        with patch.object(client, "dividends", AsyncMock(return_value=Success(dividends))), \
                patch.object(client, "splits", AsyncMock(return_value=Success(splits))):
            outcome = asyncio.run(client.actions("AAPL"))

        assert [a.kind for a in outcome.value.actions] == ["dividend", "split"]


class TestConnectionPool:
    """Tests for the pooled HTTP client across event loops."""

    def test_pool_reused_within_loop(self):
        """Test requests on one event loop share a single pool."""
        transport = HttpTransport(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

        async def pools():
            return transport.client, transport.client

        first, second = asyncio.run(pools())
        assert first is second

    def test_shared_client_survives_new_event_loop(self, make_client, respond, chart_payload, monkeypatch):
        """Test the default client keeps working across separate asyncio.run calls."""
        from yfkit.app import ticker as ticker_module

        client = make_client(respond(chart_payload))
        monkeypatch.setattr(ticker_module, "default_client", client)
        pools = []

        async def fetch():
            outcome = await ticker_module.get_history("AAPL")
            pools.append(client.http.client)
            return outcome

        first = asyncio.run(fetch())
        second = asyncio.run(fetch())

        assert first.is_success()
        assert second.is_success()
        assert len(second.value.quotes) == 3
        assert pools[0] is not pools[1]
