"""
Unit tests for the FastAPI API endpoints.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from yfkit.core.fundamentals import (
    FinancialStatement,
    Frequency,
    InstitutionalHoldersData,
    MajorHolders,
    MutualFundHoldersData,
    StatementType,
)
from yfkit.core.models import FastInfo, HistoricalSeries, OptionChain, Quote
from yfkit.core.outcome import ErrorKind, Failure, Success


@pytest.fixture
def mock_client():
    """Mock the module-level client used by the API."""
    with patch("yfkit.app.api.client") as mock:
        yield mock


def series(symbol="AAPL"):
    return HistoricalSeries(
        symbol=symbol,
        currency="USD",
        quotes=[Quote(timestamp=1704205800, close=185.64, volume=82488700)],
    )


class TestRootEndpoints:
    """Tests for root and health endpoints."""

    def test_root(self, test_client):
        """Test root endpoint returns API info."""
        response = test_client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_health_without_probe(self, test_client, mock_client):
        """Test health does not call upstream unless asked."""
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        mock_client.fast_info.assert_not_called()

    def test_health_probe_failure(self, test_client, mock_client):
        """Test a failing probe reports degraded."""
        mock_client.fast_info = AsyncMock(return_value=Failure("down", ErrorKind.NETWORK_ERROR))
        response = test_client.get("/health?probe=true")
        assert response.json()["status"] == "degraded"
        assert response.json()["upstream"] is False


class TestHistoryEndpoint:
    """Tests for the history endpoint."""

    def test_history(self, test_client, mock_client):
        """Test bars are returned for a period."""
        mock_client.history = AsyncMock(return_value=Success(series()))

        response = test_client.get("/history/AAPL?period=5d")

        assert response.status_code == 200
        assert response.json()["quotes"][0]["close"] == 185.64
        mock_client.history.assert_awaited_once()

    def test_history_range(self, test_client, mock_client):
        """Test start and end switch to a date range lookup."""
        mock_client.history_by_range = AsyncMock(return_value=Success(series()))

        response = test_client.get("/history/AAPL?start=2024-01-01&end=2024-01-31")

        assert response.status_code == 200
        mock_client.history_by_range.assert_awaited_once()

    def test_history_half_range(self, test_client, mock_client):
        """Test a start without an end is rejected."""
        response = test_client.get("/history/AAPL?start=2024-01-01")
        assert response.status_code == 400

    def test_history_invalid_date(self, test_client, mock_client):
        """Test a malformed date is rejected."""
        response = test_client.get("/history/AAPL?start=01-01-2024&end=2024-01-31")
        assert response.status_code == 400

    def test_history_invalid_period(self, test_client):
        """Test an unknown period fails validation."""
        response = test_client.get("/history/AAPL?period=7w")
        assert response.status_code == 422

    @pytest.mark.parametrize("kind,status", [
        (ErrorKind.INVALID_PARAMETERS, 400),
        (ErrorKind.INVALID_SYMBOL, 404),
        (ErrorKind.RATE_LIMITED, 429),
        (ErrorKind.UPSTREAM_ERROR, 502),
        (ErrorKind.PARSING_ERROR, 502),
        (ErrorKind.NETWORK_ERROR, 503),
        (ErrorKind.UNKNOWN, 500),
    ])
    def test_failure_status(self, test_client, mock_client, kind, status):
        """Test every failure kind maps to its HTTP status."""
        mock_client.history = AsyncMock(return_value=Failure("boom", kind))

        response = test_client.get("/history/AAPL")

        assert response.status_code == status
        assert response.json()["detail"]["kind"] == kind.value


class TestProfileEndpoints:
    """Tests for fast info, financials and holders."""

    def test_fast_info(self, test_client, mock_client):
        """Test fast info is returned as-is."""
        mock_client.fast_info = AsyncMock(
            return_value=Success(FastInfo(symbol="AAPL", last_price=187.5))
        )
        response = test_client.get("/fast-info/AAPL")
        assert response.json()["last_price"] == 187.5

    def test_financials(self, test_client, mock_client):
        """Test the statement path selects the client operation."""
        statement = FinancialStatement(
            symbol="AAPL",
            statement=StatementType.BALANCE_SHEET,
            frequency=Frequency.QUARTERLY,
            data={"2023-12-30": {"totalAssets": 353514000000.0}},
        )
        mock_client.balance_sheet = AsyncMock(return_value=Success(statement))

        response = test_client.get("/financials/AAPL/balance?frequency=quarterly")

        assert response.status_code == 200
        assert response.json()["data"]["2023-12-30"]["totalAssets"] == 353514000000.0
        mock_client.balance_sheet.assert_awaited_once_with("AAPL", Frequency.QUARTERLY)

    def test_financials_unknown_statement(self, test_client):
        """Test an unknown statement fails validation."""
        response = test_client.get("/financials/AAPL/dividends")
        assert response.status_code == 422

    def test_holders(self, test_client, mock_client):
        """Test holders combine three lookups."""
        mock_client.major_holders = AsyncMock(
            return_value=Success(MajorHolders(symbol="AAPL", insiders_percent_held=0.0007))
        )
        mock_client.institutional_holders = AsyncMock(
            return_value=Success(InstitutionalHoldersData(symbol="AAPL"))
        )
        mock_client.mutual_fund_holders = AsyncMock(
            return_value=Success(MutualFundHoldersData(symbol="AAPL"))
        )

        response = test_client.get("/holders/aapl")

        assert response.status_code == 200
        assert response.json()["symbol"] == "AAPL"
        assert response.json()["major"]["insiders_percent_held"] == 0.0007

    def test_option_chain_by_date(self, test_client, mock_client):
        """Test an ISO expiration is parsed before the lookup."""
        mock_client.option_chain = AsyncMock(
            return_value=Success(OptionChain(symbol="AAPL", expiration=1705622400))
        )
        response = test_client.get("/options/AAPL/2024-01-19")
        assert response.status_code == 200
        assert response.json()["expiration"] == 1705622400


class TestDownloadEndpoint:
    """Tests for the multi-symbol download endpoint."""

    def test_partial_failure(self, test_client, mock_client):
        """Test successes and failures are reported separately."""
        async def history(symbol, period, interval):
            if symbol == "BAD":
                return Failure("no data", ErrorKind.INVALID_SYMBOL)
            return Success(series(symbol))

        mock_client.history = history

        response = test_client.get("/download?symbols=AAPL,MSFT,BAD")

        assert response.status_code == 200
        data = response.json()
        assert data["success_count"] == 2
        assert data["failed_tickers"] == ["BAD"]
        assert data["errors"]["BAD"]["kind"] == "invalid_symbol"
        assert set(data["series"]) == {"AAPL", "MSFT"}

    def test_empty_symbols(self, test_client):
        """Test an empty symbol list is rejected."""
        response = test_client.get("/download?symbols=,,")
        assert response.status_code == 400

    def test_too_many_symbols(self, test_client):
        """Test the symbol limit is enforced."""
        symbols = ",".join(f"T{i}" for i in range(51))
        response = test_client.get(f"/download?symbols={symbols}")
        assert response.status_code == 400


class TestLifespan:
    """Tests for application startup and shutdown."""

    def test_shutdown_closes_client(self):
        """Test the shared client's connection pool is closed on shutdown."""
        from yfkit.app import api

        with patch.object(api.client, "aclose", new_callable=AsyncMock) as aclose:
            with TestClient(api.app) as client:
                assert client.get("/").status_code == 200
                aclose.assert_not_awaited()
            aclose.assert_awaited_once()
