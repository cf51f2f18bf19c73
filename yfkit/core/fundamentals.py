"""
Pydantic models for fundamentals and ownership data.
Defines financial statements, earnings, holders, analyst, ESG, filings and share-count entities.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from yfkit.core.models import DomainModel


class Frequency(str, Enum):
    """Reporting frequency for statement requests."""

    ANNUAL = "annual"
    QUARTERLY = "quarterly"
    TRAILING = "trailing"


class StatementType(str, Enum):
    INCOME = "income"
    BALANCE_SHEET = "balance"
    CASH_FLOW = "cashflow"


# ============================================================================
# Financial statements
# ============================================================================

class FinancialStatement(DomainModel):
    """
    Income statement, balance sheet or cash flow keyed by period.

    ``data`` maps an ISO period end date (YYYY-MM-DD) to a flat mapping of
    line item name to value. Line items absent upstream are absent keys.
    """

    symbol: str = Field(..., description="Ticker symbol")
    statement: StatementType = Field(..., description="Statement kind")
    frequency: Frequency = Field(..., description="Reporting frequency")
    currency: Optional[str] = Field(default=None, description="Reporting currency")
    data: dict[str, dict[str, float]] = Field(default_factory=dict)

    def periods(self) -> list[str]:
        """Period keys, oldest first."""
        return sorted(self.data)

    def line_item(self, name: str) -> dict[str, float]:
        """Values of one line item across every period that reports it."""
        return {
            period: items[name]
            for period, items in sorted(self.data.items())
            if name in items
        }

    def latest(self) -> Optional[tuple[str, dict[str, float]]]:
        if not self.data:
            return None
        period = max(self.data)
        return period, self.data[period]


# ============================================================================
# Calendar and earnings
# ============================================================================

class Calendar(DomainModel):
    """Upcoming earnings and dividend events."""

    symbol: str
    earnings_dates: list[int] = Field(default_factory=list)
    ex_dividend_date: Optional[int] = None
    dividend_date: Optional[int] = None
    earnings_average: Optional[float] = None
    earnings_low: Optional[float] = None
    earnings_high: Optional[float] = None
    revenue_average: Optional[int] = None
    revenue_low: Optional[int] = None
    revenue_high: Optional[int] = None

    @property
    def next_earnings_date(self) -> Optional[int]:
        return min(self.earnings_dates) if self.earnings_dates else None


class QuarterlyEarnings(DomainModel):
    quarter: str = Field(..., description="Quarter label, e.g. 3Q2024")
    actual: Optional[float] = None
    estimate: Optional[float] = None


class FinancialsPoint(DomainModel):
    period: str = Field(..., description="Year (yearly) or quarter label (quarterly)")
    revenue: Optional[int] = None
    earnings: Optional[int] = None


class FullEarnings(DomainModel):
    """EPS chart plus yearly and quarterly revenue and earnings."""

    symbol: str
    quarterly_eps: list[QuarterlyEarnings] = Field(default_factory=list)
    current_quarter_estimate: Optional[float] = None
    yearly: list[FinancialsPoint] = Field(default_factory=list)
    quarterly: list[FinancialsPoint] = Field(default_factory=list)

    def yearly_revenue_growth(self) -> dict[str, float]:
        """
        Year-over-year revenue growth in percent.

        Years without revenue are skipped, as is any year whose predecessor
        reported zero revenue.
        """
        points = sorted(
            (p for p in self.yearly if p.revenue is not None),
            key=lambda p: p.period,
        )
        growth = {}
        for previous, current in zip(points, points[1:]):
            if previous.revenue:
                growth[current.period] = (
                    (current.revenue - previous.revenue) / previous.revenue * 100.0
                )
        return growth


class EarningsHistoryItem(DomainModel):
    quarter: Optional[int] = Field(default=None, description="Quarter end (epoch seconds)")
    period: Optional[str] = Field(default=None, description="Relative period, e.g. -1q")
    eps_actual: Optional[float] = None
    eps_estimate: Optional[float] = None
    eps_difference: Optional[float] = None
    surprise_percent: Optional[float] = None

    def beat_estimates(self) -> bool:
        if self.eps_actual is None or self.eps_estimate is None:
            return False
        return self.eps_actual > self.eps_estimate


class EarningsHistory(DomainModel):
    symbol: str
    history: list[EarningsHistoryItem] = Field(default_factory=list)

    def beats(self) -> int:
        return sum(1 for item in self.history if item.beat_estimates())


# ============================================================================
# Holders
# ============================================================================

class MajorHolders(DomainModel):
    symbol: str
    insiders_percent_held: Optional[float] = None
    institutions_percent_held: Optional[float] = None
    institutions_float_percent_held: Optional[float] = None
    institutions_count: Optional[int] = None


class InstitutionalHolder(DomainModel):
    holder: str
    shares: Optional[int] = None
    date_reported: Optional[int] = None
    percent_held: Optional[float] = None
    value: Optional[int] = None


class InstitutionalHoldersData(DomainModel):
    symbol: str
    holders: list[InstitutionalHolder] = Field(default_factory=list)

    def top_holders(self, n: int = 10) -> list[InstitutionalHolder]:
        """Largest holders by percent held; holders without a percentage sort last."""
        ranked = sorted(
            self.holders,
            key=lambda h: (h.percent_held is not None, h.percent_held or 0.0),
            reverse=True,
        )
        return ranked[:n]

    def total_percent_held(self) -> float:
        return sum(h.percent_held for h in self.holders if h.percent_held is not None)


class MutualFundHolder(DomainModel):
    holder: str
    shares: Optional[int] = None
    date_reported: Optional[int] = None
    percent_held: Optional[float] = None
    value: Optional[int] = None


class MutualFundHoldersData(DomainModel):
    symbol: str
    holders: list[MutualFundHolder] = Field(default_factory=list)


class InsiderTransaction(DomainModel):
    insider: str
    relation: Optional[str] = None
    start_date: Optional[int] = None
    transaction_text: Optional[str] = None
    ownership: Optional[str] = None
    shares: Optional[int] = None
    value: Optional[int] = None


class InsiderTransactionsData(DomainModel):
    symbol: str
    transactions: list[InsiderTransaction] = Field(default_factory=list)

    def purchases(self) -> list[InsiderTransaction]:
        return [
            t for t in self.transactions
            if t.transaction_text
            and any(word in t.transaction_text.lower() for word in ("buy", "purchase"))
        ]

    def sales(self) -> list[InsiderTransaction]:
        return [
            t for t in self.transactions
            if t.transaction_text and "sale" in t.transaction_text.lower()
        ]


class InsiderRosterHolder(DomainModel):
    name: str
    relation: Optional[str] = None
    url: Optional[str] = None
    latest_transaction_date: Optional[int] = None
    position_direct_date: Optional[int] = None
    shares_direct: Optional[int] = None


class InsiderRosterData(DomainModel):
    symbol: str
    holders: list[InsiderRosterHolder] = Field(default_factory=list)


# ============================================================================
# Analysts
# ============================================================================

class Recommendation(DomainModel):
    """One analyst rating change."""

    timestamp: int = Field(..., description="Grade date (epoch seconds)")
    firm: str = Field(..., description="Research firm")
    to_grade: Optional[str] = None
    from_grade: Optional[str] = None
    action: Optional[str] = Field(default=None, description="up, down, init, main, reit")

    def is_upgrade(self) -> bool:
        return self.action is not None and self.action.lower() in ("up", "upgrade")

    def is_downgrade(self) -> bool:
        return self.action is not None and self.action.lower() in ("down", "downgrade")

    def is_initiation(self) -> bool:
        return self.action is not None and self.action.lower() == "init"


class RecommendationsData(DomainModel):
    symbol: str
    recommendations: list[Recommendation] = Field(default_factory=list)

    def upgrades(self) -> list[Recommendation]:
        return [r for r in self.recommendations if r.is_upgrade()]

    def downgrades(self) -> list[Recommendation]:
        return [r for r in self.recommendations if r.is_downgrade()]

    def by_firm(self, firm: str) -> list[Recommendation]:
        return [r for r in self.recommendations if r.firm.lower() == firm.lower()]


class RecommendationTrend(DomainModel):
    """Rating counts for one relative period (0m, -1m, ...)."""

    period: str
    strong_buy: int = 0
    buy: int = 0
    hold: int = 0
    sell: int = 0
    strong_sell: int = 0

    @property
    def total(self) -> int:
        return self.strong_buy + self.buy + self.hold + self.sell + self.strong_sell

    @property
    def average(self) -> Optional[float]:
        """Mean rating on a 1 (strong buy) to 5 (strong sell) scale."""
        if self.total == 0:
            return None
        weighted = (
            self.strong_buy * 1 + self.buy * 2 + self.hold * 3
            + self.sell * 4 + self.strong_sell * 5
        )
        return weighted / self.total


class RecommendationsSummary(DomainModel):
    symbol: str
    trend: list[RecommendationTrend] = Field(default_factory=list)


class AnalystPriceTargets(DomainModel):
    symbol: str
    current: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    mean: Optional[float] = None
    median: Optional[float] = None
    number_of_analysts: Optional[int] = None

    @property
    def upside_from_mean(self) -> Optional[float]:
        """Percent distance from the current price to the mean target."""
        if self.current is None or self.mean is None or self.current == 0:
            return None
        return (self.mean - self.current) / self.current * 100.0


# ============================================================================
# ESG, filings and shares
# ============================================================================

class Sustainability(DomainModel):
    symbol: str
    total_esg: Optional[float] = None
    environment_score: Optional[float] = None
    social_score: Optional[float] = None
    governance_score: Optional[float] = None
    percentile: Optional[float] = None
    esg_performance: Optional[str] = None
    peer_group: Optional[str] = None
    peer_count: Optional[int] = None
    highest_controversy: Optional[int] = None

    def has_high_controversy(self) -> bool:
        return self.highest_controversy is not None and self.highest_controversy >= 4

    def rating_category(self) -> Optional[str]:
        if self.total_esg is None:
            return None
        if self.total_esg >= 80:
            return "Excellent"
        if self.total_esg >= 60:
            return "Good"
        if self.total_esg >= 40:
            return "Average"
        if self.total_esg >= 20:
            return "Below Average"
        return "Poor"


class SecFiling(DomainModel):
    date: str
    timestamp: int
    type: str
    title: str
    edgar_url: Optional[str] = None


class SecFilingsData(DomainModel):
    symbol: str
    filings: list[SecFiling] = Field(default_factory=list)

    def of_type(self, filing_type: str) -> list[SecFiling]:
        return [f for f in self.filings if f.type.upper() == filing_type.upper()]


class SharesData(DomainModel):
    """Share counts keyed by as-of timestamp."""

    symbol: str
    counts: dict[int, int] = Field(default_factory=dict)

    def latest(self) -> Optional[int]:
        if not self.counts:
            return None
        return self.counts[max(self.counts)]

    def at(self, timestamp: int) -> Optional[int]:
        return self.counts.get(timestamp)
