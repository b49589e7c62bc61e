"""Data structures returned by the financial data client."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Price:
    """
    One daily OHLCV bar.

    ``time`` is either an RFC 3339 date-time or a plain ``YYYY-MM-DD`` date.
    """
    open: float
    close: float
    high: float
    low: float
    volume: int
    time: str


@dataclass
class FinancialMetrics:
    """
    Valuation, profitability, efficiency, liquidity and growth ratios for one
    (ticker, report period, period type).

    Ratios typed ``Optional[float]`` may be omitted upstream; ``None`` means
    unknown and is distinct from a measured ``0.0``.
    """
    ticker: str
    report_period: str
    period: str
    currency: str
    market_cap: float = 0.0
    enterprise_value: float = 0.0
    price_to_earnings_ratio: float = 0.0
    price_to_book_ratio: float = 0.0
    price_to_sales_ratio: float = 0.0
    enterprise_value_to_ebitda_ratio: float = 0.0
    enterprise_value_to_revenue_ratio: float = 0.0
    free_cash_flow_yield: float = 0.0
    peg_ratio: float = 0.0
    gross_margin: float = 0.0
    operating_margin: Optional[float] = None
    net_margin: Optional[float] = None
    return_on_equity: Optional[float] = None
    return_on_assets: Optional[float] = None
    return_on_invested_capital: float = 0.0
    asset_turnover: float = 0.0
    inventory_turnover: float = 0.0
    receivables_turnover: float = 0.0
    days_sales_outstanding: float = 0.0
    operating_cycle: float = 0.0
    working_capital_turnover: float = 0.0
    current_ratio: Optional[float] = None
    quick_ratio: Optional[float] = None
    cash_ratio: Optional[float] = None
    operating_cash_flow_ratio: float = 0.0
    debt_to_equity: Optional[float] = None
    debt_to_assets: float = 0.0
    interest_coverage: Optional[float] = None
    revenue_growth: float = 0.0
    earnings_growth: float = 0.0
    book_value_growth: float = 0.0
    earnings_per_share_growth: float = 0.0
    free_cash_flow_growth: float = 0.0
    operating_income_growth: float = 0.0
    ebitda_growth: float = 0.0
    payout_ratio: float = 0.0
    earnings_per_share: float = 0.0
    book_value_per_share: float = 0.0
    free_cash_flow_per_share: float = 0.0


@dataclass
class LineItem:
    """
    A search result for caller-chosen financial statement line items.

    Only the four header fields are fixed. ``data`` holds every other key of the
    payload in server order; which keys appear depends on the ``line_items``
    requested, so the type cannot describe them ahead of time.
    """
    ticker: str
    report_period: str
    period: str
    currency: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class InsiderTrade:
    """A single insider transaction. Only ``ticker`` and ``filing_date`` are guaranteed."""
    ticker: str
    filing_date: str
    issuer: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    is_board_director: Optional[bool] = None
    transaction_date: Optional[str] = None
    transaction_shares: Optional[float] = None
    transaction_price_per_share: Optional[float] = None
    transaction_value: Optional[float] = None
    shares_owned_before_transaction: Optional[float] = None
    shares_owned_after_transaction: Optional[float] = None
    security_title: Optional[str] = None


@dataclass
class CompanyNews:
    """
    Represents a news article about a company.
    """
    ticker: str
    title: str
    author: str
    source: str
    date: str  # YYYY-MM-DD or ISO 8601 timestamp
    url: str
    sentiment: Optional[str] = None


@dataclass
class CompanyFacts:
    """Static company attributes plus the live market capitalization."""
    ticker: str
    name: str = ""
    cik: str = ""
    industry: str = ""
    sector: str = ""
    category: str = ""
    exchange: str = ""
    is_active: bool = False
    listing_date: str = ""
    location: str = ""
    market_cap: float = 0.0
    number_of_employees: int = 0
    sec_filings_url: str = ""
    sic_code: str = ""
    sic_industry: str = ""
    sic_sector: str = ""
    website_url: str = ""
    weighted_average_shares: int = 0


@dataclass
class FundamentalAnalysis:
    """
    Outcome of scoring the latest metrics against value-investing criteria.
    """
    score: int
    details: str
    metrics: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass
class FinancialMetricsSnapshot:
    """
    Result of the ``get_financial_metrics`` action, as archived under output/metrics.
    """
    symbol: str
    date: str
    period: str
    metrics: List[FinancialMetrics] = field(default_factory=list)
    count: int = 0
    error: Optional[str] = None


@dataclass
class CompanyNewsSnapshot:
    """
    Result of the ``get_company_news`` action, as archived under output/news.
    """
    symbol: str
    date: str
    news: List[CompanyNews] = field(default_factory=list)
    count: int = 0
    error: Optional[str] = None


@dataclass
class MarketCapQuote:
    """Result of the ``get_market_cap`` action."""
    symbol: str
    date: str
    market_cap: float = 0.0
    currency: str = "USD"
    error: Optional[str] = None
