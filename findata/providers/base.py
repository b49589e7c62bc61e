"""Abstract base class for financial data providers."""

from abc import ABC, abstractmethod
from typing import List, Optional

from findata.models.datatypes import (
    CompanyFacts,
    CompanyNews,
    FinancialMetrics,
    InsiderTrade,
    LineItem,
    Price,
)


class FinancialDataProvider(ABC):
    """Abstract interface for fetching prices, fundamentals, insider trades and news."""

    @abstractmethod
    def fetch_prices(self, ticker: str, start_date: str, end_date: str) -> List[Price]:
        """
        Fetch daily OHLCV bars for a ticker.

        Args:
            ticker (str): The ticker symbol.
            start_date (str): Start date in YYYY-MM-DD format.
            end_date (str): End date in YYYY-MM-DD format.

        Returns:
            List[Price]: Bars in server order.
        """
        pass

    @abstractmethod
    def fetch_financial_metrics(
        self, ticker: str, end_date: str, period: str = "ttm", limit: int = 10
    ) -> List[FinancialMetrics]:
        """
        Fetch metrics for report periods ending on or before ``end_date``, newest first.

        Args:
            ticker (str): The ticker symbol.
            end_date (str): Latest report period to include.
            period (str): ``ttm``, ``annual`` or ``quarterly``.
            limit (int): Maximum number of records.

        Returns:
            List[FinancialMetrics]: Metrics records, possibly empty.
        """
        pass

    @abstractmethod
    def search_line_items(
        self,
        ticker: str,
        line_items: List[str],
        end_date: str,
        period: str = "ttm",
        limit: int = 10,
    ) -> List[LineItem]:
        """
        Search caller-named financial statement line items.

        Args:
            ticker (str): The ticker symbol.
            line_items (List[str]): Line item names, e.g. ``["revenue", "net_income"]``.
            end_date (str): Latest report period to include.
            period (str): Period type.
            limit (int): Maximum number of records.

        Returns:
            List[LineItem]: One record per report period.
        """
        pass

    @abstractmethod
    def fetch_insider_trades(
        self, ticker: str, end_date: str, start_date: Optional[str] = None, limit: int = 1000
    ) -> List[InsiderTrade]:
        """
        Fetch insider trades filed on or before ``end_date``.

        Args:
            ticker (str): The ticker symbol.
            end_date (str): Newest filing date.
            start_date (Optional[str]): Oldest filing date; ``None`` fetches a single page.
            limit (int): Page size.

        Returns:
            List[InsiderTrade]: Trades in page order.
        """
        pass

    @abstractmethod
    def fetch_company_news(
        self, ticker: str, end_date: str, start_date: Optional[str] = None, limit: int = 1000
    ) -> List[CompanyNews]:
        """
        Fetch news published on or before ``end_date``.

        Args:
            ticker (str): The ticker symbol.
            end_date (str): Newest publish date.
            start_date (Optional[str]): Oldest publish date; ``None`` fetches a single page.
            limit (int): Page size.

        Returns:
            List[CompanyNews]: Articles in page order.
        """
        pass

    @abstractmethod
    def fetch_company_facts(self, ticker: str) -> CompanyFacts:
        """
        Fetch descriptive company attributes including the live market cap.

        Args:
            ticker (str): The ticker symbol.

        Returns:
            CompanyFacts: The company facts.
        """
        pass
