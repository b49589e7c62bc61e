"""Financial Datasets (api.financialdatasets.ai) implementation of FinancialDataProvider."""

from typing import List, Optional

import pandas as pd
import requests

from findata.core.exceptions import APIStatusError
from findata.core.http import HTTPClient
from findata.core.logger import logger
from findata.models.datatypes import (
    CompanyFacts,
    CompanyNews,
    FinancialMetrics,
    InsiderTrade,
    LineItem,
    Price,
)
from findata.pipeline.normalizer import prices_to_df
from findata.providers.base import FinancialDataProvider
from findata.providers.decoders import (
    decode_company_facts,
    decode_company_news,
    decode_financial_metrics,
    decode_insider_trades,
    decode_line_items,
    decode_prices,
    read_json,
)
from findata.providers.pagination import paginate_backward

DEFAULT_PERIOD = "ttm"
DEFAULT_METRICS_LIMIT = 10
DEFAULT_PAGE_LIMIT = 1000


class FinancialDatasetsProvider(FinancialDataProvider):
    """Fetches and decodes every Financial Datasets endpoint over one HTTPClient.

    All calls are synchronous and stateless; records are built fresh per call.

    Args:
        client: Transport shared by every request this provider makes.
    """

    def __init__(self, client: HTTPClient) -> None:
        self.client = client

    # ── prices ──────────────────────────────────────────────────────────────

    def fetch_prices(self, ticker: str, start_date: str, end_date: str) -> List[Price]:
        logger.info(f"Fetching prices for {ticker} from {start_date} to {end_date}")
        params = {
            "ticker": ticker,
            "interval": "day",
            "interval_multiplier": 1,
            "start_date": start_date,
            "end_date": end_date,
        }
        response = self.client.get("/prices/", params=params, ticker=ticker)
        _raise_for_status(response, ticker)
        return decode_prices(read_json(response, ticker), ticker)

    def fetch_price_data(self, ticker: str, start_date: str, end_date: str) -> pd.DataFrame:
        """
        Fetch prices and normalize them into a date-sorted OHLCV DataFrame.

        Returns:
            pd.DataFrame: Columns Date, Open, Close, High, Low, Volume.
        """
        return prices_to_df(self.fetch_prices(ticker, start_date, end_date))

    # ── fundamentals ────────────────────────────────────────────────────────

    def fetch_financial_metrics(
        self,
        ticker: str,
        end_date: str,
        period: str = DEFAULT_PERIOD,
        limit: int = DEFAULT_METRICS_LIMIT,
    ) -> List[FinancialMetrics]:
        period = period or DEFAULT_PERIOD
        limit = limit or DEFAULT_METRICS_LIMIT
        logger.info(f"Fetching {period} financial metrics for {ticker} up to {end_date} (limit={limit})")
        params = {
            "ticker": ticker,
            "report_period_lte": end_date,
            "limit": limit,
            "period": period,
        }
        response = self.client.get("/financial-metrics/", params=params, ticker=ticker)
        _raise_for_status(response, ticker)
        return decode_financial_metrics(read_json(response, ticker), ticker)

    def search_line_items(
        self,
        ticker: str,
        line_items: List[str],
        end_date: str,
        period: str = DEFAULT_PERIOD,
        limit: int = DEFAULT_METRICS_LIMIT,
    ) -> List[LineItem]:
        period = period or DEFAULT_PERIOD
        limit = limit or DEFAULT_METRICS_LIMIT
        logger.info(f"Searching line items {line_items} for {ticker} up to {end_date}")
        body = {
            "tickers": [ticker],
            "line_items": list(line_items),
            "end_date": end_date,
            "period": period,
            "limit": limit,
        }
        response = self.client.post("/financials/search/line-items", json_body=body, ticker=ticker)
        _raise_for_status(response, ticker)
        results = decode_line_items(read_json(response, ticker), ticker)
        return results[:limit]

    def fetch_company_facts(self, ticker: str) -> CompanyFacts:
        logger.info(f"Fetching company facts for {ticker}")
        response = self.client.get("/company/facts/", params={"ticker": ticker}, ticker=ticker)
        _raise_for_status(response, ticker)
        return decode_company_facts(read_json(response, ticker), ticker)

    # ── paginated feeds ─────────────────────────────────────────────────────

    def fetch_insider_trades(
        self,
        ticker: str,
        end_date: str,
        start_date: Optional[str] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[InsiderTrade]:
        limit = limit or DEFAULT_PAGE_LIMIT

        def fetch_page(cursor: str) -> List[InsiderTrade]:
            params = {"ticker": ticker, "filing_date_lte": cursor}
            if start_date is not None:
                params["filing_date_gte"] = start_date
            params["limit"] = limit
            response = self.client.get("/insider-trades/", params=params, ticker=ticker)
            _raise_for_status(response, ticker)
            return decode_insider_trades(read_json(response, ticker), ticker)

        trades = paginate_backward(
            fetch_page, end_date, start_date, limit, date_of=lambda trade: trade.filing_date
        )
        logger.info(f"Fetched {len(trades)} insider trades for {ticker}")
        return trades

    def fetch_company_news(
        self,
        ticker: str,
        end_date: str,
        start_date: Optional[str] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[CompanyNews]:
        limit = limit or DEFAULT_PAGE_LIMIT

        def fetch_page(cursor: str) -> List[CompanyNews]:
            params = {"ticker": ticker, "end_date": cursor}
            if start_date is not None:
                params["start_date"] = start_date
            params["limit"] = limit
            response = self.client.get("/news/", params=params, ticker=ticker)
            _raise_for_status(response, ticker)
            return decode_company_news(read_json(response, ticker), ticker)

        news = paginate_backward(
            fetch_page, end_date, start_date, limit, date_of=lambda article: article.date
        )
        logger.info(f"Fetched {len(news)} news articles for {ticker}")
        return news


# ── helpers ───────────────────────────────────────────────────────────────────

def _raise_for_status(response: requests.Response, ticker: str) -> None:
    """Raise APIStatusError carrying the raw body for any non-200 response."""
    if response.status_code != 200:
        raise APIStatusError(ticker, response.status_code, response.text)
