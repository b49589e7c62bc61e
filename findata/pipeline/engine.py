"""Tool engine — the named actions an agent orchestrator calls, plus their JSON archive.

Actions:
  1. get_financial_metrics — metrics snapshot → output/metrics/
  2. get_company_news      — single-page news snapshot → output/news/
  3. get_market_cap        — live or historical market cap (not archived)
  4. analyze_fundamentals  — scorecard over metrics → output/analysis/

Each action fills in defaults for missing input, never raises on a data failure
(the error text is returned in the output's ``error`` field), and treats a failed
archive write as a warning.
"""

import datetime as dt
import json
import os
from dataclasses import asdict
from typing import Any, Callable, List, Optional

from findata.core.exceptions import FinancialDataError
from findata.core.logger import logger
from findata.models.datatypes import (
    CompanyNewsSnapshot,
    FinancialMetrics,
    FinancialMetricsSnapshot,
    FundamentalAnalysis,
    MarketCapQuote,
)
from findata.pipeline.fundamentals import analyze_fundamentals
from findata.pipeline.market_cap import get_market_cap
from findata.providers.base import FinancialDataProvider

_DATE_FMT = "%Y-%m-%d"
_FILE_TS_FMT = "%Y-%m-%d_%H-%M-%S"

METRICS_DEFAULT_LIMIT = 5
METRICS_MAX_LIMIT = 10
NEWS_DEFAULT_LIMIT = 10
NEWS_MAX_LIMIT = 20

EMPTY_SYMBOL_ERROR = "Ticker symbol must not be empty"


class ToolEngine:
    """Wraps a provider in orchestrator-facing actions.

    Args:
        provider: Data source used by every action.
        output_dir: Root of the snapshot archive.
        today: Returns the date used when the caller gives none.
        now: Returns the timestamp embedded in snapshot file names.
    """

    def __init__(
        self,
        provider: FinancialDataProvider,
        output_dir: str = "output",
        today: Optional[Callable[[], dt.date]] = None,
        now: Optional[Callable[[], dt.datetime]] = None,
    ) -> None:
        self.provider = provider
        self.output_dir = output_dir
        self.today = today or dt.date.today
        self.now = now or dt.datetime.now

    # ── public ────────────────────────────────────────────────────────────────

    def get_financial_metrics(
        self,
        symbol: str,
        date: str = "",
        period: str = "",
        limit: int = 0,
    ) -> FinancialMetricsSnapshot:
        """Fetch valuation, profitability, efficiency and leverage ratios for a ticker."""
        logger.info(f"get_financial_metrics: symbol={symbol} date={date} period={period} limit={limit}")
        if not symbol:
            logger.error("get_financial_metrics: empty symbol")
            return FinancialMetricsSnapshot(symbol="", date="", period="", error=EMPTY_SYMBOL_ERROR)

        date = date or self._today()
        period = period or "ttm"
        if limit <= 0:
            limit = METRICS_DEFAULT_LIMIT
        limit = min(limit, METRICS_MAX_LIMIT)

        try:
            metrics = self.provider.fetch_financial_metrics(symbol, date, period=period, limit=limit)
        except FinancialDataError as exc:
            logger.error(f"get_financial_metrics: fetch failed for {symbol}: {exc}")
            return FinancialMetricsSnapshot(
                symbol=symbol, date=date, period=period,
                error=f"Failed to fetch financial metrics: {exc}",
            )

        result = FinancialMetricsSnapshot(
            symbol=symbol, date=date, period=period,
            metrics=metrics, count=len(metrics),
        )
        self._save_snapshot("metrics", f"metrics_{symbol}_{period}", result)
        logger.info(f"get_financial_metrics: {symbol} returned {result.count} records")
        return result

    def get_company_news(self, symbol: str, date: str = "", limit: int = 0) -> CompanyNewsSnapshot:
        """Fetch the latest page of news for a ticker."""
        logger.info(f"get_company_news: symbol={symbol} date={date} limit={limit}")
        if not symbol:
            logger.error("get_company_news: empty symbol")
            return CompanyNewsSnapshot(symbol="", date="", error=EMPTY_SYMBOL_ERROR)

        date = date or self._today()
        if limit <= 0:
            limit = NEWS_DEFAULT_LIMIT
        limit = min(limit, NEWS_MAX_LIMIT)

        try:
            news = self.provider.fetch_company_news(symbol, date, start_date=None, limit=limit)
        except FinancialDataError as exc:
            logger.error(f"get_company_news: fetch failed for {symbol}: {exc}")
            return CompanyNewsSnapshot(symbol=symbol, date=date, error=f"Failed to fetch news: {exc}")

        result = CompanyNewsSnapshot(symbol=symbol, date=date, news=news, count=len(news))
        self._save_snapshot("news", f"news_{symbol}", result)
        logger.info(f"get_company_news: {symbol} returned {result.count} articles")
        return result

    def get_market_cap(self, symbol: str, date: str = "") -> MarketCapQuote:
        """Return the market cap of a ticker on a date (today by default)."""
        logger.info(f"get_market_cap: symbol={symbol} date={date}")
        if not symbol:
            logger.error("get_market_cap: empty symbol")
            return MarketCapQuote(symbol="", date="", error=EMPTY_SYMBOL_ERROR)

        date = date or self._today()
        try:
            market_cap = get_market_cap(self.provider, symbol, date, today=self.today())
        except FinancialDataError as exc:
            logger.error(f"get_market_cap: failed for {symbol}: {exc}")
            return MarketCapQuote(symbol=symbol, date=date, error=f"Failed to fetch market cap: {exc}")

        logger.info(f"get_market_cap: {symbol} on {date} = {market_cap:.2f}")
        return MarketCapQuote(symbol=symbol, date=date, market_cap=market_cap)

    def analyze_fundamentals(self, metrics: List[FinancialMetrics]) -> FundamentalAnalysis:
        """Score the newest metrics record and archive the result."""
        result = analyze_fundamentals(metrics)
        if result.error is None:
            self._save_snapshot("analysis", f"analysis_{metrics[0].ticker}", result)
        return result

    # ── internal ──────────────────────────────────────────────────────────────

    def _today(self) -> str:
        return self.today().strftime(_DATE_FMT)

    def _save_snapshot(self, kind: str, stem: str, payload: Any) -> Optional[str]:
        """Write ``payload`` to ``<output_dir>/<kind>/<stem>_<timestamp>.json``.

        Returns:
            The written path, or ``None`` if the write failed.
        """
        dir_path = os.path.join(self.output_dir, kind)
        file_path = os.path.join(dir_path, f"{stem}_{self.now().strftime(_FILE_TS_FMT)}.json")
        try:
            os.makedirs(dir_path, exist_ok=True)
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(asdict(payload), f, indent=2)
        except (OSError, TypeError) as exc:
            logger.warning(f"Could not save {kind} snapshot to {file_path}: {exc}")
            return None
        logger.info(f"Saved {kind} snapshot → {file_path}")
        return file_path
