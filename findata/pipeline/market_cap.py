"""Market capitalization from live company facts or historical TTM metrics."""

from datetime import date
from typing import Optional

from findata.core.exceptions import APIStatusError, RetriesExhaustedError, TransportError
from findata.core.logger import logger
from findata.providers.base import FinancialDataProvider

# Failures of the live facts lookup that degrade to a zero market cap
_FACTS_SOFT_FAILURES = (APIStatusError, RetriesExhaustedError, TransportError)


def get_market_cap(
    provider: FinancialDataProvider,
    ticker: str,
    end_date: str,
    today: Optional[date] = None,
) -> float:
    """
    Return the market cap of ``ticker`` as of ``end_date``.

    For today's date the live figure from company facts is used. If the facts
    endpoint is unreachable, stays rate limited or answers non-200, the failure is
    logged and ``0.0`` is returned. For any other date the most recent TTM metrics
    record on or before ``end_date`` is used, or ``0.0`` if there is none.

    Args:
        provider (FinancialDataProvider): Data source.
        ticker (str): The ticker symbol.
        end_date (str): Date in YYYY-MM-DD format.
        today (Optional[date]): Overrides the wall-clock date.

    Returns:
        float: Market capitalization in the reporting currency.
    """
    today = today or date.today()

    if end_date == today.strftime("%Y-%m-%d"):
        try:
            facts = provider.fetch_company_facts(ticker)
        except _FACTS_SOFT_FAILURES as exc:
            logger.warning(f"Company facts unavailable for {ticker} ({exc}); market cap set to 0")
            return 0.0
        return facts.market_cap

    metrics = provider.fetch_financial_metrics(ticker, end_date, period="ttm", limit=10)
    if not metrics:
        logger.warning(f"No TTM metrics for {ticker} on or before {end_date}; market cap set to 0")
        return 0.0
    return metrics[0].market_cap
