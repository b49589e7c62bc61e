"""JSON envelope decoders for the Financial Datasets API.

Every list endpoint wraps its records in a single key:

    /prices/                        → {"ticker": ..., "prices": [...]}
    /financial-metrics/             → {"financial_metrics": [...]}
    /financials/search/line-items   → {"search_results": [...]}
    /insider-trades/                → {"insider_trades": [...]}
    /news/                          → {"news": [...]}
    /company/facts/                 → {"company_facts": {...}}

A missing, ``null`` or empty list is a normal zero-result answer. Anything that is
not valid JSON, or whose envelope has the wrong shape, raises ResponseDecodeError.
"""

from dataclasses import fields
from typing import Any, Dict, List, Optional

import requests

from findata.core.exceptions import ResponseDecodeError
from findata.models.datatypes import (
    CompanyFacts,
    CompanyNews,
    FinancialMetrics,
    InsiderTrade,
    LineItem,
    Price,
)

_LINE_ITEM_HEADER = ("ticker", "report_period", "period", "currency")
_METRICS_HEADER = ("ticker", "report_period", "period", "currency")


def read_json(response: requests.Response, ticker: Optional[str] = None) -> Any:
    """
    Parse a response body as JSON.

    Args:
        response (requests.Response): A 200 response.
        ticker (Optional[str]): Ticker for error context.

    Returns:
        Any: The parsed payload.
    """
    try:
        return response.json()
    except ValueError as exc:
        raise ResponseDecodeError(f"Response body is not valid JSON: {exc}", ticker) from exc


def decode_prices(payload: Any, ticker: Optional[str] = None) -> List[Price]:
    """Decode ``{"prices": [...]}`` into Price records."""
    prices = []
    for raw in _records(payload, "prices", ticker):
        try:
            prices.append(Price(
                open=float(raw["open"]),
                close=float(raw["close"]),
                high=float(raw["high"]),
                low=float(raw["low"]),
                volume=int(raw["volume"]),
                time=str(raw["time"]),
            ))
        except (KeyError, TypeError, ValueError) as exc:
            raise ResponseDecodeError(f"Malformed price record {raw!r}: {exc}", ticker) from exc
    return prices


def decode_financial_metrics(payload: Any, ticker: Optional[str] = None) -> List[FinancialMetrics]:
    """Decode ``{"financial_metrics": [...]}``.

    Ratios declared ``Optional`` keep ``None`` when the server omits them; every
    other numeric field falls back to ``0.0``.
    """
    metrics = []
    for raw in _records(payload, "financial_metrics", ticker):
        kwargs: Dict[str, Any] = {key: raw.get(key) or "" for key in _METRICS_HEADER}
        for f in fields(FinancialMetrics):
            if f.name in _METRICS_HEADER:
                continue
            value = raw.get(f.name)
            if value is None:
                kwargs[f.name] = f.default
                continue
            try:
                kwargs[f.name] = float(value)
            except (TypeError, ValueError) as exc:
                raise ResponseDecodeError(
                    f"Metric {f.name} has non-numeric value {value!r}", ticker
                ) from exc
        metrics.append(FinancialMetrics(**kwargs))
    return metrics


def decode_line_items(payload: Any, ticker: Optional[str] = None) -> List[LineItem]:
    """Decode ``{"search_results": [...]}`` into LineItem records.

    Each result is read twice: once for the fixed header and once as a plain
    mapping. The header keys are dropped from the mapping and whatever remains
    becomes ``LineItem.data``.
    """
    items = []
    for raw in _records(payload, "search_results", ticker):
        extra = dict(raw)
        for key in _LINE_ITEM_HEADER:
            extra.pop(key, None)
        items.append(LineItem(
            ticker=raw.get("ticker") or "",
            report_period=raw.get("report_period") or "",
            period=raw.get("period") or "",
            currency=raw.get("currency") or "",
            data=extra,
        ))
    return items


def decode_insider_trades(payload: Any, ticker: Optional[str] = None) -> List[InsiderTrade]:
    """Decode ``{"insider_trades": [...]}``."""
    trades = []
    for raw in _records(payload, "insider_trades", ticker):
        kwargs = {f.name: raw.get(f.name) for f in fields(InsiderTrade)}
        kwargs["ticker"] = kwargs["ticker"] or ""
        kwargs["filing_date"] = kwargs["filing_date"] or ""
        trades.append(InsiderTrade(**kwargs))
    return trades


def decode_company_news(payload: Any, ticker: Optional[str] = None) -> List[CompanyNews]:
    """Decode ``{"news": [...]}``."""
    news = []
    for raw in _records(payload, "news", ticker):
        news.append(CompanyNews(
            ticker=raw.get("ticker") or "",
            title=raw.get("title") or "",
            author=raw.get("author") or "",
            source=raw.get("source") or "",
            date=raw.get("date") or "",
            url=raw.get("url") or "",
            sentiment=raw.get("sentiment"),
        ))
    return news


def decode_company_facts(payload: Any, ticker: Optional[str] = None) -> CompanyFacts:
    """Decode ``{"company_facts": {...}}``; ``null`` fields keep their defaults."""
    if not isinstance(payload, dict) or not isinstance(payload.get("company_facts"), dict):
        raise ResponseDecodeError("Response has no company_facts object", ticker)
    raw = payload["company_facts"]
    kwargs = {
        f.name: raw[f.name]
        for f in fields(CompanyFacts)
        if raw.get(f.name) is not None
    }
    kwargs.setdefault("ticker", ticker or "")
    try:
        facts = CompanyFacts(**kwargs)
        facts.market_cap = float(facts.market_cap)
    except (TypeError, ValueError) as exc:
        raise ResponseDecodeError(f"Malformed company facts: {exc}", ticker) from exc
    return facts


def _records(payload: Any, key: str, ticker: Optional[str]) -> List[Dict[str, Any]]:
    """Return the record list stored under ``key``; absent or null means empty."""
    if not isinstance(payload, dict):
        raise ResponseDecodeError(
            f"Expected a JSON object, got {type(payload).__name__}", ticker
        )
    records = payload.get(key)
    if records is None:
        return []
    if not isinstance(records, list):
        raise ResponseDecodeError(f"Field {key!r} is not a list", ticker)
    for record in records:
        if not isinstance(record, dict):
            raise ResponseDecodeError(f"Entry in {key!r} is not an object: {record!r}", ticker)
    return records
