"""Converts raw Price records into a date-sorted OHLCV DataFrame."""

import re
from typing import List

import pandas as pd

from findata.core.exceptions import ResponseDecodeError
from findata.models.datatypes import Price

PRICE_COLUMNS = ["Date", "Open", "Close", "High", "Low", "Volume"]

# RFC 3339 date-time (up to nanosecond fractions, mandatory offset) or a bare date
_RFC3339_DATETIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,9})?(Z|[+-]\d{2}:\d{2})$"
)
_PLAIN_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_timestamp(value: str) -> pd.Timestamp:
    """
    Parse an RFC 3339 date-time, falling back to a ``YYYY-MM-DD`` date at midnight UTC.

    Fractional seconds are kept down to the nanosecond.

    Args:
        value (str): Timestamp from a price record.

    Returns:
        pd.Timestamp: Timezone-aware timestamp in UTC.

    Raises:
        ResponseDecodeError: ``value`` matches neither format or is not a real date.
    """
    if not (_RFC3339_DATETIME.match(value) or _PLAIN_DATE.match(value)):
        raise ResponseDecodeError(f"Unparseable price timestamp: {value!r}")
    try:
        return pd.to_datetime(value, utc=True, format="ISO8601")
    except (ValueError, OverflowError) as exc:
        raise ResponseDecodeError(f"Unparseable price timestamp: {value!r}") from exc


def prices_to_df(prices: List[Price]) -> pd.DataFrame:
    """
    Build an OHLCV DataFrame sorted ascending by Date.

    The sort is stable, so bars with equal timestamps keep their input order. A
    single bad timestamp aborts the whole conversion.

    Args:
        prices (List[Price]): Bars in any order.

    Returns:
        pd.DataFrame: Columns Date (UTC), Open, Close, High, Low, Volume.
    """
    if not prices:
        return pd.DataFrame(columns=PRICE_COLUMNS)

    dates = [parse_timestamp(price.time) for price in prices]

    df = pd.DataFrame({
        "Date": pd.to_datetime(dates, utc=True),
        "Open": [price.open for price in prices],
        "Close": [price.close for price in prices],
        "High": [price.high for price in prices],
        "Low": [price.low for price in prices],
        "Volume": pd.Series([price.volume for price in prices], dtype="int64"),
    })

    df = df.sort_values("Date", kind="mergesort").reset_index(drop=True)
    return df[PRICE_COLUMNS]
