"""UTC + bucket utilities for intraday OHLCV data.

Design goals:
- Raw timestamps are integer nanoseconds since the Unix epoch and are always
  interpreted as UTC. No other timezone handling is performed.
- The trading day is the UTC calendar date.
- Candle buckets are half-open 5-minute windows ``[start, start + 5min)``
  keyed by their start formatted to whole minutes.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Union
import numpy as np
import pytz
import pandas as pd

UTC_TZ = pytz.UTC

# Candle width. Only 5-minute buckets are supported.
BUCKET_MINUTES = 5
BUCKET_FREQ = f"{BUCKET_MINUTES}min"

# Bucket keys sort lexicographically in chronological order.
BUCKET_KEY_FORMAT = "%Y-%m-%d %H:%M"


def to_utc(dt: Union[datetime, pd.Timestamp, int]) -> pd.Timestamp:
    """Convert a timestamp to a tz-aware UTC ``pd.Timestamp``.

    Args:
        dt: Nanoseconds since epoch, naive datetime (assumed UTC) or
            timezone-aware datetime

    Returns:
        Timestamp in UTC
    """
    if isinstance(dt, (int, np.integer)) and not isinstance(dt, bool):
        return pd.Timestamp(dt, unit="ns", tz=UTC_TZ)

    ts = pd.Timestamp(dt)
    if ts.tz is None:
        return ts.tz_localize(UTC_TZ)
    return ts.tz_convert(UTC_TZ)


def utc_day_start(day: date) -> pd.Timestamp:
    """Midnight UTC at the start of ``day``."""
    return pd.Timestamp(day.year, day.month, day.day, tz=UTC_TZ)


def truncate_to_bucket(ts: pd.Timestamp) -> pd.Timestamp:
    """Floor a UTC timestamp to the start of its 5-minute bucket."""
    return to_utc(ts).floor(BUCKET_FREQ)


def bucket_key(ts: pd.Timestamp) -> str:
    """Bucket key (``YYYY-MM-DD HH:MM``) for a single timestamp.

    Examples:
        09:30:00            -> "... 09:30"
        09:34:59.999999999  -> "... 09:30"
        09:35:00            -> "... 09:35"
    """
    return truncate_to_bucket(ts).strftime(BUCKET_KEY_FORMAT)


def bucket_keys(timestamps: pd.Series) -> pd.Series:
    """Vectorised :func:`bucket_key` for a Series of UTC timestamps."""
    return timestamps.dt.floor(BUCKET_FREQ).dt.strftime(BUCKET_KEY_FORMAT)


def nanos_to_utc(nanos: pd.Series) -> pd.Series:
    """Convert a Series of epoch nanoseconds to tz-aware UTC timestamps.

    Null entries become ``NaT``.
    """
    return pd.to_datetime(nanos, unit="ns", utc=True)
