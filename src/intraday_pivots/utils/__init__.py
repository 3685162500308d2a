"""Shared utilities for the intraday pivot pipeline."""

from .timezone import (
    UTC_TZ,
    BUCKET_MINUTES,
    BUCKET_KEY_FORMAT,
    to_utc,
    utc_day_start,
    truncate_to_bucket,
    bucket_key,
    bucket_keys,
    nanos_to_utc,
)

__all__ = [
    "UTC_TZ",
    "BUCKET_MINUTES",
    "BUCKET_KEY_FORMAT",
    "to_utc",
    "utc_day_start",
    "truncate_to_bucket",
    "bucket_key",
    "bucket_keys",
    "nanos_to_utc",
]
