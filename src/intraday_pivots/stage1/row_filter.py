"""Target-day row filter.

A row is accepted iff its timestamp is set (non-zero) and its UTC calendar
date equals the target date. Prices are not inspected.
"""

from __future__ import annotations

from datetime import date
import pandas as pd

from ..utils.timezone import nanos_to_utc, to_utc, utc_day_start
from .streaming_reader import Row


class RowFilter:
    """Accept rows belonging to a single UTC trading day."""

    def __init__(self, target_date: date):
        self.target_date = target_date
        self._day_start = utc_day_start(target_date)

    def accepts(self, row: Row) -> bool:
        """Return True if ``row`` has a usable timestamp on the target day."""
        if not row.date:
            return False
        return to_utc(row.date).normalize() == self._day_start

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        """Vectorised :meth:`accepts` over a raw batch.

        Args:
            frame: Batch with an int64 ``date`` column

        Returns:
            Boolean Series aligned with ``frame``
        """
        valid = frame["date"] != 0
        timestamps = nanos_to_utc(frame["date"])
        return valid & (timestamps.dt.normalize() == self._day_start)

    def apply(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Return the accepted rows of ``frame`` with a UTC ``timestamp`` column.

        Row order is preserved.
        """
        keep = self.mask(frame)
        accepted = frame.loc[keep].copy()
        accepted["timestamp"] = nanos_to_utc(accepted["date"])
        return accepted
