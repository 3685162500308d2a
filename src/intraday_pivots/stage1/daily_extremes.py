"""Running daily high / low / close for the target day."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import pandas as pd

from .streaming_reader import Row


@dataclass
class DailyExtremes:
    """Running extremes over all accepted rows of one file run.

    ``high`` and ``low`` are None until the first accepted row, so a
    legitimate zero or negative low is never mistaken for "unset".
    ``close`` is the close of the last row processed, not the row with the
    latest timestamp.
    """

    high: Optional[float] = None
    low: Optional[float] = None
    close: float = 0.0
    row_count: int = 0

    def update(self, row: Row) -> None:
        self._fold(row.high, row.low, row.close)

    def update_frame(self, frame: pd.DataFrame) -> None:
        """Apply :meth:`update` to every row of a filtered batch, in order."""
        for high, low, close in zip(
            frame["high"].to_numpy(),
            frame["low"].to_numpy(),
            frame["close"].to_numpy(),
        ):
            self._fold(float(high), float(low), float(close))

    def _fold(self, high: float, low: float, close: float) -> None:
        if self.high is None or high > self.high:
            self.high = high
        if self.low is None or low < self.low:
            self.low = low
        self.close = close
        self.row_count += 1

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0

    def finalize(self) -> tuple[float, float, float]:
        """Freeze the (high, low, close) triple for pivot calculation.

        Unset extremes fall back to 0.0 so an empty day still yields a
        defined (all-zero) pivot row.
        """
        high = self.high if self.high is not None else 0.0
        low = self.low if self.low is not None else 0.0
        return high, low, self.close
