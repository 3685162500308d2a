"""5-minute candle aggregation for intraday OHLCV data.

Folds accepted rows into one OHLC candle per 5-minute UTC bucket.

Bucket schema:
| Key                | Covers                                   |
|--------------------|------------------------------------------|
| 2024-01-10 09:30   | [09:30:00, 09:35:00)                     |
| 2024-01-10 09:35   | [09:35:00, 09:40:00)                     |

Update rules per bucket:
- open:  open of the first row processed for the bucket
- high:  max high
- low:   min low
- close: close of the last row processed (input order, not timestamp order)
"""

from __future__ import annotations

from dataclasses import dataclass
import pandas as pd

from ..utils.timezone import bucket_key, bucket_keys
from .streaming_reader import Row


CANDLE_COLUMNS = ["interval", "open", "high", "low", "close"]


@dataclass
class Candle:
    """Mutable OHLC state for one bucket."""

    open: float
    high: float
    low: float
    close: float


class BucketAggregator:
    """Aggregate accepted rows into 5-minute OHLC candles.

    The aggregator owns its candle map; create one per file run.
    """

    def __init__(self):
        """Initialize aggregator."""
        self.candles: dict[str, Candle] = {}

    def __len__(self) -> int:
        return len(self.candles)

    def update(self, row: Row) -> None:
        """Fold a single accepted row into its bucket."""
        self._fold(bucket_key(row.timestamp), row.open, row.high, row.low, row.close)

    def update_frame(self, frame: pd.DataFrame) -> None:
        """Fold every row of a filtered batch into its bucket, in frame order.

        Args:
            frame: Accepted rows with a UTC ``timestamp`` column
        """
        if frame.empty:
            return

        keys = bucket_keys(frame["timestamp"])
        for key, open_, high, low, close in zip(
            keys.to_numpy(),
            frame["open"].to_numpy(),
            frame["high"].to_numpy(),
            frame["low"].to_numpy(),
            frame["close"].to_numpy(),
        ):
            self._fold(key, float(open_), float(high), float(low), float(close))

    def _fold(self, key: str, open_: float, high: float, low: float, close: float) -> None:
        candle = self.candles.get(key)
        if candle is None:
            self.candles[key] = Candle(open=open_, high=high, low=low, close=close)
            return

        if high > candle.high:
            candle.high = high
        if low < candle.low:
            candle.low = low
        candle.close = close

    def to_frame(self) -> pd.DataFrame:
        """Return candles as a DataFrame sorted by bucket key.

        Returns:
            DataFrame with columns interval, open, high, low, close
        """
        records = [
            {"interval": key, "open": c.open, "high": c.high, "low": c.low, "close": c.close}
            for key, c in sorted(self.candles.items())
        ]
        return pd.DataFrame(records, columns=CANDLE_COLUMNS)
