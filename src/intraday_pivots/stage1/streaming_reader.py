"""Streaming Parquet reader for intraday OHLCV data.

Provides memory-efficient batched reading of large Parquet files. Only one
batch is held in memory at a time.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator
import numpy as np
import pandas as pd
import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.parquet as pq

from ..utils.timezone import to_utc


# Column names for raw data (date in epoch nanoseconds, O, H, L, C, V)
RAW_COLUMNS = ["date", "open", "high", "low", "close", "volume"]


@dataclass(frozen=True)
class Row:
    """A single raw OHLCV record.

    ``date`` is the raw epoch-nanosecond value; 0 means unset.
    """

    date: int
    open: float
    high: float
    low: float
    close: float
    volume: int

    @property
    def timestamp(self) -> pd.Timestamp:
        return to_utc(self.date)


class StreamingReader:
    """Memory-efficient reader for Parquet OHLCV data."""

    def __init__(self, batch_size: int = 100000):
        """Initialize reader.

        Args:
            batch_size: Maximum number of rows per batch
        """
        self.batch_size = batch_size

    def iter_batches(self, path: str | Path) -> Iterator[pd.DataFrame]:
        """Iterate over a file in batches.

        Each call opens the file afresh, so a file can be re-read from the
        start by calling this again.

        Args:
            path: File path

        Yields:
            DataFrame batches with ``RAW_COLUMNS``
        """
        with pq.ParquetFile(path) as pf:
            self._check_schema(pf.schema_arrow, path)
            for batch in pf.iter_batches(batch_size=self.batch_size, columns=RAW_COLUMNS):
                yield self._batch_to_frame(batch)

    def read_file(self, path: str | Path) -> pd.DataFrame:
        """Read an entire file into one DataFrame."""
        frames = list(self.iter_batches(path))
        if not frames:
            return pd.DataFrame(columns=RAW_COLUMNS)
        return pd.concat(frames, ignore_index=True)

    @staticmethod
    def _check_schema(schema: pa.Schema, path: str | Path) -> None:
        missing = [c for c in RAW_COLUMNS if c not in schema.names]
        if missing:
            raise ValueError(f"{path}: missing required column(s) {missing}")

    @staticmethod
    def _batch_to_frame(batch: pa.RecordBatch) -> pd.DataFrame:
        """Convert an Arrow batch to pandas with an int64 ``date`` column.

        Parquet timestamp columns are converted to epoch nanoseconds and null
        dates become 0 (unset) so they are dropped by the row filter.
        """
        date_col = batch.column(batch.schema.get_field_index("date"))
        if pa.types.is_timestamp(date_col.type):
            date_col = date_col.cast(pa.timestamp("ns", tz=date_col.type.tz))
        date_col = pc.fill_null(date_col.cast(pa.int64()), 0)

        arrays = [date_col] + [
            batch.column(batch.schema.get_field_index(name)) for name in RAW_COLUMNS[1:]
        ]
        frame = pa.RecordBatch.from_arrays(arrays, names=RAW_COLUMNS).to_pandas()
        frame["date"] = frame["date"].astype(np.int64)
        return frame

    def get_file_stats(self, path: str | Path) -> dict:
        """Get statistics for a file by streaming it once.

        Args:
            path: File path

        Returns:
            Dictionary with file statistics
        """
        path = Path(path)

        row_count = 0
        min_ts = None
        max_ts = None

        with pq.ParquetFile(path) as pf:
            row_groups = pf.metadata.num_row_groups

        for batch in self.iter_batches(path):
            row_count += len(batch)
            dates = batch.loc[batch["date"] != 0, "date"]
            if dates.empty:
                continue

            batch_min = int(dates.min())
            batch_max = int(dates.max())
            if min_ts is None or batch_min < min_ts:
                min_ts = batch_min
            if max_ts is None or batch_max > max_ts:
                max_ts = batch_max

        return {
            "path": str(path),
            "row_count": row_count,
            "row_groups": row_groups,
            "min_timestamp": to_utc(min_ts) if min_ts is not None else None,
            "max_timestamp": to_utc(max_ts) if max_ts is not None else None,
            "file_size_mb": round(path.stat().st_size / (1024 * 1024), 2),
        }


def to_rows(frame: pd.DataFrame) -> Iterator[Row]:
    """Convert a raw batch into ``Row`` objects in frame order."""
    for rec in frame[RAW_COLUMNS].itertuples(index=False):
        yield Row(
            date=int(rec.date),
            open=float(rec.open),
            high=float(rec.high),
            low=float(rec.low),
            close=float(rec.close),
            volume=0 if pd.isna(rec.volume) else int(rec.volume),
        )

