"""Shared fixtures: tiny Parquet OHLCV files built on the fly."""

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
import pytest


def ns(ts: str) -> int:
    """Epoch nanoseconds for a UTC timestamp string."""
    return pd.Timestamp(ts, tz="UTC").value


def write_ohlcv(path: Path, rows: list[tuple], row_group_size: int | None = None) -> Path:
    """Write ``(date, open, high, low, close, volume)`` tuples to Parquet.

    ``date`` may be a timestamp string or raw epoch nanoseconds.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    dates = [ns(r[0]) if isinstance(r[0], str) else r[0] for r in rows]
    table = pa.table({
        "date": pa.array(dates, type=pa.int64()),
        "open": pa.array([float(r[1]) for r in rows], type=pa.float64()),
        "high": pa.array([float(r[2]) for r in rows], type=pa.float64()),
        "low": pa.array([float(r[3]) for r in rows], type=pa.float64()),
        "close": pa.array([float(r[4]) for r in rows], type=pa.float64()),
        "volume": pa.array([int(r[5]) for r in rows], type=pa.int64()),
    })
    pq.write_table(table, path, row_group_size=row_group_size)
    return path


# Rows in file order. Two rows of the 09:30 bucket arrive out of timestamp
# order; three rows fall outside 2024-01-10 or have an unset timestamp.
SAMPLE_ROWS = [
    ("2024-01-10 09:31:00", 100.0, 101.0, 99.0, 100.5, 10),
    ("2024-01-10 09:30:00", 100.2, 102.0, 99.5, 101.0, 20),
    ("2024-01-10 09:35:00", 101.0, 103.0, 100.0, 102.25, 30),
    ("2024-01-09 23:59:59.999999999", 1.0, 500.0, 0.5, 1.0, 1),
    ("2024-01-11 00:00:00", 1.0, 500.0, 0.5, 1.0, 1),
    (0, 1.0, 500.0, 0.5, 1.0, 1),
    ("2024-01-10 00:00:00", 98.0, 99.0, 97.0, 98.5, 40),
]

SAMPLE_CANDLES_CSV = (
    "Interval,Open,High,Low,Close\n"
    "2024-01-10 00:00,98.00,99.00,97.00,98.50\n"
    "2024-01-10 09:30,100.00,102.00,99.00,101.00\n"
    "2024-01-10 09:35,101.00,103.00,100.00,102.25\n"
)

# high=103, low=97, close=98.5 (last processed row)
SAMPLE_PIVOTS_CSV = (
    "Pivot,R1,R2,R3,S1,S2,S3\n"
    "99.50,101.79,103.21,105.50,97.21,95.79,93.50\n"
)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    return write_ohlcv(tmp_path / "data" / "ESH4.parquet", SAMPLE_ROWS)
