"""CSV output for candles and pivot points.

Each input file produces two tables in the output directory:

- ``<stem>.csv``: ``Interval,Open,High,Low,Close``, one row per bucket
- ``pivot_points_<stem>.csv``: ``Pivot,R1,R2,R3,S1,S2,S3``, exactly one row

Prices are written with two decimals. Files are first written to a temporary
path in the output directory and then renamed over the destination, so a
failure never leaves a truncated table behind. ``write_tables`` renders both
tables of a file before renaming either, so a failed render never leaves a new
candle table next to a stale pivot table.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pandas as pd

from ..stage1.bucket_aggregator import BucketAggregator, CANDLE_COLUMNS
from .pivot_points import PivotPoints, PIVOT_COLUMNS


CANDLE_HEADER = ["Interval", "Open", "High", "Low", "Close"]
PIVOT_HEADER = ["Pivot", "R1", "R2", "R3", "S1", "S2", "S3"]

FLOAT_FORMAT = "%.2f"


class CsvWriter:
    """Write candle and pivot tables to CSV."""

    def __init__(self, base_dir: str | Path):
        """Initialize writer.

        Args:
            base_dir: Output directory (created if missing)
        """
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def candles_path(self, stem: str) -> Path:
        return self.base_dir / f"{stem}.csv"

    def pivots_path(self, stem: str) -> Path:
        return self.base_dir / f"pivot_points_{stem}.csv"

    def _candle_frame(self, candles: BucketAggregator | pd.DataFrame) -> pd.DataFrame:
        if isinstance(candles, BucketAggregator):
            df = candles.to_frame()
        else:
            df = candles.sort_values("interval").reset_index(drop=True)
        return df[CANDLE_COLUMNS].set_axis(CANDLE_HEADER, axis=1)

    def _pivot_frame(self, pivots: PivotPoints) -> pd.DataFrame:
        return pd.DataFrame([pivots.as_dict()], columns=PIVOT_COLUMNS).set_axis(PIVOT_HEADER, axis=1)

    def write_candles(self, candles: BucketAggregator | pd.DataFrame, stem: str) -> Path:
        """Write the candle table sorted by interval."""
        output_path = self.candles_path(stem)
        self._write_atomic(self._candle_frame(candles), output_path)
        return output_path

    def write_pivot_points(self, pivots: PivotPoints, stem: str) -> Path:
        """Write the single-row pivot table."""
        output_path = self.pivots_path(stem)
        self._write_atomic(self._pivot_frame(pivots), output_path)
        return output_path

    def write_tables(
        self,
        candles: BucketAggregator | pd.DataFrame,
        pivots: PivotPoints,
        stem: str,
    ) -> tuple[Path, Path]:
        """Write the candle and pivot tables of one file as a pair.

        Both tables are rendered to temporary files first. Only when both
        renders succeed are they renamed into place, so an error while
        writing either table leaves both previous tables untouched.

        Args:
            candles: Aggregated candles for the file
            pivots: Pivot levels for the file
            stem: Output name stem

        Returns:
            Tuple of (candles path, pivots path)
        """
        targets = [
            (self._candle_frame(candles), self.candles_path(stem)),
            (self._pivot_frame(pivots), self.pivots_path(stem)),
        ]

        staged = []
        try:
            for df, output_path in targets:
                staged.append((self._write_temp(df, output_path), output_path))
            for tmp_path, output_path in staged:
                os.replace(tmp_path, output_path)
        except BaseException:
            for tmp_path, _ in staged:
                if tmp_path.exists():
                    tmp_path.unlink()
            raise

        return targets[0][1], targets[1][1]

    def _write_temp(self, df: pd.DataFrame, output_path: Path) -> Path:
        """Render a table to a temporary file beside ``output_path``."""
        fd, tmp_name = tempfile.mkstemp(
            dir=self.base_dir, prefix=f".{output_path.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", newline="") as handle:
                df.to_csv(
                    handle,
                    index=False,
                    float_format=FLOAT_FORMAT,
                    na_rep="NaN",
                    lineterminator="\n",
                )
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return tmp_path

    def _write_atomic(self, df: pd.DataFrame, output_path: Path) -> None:
        tmp_path = self._write_temp(df, output_path)
        try:
            os.replace(tmp_path, output_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise


def read_candles(path: str | Path) -> pd.DataFrame:
    """Read a candle table written by :class:`CsvWriter`."""
    return pd.read_csv(path, dtype={"Interval": "string"})


def read_pivot_points(path: str | Path) -> PivotPoints:
    """Read a pivot table written by :class:`CsvWriter`."""
    df = pd.read_csv(path)
    if len(df) != 1:
        raise ValueError(f"Expected exactly one pivot row in {path}, found {len(df)}")

    row = df.iloc[0]
    return PivotPoints(**{
        col: float(row[header]) for col, header in zip(PIVOT_COLUMNS, PIVOT_HEADER)
    })
