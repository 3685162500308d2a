"""Tests for Stage 1: file discovery, streaming reads and the target-day filter."""

from datetime import date

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from intraday_pivots.stage1.file_scanner import FileScanner
from intraday_pivots.stage1.streaming_reader import StreamingReader, Row, RAW_COLUMNS, to_rows
from intraday_pivots.stage1.row_filter import RowFilter

from conftest import ns, write_ohlcv, SAMPLE_ROWS


TARGET = date(2024, 1, 10)


def make_row(ts, close: float = 1.0) -> Row:
    raw = ns(ts) if isinstance(ts, str) else ts
    return Row(date=raw, open=1.0, high=1.0, low=1.0, close=close, volume=1)


class TestFileScanner:
    """Tests for Parquet file discovery."""

    def test_scan_recursive_and_sorted(self, tmp_path):
        """Nested Parquet files are found in path order; other files ignored."""
        root = tmp_path / "data"
        write_ohlcv(root / "b" / "NQ.parquet", SAMPLE_ROWS[:1])
        write_ohlcv(root / "ES.parquet", SAMPLE_ROWS[:1])
        (root / "notes.txt").write_text("ignore me")
        (root / "ES.parquet.bak").write_text("ignore me")

        files = FileScanner(root).scan()

        assert [f.filename for f in files] == ["ES.parquet", "NQ.parquet"]
        assert [f.stem for f in files] == ["ES", "NQ"]
        assert all(f.file_size > 0 for f in files)
        assert [f.path for f in FileScanner(root).iter_files()] == [f.path for f in files]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileScanner(tmp_path / "nope").scan()

    def test_file_stats(self, sample_file):
        stats = FileScanner(sample_file.parent).get_file_stats()
        assert stats["file_count"] == 1
        assert stats["files"] == [str(sample_file)]


class TestStreamingReader:
    """Tests for batched Parquet reads."""

    def test_batches_respect_batch_size(self, sample_file):
        reader = StreamingReader(batch_size=3)
        sizes = [len(b) for b in reader.iter_batches(sample_file)]
        assert sizes == [3, 3, 1]

    def test_batch_schema_and_order(self, sample_file):
        """Batches carry the raw columns in file order with int64 dates."""
        df = StreamingReader(batch_size=2).read_file(sample_file)

        assert list(df.columns) == RAW_COLUMNS
        assert df["date"].dtype == "int64"
        assert df["date"].iloc[0] == ns("2024-01-10 09:31:00")
        assert df["date"].iloc[5] == 0
        assert df["close"].tolist() == [r[4] for r in SAMPLE_ROWS]

    def test_restartable(self, sample_file):
        """Re-reading a file starts again from the first row."""
        reader = StreamingReader(batch_size=4)
        first = pd.concat(reader.iter_batches(sample_file), ignore_index=True)
        second = pd.concat(reader.iter_batches(sample_file), ignore_index=True)
        pd.testing.assert_frame_equal(first, second)

    def test_timestamp_typed_date_column(self, tmp_path):
        """A Parquet timestamp column is converted to epoch nanoseconds."""
        path = tmp_path / "ts.parquet"
        stamps = pd.to_datetime(["2024-01-10 09:30:00", "2024-01-10 09:34:59"], utc=True)
        table = pa.table({
            "date": pa.array(stamps, type=pa.timestamp("us", tz="UTC")),
            "open": [1.0, 2.0],
            "high": [1.0, 2.0],
            "low": [1.0, 2.0],
            "close": [1.0, 2.0],
            "volume": [1, 2],
        })
        pq.write_table(table, path)

        df = StreamingReader().read_file(path)
        assert df["date"].tolist() == [ns("2024-01-10 09:30:00"), ns("2024-01-10 09:34:59")]

    def test_null_dates_become_unset(self, tmp_path):
        path = tmp_path / "nulls.parquet"
        table = pa.table({
            "date": pa.array([ns("2024-01-10 09:30:00"), None], type=pa.int64()),
            "open": [1.0, 2.0],
            "high": [1.0, 2.0],
            "low": [1.0, 2.0],
            "close": [1.0, 2.0],
            "volume": [1, 2],
        })
        pq.write_table(table, path)

        df = StreamingReader().read_file(path)
        assert df["date"].tolist() == [ns("2024-01-10 09:30:00"), 0]

    def test_missing_column_raises(self, tmp_path):
        path = tmp_path / "bad.parquet"
        pq.write_table(pa.table({"date": [1], "open": [1.0]}), path)

        with pytest.raises(ValueError, match="missing required column"):
            list(StreamingReader().iter_batches(path))

    def test_to_rows(self, sample_file):
        df = StreamingReader().read_file(sample_file)
        rows = list(to_rows(df))

        assert len(rows) == len(SAMPLE_ROWS)
        assert rows[0].timestamp == pd.Timestamp("2024-01-10 09:31:00", tz="UTC")
        assert rows[2].close == 102.25
        assert rows[2].volume == 30

    def test_file_stats(self, sample_file):
        stats = StreamingReader(batch_size=2).get_file_stats(sample_file)
        assert stats["row_count"] == len(SAMPLE_ROWS)
        assert stats["min_timestamp"] == pd.Timestamp("2024-01-09 23:59:59.999999999", tz="UTC")
        assert stats["max_timestamp"] == pd.Timestamp("2024-01-11 00:00:00", tz="UTC")


class TestRowFilter:
    """Tests for the target-day filter."""

    def test_day_boundaries(self):
        """Only rows on the target UTC date pass, however close to midnight."""
        f = RowFilter(TARGET)
        assert f.accepts(make_row("2024-01-10 00:00:00"))
        assert f.accepts(make_row("2024-01-10 23:59:59.999999999"))
        assert not f.accepts(make_row("2024-01-09 23:59:59.999999999"))
        assert not f.accepts(make_row("2024-01-11 00:00:00"))

    def test_zero_timestamp_rejected(self):
        """An unset timestamp is rejected even when the target is the epoch day."""
        f = RowFilter(date(1970, 1, 1))
        assert not f.accepts(make_row(0))
        assert f.accepts(make_row(1))

    def test_mask_matches_accepts(self, sample_file):
        df = StreamingReader().read_file(sample_file)
        f = RowFilter(TARGET)

        expected = [f.accepts(r) for r in to_rows(df)]
        assert f.mask(df).tolist() == expected
        assert expected == [True, True, True, False, False, False, True]

    def test_mask_epoch_day(self):
        frame = pd.DataFrame({
            "date": [0, 1, ns("1970-01-02 00:00:00")],
            "open": 1.0, "high": 1.0, "low": 1.0, "close": 1.0, "volume": 1,
        })
        assert RowFilter(date(1970, 1, 1)).mask(frame).tolist() == [False, True, False]

    def test_apply_preserves_order_and_adds_timestamp(self, sample_file):
        df = StreamingReader().read_file(sample_file)
        accepted = RowFilter(TARGET).apply(df)

        assert accepted["close"].tolist() == [100.5, 101.0, 102.25, 98.5]
        assert str(accepted["timestamp"].dt.tz) == "UTC"
        assert accepted["timestamp"].iloc[1] == pd.Timestamp("2024-01-10 09:30:00", tz="UTC")
