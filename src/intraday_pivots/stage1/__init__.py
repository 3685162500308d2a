"""Stage 1: Streaming ingestion, target-day filtering and 5-minute aggregation."""

from .file_scanner import FileScanner, DataFile
from .streaming_reader import StreamingReader, Row, RAW_COLUMNS, to_rows
from .row_filter import RowFilter
from .daily_extremes import DailyExtremes
from .bucket_aggregator import BucketAggregator, Candle

__all__ = [
    "FileScanner",
    "DataFile",
    "StreamingReader",
    "Row",
    "RAW_COLUMNS",
    "to_rows",
    "RowFilter",
    "DailyExtremes",
    "BucketAggregator",
    "Candle",
]
