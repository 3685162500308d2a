"""Pivot pipeline: Parquet files -> 5-minute candles + Fibonacci pivots.

For each input file, batches stream through the row filter; accepted rows
feed the daily extremes tracker and the bucket aggregator in the same order.
Once the file is exhausted, pivots are computed from the final extremes and
both tables are written.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import pyarrow as pa

from .config import PipelineConfig
from .stage1.file_scanner import FileScanner, DataFile
from .stage1.streaming_reader import StreamingReader
from .stage1.row_filter import RowFilter
from .stage1.daily_extremes import DailyExtremes
from .stage1.bucket_aggregator import BucketAggregator
from .stage2.pivot_points import calculate_pivot_points
from .stage2.csv_writer import CsvWriter


LOGGER = logging.getLogger(__name__)

# Failures isolated to a single file; anything else aborts the run.
FILE_ERRORS = (OSError, ValueError, KeyError, pa.ArrowException)


class PivotPipeline:
    """Complete per-file processing pipeline."""

    def __init__(self, config: PipelineConfig):
        """Initialize pipeline.

        Args:
            config: Pipeline configuration
        """
        self.config = config

        self.scanner = FileScanner(config.input_dir)
        self.reader = StreamingReader(batch_size=config.batch_size)
        self.row_filter = RowFilter(config.target_date)
        self.writer = CsvWriter(config.output_dir)

    def aggregate_file(self, path: str | Path) -> tuple[BucketAggregator, DailyExtremes, int]:
        """Stream one file through the filter and both aggregates.

        Returns:
            (bucket aggregator, daily extremes, rows read)
        """
        aggregator = BucketAggregator()
        extremes = DailyExtremes()
        rows_read = 0

        for batch in self.reader.iter_batches(path):
            rows_read += len(batch)
            accepted = self.row_filter.apply(batch)
            extremes.update_frame(accepted)
            aggregator.update_frame(accepted)

        LOGGER.debug("Reached end of file %s", path)
        return aggregator, extremes, rows_read

    def process_file(self, data_file: DataFile) -> dict:
        """Process one file and write its candle and pivot tables.

        Args:
            data_file: File to process

        Returns:
            Dictionary with processing statistics
        """
        start_time = datetime.now()
        LOGGER.info("Processing %s", data_file.path)

        aggregator, extremes, rows_read = self.aggregate_file(data_file.path)
        if extremes.is_empty:
            LOGGER.warning(
                "No rows for %s in %s; writing empty candle table",
                self.config.target_date,
                data_file.path,
            )

        pivots = calculate_pivot_points(*extremes.finalize())

        candles_path, pivots_path = self.writer.write_tables(aggregator, pivots, data_file.stem)
        LOGGER.info("Wrote %s and %s", candles_path, pivots_path)

        elapsed = (datetime.now() - start_time).total_seconds()

        return {
            "stem": data_file.stem,
            "path": str(data_file.path),
            "status": "success",
            "rows_read": rows_read,
            "rows_accepted": extremes.row_count,
            "buckets": len(aggregator),
            "pivot": pivots.pivot,
            "candles_path": str(candles_path),
            "pivots_path": str(pivots_path),
            "elapsed_seconds": round(elapsed, 2),
        }

    def run(self, files: Optional[Iterable[DataFile]] = None) -> dict[str, dict]:
        """Process every input file, isolating per-file failures.

        Args:
            files: Files to process (defaults to everything under input_dir)

        Returns:
            Dictionary with processing statistics keyed by input file path
        """
        if files is None:
            files = self.scanner.scan()
        files = list(files)
        LOGGER.info("Found %d file(s) under %s", len(files), self.config.input_dir)

        results = {}
        for i, data_file in enumerate(files):
            LOGGER.info("[%d/%d] %s", i + 1, len(files), data_file.filename)
            try:
                results[str(data_file.path)] = self.process_file(data_file)
            except FILE_ERRORS as e:
                LOGGER.exception("Error processing %s", data_file.path)
                results[str(data_file.path)] = {
                    "stem": data_file.stem,
                    "path": str(data_file.path),
                    "status": "failed",
                    "error": str(e),
                }

        return results


def run_pipeline(config: PipelineConfig) -> dict[str, dict]:
    """Run the pipeline for every file under ``config.input_dir``.

    Args:
        config: Pipeline configuration

    Returns:
        Dictionary with processing statistics keyed by input file path
    """
    pipeline = PivotPipeline(config)
    return pipeline.run()
