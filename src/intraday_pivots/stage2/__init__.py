"""Stage 2: Fibonacci pivot points and CSV output."""

from .pivot_points import PivotPoints, calculate_pivot_points, FIB_RATIOS
from .csv_writer import CsvWriter, read_candles, read_pivot_points

__all__ = [
    "PivotPoints",
    "calculate_pivot_points",
    "FIB_RATIOS",
    "CsvWriter",
    "read_candles",
    "read_pivot_points",
]
