"""Intraday pivots: 5-minute candles and Fibonacci pivot points from Parquet OHLCV data."""

__version__ = "0.1.0"
