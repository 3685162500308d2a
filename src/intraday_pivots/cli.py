"""Command-line interface for the intraday pivot pipeline.

Usage:
    intraday-pivots run --config config/default.yaml
    intraday-pivots run --input data --output 5min_candles --date 2024-01-10
    intraday-pivots info --input data
    intraday-pivots pivots --high 110 --low 90 --close 100
"""

import logging
from pathlib import Path
from typing import Optional
import typer

from .config import PipelineConfig, load_config

app = typer.Typer(
    name="intraday-pivots",
    help="5-minute candles and Fibonacci pivot points from Parquet OHLCV data",
    add_completion=False,
)


def _configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(levelname)s %(message)s",
    )


def _build_config(
    config: Optional[str],
    input_dir: Optional[str],
    output_dir: Optional[str],
    target_date: Optional[str],
) -> PipelineConfig:
    """Load the YAML config (if any) and apply command-line overrides."""
    try:
        if config is not None:
            cfg = PipelineConfig.from_dict(load_config(config))
        else:
            cfg = PipelineConfig()
        return cfg.with_overrides(
            input_dir=input_dir,
            output_dir=output_dir,
            target_date=target_date,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.command()
def run(
    config: Optional[str] = typer.Option(
        None,
        "--config", "-c",
        help="Path to configuration file",
    ),
    input_dir: Optional[str] = typer.Option(
        None,
        "--input", "-i",
        help="Input directory searched for Parquet files",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output", "-o",
        help="Output directory for CSV tables",
    ),
    target_date: Optional[str] = typer.Option(
        None,
        "--date", "-d",
        help="Target UTC trading day (YYYY-MM-DD)",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR",
    ),
):
    """Aggregate every Parquet file into 5-minute candles and pivot points."""
    from .pipeline import run_pipeline

    _configure_logging(log_level)
    cfg = _build_config(config, input_dir, output_dir, target_date)

    typer.echo(f"Input: {cfg.input_dir}")
    typer.echo(f"Output: {cfg.output_dir}")
    typer.echo(f"Target date: {cfg.target_date.isoformat()}")

    try:
        results = run_pipeline(cfg)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    failed = 0
    for stats in results.values():
        if stats["status"] == "success":
            typer.echo(
                f"  {stats['stem']}: {stats['rows_accepted']:,}/{stats['rows_read']:,} rows, "
                f"{stats['buckets']} candles, pivot {stats['pivot']:.2f}"
            )
        else:
            failed += 1
            typer.echo(f"  {stats['path']}: FAILED ({stats.get('error', 'unknown error')})", err=True)

    typer.echo(f"\nProcessed {len(results) - failed}/{len(results)} files")
    if failed:
        raise typer.Exit(code=1)


@app.command()
def info(
    input_dir: str = typer.Option(
        "data",
        "--input", "-i",
        help="Input directory",
    ),
    details: bool = typer.Option(
        False,
        "--details",
        help="Stream each file to report row counts and time range",
    ),
):
    """Show information about available data."""
    from .stage1 import FileScanner, StreamingReader

    scanner = FileScanner(input_dir)
    try:
        stats = scanner.get_file_stats()
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"\nData under {stats['root_dir']}:")
    typer.echo(f"  Files: {stats['file_count']}")
    typer.echo(f"  Size: {stats['total_size_mb']:.1f} MB")

    reader = StreamingReader()
    for path in stats["files"]:
        if not details:
            typer.echo(f"  {Path(path).name}")
            continue
        file_stats = reader.get_file_stats(path)
        typer.echo(
            f"  {Path(path).name}: {file_stats['row_count']:,} rows, "
            f"{file_stats['min_timestamp']} -> {file_stats['max_timestamp']}"
        )


@app.command()
def pivots(
    high: float = typer.Option(..., "--high", help="Day high"),
    low: float = typer.Option(..., "--low", help="Day low"),
    close: float = typer.Option(..., "--close", help="Day close"),
):
    """Print Fibonacci pivot points for a given high, low and close."""
    from .stage2 import calculate_pivot_points

    points = calculate_pivot_points(high, low, close)
    for name, value in points.as_dict().items():
        typer.echo(f"{name.upper()}: {value:.2f}")


def main() -> None:
    """Entrypoint for the console script."""
    app()


if __name__ == "__main__":
    main()
