"""Pipeline configuration.

Configuration is read from YAML::

    paths:
      input_data: data
      output: 5min_candles
    target_date: "2024-01-10"
    bucket_minutes: 5
    ingestion:
      batch_size: 100000
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml

from .utils.timezone import BUCKET_MINUTES


DEFAULT_INPUT_DIR = "data"
DEFAULT_OUTPUT_DIR = "5min_candles"
DEFAULT_TARGET_DATE = date(2024, 1, 10)
DEFAULT_BATCH_SIZE = 100000


@dataclass(frozen=True)
class PipelineConfig:
    input_dir: Path = Path(DEFAULT_INPUT_DIR)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)

    # Single UTC trading day to aggregate
    target_date: date = DEFAULT_TARGET_DATE

    # Candle width; only 5 is supported
    bucket_minutes: int = BUCKET_MINUTES

    # Rows per streamed batch
    batch_size: int = DEFAULT_BATCH_SIZE

    def __post_init__(self):
        if self.bucket_minutes != BUCKET_MINUTES:
            raise ValueError(
                f"Unsupported bucket_minutes={self.bucket_minutes}; only {BUCKET_MINUTES}-minute candles are supported"
            )
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be a positive integer, got {self.batch_size!r}")

    @classmethod
    def from_dict(cls, cfg: dict) -> "PipelineConfig":
        """Build a config from a parsed YAML mapping (validated first)."""
        validate_config(cfg)

        paths = cfg["paths"]
        return cls(
            input_dir=Path(paths["input_data"]),
            output_dir=Path(paths["output"]),
            target_date=parse_date(cfg.get("target_date", DEFAULT_TARGET_DATE)),
            bucket_minutes=int(cfg.get("bucket_minutes", BUCKET_MINUTES)),
            batch_size=int((cfg.get("ingestion") or {}).get("batch_size", DEFAULT_BATCH_SIZE)),
        )

    def with_overrides(
        self,
        input_dir: Optional[str | Path] = None,
        output_dir: Optional[str | Path] = None,
        target_date: Optional[str | date] = None,
    ) -> "PipelineConfig":
        """Return a copy with any non-None overrides applied."""
        updates: dict[str, Any] = {}
        if input_dir is not None:
            updates["input_dir"] = Path(input_dir)
        if output_dir is not None:
            updates["output_dir"] = Path(output_dir)
        if target_date is not None:
            updates["target_date"] = parse_date(target_date)
        return replace(self, **updates)


def parse_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` string (YAML may already give a ``date``)."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ValueError(f"Invalid target_date {value!r}; expected YYYY-MM-DD") from e


def load_config(config_path: str | Path) -> dict:
    """Load configuration from YAML file."""
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def validate_config(cfg: dict) -> None:
    """Validate pipeline configuration.

    Raises ``ValueError`` with a clear message on failure.
    """
    paths = cfg.get("paths")
    if not paths:
        raise ValueError("Config missing required 'paths' section")
    for key in ("input_data", "output"):
        if key not in paths:
            raise ValueError(f"Config 'paths' section missing required key '{key}'")

    if "target_date" in cfg:
        parse_date(cfg["target_date"])

    bucket_minutes = cfg.get("bucket_minutes", BUCKET_MINUTES)
    if bucket_minutes != BUCKET_MINUTES:
        raise ValueError(
            f"Unsupported bucket_minutes={bucket_minutes}; only {BUCKET_MINUTES}-minute candles are supported"
        )

    batch_size = (cfg.get("ingestion") or {}).get("batch_size", DEFAULT_BATCH_SIZE)
    if not isinstance(batch_size, int) or batch_size <= 0:
        raise ValueError(f"ingestion.batch_size must be a positive integer, got {batch_size!r}")
