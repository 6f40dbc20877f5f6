"""
Configuration models and YAML I/O for stock-price-ingest.

This module defines the Pydantic models that map 1:1 to pricefetch.yaml,
plus helper functions for loading, saving, and auto-generating the config.

Key models:
- RunConfig: Top-level config (data + fetch + output + symbols + timezone).
- DataConfig: Where the reference CSV tables (and extra layouts) live.
- FetchConfig: HTTP and concurrency settings for the download step.
- OutputConfig: Output directory and format for prices and errors.

Key functions:
- load_config(path) -> RunConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
- generate_default_config(...) -> RunConfig: Build a config for a data directory.

Why Pydantic + YAML:
- Pydantic gives us strict validation, type coercion, and clear error messages.
- YAML is human-editable (the user will hand-edit symbols and worker counts).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator

from stock_price_ingest.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class DataConfig(BaseModel):
    """Reference data locations."""

    data_dir: str = Field(".", description="Directory holding the reference CSV files")
    sources_file: str = Field("source.csv", description="Source table, relative to data_dir")
    instruments_file: str = Field("stock.csv", description="Instrument table, relative to data_dir")
    layouts_dir: str | None = Field(
        None,
        description="Optional directory of extra layout YAML files (added to the built-in ones)",
    )


class FetchConfig(BaseModel):
    """Download settings."""

    max_workers: int | None = Field(
        8,
        ge=1,
        description="Concurrent downloads; null means one worker per instrument",
    )
    timeout_seconds: float | None = Field(
        None, gt=0, description="Per-request timeout; null waits indefinitely"
    )
    user_agent: str | None = Field(None, description="User-Agent header override")


class OutputConfig(BaseModel):
    """Output settings."""

    output_dir: str = Field("outputs/", description="Directory for output files")
    output_format: Literal["csv", "parquet"] = Field("csv", description="Price table format")
    errors_file: str = Field("errors.txt", description="Failure log, relative to output_dir")


class RunConfig(BaseModel):
    """Top-level configuration for stock-price-ingest.

    Maps 1:1 to pricefetch.yaml.
    """

    data: DataConfig = Field(default_factory=DataConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    symbols: list[str] = Field(
        default_factory=list,
        description=(
            "Symbols to download. If empty, every enabled instrument is "
            "downloaded; if set, the listed ones are, enabled or not."
        ),
    )
    timezone: str = Field("UTC", description="IANA timezone defining the run's 'today'")

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @property
    def sources_path(self) -> Path:
        return Path(self.data.data_dir) / self.data.sources_file

    @property
    def instruments_path(self) -> Path:
        return Path(self.data.data_dir) / self.data.instruments_file


def load_config(path: str | Path) -> RunConfig:
    """Load and validate pricefetch.yaml into a RunConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigurationError: If the config file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigurationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return RunConfig.model_validate(raw)


def save_config(config: RunConfig, path: str | Path) -> None:
    """Serialize a RunConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# stock-price-ingest configuration\n")
        f.write("# Edit this file to choose symbols, worker count, output format, etc.\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)


def generate_default_config(
    data_dir: str = ".",
    output_dir: str = "outputs/",
    symbols: list[str] | None = None,
) -> RunConfig:
    """Build a RunConfig for the reference tables in *data_dir*."""
    return RunConfig(
        data=DataConfig(data_dir=data_dir),
        output=OutputConfig(output_dir=output_dir),
        symbols=list(symbols or []),
    )
