"""
stock-price-ingest: download market-data pages and extract daily prices.

Public API surface:

- ``run(config_path, ...)`` -- **recommended entry point**. Loads
  ``pricefetch.yaml``, the source/instrument tables and the page layouts,
  downloads every selected instrument concurrently, and exports
  ``price.csv`` (or ``.parquet``) plus ``errors.txt``. Returns a
  ``RunResult``.

- ``download_prices(instruments, sources, fetcher=...)`` -- the pipeline
  alone, for callers that already hold the tables in memory and want the
  records back rather than files on disk.

- ``today(timezone)`` -- the observation date stamped on records.
"""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from zoneinfo import ZoneInfo

from stock_price_ingest._pipeline import PageFetcher, RunResult, download_prices
from stock_price_ingest.config import RunConfig, load_config
from stock_price_ingest.export import export_results
from stock_price_ingest.fetch import Fetcher
from stock_price_ingest.layout_registry import load_all_layouts
from stock_price_ingest.models import ExtractionFailure, Instrument, PriceRecord, Source
from stock_price_ingest.reference import load_instruments, load_sources
from stock_price_ingest.strategy import build_extractors

__all__ = [
    "run",
    "run_config",
    "download_prices",
    "today",
    "RunResult",
    "Fetcher",
    "Source",
    "Instrument",
    "PriceRecord",
    "ExtractionFailure",
]

logger = logging.getLogger(__name__)


def today(timezone: str = "UTC") -> dt.date:
    """The current calendar date in *timezone*."""
    return dt.datetime.now(ZoneInfo(timezone)).date()


def run(
    config_path: str = "pricefetch.yaml",
    symbols: list[str] | None = None,
    fetcher: PageFetcher | None = None,
    export: bool = True,
) -> RunResult:
    """Load ``pricefetch.yaml`` and run the download. See ``run_config``."""
    logger.info("run() -- config_path=%s", config_path)
    return run_config(load_config(config_path), symbols=symbols, fetcher=fetcher, export=export)


def run_config(
    config: RunConfig,
    symbols: list[str] | None = None,
    fetcher: PageFetcher | None = None,
    export: bool = True,
) -> RunResult:
    """Run the full download for an already-built config.

    Orchestration:
      1. ``load_sources()`` / ``load_instruments()`` from ``config.data``.
      2. ``load_all_layouts()`` (built-in + optional ``layouts_dir``) ->
         ``build_extractors()``.
      3. ``download_prices()`` with the observation date in
         ``config.timezone``.
      4. If *export* is True, ``export_results()`` to ``config.output``.

    Args:
        config: The validated run config.
        symbols: Symbols to download; overrides ``config.symbols`` when
            given.
        fetcher: Page fetcher to use. If ``None``, a ``Fetcher`` is built
            from ``config.fetch`` and closed afterwards.
        export: Write outputs to disk.

    Returns:
        The ``RunResult``.

    Raises:
        FileNotFoundError: If a reference table does not exist.
        ConfigurationError: If the tables or layouts are inconsistent.
        ExportError: If the outputs cannot be written.
    """
    sources = load_sources(config.sources_path)
    instruments = load_instruments(config.instruments_path)
    logger.info("Loaded %d source(s), %d instrument(s)", len(sources), len(instruments))

    layouts = load_all_layouts()
    if config.data.layouts_dir:
        layouts += load_all_layouts(Path(config.data.layouts_dir))
    extractors = build_extractors(layouts)

    requested = symbols if symbols is not None else config.symbols
    observation_date = today(config.timezone)

    own_fetcher = fetcher is None
    active = Fetcher.from_config(config.fetch) if own_fetcher else fetcher
    try:
        result = download_prices(
            instruments,
            sources,
            fetcher=active,
            extractors=extractors,
            symbols=requested,
            max_workers=config.fetch.max_workers,
            observation_date=observation_date,
        )
    finally:
        if own_fetcher:
            active.close()

    if export:
        export_results(
            result.records,
            result.failures,
            output_dir=config.output.output_dir,
            output_format=config.output.output_format,
            errors_file=config.output.errors_file,
        )
    return result
