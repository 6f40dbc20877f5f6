"""
Internal pipeline orchestration for stock-price-ingest.

Pairs each instrument with its source, downloads and extracts every page
concurrently, and aggregates the outcomes into two ordered lists.

Steps:
  1. ``select_instruments()`` -- filter (enabled / requested symbols) and
     sort by symbol. This order is the output order.
  2. ``resolve_sources()`` -- every instrument must have a source. A
     missing one is a ``ConfigurationError`` raised before anything is
     downloaded.
  3. One ``process_instrument()`` task per instrument on a thread pool.
     Tasks share nothing mutable; each returns either a ``PriceRecord``
     or an ``ExtractionFailure``.
  4. Results are collected future by future in submission order, so the
     aggregated lists follow step 1's order whatever order the downloads
     finish in.

This module is **not** part of the public API; ``download_prices`` and
``RunResult`` are re-exported from the package.
"""

from __future__ import annotations

import datetime as dt
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Protocol

from stock_price_ingest.exceptions import ConfigurationError, ExtractionError
from stock_price_ingest.models import ExtractionFailure, Instrument, PriceRecord, Source
from stock_price_ingest.parsers.base import BaseExtractor
from stock_price_ingest.strategy import build_extractors, select_extractor

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class PageFetcher(Protocol):
    """Anything that can turn a URL into a document (``Fetcher`` or a test fake)."""

    def fetch(self, url: str) -> str: ...


@dataclass
class RunResult:
    """Output of one pipeline run.

    Attributes:
        records: Successful extractions, in symbol order.
        failures: One entry per failed instrument, in symbol order.
        observation_date: The date stamped on every record.
    """

    records: list[PriceRecord] = field(default_factory=list)
    failures: list[ExtractionFailure] = field(default_factory=list)
    observation_date: dt.date | None = None

    @property
    def succeeded(self) -> int:
        return len(self.records)

    @property
    def failed(self) -> int:
        return len(self.failures)


def select_instruments(
    instruments: list[Instrument],
    symbols: list[str] | None = None,
) -> list[Instrument]:
    """Choose the instruments for this run, sorted by symbol.

    If *symbols* is non-empty, exactly the instruments with those symbols
    are chosen, whether enabled or not. Otherwise every enabled
    instrument is chosen.
    """
    if symbols:
        requested = set(symbols)
        chosen = [inst for inst in instruments if inst.symbol in requested]
        unmatched = requested - {inst.symbol for inst in chosen}
        if unmatched:
            logger.warning("Requested symbols not in instrument table: %s", sorted(unmatched))
    else:
        chosen = [inst for inst in instruments if inst.enabled]
    return sorted(chosen, key=lambda inst: inst.symbol)


def resolve_sources(
    instruments: list[Instrument],
    sources: list[Source],
) -> dict[int, Source]:
    """Map each instrument id to its ``Source``.

    Raises:
        ConfigurationError: If the source table has duplicate ids, or if any
            instrument references a source id absent from it. All offending
            instruments are listed in the message.
    """
    by_id: dict[int, Source] = {}
    for source in sources:
        if source.id in by_id:
            raise ConfigurationError(f"Duplicate source id {source.id} in source table")
        by_id[source.id] = source

    resolved: dict[int, Source] = {}
    orphans: list[str] = []
    for inst in instruments:
        source = by_id.get(inst.source_id)
        if source is None:
            orphans.append(f"{inst.symbol} (source id {inst.source_id})")
        else:
            resolved[inst.id] = source

    if orphans:
        raise ConfigurationError(
            "Instruments reference source ids missing from the source table: "
            + ", ".join(orphans)
        )
    return resolved


def build_url(source: Source, instrument: Instrument) -> str:
    """The page URL for *instrument*: source prefix + page name."""
    return source.url + instrument.page_name


def process_instrument(
    instrument: Instrument,
    source: Source,
    extractor: BaseExtractor,
    fetcher: PageFetcher,
    observation_date: dt.date,
) -> PriceRecord | ExtractionFailure:
    """Download and extract a single instrument.

    ``ExtractionError`` is converted into an ``ExtractionFailure``; any
    other exception propagates to the caller.
    """
    url = build_url(source, instrument)
    try:
        logger.info("Downloading %s from %s", instrument.symbol, url)
        document = fetcher.fetch(url)
        record = extractor.extract(document, instrument, observation_date)
    except ExtractionError as exc:
        logger.warning("%s failed: %s", instrument.symbol, exc)
        return ExtractionFailure(
            instrument_id=instrument.id,
            symbol=instrument.symbol,
            cause=str(exc),
            error_type=type(exc).__name__,
        )
    logger.info(
        "  %s: price=%s prev_price=%s", instrument.symbol, record.price, record.prev_price,
    )
    return record


def _collect(
    instrument: Instrument,
    future: Future,
    result: RunResult,
) -> None:
    """Add one finished task's outcome to *result*."""
    try:
        outcome = future.result()
    except Exception as exc:
        logger.exception("Unexpected error while processing %s", instrument.symbol)
        outcome = ExtractionFailure(
            instrument_id=instrument.id,
            symbol=instrument.symbol,
            cause=str(exc),
            error_type=type(exc).__name__,
        )
    if isinstance(outcome, PriceRecord):
        result.records.append(outcome)
    else:
        result.failures.append(outcome)


def download_prices(
    instruments: list[Instrument],
    sources: list[Source],
    *,
    fetcher: PageFetcher,
    extractors: dict[int, BaseExtractor] | None = None,
    symbols: list[str] | None = None,
    max_workers: int | None = DEFAULT_MAX_WORKERS,
    observation_date: dt.date | None = None,
) -> RunResult:
    """Download and extract prices for every selected instrument.

    Args:
        instruments: The full instrument table.
        sources: The full source table.
        fetcher: Object whose ``fetch(url)`` returns the page text.
        extractors: ``source_id -> extractor`` mapping. Defaults to the
            built-in layouts.
        symbols: Optional explicit symbol subset (see ``select_instruments``).
        max_workers: Upper bound on concurrent downloads. ``None`` runs one
            worker per instrument.
        observation_date: Date stamped on every record. Defaults to today
            in UTC.

    Returns:
        ``RunResult`` with records and failures in symbol order.

    Raises:
        ConfigurationError: If an instrument's source is missing. Raised
            before any download starts.
    """
    selected = select_instruments(instruments, symbols)
    source_for = resolve_sources(selected, sources)
    if extractors is None:
        extractors = build_extractors()
    if observation_date is None:
        observation_date = dt.datetime.now(dt.timezone.utc).date()

    result = RunResult(observation_date=observation_date)
    if not selected:
        logger.info("No instruments selected; nothing to download")
        return result

    workers = len(selected) if max_workers is None else min(max_workers, len(selected))
    logger.info(
        "Dispatching %d instrument(s) on %d worker(s), date %s",
        len(selected), workers, observation_date.isoformat(),
    )

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="price") as executor:
        futures = [
            executor.submit(
                process_instrument,
                inst,
                source_for[inst.id],
                select_extractor(inst, extractors),
                fetcher,
                observation_date,
            )
            for inst in selected
        ]
        # Submission order, not completion order
        for inst, future in zip(selected, futures):
            _collect(inst, future, result)

    logger.info(
        "Run complete: %d succeeded, %d failed", result.succeeded, result.failed,
    )
    return result
