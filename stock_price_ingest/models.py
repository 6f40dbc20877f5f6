"""
Data model for stock-price-ingest.

Reference rows (``Source``, ``Instrument``) are read once per run and never
change. Outcomes (``PriceRecord``, ``ExtractionFailure``) are produced by the
pipeline, one per processed instrument, and handed whole to the exporter.
Every type is a frozen dataclass so units of work can share them across
threads without copying.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass


@dataclass(frozen=True)
class Source:
    """A market-data website. ``url`` is the prefix each page name is appended to."""
    id: int
    name: str
    url: str


@dataclass(frozen=True)
class Instrument:
    """A stock or fund to download.

    Attributes:
        id: Primary key, referenced by ``PriceRecord.instrument_id``.
        symbol: Display symbol; the run is ordered and filtered by it.
        name: Company or fund name.
        alternate_symbol: Symbol on other sites (the ``YahooSymbol`` column).
        page_name: Source-specific page fragment appended to ``Source.url``.
        classification_code: Optional sector classification (``Csi``).
        source_id: Foreign key into the source table.
        enabled: Disabled instruments are only processed when explicitly
            requested by symbol.
    """
    id: int
    symbol: str
    name: str
    alternate_symbol: str
    page_name: str
    classification_code: int | None
    source_id: int
    enabled: bool = True


@dataclass(frozen=True)
class PriceRecord:
    """Prices extracted for one instrument on one day."""
    instrument_id: int
    date: dt.date
    price: float
    prev_price: float
    fifty_two_week_high: float | None = None
    fifty_two_week_low: float | None = None


@dataclass(frozen=True)
class ExtractionFailure:
    """Why an instrument produced no ``PriceRecord`` in this run."""
    instrument_id: int
    symbol: str
    cause: str
    error_type: str = ""

    @property
    def message(self) -> str:
        return f"Could not download price {self.symbol}, error is {self.cause}"

    def __str__(self) -> str:
        return self.message
