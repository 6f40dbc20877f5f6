"""
Base extractor ABC for stock-price-ingest.

Every page layout is served by an extractor implementing this interface.
The contract is:
1. extract() takes the downloaded document, the instrument it belongs to,
   and the run's observation date.
2. It returns a complete ``PriceRecord`` or raises an ``ExtractionError``;
   a partially filled record is never returned.

Why an ABC:
- The orchestrator treats every source the same way and only holds a
  ``source_id -> BaseExtractor`` mapping.
- Sources without a layout get an extractor too (``UnknownSourceExtractor``),
  so "no layout" is reported through the same per-instrument failure path.
"""

from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod

from stock_price_ingest.exceptions import UnknownSourceError
from stock_price_ingest.models import Instrument, PriceRecord


class BaseExtractor(ABC):
    """Abstract base class for page extractors."""

    format_name: str = ""

    @abstractmethod
    def extract(
        self,
        document: str,
        instrument: Instrument,
        observation_date: dt.date,
    ) -> PriceRecord:
        """Extract a price record from a downloaded page.

        Args:
            document: The full page body as text.
            instrument: The instrument the page was fetched for.
            observation_date: The run's "today".

        Returns:
            A fully populated ``PriceRecord``.

        Raises:
            ExtractionError: If the page does not match the layout.
        """


class UnknownSourceExtractor(BaseExtractor):
    """Extractor for a source id with no registered layout; always fails."""

    format_name = "unknown"

    def __init__(self, source_id: int) -> None:
        self.source_id = source_id

    def extract(
        self,
        document: str,
        instrument: Instrument,
        observation_date: dt.date,
    ) -> PriceRecord:
        raise UnknownSourceError(self.source_id)

    def __repr__(self) -> str:
        return f"UnknownSourceExtractor(source_id={self.source_id})"
