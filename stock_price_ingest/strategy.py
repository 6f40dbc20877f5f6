"""
Extraction strategy selection for stock-price-ingest.

Each data source publishes its pages in one layout. This module turns the
loaded layouts into a ``source_id -> extractor`` mapping and resolves the
extractor for an instrument.

Design: Strategy Pattern
- build_extractors() returns one MarkerLayoutExtractor per layout.
- select_extractor() looks an instrument's source id up in that mapping.
- A source id with no layout gets an UnknownSourceExtractor, which fails
  the instrument with UnknownSourceError.
"""

from __future__ import annotations

import logging

from stock_price_ingest.exceptions import ConfigurationError
from stock_price_ingest.layout_registry import Layout, load_all_layouts
from stock_price_ingest.models import Instrument
from stock_price_ingest.parsers.base import BaseExtractor, UnknownSourceExtractor
from stock_price_ingest.parsers.marker import MarkerLayoutExtractor

logger = logging.getLogger(__name__)


def build_extractors(layouts: list[Layout] | None = None) -> dict[int, BaseExtractor]:
    """Build the ``source_id -> extractor`` mapping.

    Args:
        layouts: Pre-loaded layouts (optional; loads the built-in layouts
            from disk if None).

    Raises:
        ConfigurationError: If two layouts claim the same source id.
    """
    if layouts is None:
        layouts = load_all_layouts()

    extractors: dict[int, BaseExtractor] = {}
    for layout in layouts:
        existing = extractors.get(layout.source_id)
        if existing is not None:
            raise ConfigurationError(
                f"Layouts '{existing.format_name}' and '{layout.format_name}' "
                f"both claim source id {layout.source_id}"
            )
        extractors[layout.source_id] = MarkerLayoutExtractor(layout)

    logger.info(
        "Extraction strategies: %s",
        ", ".join(f"{sid}={ex.format_name}" for sid, ex in extractors.items()) or "none",
    )
    return extractors


def select_extractor(
    instrument: Instrument,
    extractors: dict[int, BaseExtractor],
) -> BaseExtractor:
    """Return the extractor for *instrument*'s source."""
    extractor = extractors.get(instrument.source_id)
    if extractor is None:
        logger.warning(
            "No layout for source id %d (instrument %s)",
            instrument.source_id, instrument.symbol,
        )
        return UnknownSourceExtractor(instrument.source_id)
    return extractor
