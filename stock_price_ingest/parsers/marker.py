"""
Marker-layout extractor: reads the four price fields described by a
``Layout`` using a single forward-only cursor.
"""

from __future__ import annotations

import datetime as dt
import logging

from stock_price_ingest.layout_registry import Layout
from stock_price_ingest.models import Instrument, PriceRecord
from stock_price_ingest.parsers.base import BaseExtractor
from stock_price_ingest.parsers.cursor import MarkerCursor
from stock_price_ingest.parsers.fields import extract_number

logger = logging.getLogger(__name__)


class MarkerLayoutExtractor(BaseExtractor):
    """Extract prices by walking a layout's field rules in order.

    For each rule the cursor advances past every marker, then the number
    at the cursor is read. The cursor is *not* moved past the number, so
    the next rule's markers are searched for from there. The first
    missing marker or unreadable number aborts the whole extraction.
    """

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self.format_name = layout.format_name

    def read_fields(self, document: str) -> dict[str, float]:
        """Return ``field name -> value`` for every rule in the layout."""
        cursor = MarkerCursor(document)
        values: dict[str, float] = {}
        for rule in self.layout.rules:
            cursor = cursor.advance_through(rule.markers)
            values[rule.name] = extract_number(cursor)
            logger.debug("  [%s] %s = %s", self.format_name, rule.name, values[rule.name])
        return values

    def extract(
        self,
        document: str,
        instrument: Instrument,
        observation_date: dt.date,
    ) -> PriceRecord:
        values = self.read_fields(document)
        price = values["price"]
        return PriceRecord(
            instrument_id=instrument.id,
            date=observation_date,
            price=price,
            prev_price=price - values["change"],
            fifty_two_week_high=values["fifty_two_week_high"],
            fifty_two_week_low=values["fifty_two_week_low"],
        )

    def __repr__(self) -> str:
        return (
            f"MarkerLayoutExtractor(format_name={self.format_name!r}, "
            f"source_id={self.layout.source_id})"
        )
