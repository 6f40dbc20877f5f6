"""
Forward-only marker scanning over a downloaded page.

A ``MarkerCursor`` is an offset into a document string. Advancing past a
marker returns a *new* cursor; the old one is untouched, so a cursor can be
passed around, logged or retried without any shared mutable state. The
offset only ever grows, which means text that has been consumed is never
examined again within one extraction.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stock_price_ingest.exceptions import MarkerNotFound


@dataclass(frozen=True)
class MarkerCursor:
    """Immutable scan position within ``text``."""

    text: str = field(repr=False)
    position: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.position <= len(self.text):
            raise ValueError(
                f"Cursor position {self.position} outside document of length {len(self.text)}"
            )

    @property
    def remaining(self) -> str:
        """The unconsumed suffix of the document."""
        return self.text[self.position:]

    def advance_past(self, marker: str) -> MarkerCursor:
        """Return a cursor positioned immediately after the next *marker*.

        The search starts at the current position.

        Raises:
            MarkerNotFound: If *marker* does not occur in the remaining text.
        """
        idx = self.text.find(marker, self.position)
        if idx < 0:
            raise MarkerNotFound(marker)
        return MarkerCursor(self.text, idx + len(marker))

    def advance_through(self, markers: list[str]) -> MarkerCursor:
        """Advance past each marker in turn, failing on the first one missing."""
        cursor = self
        for marker in markers:
            cursor = cursor.advance_past(marker)
        return cursor
