"""
Unit tests for MarkerCursor (stock_price_ingest.parsers.cursor).

Covers forward-only advancing, immutability of the original cursor, and
the MarkerNotFound error for absent markers.
"""

from __future__ import annotations

import pytest

from stock_price_ingest.exceptions import ExtractionError, MarkerNotFound
from stock_price_ingest.parsers.cursor import MarkerCursor

HEADER = "<h2>CLLN Market Data</h2> whatever"


class TestAdvancePast:
    """Tests for MarkerCursor.advance_past()."""

    def test_returns_text_following_marker(self):
        assert MarkerCursor(HEADER).advance_past("Data</h2>").remaining == " whatever"

    def test_first_occurrence_wins(self):
        """'h2>' occurs twice; the cursor lands after the first."""
        assert MarkerCursor(HEADER).advance_past("h2>").remaining == "CLLN Market Data</h2> whatever"

    def test_marker_at_end_leaves_empty_remainder(self):
        cursor = MarkerCursor(HEADER).advance_past("whatever")
        assert cursor.remaining == ""
        assert cursor.position == len(HEADER)

    def test_position_is_just_after_marker(self):
        cursor = MarkerCursor("abc>def").advance_past(">")
        assert cursor.position == 4

    def test_original_cursor_is_unchanged(self):
        start = MarkerCursor(HEADER)
        moved = start.advance_past("Market")
        assert start.position == 0
        assert moved.position > start.position

    def test_never_scans_backward(self):
        """Text before the cursor is not searched again."""
        cursor = MarkerCursor("<td>1</td><td>2</td>").advance_past("<td>").advance_past("<td>")
        assert cursor.remaining == "2</td>"
        with pytest.raises(MarkerNotFound):
            cursor.advance_past("<td>")

    def test_missing_marker_raises(self):
        with pytest.raises(MarkerNotFound) as excinfo:
            MarkerCursor("hello world").advance_past("BLAH")
        assert excinfo.value.marker == "BLAH"
        assert str(excinfo.value) == "Cannot parse document, Cannot find BLAH in string"

    def test_missing_marker_is_extraction_error(self):
        """Marker errors are per-instrument, recoverable failures."""
        with pytest.raises(ExtractionError):
            MarkerCursor("").advance_past("x")


class TestAdvanceThrough:
    """Tests for MarkerCursor.advance_through()."""

    def test_advances_through_each_marker_in_order(self):
        text = '<span class="price"><b>12.5</b>'
        cursor = MarkerCursor(text).advance_through(["price", ">", ">"])
        assert cursor.remaining == "12.5</b>"

    def test_stops_at_first_missing_marker(self):
        with pytest.raises(MarkerNotFound, match="second"):
            MarkerCursor("first third").advance_through(["first", "second", "third"])

    def test_empty_marker_list_returns_same_position(self):
        cursor = MarkerCursor("abc", 1)
        assert cursor.advance_through([]).position == 1


class TestConstruction:
    """Tests for cursor construction and representation."""

    def test_position_out_of_range(self):
        with pytest.raises(ValueError, match="outside document"):
            MarkerCursor("abc", 4)

    def test_repr_omits_document(self):
        assert "Market" not in repr(MarkerCursor(HEADER, 3))
