"""
Numeric field extraction for stock-price-ingest.

Every price on every supported page is read the same way: the text between
the cursor and the next tag is a number, possibly wrapped in whitespace,
carrying thousands separators, or followed by a unit such as ``p``.

This module:
1. Cuts the raw text off at the next ``<``.
2. Removes ASCII whitespace and lower-cases it.
3. Treats an empty value or ``n/a`` as ``0.0`` (the sites' "no data" convention).
4. Keeps the leading run of digits, ``.``, ``,`` and ``-``, then drops commas.
5. Parses what is left as a float.
"""

from __future__ import annotations

import re

from stock_price_ingest.exceptions import MalformedNumber, UnterminatedField
from stock_price_ingest.parsers.cursor import MarkerCursor

_NOT_AVAILABLE = "n/a"

# ASCII only; non-breaking spaces are kept
_ASCII_WHITESPACE = re.compile(r"[ \t\n\r\x0b\x0c]+")

_NUMERIC_PREFIX = re.compile(r"[0-9.,\-]*")


def read_field_text(cursor: MarkerCursor) -> str:
    """Return the raw text between *cursor* and the next ``<``.

    Raises:
        UnterminatedField: If no ``<`` follows the cursor.
    """
    end = cursor.text.find("<", cursor.position)
    if end < 0:
        raise UnterminatedField()
    return cursor.text[cursor.position:end]


def normalize_field_text(raw: str) -> str:
    """Strip ASCII whitespace and lower-case a raw field value."""
    return _ASCII_WHITESPACE.sub("", raw).lower()


def parse_number(raw: str) -> float:
    """Parse a raw field value into a float.

    Args:
        raw: Text exactly as found in the page, e.g. ``" 1,234.56p "``.

    Returns:
        The numeric value; ``0.0`` for empty or ``n/a`` values.

    Raises:
        MalformedNumber: If the numeric prefix is not a valid float
            (e.g. ``"abc"``, ``"1.2.3"`` or a lone ``"-"``).
    """
    text = normalize_field_text(raw)
    if not text or text == _NOT_AVAILABLE:
        return 0.0

    numeric = _NUMERIC_PREFIX.match(text).group(0).replace(",", "")
    try:
        return float(numeric)
    except ValueError as exc:
        raise MalformedNumber(numeric) from exc


def extract_number(cursor: MarkerCursor) -> float:
    """Read the numeric field that starts at *cursor*.

    The cursor is not advanced; callers locate the next field by advancing
    past its markers from the same position.
    """
    return parse_number(read_field_text(cursor))
