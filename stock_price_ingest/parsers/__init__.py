"""
Parsers sub-package for stock-price-ingest.

Turns a downloaded page into a ``PriceRecord`` without building a DOM:
extraction is a linear scan for literal markers followed by a number.

Design: Strategy Pattern
- cursor.py defines MarkerCursor, the immutable forward-only scan position.
- fields.py reads and normalizes the numeric value at a cursor.
- base.py defines the BaseExtractor ABC and UnknownSourceExtractor.
- marker.py implements MarkerLayoutExtractor, driven by a Layout (YAML).

The strategy module (strategy.py) maps each source id to an extractor.
"""
