"""
Layout definitions sub-package for stock-price-ingest.

Contains YAML files that define the marker sequences for each known
market-data page format. The loader module (layout_registry.py in the
parent package) reads these files at runtime.
"""
