"""
Layout loader for stock-price-ingest.

Loads layout YAML files from stock_price_ingest/layouts/ and provides
structured access via Pydantic models. Each layout defines:
- format_name: unique identifier (e.g., "equity", "fund")
- source_id: the id in the source table whose pages use this layout
- rules: the ordered field rules; each rule lists the markers to advance
  past, in order, before the field's numeric value is read

Field rules are walked in file order with a single forward-only cursor,
so a later rule's markers are searched for after the previous field.

Why YAML instead of hardcoded:
- When a site changes its markup, only the marker strings need editing.
- A new site with the same four fields is a new YAML file, no code changes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Literal

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

# Directory containing layout YAML files (sibling package)
_LAYOUTS_DIR = Path(__file__).parent / "layouts"

FieldName = Literal["price", "change", "fifty_two_week_high", "fifty_two_week_low"]

REQUIRED_FIELDS: tuple[str, ...] = (
    "price",
    "change",
    "fifty_two_week_high",
    "fifty_two_week_low",
)


class FieldRule(BaseModel):
    """Markers leading up to one numeric field."""
    name: FieldName
    markers: list[Annotated[str, Field(min_length=1)]] = Field(min_length=1)


class Layout(BaseModel):
    """A complete page layout definition loaded from YAML."""
    format_name: str
    source_id: int
    description: str = ""
    rules: list[FieldRule]

    @model_validator(mode="after")
    def _check_fields_complete(self) -> Layout:
        """Every required field must appear exactly once."""
        names = [rule.name for rule in self.rules]
        missing = [name for name in REQUIRED_FIELDS if name not in names]
        if missing:
            raise ValueError(f"Layout '{self.format_name}' is missing field rules: {missing}")
        duplicated = sorted({name for name in names if names.count(name) > 1})
        if duplicated:
            raise ValueError(f"Layout '{self.format_name}' repeats field rules: {duplicated}")
        return self


def load_layout(path: Path) -> Layout:
    """Load a single layout YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    return Layout.model_validate(raw)


def load_all_layouts(layouts_dir: Path | None = None) -> list[Layout]:
    """Load all layout YAML files, sorted by source id.

    Files that fail to parse or validate are skipped with a warning, so
    one broken layout does not disable every other source.

    Args:
        layouts_dir: Directory to scan for .yaml files. Defaults to
            the built-in layouts/ directory.

    Returns:
        List of Layout objects, sorted by ``source_id``.
    """
    layouts_dir = Path(layouts_dir) if layouts_dir is not None else _LAYOUTS_DIR
    layouts: list[Layout] = []
    for yaml_path in sorted(layouts_dir.glob("*.yaml")):
        try:
            layout = load_layout(yaml_path)
        except Exception as e:
            logger.warning("Failed to load layout from %s: %s", yaml_path, e)
            continue
        layouts.append(layout)
        logger.debug(
            "Loaded layout: %s (source %d) from %s",
            layout.format_name, layout.source_id, yaml_path,
        )
    layouts.sort(key=lambda l: l.source_id)
    logger.info("Loaded %d layouts from %s", len(layouts), layouts_dir)
    return layouts
