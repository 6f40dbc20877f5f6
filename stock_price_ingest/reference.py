"""
Reference table loading for stock-price-ingest.

Reads the source and instrument CSV tables into model objects. The tables
use PascalCase headers:

- source.csv: ``Id, Name, Url``
- stock.csv:  ``Id, Symbol, Name, YahooSymbol, DigitalLookName, Csi,
  SourceId[, Enabled]``

Every column is read as a string with NA coercion disabled, so a blank
``Csi`` stays ``""`` (-> ``None``) and a symbol such as ``NA`` is not
turned into a missing value. Conversion to ints/bools happens here, with a
``ConfigurationError`` naming the file, row and column on bad input.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

import pandas as pd

from stock_price_ingest.exceptions import ConfigurationError
from stock_price_ingest.models import Instrument, Source

logger = logging.getLogger(__name__)

_SOURCE_COLUMNS = ["Id", "Name", "Url"]
_INSTRUMENT_COLUMNS = ["Id", "Symbol", "Name", "YahooSymbol", "DigitalLookName", "Csi", "SourceId"]

_TRUE_VALUES = {"true", "1", "yes", "y"}
_FALSE_VALUES = {"false", "0", "no", "n"}


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _read_table(path: str | Path, required: list[str]) -> pd.DataFrame:
    """Read a reference CSV as all-string columns and check its header."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Reference table not found: {path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    df.columns = [c.strip() for c in df.columns]

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ConfigurationError(
            f"{path.name} is missing required columns {missing}; "
            f"found {list(df.columns)}"
        )
    logger.info("Read %s (%d rows)", path, len(df))
    return df


def _to_int(value: str, path: Path, row: int, column: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"{path.name} row {row}: column {column} is not an integer: {value!r}"
        ) from exc


def _to_optional_int(value: str, path: Path, row: int, column: str) -> int | None:
    if not value.strip() or value.strip().lower() == "null":
        return None
    return _to_int(value, path, row, column)


def _to_bool(value: str, path: Path, row: int, column: str) -> bool:
    normalized = value.strip().lower()
    if not normalized or normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"{path.name} row {row}: column {column} is not a boolean: {value!r}"
    )


def _check_unique_ids(ids: list[int], path: Path) -> None:
    duplicates = sorted(i for i, count in Counter(ids).items() if count > 1)
    if duplicates:
        raise ConfigurationError(f"{path.name} has duplicate Id values: {duplicates}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_sources(path: str | Path) -> list[Source]:
    """Load the source table.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: On missing columns, non-integer ids or duplicate ids.
    """
    path = Path(path)
    df = _read_table(path, _SOURCE_COLUMNS)
    sources = [
        Source(
            id=_to_int(row["Id"], path, i, "Id"),
            name=row["Name"].strip(),
            url=row["Url"].strip(),
        )
        for i, row in enumerate(df.to_dict("records"), start=1)
    ]
    _check_unique_ids([s.id for s in sources], path)
    return sources


def load_instruments(path: str | Path) -> list[Instrument]:
    """Load the instrument table.

    The ``Enabled`` column is optional; when absent every instrument is
    enabled. Blank ``Csi`` values become ``None``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: On missing columns, bad values or duplicate ids.
    """
    path = Path(path)
    df = _read_table(path, _INSTRUMENT_COLUMNS)
    has_enabled = "Enabled" in df.columns

    instruments: list[Instrument] = []
    for i, row in enumerate(df.to_dict("records"), start=1):
        instruments.append(
            Instrument(
                id=_to_int(row["Id"], path, i, "Id"),
                symbol=row["Symbol"].strip(),
                name=row["Name"].strip(),
                alternate_symbol=row["YahooSymbol"].strip(),
                page_name=row["DigitalLookName"].strip(),
                classification_code=_to_optional_int(row["Csi"], path, i, "Csi"),
                source_id=_to_int(row["SourceId"], path, i, "SourceId"),
                enabled=_to_bool(row["Enabled"], path, i, "Enabled") if has_enabled else True,
            )
        )
    _check_unique_ids([inst.id for inst in instruments], path)
    return instruments


def describe_reference(sources: list[Source], instruments: list[Instrument]) -> pd.DataFrame:
    """Join instruments to their sources for display.

    Instruments whose source id is not in *sources* get an empty
    ``source`` column rather than being dropped, so misconfigured rows are
    visible.
    """
    source_names = {s.id: s.name for s in sources}
    return pd.DataFrame(
        [
            {
                "id": inst.id,
                "symbol": inst.symbol,
                "name": inst.name,
                "page_name": inst.page_name,
                "source_id": inst.source_id,
                "source": source_names.get(inst.source_id, ""),
                "enabled": inst.enabled,
            }
            for inst in sorted(instruments, key=lambda x: x.symbol)
        ],
        columns=["id", "symbol", "name", "page_name", "source_id", "source", "enabled"],
    )
