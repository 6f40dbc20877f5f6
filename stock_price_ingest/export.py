"""
Exporter for stock-price-ingest.

Writes the outcome of a run to the output directory:

  price.{csv|parquet}  -- one row per PriceRecord, columns matching the
                          price reference table (StockId, Date, Price,
                          PrevPrice, FiftyTwoWeekHigh, FiftyTwoWeekLow).
  errors.txt           -- one "ERROR <message>" line per failed instrument.

Dates are rendered as ``YYYY-MM-DD 00:00:00.000`` so exported rows can be
appended to the existing price table as-is.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import pandas as pd

from stock_price_ingest.exceptions import ExportError
from stock_price_ingest.models import ExtractionFailure, PriceRecord

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}

_DATE_FORMAT = "%Y-%m-%d 00:00:00.000"

PRICE_COLUMNS = [
    "StockId",
    "Date",
    "Price",
    "PrevPrice",
    "FiftyTwoWeekHigh",
    "FiftyTwoWeekLow",
]


def prices_to_frame(records: list[PriceRecord]) -> pd.DataFrame:
    """Convert price records to a DataFrame in the price table layout."""
    rows = [
        {
            "StockId": r.instrument_id,
            "Date": r.date.strftime(_DATE_FORMAT),
            "Price": r.price,
            "PrevPrice": r.prev_price,
            "FiftyTwoWeekHigh": r.fifty_two_week_high,
            "FiftyTwoWeekLow": r.fifty_two_week_low,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=PRICE_COLUMNS)


def _write_dataframe(df: pd.DataFrame, path: Path, output_format: str) -> None:
    """Write a single DataFrame to disk in the specified format.

    Raises:
        ExportError: If writing fails for any reason.
    """
    try:
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8")
        else:  # parquet
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise ExportError(f"Failed to write {path.name} as {output_format}: {exc}") from exc


def _write_failures(failures: list[ExtractionFailure], path: Path) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            for failure in failures:
                f.write(f"ERROR {failure.message}\n")
    except OSError as exc:
        raise ExportError(f"Failed to write {path.name}: {exc}") from exc


def export_results(
    records: list[PriceRecord],
    failures: list[ExtractionFailure],
    output_dir: str | Path,
    output_format: Literal["csv", "parquet"] = "csv",
    errors_file: str = "errors.txt",
) -> list[str]:
    """Write price records and failure lines to disk.

    The output directory is created recursively if it does not exist. The
    errors file is always written (empty when nothing failed) so a stale
    one from an earlier run never lingers.

    Args:
        records: Successful extractions.
        failures: Failed instruments.
        output_dir: Directory to write files into (created if needed).
        output_format: "csv" or "parquet" for the price table.
        errors_file: File name for the failure lines.

    Returns:
        List of file paths (as strings) that were written: price table
        first, then the errors file.

    Raises:
        ExportError: If *output_format* is unsupported, or if any write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    price_path = out / f"price.{output_format}"
    _write_dataframe(prices_to_frame(records), price_path, output_format)
    logger.info("Exported %d price(s) -> %s", len(records), price_path)

    errors_path = out / errors_file
    _write_failures(failures, errors_path)
    logger.info("Exported %d failure(s) -> %s", len(failures), errors_path)

    return [str(price_path), str(errors_path)]
