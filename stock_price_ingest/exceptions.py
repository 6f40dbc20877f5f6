"""
Custom exception hierarchy for stock-price-ingest.

Two families matter to the pipeline:

- ``ConfigurationError`` is fatal. It means the reference tables, layouts
  or run config are inconsistent (e.g., an instrument points at a source
  id that is not in the source table) and the run stops before any
  download is dispatched.
- ``ExtractionError`` and its subclasses are per-instrument. The
  orchestrator catches them at the instrument boundary and records an
  ``ExtractionFailure``; other instruments are unaffected.
"""


class StockPriceIngestError(Exception):
    """Base exception for all stock-price-ingest errors."""


class ConfigurationError(StockPriceIngestError):
    """Raised when reference data, layouts or the run config are invalid.

    This can happen if:
    - An instrument references a source id absent from the source table.
    - A reference CSV is missing required columns or has duplicate ids.
    - Two layouts claim the same source id.
    """


class ExtractionError(StockPriceIngestError):
    """Base class for failures that only affect a single instrument."""


class NetworkError(ExtractionError):
    """Raised when the page for an instrument could not be fetched."""

    def __init__(self, url: str, cause: object) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Request for {url} failed: {cause}")


class MarkerNotFound(ExtractionError):
    """Raised when a layout marker does not occur in the remaining text.

    Usually means the site changed its page layout, the instrument was
    delisted, or the instrument is assigned to the wrong source.
    """

    def __init__(self, marker: str) -> None:
        self.marker = marker
        super().__init__(f"Cannot parse document, Cannot find {marker} in string")


class UnterminatedField(ExtractionError):
    """Raised when no ``<`` follows a field value."""

    def __init__(self) -> None:
        super().__init__("Cannot parse document, Cannot find next '<' character")


class MalformedNumber(ExtractionError):
    """Raised when a normalized field value does not parse as a float."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Cannot parse number from {text!r}")


class UnknownSourceError(ExtractionError):
    """Raised when no layout is registered for an instrument's source id."""

    def __init__(self, source_id: int) -> None:
        self.source_id = source_id
        super().__init__(f"No extraction layout registered for source id {source_id}")


class ExportError(StockPriceIngestError):
    """Raised when the exporter fails to write output files.

    For example, permission errors, disk full, or unsupported format.
    """
