"""
Shared test fixtures and page samples for stock-price-ingest tests.

The HTML samples below are trimmed-down versions of the two supported page
layouts, with the values used throughout the suite:
price 150.0, change 5.0, 52 week high 200.0, 52 week low 100.0.
Nothing in the test suite touches the network; pipeline tests inject a
``FakeFetcher`` that serves these samples by URL.
"""

from __future__ import annotations

import random
import threading
import time
from pathlib import Path

import pytest

from stock_price_ingest.exceptions import NetworkError
from stock_price_ingest.models import Instrument, Source

# ---------------------------------------------------------------------------
# Page samples
# ---------------------------------------------------------------------------

EQUITY_PAGE = """\
<html><body>
<h2>VOD Market Data</h2>
<div class="quote">
  <span class="precio_ultima_cotizacion">150.0</span>p
  <span class="variacion_puntos"><b>5.0</b></span>
</div>
<table class="range">
  <tr><th>High 52 week range</th><td>200.0</td></tr>
  <tr><th>Low 52 week range</th><td>100.0</td></tr>
</table>
</body></html>
"""

FUND_PAGE = """\
<html><body>
<h2>Detailed Price Data</h2>
<table>
  <tr><td>Price:</td><td class="val">150.0</td></tr>
  <tr><td>Change:</td><td><span class="up">5.0</span></td></tr>
  <tr><td>52 week High</td><td>200.0</td></tr>
  <tr><td>52 week Low</td><td>100.0</td></tr>
</table>
</body></html>
"""

EQUITY_URL = "http://equity.example/equity/"
FUND_URL = "http://fund.example/etf/"

SOURCE_CSV = f"""\
Id,Name,Url
1,Equity Site,{EQUITY_URL}
2,Fund Site,{FUND_URL}
"""

STOCK_CSV = """\
Id,Symbol,Name,YahooSymbol,DigitalLookName,Csi,SourceId,Enabled
10,VOD,Vodafone Group,VOD.L,vodafone-group,6530,1,true
11,BARC,Barclays,BARC.L,barclays,,1,true
12,ISF,iShares Core FTSE 100,ISF.L,ishares-core-ftse-100,,2,true
13,OLD,Delisted plc,OLD.L,delisted,,1,false
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_instrument(
    id: int,
    symbol: str,
    source_id: int = 1,
    enabled: bool = True,
    page_name: str | None = None,
) -> Instrument:
    """Build an Instrument with sensible defaults for the unused columns."""
    return Instrument(
        id=id,
        symbol=symbol,
        name=f"{symbol} plc",
        alternate_symbol=f"{symbol}.L",
        page_name=page_name if page_name is not None else symbol.lower(),
        classification_code=None,
        source_id=source_id,
        enabled=enabled,
    )


def make_sources() -> list[Source]:
    return [
        Source(id=1, name="Equity Site", url=EQUITY_URL),
        Source(id=2, name="Fund Site", url=FUND_URL),
    ]


class FakeFetcher:
    """Serves canned pages by URL; URLs in *failing* raise NetworkError.

    Unknown URLs get the equity page for source 1 URLs and the fund page
    for source 2 URLs. With *jitter* set, each fetch sleeps a random
    amount so tasks finish in a shuffled order; *delays* adds a fixed
    per-URL sleep.
    """

    def __init__(
        self,
        pages: dict[str, str] | None = None,
        failing: set[str] | None = None,
        jitter: float = 0.0,
        seed: int = 0,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.pages = pages or {}
        self.delays = delays or {}
        self.failing = failing or set()
        self.jitter = jitter
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
        self.calls: list[str] = []
        self.completed: list[str] = []
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def fetch(self, url: str) -> str:
        with self._lock:
            self.calls.append(url)
            delay = self._rng.uniform(0, self.jitter) if self.jitter else 0.0
            delay += self.delays.get(url, 0.0)
        if delay:
            time.sleep(delay)
        try:
            if url in self.failing:
                raise NetworkError(url, "simulated connection reset")
            if url in self.pages:
                return self.pages[url]
            if url.startswith(FUND_URL):
                return FUND_PAGE
            return EQUITY_PAGE
        finally:
            with self._lock:
                self.completed.append(url)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A directory holding source.csv and stock.csv."""
    d = tmp_path / "data"
    d.mkdir()
    (d / "source.csv").write_text(SOURCE_CSV, encoding="utf-8")
    (d / "stock.csv").write_text(STOCK_CSV, encoding="utf-8")
    return d


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs the full pipeline on files)",
    )
