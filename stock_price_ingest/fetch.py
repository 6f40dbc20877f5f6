"""
HTTP fetcher for stock-price-ingest.

Downloads one page per instrument with a shared ``requests.Session`` (for
connection pooling across worker threads). Exactly one attempt is made per
URL: there is no retry adapter, and every transport error, timeout or
non-2xx status becomes a ``NetworkError`` that the pipeline records as the
instrument's failure.
"""

from __future__ import annotations

import logging

import requests

from stock_price_ingest.config import FetchConfig
from stock_price_ingest.exceptions import NetworkError

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-GB,en;q=0.9",
}


class Fetcher:
    """Fetch page bodies over HTTP GET.

    Args:
        timeout: Seconds to wait for the server; ``None`` waits indefinitely.
        user_agent: Optional User-Agent header.
        session: An existing session to use (mainly for tests). When
            omitted a new one is created and owned by this fetcher.
    """

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(_DEFAULT_HEADERS)
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    @classmethod
    def from_config(cls, config: FetchConfig) -> Fetcher:
        return cls(timeout=config.timeout_seconds, user_agent=config.user_agent)

    def fetch(self, url: str) -> str:
        """GET *url* and return the response body as text.

        Raises:
            NetworkError: On connection failure, timeout or a non-success status.
        """
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkError(url, exc) from exc
        return response.text

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
