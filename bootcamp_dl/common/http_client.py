"""HTTP client for catalog, distribution and package fetches."""

from __future__ import annotations

import logging

import requests

from .config import Settings, settings as default_settings
from .errors import NetworkError

logger = logging.getLogger(__name__)


class HTTPClient:
    """HTTP client wrapping a requests session.

    Features:
    - Fixed Software Update User-Agent
    - Per-request timeout from settings
    - requests failures surfaced as NetworkError

    No retries: a failed request is reported to the caller immediately.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.settings.network.user_agent})

    def get(self, url: str, stream: bool = False) -> requests.Response:
        """Send a GET request.

        Args:
            url: Target URL.
            stream: Defer body download (used for package downloads).

        Returns:
            requests.Response object with a 2xx status.

        Raises:
            NetworkError: On connection failure, timeout or non-2xx status.
        """
        logger.debug("GET %s (stream=%s)", url, stream)
        try:
            resp = self._session.get(
                url,
                stream=stream,
                timeout=self.settings.network.request_timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Request failed: %s — %s", url, exc)
            raise NetworkError(f"GET {url} failed: {exc}", url=url) from exc
        return resp

    def get_text(self, url: str) -> str:
        """GET a URL and return the decoded body."""
        resp = self.get(url)
        try:
            return resp.text
        except requests.RequestException as exc:
            raise NetworkError(f"Reading {url} failed: {exc}", url=url) from exc

    def get_bytes(self, url: str) -> bytes:
        """GET a URL and return the raw body."""
        resp = self.get(url)
        try:
            return resp.content
        except requests.RequestException as exc:
            raise NetworkError(f"Reading {url} failed: {exc}", url=url) from exc

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
