"""
Mirror Fetcher

Retrieves a product page from an ordered list of mirrors (primary domain,
mobile subdomain, regional domain), stopping at the first mirror that
returns content.

The site serves soft-error pages with status 200/4xx that still embed
partial data, so any status below 500 counts as content. Timeouts,
connection errors and 5xx responses advance to the next mirror.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests

from ..models import FetchAttempt, RawFetchResult
from .errors import AllMirrorsFailed

logger = logging.getLogger(__name__)

DEFAULT_MIRRORS = [
    "{base_url}/item/{product_id}.html",
    "https://m.aliexpress.com/item/{product_id}.html",
    "https://www.aliexpress.us/item/{product_id}.html",
]

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                  "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class MirrorFetcher:
    """
    Fetches raw product pages from mirrors in priority order.

    Usage:
        fetcher = MirrorFetcher(base_url="https://www.aliexpress.com")
        result = fetcher.fetch("1005001234567890")
        html = result.body
    """

    SERVER_ERROR_STATUS = 500

    def __init__(
        self,
        base_url: str = "https://www.aliexpress.com",
        mirrors: Optional[List[str]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        """
        Initialize the fetcher.

        Args:
            base_url: Primary site URL, substituted for {base_url} in templates
            mirrors: Ordered URL templates with {product_id} (and optional {base_url})
            headers: Browser-identifying headers sent with every attempt
            timeout: Per-attempt timeout in seconds
            session: Shared session for connection reuse (created if omitted)
        """
        self.base_url = base_url.rstrip('/')
        self.mirrors = list(mirrors or DEFAULT_MIRRORS)
        self.headers = dict(headers or DEFAULT_HEADERS)
        self.timeout = timeout
        self._session = session
        self._owns_session = False

    @classmethod
    def from_settings(cls, settings: dict, session: requests.Session | None = None) -> "MirrorFetcher":
        """Build a fetcher from importer settings."""
        source = settings.get('source', {})
        http = settings.get('http', {})
        return cls(
            base_url=source.get('base_url', "https://www.aliexpress.com"),
            mirrors=source.get('mirrors'),
            headers=http.get('headers'),
            timeout=http.get('timeout', 30),
            session=session,
        )

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self._session

    def mirror_urls(self, product_id: str) -> List[str]:
        """Expand the mirror templates for a product id."""
        return [
            template.format(base_url=self.base_url, product_id=product_id)
            for template in self.mirrors
        ]

    def fetch(self, product_id: str) -> RawFetchResult:
        """
        Fetch the product page from the first mirror that returns content.

        Args:
            product_id: Canonical product id

        Returns:
            RawFetchResult for the first usable response

        Raises:
            AllMirrorsFailed: If every mirror fails at the transport level
        """
        attempts: List[FetchAttempt] = []

        for url in self.mirror_urls(product_id):
            logger.debug("Trying URL: %s", url)
            try:
                response = self.session.get(url, headers=self.headers, timeout=self.timeout)
            except requests.RequestException as e:
                error = f"{type(e).__name__}: {str(e)[:100]}"
                logger.warning("Error fetching from %s: %s", url, error)
                attempts.append(FetchAttempt(url=url, error=error))
                continue

            logger.debug("Response status: %d for URL: %s", response.status_code, url)

            if response.status_code >= self.SERVER_ERROR_STATUS:
                error = f"HTTP {response.status_code}"
                logger.warning("Server error from %s: %s", url, error)
                attempts.append(FetchAttempt(url=url, error=error))
                continue

            return RawFetchResult(
                url=url,
                status_code=response.status_code,
                body=response.text or "",
            )

        raise AllMirrorsFailed(product_id, attempts)

    def close(self):
        """Close the session if this object created it."""
        if self._owns_session:
            self._session.close()
