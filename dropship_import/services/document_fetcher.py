# dropship_import/services/document_fetcher.py

"""Fetch product-page HTML through a chain of proxy endpoints."""

import logging
from typing import Any
from urllib.parse import quote

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from dropship_import.config.settings import Settings
from dropship_import.models.errors import FetchFailedError

FETCH_FAILED_MESSAGE = (
    "Could not fetch the product page. "
    "The site may be blocking automated access."
)


class DocumentFetcher:
    """Retrieves raw page text for the extraction pipelines.

    Each proxy endpoint in ``Settings.PROXY_ENDPOINTS`` is tried once,
    in order, with a bounded timeout. The first HTTP 200 body longer
    than ``min_length`` wins. When every proxy fails, a direct
    cloudscraper request is the last resort before giving up with
    :class:`FetchFailedError`.
    """

    def __init__(self, min_length: int | None = None) -> None:
        self.logger = logging.getLogger("dropship_import.fetcher")
        self.settings = Settings()
        self.min_length = (
            min_length
            if min_length is not None
            else self.settings.MIN_DOCUMENT_LENGTH
        )
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def endpoint_urls(self, url: str) -> list[str]:
        """Expand every proxy template for *url*."""
        encoded = quote(url, safe="")
        return [
            template.format(url=encoded)
            for template in self.settings.PROXY_ENDPOINTS
        ]

    def _is_usable(self, text: str) -> bool:
        return len(text) > self.min_length

    def _fetch_via_proxy(self, proxy_url: str, attempt: int) -> str | None:
        """Try a single proxy endpoint; return the body or None."""
        try:
            resp = self.session.get(
                proxy_url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.warning(
                "[fetcher] Proxy error on attempt %d: %s",
                attempt,
                exc,
                exc_info=True,
            )
            return None

        if resp.status_code != 200:
            self.logger.warning(
                "[fetcher] HTTP %d on attempt %d",
                resp.status_code,
                attempt,
            )
            return None

        text = resp.text
        if not self._is_usable(text):
            self.logger.warning(
                "[fetcher] Body too short (%d chars) on attempt %d",
                len(text),
                attempt,
            )
            return None
        return text

    def _fetch_direct(self, url: str) -> str | None:
        """Fallback: request the page directly through cloudscraper."""
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
            if resp.status_code == 200:
                text = str(resp.text)
                if self._is_usable(text):
                    return text
            self.logger.warning(
                "[fetcher] cloudscraper fallback returned HTTP %s",
                resp.status_code,
            )
        except Exception as e:
            self.logger.error(
                "[fetcher] cloudscraper fallback also failed: %s",
                e,
                exc_info=True,
            )
        return None

    def fetch(self, url: str) -> str:
        """Return the page text for *url* or raise FetchFailedError."""
        for attempt, proxy_url in enumerate(self.endpoint_urls(url), 1):
            text = self._fetch_via_proxy(proxy_url, attempt)
            if text is not None:
                self.logger.info(
                    "[fetcher] Fetched %s via proxy %d (%d chars)",
                    url,
                    attempt,
                    len(text),
                )
                return text

        self.logger.info(
            "[fetcher] Proxies exhausted for %s, falling back to cloudscraper",
            url,
        )
        text = self._fetch_direct(url)
        if text is not None:
            return text

        self.logger.error("[fetcher] All retrieval attempts failed for %s", url)
        raise FetchFailedError(FETCH_FAILED_MESSAGE)
