# tests/test_document_fetcher.py

"""Tests for the proxy-chain document fetcher."""

import unittest
from unittest.mock import MagicMock, patch

from dropship_import.config.settings import Settings
from dropship_import.models.errors import FetchFailedError
from dropship_import.services.document_fetcher import (
    FETCH_FAILED_MESSAGE,
    DocumentFetcher,
)

_TARGET = "https://www.alibaba.com/product-detail/x_1.html?spm=a"
_LONG_BODY = "<html>" + "x" * 2000 + "</html>"


def _response(status: int = 200, text: str = _LONG_BODY) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


class TestEndpointUrls(unittest.TestCase):
    """Verify proxy URL expansion."""

    def test_one_url_per_endpoint_with_encoded_target(self) -> None:
        urls = DocumentFetcher().endpoint_urls(_TARGET)
        self.assertEqual(len(urls), len(Settings.PROXY_ENDPOINTS))
        self.assertTrue(urls[0].startswith("https://api.allorigins.win/raw?url="))
        self.assertIn("https%3A%2F%2Fwww.alibaba.com", urls[0])
        self.assertNotIn("?spm=a", urls[0])


class TestFetch(unittest.TestCase):
    """Verify fallback order and failure handling."""

    def setUp(self) -> None:
        self.fetcher = DocumentFetcher()
        self.fetcher.session = MagicMock()

    def test_first_good_proxy_wins(self) -> None:
        self.fetcher.session.get.side_effect = [
            _response(status=500),
            _response(),
        ]
        self.assertEqual(self.fetcher.fetch(_TARGET), _LONG_BODY)
        self.assertEqual(self.fetcher.session.get.call_count, 2)

    def test_timeout_passed_to_session(self) -> None:
        self.fetcher.session.get.return_value = _response()
        self.fetcher.fetch(_TARGET)
        _, kwargs = self.fetcher.session.get.call_args
        self.assertEqual(kwargs["timeout"], Settings.REQUEST_TIMEOUT)

    def test_short_body_is_rejected(self) -> None:
        self.fetcher.session.get.side_effect = [
            _response(text="<html>blocked</html>"),
            _response(),
        ]
        self.assertEqual(self.fetcher.fetch(_TARGET), _LONG_BODY)

    @patch("dropship_import.services.document_fetcher.cloudscraper")
    def test_cloudscraper_fallback_after_proxies(
        self, mock_cloudscraper: MagicMock,
    ) -> None:
        self.fetcher.session.get.side_effect = [
            ConnectionError("reset"),
            _response(status=403),
            _response(text="short"),
        ]
        scraper = MagicMock()
        scraper.get.return_value = _response()
        mock_cloudscraper.create_scraper.return_value = scraper

        self.assertEqual(self.fetcher.fetch(_TARGET), _LONG_BODY)
        scraper.get.assert_called_once()
        self.assertEqual(scraper.get.call_args[0][0], _TARGET)

    @patch("dropship_import.services.document_fetcher.cloudscraper")
    def test_all_attempts_fail(self, mock_cloudscraper: MagicMock) -> None:
        self.fetcher.session.get.return_value = _response(status=502)
        mock_cloudscraper.create_scraper.side_effect = RuntimeError("no")

        with self.assertRaises(FetchFailedError) as ctx:
            self.fetcher.fetch(_TARGET)
        self.assertEqual(str(ctx.exception), FETCH_FAILED_MESSAGE)
        self.assertEqual(
            self.fetcher.session.get.call_count,
            len(Settings.PROXY_ENDPOINTS),
        )

    def test_custom_min_length(self) -> None:
        fetcher = DocumentFetcher(min_length=1000)
        fetcher.session = MagicMock()
        fetcher.session.get.return_value = _response(text="y" * 800)
        with patch(
            "dropship_import.services.document_fetcher.cloudscraper"
        ) as mock_cloudscraper:
            mock_cloudscraper.create_scraper.return_value.get.return_value = (
                _response(text="y" * 800)
            )
            with self.assertRaises(FetchFailedError):
                fetcher.fetch(_TARGET)


if __name__ == "__main__":
    unittest.main()
