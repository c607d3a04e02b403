"""Tests for catalog_import/extraction/fetcher.py"""

from unittest.mock import patch

import pytest
import requests

from catalog_import.extraction.errors import AllMirrorsFailed
from catalog_import.extraction.fetcher import MirrorFetcher

PRODUCT_ID = "1005001234567890"

MIRRORS = [
    "{base_url}/item/{product_id}.html",
    "https://m.aliexpress.com/item/{product_id}.html",
    "https://www.aliexpress.us/item/{product_id}.html",
]


@pytest.fixture
def fetcher(mock_session):
    return MirrorFetcher(
        base_url="https://www.aliexpress.com/",
        mirrors=MIRRORS,
        headers={"User-Agent": "test-agent"},
        timeout=5,
        session=mock_session,
    )


class TestMirrorUrls:
    def test_expands_templates_in_order(self, fetcher):
        assert fetcher.mirror_urls(PRODUCT_ID) == [
            f"https://www.aliexpress.com/item/{PRODUCT_ID}.html",
            f"https://m.aliexpress.com/item/{PRODUCT_ID}.html",
            f"https://www.aliexpress.us/item/{PRODUCT_ID}.html",
        ]

    def test_from_settings(self, importer_settings, mock_session):
        fetcher = MirrorFetcher.from_settings(importer_settings, session=mock_session)
        assert fetcher.mirror_urls(PRODUCT_ID) == [f"https://www.aliexpress.com/item/{PRODUCT_ID}.html"]
        assert fetcher.timeout == 5
        assert fetcher.headers == {"User-Agent": "test-agent"}


class TestFetch:
    def test_first_mirror_success(self, fetcher, mock_session, fake_response):
        mock_session.get.return_value = fake_response(200, "<html>ok</html>")

        result = fetcher.fetch(PRODUCT_ID)

        assert result.url == f"https://www.aliexpress.com/item/{PRODUCT_ID}.html"
        assert result.status_code == 200
        assert result.body == "<html>ok</html>"
        assert mock_session.get.call_count == 1

    def test_sends_headers_and_timeout(self, fetcher, mock_session, fake_response):
        mock_session.get.return_value = fake_response(200, "x")

        fetcher.fetch(PRODUCT_ID)

        _, kwargs = mock_session.get.call_args
        assert kwargs["headers"] == {"User-Agent": "test-agent"}
        assert kwargs["timeout"] == 5

    def test_timeout_advances_to_next_mirror(self, fetcher, mock_session, fake_response):
        mock_session.get.side_effect = [
            requests.Timeout("timed out"),
            fake_response(200, "<html>mobile</html>"),
        ]

        result = fetcher.fetch(PRODUCT_ID)

        assert result.url == f"https://m.aliexpress.com/item/{PRODUCT_ID}.html"
        assert result.body == "<html>mobile</html>"

    def test_server_error_advances_to_next_mirror(self, fetcher, mock_session, fake_response):
        mock_session.get.side_effect = [
            fake_response(503, "unavailable"),
            fake_response(502, "bad gateway"),
            fake_response(200, "<html>us</html>"),
        ]

        result = fetcher.fetch(PRODUCT_ID)

        assert result.url == f"https://www.aliexpress.us/item/{PRODUCT_ID}.html"
        assert mock_session.get.call_count == 3

    def test_client_error_page_is_content(self, fetcher, mock_session, fake_response):
        mock_session.get.return_value = fake_response(404, "<html>soft error</html>")

        result = fetcher.fetch(PRODUCT_ID)

        assert result.status_code == 404
        assert result.body == "<html>soft error</html>"
        assert mock_session.get.call_count == 1

    def test_all_mirrors_failed(self, fetcher, mock_session, fake_response):
        mock_session.get.side_effect = [
            requests.ConnectionError("refused"),
            requests.Timeout("timed out"),
            fake_response(500, "error"),
        ]

        with pytest.raises(AllMirrorsFailed) as exc_info:
            fetcher.fetch(PRODUCT_ID)

        error = exc_info.value
        assert error.product_id == PRODUCT_ID
        assert len(error.attempts) == 3
        assert "ConnectionError" in error.attempts[0].error
        assert error.attempts[2].error == "HTTP 500"
        assert "All 3 mirrors failed" in str(error)

    def test_none_body_becomes_empty(self, fetcher, mock_session, fake_response):
        response = fake_response(200)
        response.text = None
        mock_session.get.return_value = response

        assert fetcher.fetch(PRODUCT_ID).body == ""


class TestClose:
    def test_injected_session_left_open(self, fetcher, mock_session):
        fetcher.close()
        mock_session.close.assert_not_called()

    def test_own_session_closed(self):
        with patch("catalog_import.extraction.fetcher.requests.Session") as session_cls:
            fetcher = MirrorFetcher(mirrors=MIRRORS)
            assert fetcher.session is session_cls.return_value
            fetcher.close()

        session_cls.return_value.close.assert_called_once()
