"""Tests for catalog_import/extraction/listing_search.py"""

from unittest.mock import patch

import pytest
import requests

from catalog_import.extraction.listing_search import ListingSearch
from catalog_import.extraction.pricing import PriceCalculator


@pytest.fixture
def search(importer_settings, mock_session):
    return ListingSearch.from_settings(importer_settings, calculator=PriceCalculator(30), session=mock_session)


class TestBuildParams:
    def test_defaults(self, search):
        params = search.build_params("usb cable")
        assert params["SearchText"] == "usb cable"
        assert params["SortType"] == "default"
        assert params["page"] == "1"

    def test_page_and_sort(self, search):
        params = search.build_params("usb cable", page=3, sort="total_tranpro_desc")
        assert params["page"] == "3"
        assert params["SortType"] == "total_tranpro_desc"

    def test_page_never_below_one(self, search):
        assert search.build_params("x", page=0)["page"] == "1"

    def test_non_numeric_page_falls_back_to_one(self, search):
        assert search.build_params("x", page="abc")["page"] == "1"
        assert search.build_params("x", page=None)["page"] == "1"
        assert search.build_params("x", page="4")["page"] == "4"


class TestLocaleCookie:
    def test_default_locale(self, search):
        assert search.locale_cookie() == "aep_usuc_f=site=glo&c_tp=USD&region=US&b_locale=en_US"

    def test_partial_override(self, search):
        cookie = search.locale_cookie({"currency": "EUR"})
        assert "c_tp=EUR" in cookie
        assert "region=US" in cookie


class TestSearch:
    def test_parses_results(self, search, mock_session, fake_response, search_html):
        mock_session.get.return_value = fake_response(200, search_html)

        results = search.search("usb cable")

        assert [r.product_id for r in results] == [
            "1005001111111111", "1005002222222222", "1005003333333333",
        ]
        assert results[0].price == pytest.approx(4.55)

    def test_request_shape(self, search, mock_session, fake_response, search_html):
        mock_session.get.return_value = fake_response(200, search_html)

        search.search("  usb cable ", page=2, locale={"currency": "EUR"})

        args, kwargs = mock_session.get.call_args
        assert args[0] == "https://www.aliexpress.com/wholesale"
        assert kwargs["params"]["SearchText"] == "usb cable"
        assert kwargs["params"]["page"] == "2"
        assert "c_tp=EUR" in kwargs["headers"]["Cookie"]
        assert kwargs["timeout"] == 5

    def test_blank_keyword_does_not_fetch(self, search, mock_session):
        assert search.search("   ") == []
        mock_session.get.assert_not_called()

    def test_transport_error_returns_empty(self, search, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("refused")
        assert search.search("usb cable") == []

    def test_server_error_returns_empty(self, search, mock_session, fake_response, search_html):
        mock_session.get.return_value = fake_response(503, search_html)
        assert search.search("usb cable") == []

    def test_page_without_payload_returns_empty(self, search, mock_session, fake_response):
        mock_session.get.return_value = fake_response(200, "<html><body>captcha</body></html>")
        assert search.search("usb cable") == []

    def test_non_numeric_page_still_searches(self, search, mock_session, fake_response, search_html):
        mock_session.get.return_value = fake_response(200, search_html)

        results = search.search("usb cable", page="two")

        assert len(results) == 3
        assert mock_session.get.call_args[1]["params"]["page"] == "1"


class TestFirstPrice:
    def test_first_result_price(self, search, mock_session, fake_response, search_html):
        mock_session.get.return_value = fake_response(200, search_html)
        assert search.first_price("1005001234567890") == pytest.approx(4.55)

    def test_no_results(self, search, mock_session):
        mock_session.get.side_effect = requests.Timeout("timed out")
        assert search.first_price("1005001234567890") is None


class TestClose:
    def test_injected_session_left_open(self, search, mock_session):
        search.close()
        mock_session.close.assert_not_called()

    def test_own_session_closed(self):
        with patch("catalog_import.extraction.listing_search.requests.Session") as session_cls:
            search = ListingSearch()
            assert search.session is session_cls.return_value
            search.close()

        session_cls.return_value.close.assert_called_once()

    def test_close_without_session(self):
        ListingSearch().close()
