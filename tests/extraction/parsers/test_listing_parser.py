"""Tests for catalog_import/extraction/parsers/listing_parser.py"""

import pytest

from catalog_import.extraction.parsers.listing_parser import ListingParser
from catalog_import.extraction.pricing import PriceCalculator


@pytest.fixture
def parser():
    return ListingParser(PriceCalculator(30), default_currency="USD")


class TestParse:
    def test_three_items_in_order(self, parser, search_html):
        results = parser.parse(search_html)

        assert len(results) == 3
        assert [r.name for r in results] == [
            "USB C Cable 2m Fast Charging",
            "Braided Lightning Cable",
            "Mystery Cable Bundle",
        ]

    def test_full_item(self, parser, search_html):
        item = parser.parse(search_html)[0]

        assert item.product_id == "1005001111111111"
        assert item.original_price == pytest.approx(3.5)
        assert item.price == pytest.approx(4.55)
        assert item.currency == "USD"
        assert item.image == "https://ae01.alicdn.com/kf/cable.jpg"
        assert item.shipping.delivery_days == "7-15"
        assert item.seller.name == "Cable Shop"
        assert item.seller.rating == pytest.approx(96.5)
        assert item.rating.average == pytest.approx(4.7)
        assert item.rating.count == 2310

    def test_formatted_price_fallback(self, parser, search_html):
        item = parser.parse(search_html)[1]
        assert item.price == pytest.approx(13.0)

    def test_sparse_item_degrades(self, parser, search_html):
        item = parser.parse(search_html)[2]
        assert item.price == 0.0
        assert item.currency == "USD"
        assert item.image == ""
        assert item.shipping.delivery_days == "15-45"

    def test_no_payload(self, parser):
        assert parser.parse("<html><body></body></html>") == []
        assert parser.parse("") == []

    def test_later_statement_in_same_script(self, parser):
        html = (
            "<html><body><script>"
            'window._init_data_ = { data: {"root": {"fields": {"mods": {"itemList": {"content": ['
            '{"productId": "1005009999999999", "title": {"displayTitle": "Phone Stand"}}'
            "]}}}}} }\n"
            'window._dida_config_.extra = {"a": {"b": 1}};'
            "</script></body></html>"
        )
        results = parser.parse(html)

        assert len(results) == 1
        assert results[0].name == "Phone Stand"


class TestParseItems:
    def test_skips_non_objects(self, parser):
        results = parser.parse_items([{"productId": "1"}, None, "junk", {"productId": "2"}])
        assert [r.product_id for r in results] == ["1", "2"]
