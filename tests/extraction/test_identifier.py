"""Tests for catalog_import/extraction/identifier.py"""

import pytest

from catalog_import.extraction.errors import UnresolvableReference
from catalog_import.extraction.identifier import resolve_product_id


class TestResolveProductId:
    @pytest.mark.parametrize("reference", [
        "https://www.aliexpress.com/item/1005001234567890.html",
        "https://www.aliexpress.com/item/1005001234567890.html?spm=a2g0o.home.0.0&gatewayAdapt=glo2usa",
        "https://www.aliexpress.us/item/1005001234567890.html",
        "https://m.aliexpress.com/item/1005001234567890.html",
        "https://www.aliexpress.com/i/1005001234567890.html",
        "https://www.aliexpress.ru/product/1005001234567890.html",
        "1005001234567890",
        "  1005001234567890  ",
    ])
    def test_known_shapes(self, reference):
        assert resolve_product_id(reference) == "1005001234567890"

    def test_item_path_wins_over_other_digit_runs(self):
        url = "https://www.aliexpress.com/item/1005001234567890.html?pdp_npi=4040000000000000"
        assert resolve_product_id(url) == "1005001234567890"

    def test_short_item_ids_on_item_path(self):
        assert resolve_product_id("https://www.aliexpress.com/item/32812345.html") == "32812345"

    def test_mobile_item_without_html_suffix(self):
        assert resolve_product_id("https://m.aliexpress.com/item/32812345") == "32812345"

    def test_app_short_link_token(self):
        assert resolve_product_id("https://a.aliexpress.com/_mKqTvXy") == "KqTvXy"

    def test_not_a_url_raises(self):
        with pytest.raises(UnresolvableReference) as exc_info:
            resolve_product_id("not-a-url")
        assert exc_info.value.reference == "not-a-url"
        assert "Could not extract product ID" in str(exc_info.value)

    def test_empty_raises(self):
        with pytest.raises(UnresolvableReference):
            resolve_product_id("   ")

    def test_non_string_raises(self):
        with pytest.raises(UnresolvableReference):
            resolve_product_id(None)

    def test_short_digit_run_not_an_id(self):
        with pytest.raises(UnresolvableReference):
            resolve_product_id("order 12345")

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_product_id("https://example.com/page")

    @pytest.mark.parametrize("reference", [
        "https://example.com/item/1234567890.html",
        "https://example.com/i/1234567890.html",
    ])
    def test_url_shape_independent_of_host(self, reference):
        assert resolve_product_id(reference) == "1234567890"
