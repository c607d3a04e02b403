"""Tests for catalog_import/common/text_utils.py"""

from catalog_import.common.text_utils import absolute_url, clean_text


class TestCleanText:
    def test_collapses_whitespace(self):
        assert clean_text("  Spaced \n\t Title  ") == "Spaced Title"

    def test_none_and_empty(self):
        assert clean_text(None) == ""
        assert clean_text("") == ""

    def test_non_string_converted(self):
        assert clean_text(12000001) == "12000001"


class TestAbsoluteUrl:
    def test_protocol_relative(self):
        assert absolute_url("//ae01.alicdn.com/kf/a.jpg") == "https://ae01.alicdn.com/kf/a.jpg"

    def test_stray_leading_slash_before_host(self):
        assert absolute_url("/ae01.alicdn.com/kf/a.jpg") == "https://ae01.alicdn.com/kf/a.jpg"

    def test_absolute_unchanged(self):
        assert absolute_url("https://ae01.alicdn.com/kf/a.jpg") == "https://ae01.alicdn.com/kf/a.jpg"

    def test_site_relative_path_unchanged(self):
        assert absolute_url("/item/1.html") == "/item/1.html"

    def test_empty(self):
        assert absolute_url(None) == ""
        assert absolute_url("   ") == ""
