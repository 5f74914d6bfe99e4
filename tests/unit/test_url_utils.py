"""
Unit tests for url_utils module.
"""

import pytest

from ai_traffic_analytics.utils.url_utils import (
    lower_keys,
    normalize_domain,
    page_path_from_url,
    parse_query_string,
    parse_referrer,
)


class TestNormalizeDomain:
    """Tests for normalize_domain function."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("example.com", "example.com"),
            ("  Example.COM  ", "example.com"),
            ("https://www.example.com/", "example.com"),
            ("http://shop.example.com//", "shop.example.com"),
            ("www.example.com", "example.com"),
        ],
    )
    def test_normalization(self, value, expected):
        assert normalize_domain(value) == expected

    def test_empty_values(self):
        assert normalize_domain("") == ""
        assert normalize_domain(None) == ""
        assert normalize_domain("  /  ") == ""

    def test_only_leading_www_removed(self):
        assert normalize_domain("docs.www.example.com") == "docs.www.example.com"


class TestParseReferrer:
    """Tests for parse_referrer function."""

    def test_full_url(self):
        parsed = parse_referrer("https://Chat.OpenAI.com/C/abc?Model=4")

        assert parsed.host == "chat.openai.com"
        assert parsed.path == "/c/abc"
        assert parsed.query == {"Model": "4"}
        assert parsed.host_and_path == "chat.openai.com/c/abc"

    def test_missing_scheme(self):
        assert parse_referrer("perplexity.ai/search").host == "perplexity.ai"

    def test_empty(self):
        assert parse_referrer("") is None
        assert parse_referrer(None) is None
        assert parse_referrer("   ") is None

    def test_no_host(self):
        assert parse_referrer("https:///path-only") is None


class TestQueryHelpers:
    """Tests for query string helpers."""

    def test_parse_query_string(self):
        assert parse_query_string("?utm_source=chatgpt&utm_medium=ai") == {
            "utm_source": "chatgpt",
            "utm_medium": "ai",
        }

    def test_first_value_wins(self):
        assert parse_query_string("a=1&a=2") == {"a": "1"}

    def test_blank_values_kept(self):
        assert parse_query_string("ref=") == {"ref": ""}

    def test_empty(self):
        assert parse_query_string("") == {}
        assert parse_query_string(None) == {}

    def test_lower_keys(self):
        assert lower_keys({"UTM_Source": "X"}) == {"utm_source": "X"}
        assert lower_keys(None) == {}


class TestPagePathFromUrl:
    """Tests for page_path_from_url function."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com/blog/post?x=1", "/blog/post"),
            ("https://example.com", "/"),
            ("/docs?x=1", "/docs"),
            ("example.com/pricing", "/pricing"),
        ],
    )
    def test_paths(self, url, expected):
        assert page_path_from_url(url) == expected
