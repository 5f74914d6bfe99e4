"""Utility functions for AI traffic analytics."""

from .url_utils import (
    ParsedReferrer,
    lower_keys,
    normalize_domain,
    page_path_from_url,
    parse_query_string,
    parse_referrer,
)

__all__ = [
    "ParsedReferrer",
    "lower_keys",
    "normalize_domain",
    "page_path_from_url",
    "parse_query_string",
    "parse_referrer",
]
