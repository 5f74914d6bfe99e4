"""
URL utility functions.

Helpers for normalizing site domains and taking apart referrer URLs and
query strings before classification.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional
from urllib.parse import parse_qsl, urlparse


@dataclass(frozen=True)
class ParsedReferrer:
    """Lower-cased pieces of a referrer URL."""

    host: str
    path: str
    query: dict[str, str] = field(default_factory=dict)

    @property
    def host_and_path(self) -> str:
        """Host followed by path, e.g. 'bing.com/chat'."""
        return f"{self.host}{self.path}"


def normalize_domain(domain: Optional[str]) -> str:
    """
    Normalize a site domain for storage.

    Strips whitespace, lower-cases, and removes the scheme, a leading
    "www." and trailing slashes.

    Examples:
        >>> normalize_domain("https://www.Example.com/")
        'example.com'
        >>> normalize_domain("shop.example.com")
        'shop.example.com'
        >>> normalize_domain("   ")
        ''
    """
    if not domain:
        return ""

    value = domain.strip().lower()

    if "://" in value:
        value = value.split("://", 1)[1]

    if value.startswith("www."):
        value = value[len("www."):]

    return value.rstrip("/")


def parse_referrer(referrer: Optional[str]) -> Optional[ParsedReferrer]:
    """
    Parse a referrer URL into host, path and query parameters.

    Returns None for an empty referrer or one without a host. Host and path
    are lower-cased so callers can match patterns case-insensitively.

    Examples:
        >>> parse_referrer("https://chat.openai.com/c/abc").host
        'chat.openai.com'
        >>> parse_referrer("") is None
        True
    """
    if not referrer or not referrer.strip():
        return None

    value = referrer.strip()
    # urlparse needs a scheme to find the host
    if "://" not in value:
        value = "https://" + value

    try:
        parsed = urlparse(value)
        host = (parsed.hostname or "").lower()
    except ValueError:
        return None

    if not host:
        return None

    return ParsedReferrer(
        host=host,
        path=parsed.path.lower(),
        query=parse_query_string(parsed.query),
    )


def parse_query_string(query: Optional[str]) -> dict[str, str]:
    """
    Parse a query string into a flat dict.

    A leading "?" is ignored and the first value wins for repeated keys.

    Examples:
        >>> parse_query_string("?utm_source=chatgpt&utm_medium=ai")
        {'utm_source': 'chatgpt', 'utm_medium': 'ai'}
    """
    if not query:
        return {}

    params: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        params.setdefault(key, value)
    return params


def lower_keys(params: Optional[Mapping[str, str]]) -> dict[str, str]:
    """Copy of a parameter mapping with lower-cased keys."""
    if not params:
        return {}
    return {str(k).lower(): "" if v is None else str(v) for k, v in params.items()}


def page_path_from_url(url: str) -> str:
    """
    Extract the path component of a page URL.

    Examples:
        >>> page_path_from_url("https://example.com/blog/post?x=1")
        '/blog/post'
        >>> page_path_from_url("https://example.com")
        '/'
        >>> page_path_from_url("/docs?x=1")
        '/docs'
    """
    if "://" not in url and not url.startswith("/"):
        url = "https://" + url
    path = urlparse(url).path
    return path or "/"
