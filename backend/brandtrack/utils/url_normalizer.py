"""
URL normalization
Canonical domain keys so that example.com, www.example.com and
https://Example.com/page/ are grouped as the same tracked brand
"""

import re

_PROTOCOL_RE = re.compile(r"^https?://")
_WWW_RE = re.compile(r"^www\.")


def _normalize_once(value: str) -> str:
    value = value.strip().lower()
    value = _PROTOCOL_RE.sub("", value)
    value = _WWW_RE.sub("", value)
    if value.endswith("/"):
        value = value[:-1]
    return value.split("/", 1)[0].strip()


def normalize_url(url) -> str:
    """
    Normalize a URL to its bare domain for comparison.

    Lowercases, strips protocol, leading www. and trailing slash, then keeps
    only the part before the first remaining slash. Anything that is not a
    non-empty string normalizes to "".

    The steps are repeated until the value stops changing, so the result is
    always a fixed point (normalize_url(normalize_url(x)) == normalize_url(x)).
    """
    if not url or not isinstance(url, str):
        return ""

    previous = None
    normalized = url
    while normalized != previous:
        previous = normalized
        normalized = _normalize_once(normalized)

    return normalized


def urls_match(url1, url2) -> bool:
    """Check if two URLs refer to the same domain after normalization"""
    return normalize_url(url1) == normalize_url(url2)
