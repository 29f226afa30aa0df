"""URL normalization used as the article identity key."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = frozenset(
    {
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        "fbclid",
        "gclid",
        "msclkid",
        "_ga",
        "mc_cid",
        "mc_eid",
    }
)


def normalize_url(url: str) -> str:
    """Normalize a URL to a canonical form for deduplication.

    Forces https, lowercases the host, drops a leading ``www.``, removes
    tracking query parameters and the fragment, and strips trailing slashes.
    Values that do not parse as absolute URLs are returned stripped.
    """
    value = (url or "").strip()
    try:
        parts = urlsplit(value)
    except ValueError:
        return value
    if not parts.scheme or not parts.netloc:
        return value

    scheme = parts.scheme.lower()
    if scheme == "http":
        scheme = "https"

    netloc = parts.netloc.lower()
    if netloc.startswith("www."):
        netloc = netloc[4:]

    query = [
        (key, val)
        for key, val in parse_qsl(parts.query, keep_blank_values=True)
        if key not in TRACKING_PARAMS
    ]

    path = parts.path.rstrip("/")
    normalized = urlunsplit((scheme, netloc, path, urlencode(query), ""))
    return normalized.rstrip("/")
