"""URL validation, cookie sanitizing and log redaction helpers."""

from __future__ import annotations

import logging
import string
from typing import Iterable, Mapping
from urllib.parse import urlparse

import httpx


logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "set-cookie",
    "x-api-key",
}

REDACTED = "[REDACTED]"

TARGET_SCHEMES = frozenset({"http", "https"})
PROXY_SCHEMES = frozenset({"http", "https", "socks5", "socks5h"})

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` that is safe to log.

    Credential headers lose their whole value. The ``Cookie`` header keeps
    each cookie name so a debug log still shows which cookies went out, but
    every value is replaced::

        >>> sanitize_headers({"Cookie": "session=abc; theme=dark"})
        {'Cookie': 'session=[REDACTED]; theme=[REDACTED]'}
    """
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        lowered = key.lower()
        if lowered == "cookie":
            redacted[key] = _redact_cookie_pairs(value)
        elif lowered in SENSITIVE_HEADERS:
            redacted[key] = REDACTED
        else:
            redacted[key] = value
    return redacted


def _redact_cookie_pairs(value: str) -> str:
    pairs = []
    for pair in value.split(";"):
        name, sep, _ = pair.strip().partition("=")
        pairs.append(f"{name}={REDACTED}" if sep else REDACTED)
    return "; ".join(pairs)


def sanitize_cookie_name(name: str) -> str:
    """Make ``name`` safe for a ``Cookie`` header.

    Line breaks become ``-``; any other character outside the HTTP token set
    is dropped. An empty result means the cookie cannot be sent.
    """
    name = name.replace("\r", "-").replace("\n", "-")
    return "".join(ch for ch in name if ch in _TOKEN_CHARS)


def sanitize_cookie_value(value: str) -> str:
    """Drop bytes a cookie value may not carry, quoting it when needed.

    Printable ASCII is kept except ``"``, ``;`` and ``\\``. A value that
    still holds a space or a comma is wrapped in double quotes.
    """
    kept = "".join(ch for ch in value if 0x20 <= ord(ch) < 0x7F and ch not in '";\\')
    if kept != value:
        logger.warning("Dropped invalid bytes from a cookie value")
    if " " in kept or "," in kept:
        return f'"{kept}"'
    return kept


def parse_url(url: str, *, schemes: Iterable[str] = TARGET_SCHEMES) -> httpx.URL:
    """Parse an absolute URL, rejecting unsupported schemes and missing hosts.

    Raises ``ValueError`` with a short reason; callers turn it into the error
    category that fits their stage.
    """
    if not isinstance(url, str) or not url:
        raise ValueError("url must be a non-empty string")
    if "\x00" in url:
        raise ValueError("url contains invalid characters")
    parsed = urlparse(url)
    if not parsed.scheme:
        raise ValueError(f"missing protocol scheme in {url!r}")
    allowed = frozenset(schemes)
    if parsed.scheme.lower() not in allowed:
        raise ValueError(f"unsupported protocol scheme {parsed.scheme!r}")
    if not parsed.netloc:
        raise ValueError(f"missing host in {url!r}")
    try:
        result = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ValueError(str(exc)) from exc
    if not result.host:
        raise ValueError(f"missing host in {url!r}")
    return result
