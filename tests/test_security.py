from __future__ import annotations

import logging

import pytest

from reqkit.security import (
    PROXY_SCHEMES,
    parse_url,
    sanitize_cookie_name,
    sanitize_cookie_value,
    sanitize_headers,
)


def test_sanitize_headers_redacts_credentials() -> None:
    headers = {
        "Authorization": "Bearer abc",
        "Proxy-Authorization": "Basic xyz",
        "X-Api-Key": "k",
        "Accept": "application/json",
    }
    assert sanitize_headers(headers) == {
        "Authorization": "[REDACTED]",
        "Proxy-Authorization": "[REDACTED]",
        "X-Api-Key": "[REDACTED]",
        "Accept": "application/json",
    }


def test_sanitize_headers_keeps_cookie_names() -> None:
    assert sanitize_headers({"cookie": "session=abc; theme=dark; bare"}) == {
        "cookie": "session=[REDACTED]; theme=[REDACTED]; [REDACTED]",
    }


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("session", "session"),
        ("a\r\nb", "a--b"),
        ("a; b=c", "abc"),
        ("", ""),
    ],
)
def test_sanitize_cookie_name(raw: str, expected: str) -> None:
    assert sanitize_cookie_name(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("abc123", "abc123"),
        ("dark; admin=1", '"dark admin=1"'),
        ('say "hi"', '"say hi"'),
        ("a,b", '"a,b"'),
        ("line\nbreak\\", "linebreak"),
        ("café", "caf"),
    ],
)
def test_sanitize_cookie_value(raw: str, expected: str) -> None:
    assert sanitize_cookie_value(raw) == expected


def test_dropped_cookie_bytes_are_logged_without_the_value(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="reqkit.security")

    sanitize_cookie_value("secret;x")

    assert "Dropped invalid bytes" in caplog.text
    assert "secret" not in caplog.text


def test_parse_url_accepts_http_targets() -> None:
    url = parse_url("https://api.example.com:8443/v1?x=1")
    assert url.host == "api.example.com"
    assert url.port == 8443


@pytest.mark.parametrize(
    ("raw", "reason"),
    [
        ("://invalid", "scheme"),
        ("api.example.com", "scheme"),
        ("gopher://api.example.com", "unsupported"),
        ("https://", "host"),
        ("", "non-empty"),
        ("https://api.example.com/\x00", "invalid"),
    ],
)
def test_parse_url_rejects_bad_urls(raw: str, reason: str) -> None:
    with pytest.raises(ValueError, match=reason):
        parse_url(raw)


def test_parse_url_with_proxy_schemes() -> None:
    assert parse_url("socks5://127.0.0.1:1080", schemes=PROXY_SCHEMES).scheme == "socks5"
    with pytest.raises(ValueError):
        parse_url("socks5://127.0.0.1:1080")
