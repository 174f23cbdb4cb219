"""Option constructors applied to a :class:`RequestOptions` builder.

Options never raise. An option that cannot be applied records the failure on
the builder and dispatch rejects the request before any network I/O. Options
that can fail are no-ops once an earlier error has been recorded.
"""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Mapping, Sequence, Union
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from .request_options import Body, Option, RequestOptions
from .security import PROXY_SCHEMES, parse_url


JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

QueryValue = Union[str, Sequence[str]]


def with_header(key: str, value: str) -> Option:
    """Set a header, replacing any existing values for ``key``."""

    def apply(request_options: RequestOptions) -> None:
        request_options.headers[str(key)] = str(value)

    return apply


def with_headers(headers: Mapping[str, str]) -> Option:
    """Set several headers, replacing existing values key by key."""

    def apply(request_options: RequestOptions) -> None:
        for key, value in headers.items():
            request_options.headers[str(key)] = str(value)

    return apply


def with_query(query: Mapping[str, QueryValue]) -> Option:
    """Append query parameters; repeated keys accumulate."""

    def apply(request_options: RequestOptions) -> None:
        for key, value in query.items():
            values = [value] if isinstance(value, str) else list(value)
            request_options.query.setdefault(key, []).extend(str(v) for v in values)

    return apply


def with_timeout(timeout: float | timedelta) -> Option:
    """Bound the call with ``timeout`` seconds. Zero leaves the default."""

    def apply(request_options: RequestOptions) -> None:
        if isinstance(timeout, timedelta):
            request_options.timeout = timeout.total_seconds()
        else:
            request_options.timeout = float(timeout)

    return apply


def with_decompress_gzip() -> Option:
    """Decode the body even when the caller negotiated ``Accept-Encoding``."""

    def apply(request_options: RequestOptions) -> None:
        request_options.decompress_gzip = True

    return apply


def _encode_json(value: object) -> bytes:
    if isinstance(value, BaseModel):
        return value.model_dump_json().encode()
    return json.dumps(value, separators=(",", ":"), allow_nan=False).encode()


def with_json(value: object) -> Option:
    """Send ``value`` as a JSON body.

    ``Content-Type`` is only set when the caller has not set one already.
    """

    def apply(request_options: RequestOptions) -> None:
        if request_options.error is not None:
            return
        try:
            payload = _encode_json(value)
        except (TypeError, ValueError) as exc:
            request_options.fail(exc)
            return
        request_options.body = payload
        if "content-type" not in request_options.headers:
            request_options.headers["Content-Type"] = JSON_CONTENT_TYPE

    return apply


def with_form(values: Mapping[str, str]) -> Option:
    """Send ``values`` url-encoded. Always replaces ``Content-Type``."""

    def apply(request_options: RequestOptions) -> None:
        if request_options.error is not None:
            return
        encoded = urlencode(sorted((str(k), str(v)) for k, v in values.items()))
        request_options.body = encoded.encode()
        request_options.headers["Content-Type"] = FORM_CONTENT_TYPE

    return apply


def with_body(body: Body) -> Option:
    """Send ``body`` as-is. Iterables and file objects are consumed once."""

    def apply(request_options: RequestOptions) -> None:
        request_options.body = body

    return apply


def with_cookies(*cookies: tuple[str, str]) -> Option:
    """Append ``(name, value)`` cookie pairs."""

    def apply(request_options: RequestOptions) -> None:
        request_options.cookies.extend((str(name), str(value)) for name, value in cookies)

    return apply


def with_proxy(url: str) -> Option:
    """Route this call through the proxy at ``url``."""

    def apply(request_options: RequestOptions) -> None:
        if request_options.error is not None:
            return
        try:
            parse_url(url, schemes=PROXY_SCHEMES)
        except ValueError as exc:
            request_options.fail(exc)
            return
        request_options.proxy = url

    return apply


def with_redirect(max_redirects: int) -> Option:
    """Follow at most ``max_redirects`` redirects; 0 follows none.

    A redirect beyond the cap is returned as the final response.
    """

    def apply(request_options: RequestOptions) -> None:
        request_options.max_redirects = max(0, int(max_redirects))

    return apply


def with_transport(transport: httpx.BaseTransport) -> Option:
    """Send this call through ``transport`` instead of the default one."""

    def apply(request_options: RequestOptions) -> None:
        request_options.transport = transport

    return apply
