"""Dispatch of one configured request over a per-call httpx client."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from .exceptions import (
    NetworkError,
    RequestBuildError,
    RequestTimeoutError,
    StatusError,
)
from .request_options import (
    HTTP_METHODS,
    Option,
    RequestOptions,
    build_request_options,
    build_url,
)
from .response import Response
from .security import sanitize_cookie_name, sanitize_cookie_value, sanitize_headers


logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS = 10
DEFAULT_USER_AGENT = "reqkit/0.1.0"


def _client_kwargs(request_options: RequestOptions) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "headers": {"User-Agent": DEFAULT_USER_AGENT},
        "max_redirects": DEFAULT_MAX_REDIRECTS,
        # Unset means no limit; a positive timeout is enforced per hop in _send_hop.
        "timeout": request_options.timeout if request_options.timeout > 0 else None,
    }
    if request_options.proxy is not None:
        kwargs["proxy"] = request_options.proxy
    if request_options.transport is not None:
        kwargs["transport"] = request_options.transport
    return kwargs


def _cookie_header(existing: str | None, cookies: list[tuple[str, str]]) -> str:
    pairs = []
    for name, value in cookies:
        name = sanitize_cookie_name(name)
        if name:
            pairs.append(f"{name}={sanitize_cookie_value(value)}")
    return "; ".join(([existing] if existing else []) + pairs)


def _build_request(client: httpx.Client, request_options: RequestOptions, url: httpx.URL) -> httpx.Request:
    headers = httpx.Headers(request_options.headers)
    if request_options.cookies:
        cookie = _cookie_header(headers.get("cookie"), request_options.cookies)
        if cookie:
            headers["Cookie"] = cookie
    return client.build_request(
        request_options.method,
        url,
        headers=headers,
        content=request_options.body,
    )


def _send_hop(client: httpx.Client, request: httpx.Request, deadline: float | None) -> httpx.Response:
    if deadline is not None:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise httpx.ReadTimeout("request deadline exceeded", request=request)
        # Redirect requests share the extensions dict of the first hop.
        request.extensions = {**request.extensions, "timeout": httpx.Timeout(remaining).as_dict()}
    return client.send(request, stream=True, follow_redirects=False)


def _send(
    client: httpx.Client,
    request: httpx.Request,
    max_redirects: int | None,
    deadline: float | None = None,
) -> httpx.Response:
    """Send ``request`` and follow redirects by hand.

    Every hop, redirects included, gets only the time left before ``deadline``.
    With an explicit cap the last redirect response is returned as is; with the
    default cap, running past it is a ``TooManyRedirects`` transport error.
    """
    cap = DEFAULT_MAX_REDIRECTS if max_redirects is None else max_redirects
    response = _send_hop(client, request, deadline)
    followed = 0
    while response.next_request is not None:
        if followed >= cap:
            if max_redirects is None:
                response.close()
                raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=response.request)
            logger.debug("Redirect limit %d reached at %s", cap, response.url)
            break
        next_request = response.next_request
        response.close()
        response = _send_hop(client, next_request, deadline)
        followed += 1
    return response


def _should_decompress(request_options: RequestOptions) -> bool:
    # Without a caller-set Accept-Encoding the transport negotiated the
    # encoding itself and decodes it transparently.
    return request_options.decompress_gzip or "accept-encoding" not in request_options.headers


def request(method: str, url: str, *options: Optional[Option]) -> Response:
    """Build and send one request.

    Raises :class:`RequestBuildError` before any I/O when the options or the
    URL are invalid, :class:`RequestTimeoutError` or :class:`NetworkError` for
    transport failures, and :class:`StatusError` for non-2xx responses. The
    status error carries the still-readable response.
    """
    method = method.upper()
    request_options = build_request_options(method, url, options)
    deadline = time.monotonic() + request_options.timeout if request_options.timeout > 0 else None
    if request_options.error is not None:
        raise RequestBuildError("invalid request options", cause=request_options.error) from request_options.error
    if method not in HTTP_METHODS:
        raise RequestBuildError(f"unsupported method {method!r}")

    try:
        target = build_url(request_options)
    except ValueError as exc:
        raise RequestBuildError("invalid url", cause=exc) from exc

    try:
        client = httpx.Client(**_client_kwargs(request_options))
    except (ValueError, ImportError) as exc:
        raise RequestBuildError("invalid transport configuration", cause=exc) from exc

    try:
        outbound = _build_request(client, request_options, target)
    except (TypeError, ValueError) as exc:
        client.close()
        raise RequestBuildError("invalid request body", cause=exc) from exc

    logger.debug(
        "Dispatching %s %s headers=%s",
        method,
        target,
        sanitize_headers(outbound.headers),
    )
    try:
        raw = _send(client, outbound, request_options.max_redirects, deadline)
    except httpx.TimeoutException as exc:
        client.close()
        logger.debug("Request timed out: %s %s", method, target)
        raise RequestTimeoutError("request timed out", cause=exc) from exc
    except httpx.RequestError as exc:
        client.close()
        logger.debug("Network error for %s %s: %r", method, target, exc)
        raise NetworkError("network error", cause=exc) from exc

    response = Response(raw, client=client, decompress=_should_decompress(request_options))
    logger.debug("Received %d for %s %s", response.status_code, method, target)
    if not response.is_success:
        raise StatusError(response.status_code, response)
    return response


def get(url: str, *options: Optional[Option]) -> Response:
    """Send a GET request."""
    return request("GET", url, *options)


def post(url: str, *options: Optional[Option]) -> Response:
    """Send a POST request."""
    return request("POST", url, *options)


def put(url: str, *options: Optional[Option]) -> Response:
    """Send a PUT request."""
    return request("PUT", url, *options)


def patch(url: str, *options: Optional[Option]) -> Response:
    """Send a PATCH request."""
    return request("PATCH", url, *options)


def delete(url: str, *options: Optional[Option]) -> Response:
    """Send a DELETE request."""
    return request("DELETE", url, *options)


def head(url: str, *options: Optional[Option]) -> Response:
    """Send a HEAD request."""
    return request("HEAD", url, *options)


def options(url: str, *opts: Optional[Option]) -> Response:
    """Send an OPTIONS request."""
    return request("OPTIONS", url, *opts)
