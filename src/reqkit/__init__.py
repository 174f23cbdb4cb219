"""Functional-options HTTP requests over httpx."""

from __future__ import annotations

from .client import delete, get, head, options, patch, post, put, request
from .exceptions import (
    NetworkError,
    NilResponseError,
    NoContentError,
    ReqkitError,
    RequestBuildError,
    RequestTimeoutError,
    ResponseError,
    StatusError,
)
from .opts import (
    with_body,
    with_cookies,
    with_decompress_gzip,
    with_form,
    with_header,
    with_headers,
    with_json,
    with_proxy,
    with_query,
    with_redirect,
    with_timeout,
    with_transport,
)
from .request_options import Option, RequestOptions
from .response import Response
from .session import Session

__version__ = "0.1.0"

__all__ = [
    "NetworkError",
    "NilResponseError",
    "NoContentError",
    "Option",
    "ReqkitError",
    "RequestBuildError",
    "RequestOptions",
    "RequestTimeoutError",
    "Response",
    "ResponseError",
    "Session",
    "StatusError",
    "delete",
    "get",
    "head",
    "options",
    "patch",
    "post",
    "put",
    "request",
    "with_body",
    "with_cookies",
    "with_decompress_gzip",
    "with_form",
    "with_header",
    "with_headers",
    "with_json",
    "with_proxy",
    "with_query",
    "with_redirect",
    "with_timeout",
    "with_transport",
]
