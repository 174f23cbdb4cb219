"""Per-call request configuration assembled from option functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Union
from urllib.parse import parse_qsl, urlencode

import httpx

from .security import parse_url


Body = Union[bytes, str, Iterable[bytes]]

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


@dataclass
class RequestOptions:
    method: str
    url: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    query: dict[str, list[str]] = field(default_factory=dict)
    body: Body | None = None
    timeout: float = 0.0
    cookies: list[tuple[str, str]] = field(default_factory=list)
    proxy: str | None = None
    max_redirects: int | None = None
    decompress_gzip: bool = False
    transport: httpx.BaseTransport | None = None
    error: Exception | None = None

    def fail(self, error: Exception) -> None:
        """Record ``error`` unless an earlier one is already set."""
        if self.error is None:
            self.error = error


Option = Callable[[RequestOptions], None]


def build_request_options(method: str, url: str, options: Iterable[Optional[Option]]) -> RequestOptions:
    """Fold ``options`` left to right into a fresh configuration."""
    request_options = RequestOptions(method=method, url=url)
    for option in options:
        if option is not None:
            option(request_options)
    return request_options


def build_url(request_options: RequestOptions) -> httpx.URL:
    """Compose the target URL with the additive query parameters.

    Without additive parameters the target is returned as parsed, so its query
    string is kept verbatim. Otherwise the existing and additive parameters are
    merged and re-encoded sorted by key.
    """
    url = parse_url(request_options.url)
    if not request_options.query:
        return url

    merged: dict[str, list[str]] = {}
    for key, value in parse_qsl(url.query.decode("ascii"), keep_blank_values=True):
        merged.setdefault(key, []).append(value)
    for key, values in request_options.query.items():
        merged.setdefault(key, []).extend(values)

    encoded = urlencode([(key, value) for key in sorted(merged) for value in merged[key]])
    return url.copy_with(query=encoded.encode("ascii"))
