"""Sessions: reusable default options prepended to every call."""

from __future__ import annotations

from typing import Optional

from . import client
from .request_options import Option
from .response import Response


class Session:
    """Holds default options applied before the options of each call.

    Per-call options are folded after the defaults, so a per-call option for
    the same key (a header, the timeout, ...) replaces the default. The
    defaults are copied on construction and never change, so one session can
    be shared between threads.
    """

    def __init__(self, *options: Optional[Option]) -> None:
        self._options: tuple[Optional[Option], ...] = tuple(options)

    @property
    def default_options(self) -> tuple[Optional[Option], ...]:
        return self._options

    def with_options(self, *options: Optional[Option]) -> "Session":
        """Return a new session with ``options`` appended to the defaults."""
        return Session(*self._options, *options)

    def request(self, method: str, url: str, *options: Optional[Option]) -> Response:
        return client.request(method, url, *self._options, *options)

    def get(self, url: str, *options: Optional[Option]) -> Response:
        return self.request("GET", url, *options)

    def post(self, url: str, *options: Optional[Option]) -> Response:
        return self.request("POST", url, *options)

    def put(self, url: str, *options: Optional[Option]) -> Response:
        return self.request("PUT", url, *options)

    def patch(self, url: str, *options: Optional[Option]) -> Response:
        return self.request("PATCH", url, *options)

    def delete(self, url: str, *options: Optional[Option]) -> Response:
        return self.request("DELETE", url, *options)

    def head(self, url: str, *options: Optional[Option]) -> Response:
        return self.request("HEAD", url, *options)

    def options(self, url: str, *options: Optional[Option]) -> Response:
        return self.request("OPTIONS", url, *options)
