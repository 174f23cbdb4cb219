"""Response wrapper with a lazy, read-once body."""

from __future__ import annotations

import json as _json
import threading
from typing import Any, TypeVar, overload

import httpx
from pydantic import TypeAdapter, ValidationError

from .exceptions import NilResponseError, NoContentError, ResponseError


T = TypeVar("T")


class Response:
    """Wraps an ``httpx.Response`` opened in streaming mode.

    The body is read on the first call to :meth:`bytes`, :meth:`text` or
    :meth:`json`; the stream and the per-call client are closed right after
    that read, whether it succeeded or not. Later calls return the cached
    bytes or re-raise the cached error.

    Reads from several threads on one wrapper are the caller's to serialize.
    The lock only guarantees that the body is read once.
    """

    def __init__(
        self,
        raw: httpx.Response | None,
        *,
        client: httpx.Client | None = None,
        decompress: bool = True,
    ) -> None:
        self.raw = raw
        self.status_code = raw.status_code if raw is not None else 0
        self.headers = raw.headers if raw is not None else httpx.Headers()
        self._client = client
        self._decompress = decompress
        self._lock = threading.Lock()
        self._consumed = False
        self._body = b""
        self._body_error: ResponseError | None = None

    def __enter__(self) -> "Response":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"

    @property
    def url(self) -> httpx.URL | None:
        if self.raw is None:
            return None
        try:
            return self.raw.url
        except RuntimeError:
            # Built without a request, e.g. by a test double.
            return None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def close(self) -> None:
        """Release the underlying stream without reading it."""
        if self.raw is not None:
            self.raw.close()
        if self._client is not None:
            self._client.close()
            self._client = None

    def bytes(self) -> bytes:
        if self.raw is None:
            raise NilResponseError("nil response")
        with self._lock:
            if not self._consumed:
                self._consumed = True
                try:
                    # A response built from in-memory content has no raw stream left.
                    if self._decompress or self.raw.is_stream_consumed:
                        chunks = self.raw.iter_bytes()
                    else:
                        chunks = self.raw.iter_raw()
                    self._body = b"".join(chunks)
                except (httpx.HTTPError, httpx.StreamError) as exc:
                    self._body_error = ResponseError("failed to read response body", cause=exc)
                finally:
                    self.close()
        if self._body_error is not None:
            raise self._body_error
        return self._body

    def text(self) -> str:
        body = self.bytes()
        encoding = self.raw.charset_encoding if self.raw is not None else None
        try:
            return body.decode(encoding or "utf-8", errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")

    @overload
    def json(self) -> Any: ...

    @overload
    def json(self, target: type[T]) -> T: ...

    def json(self, target: Any = None) -> Any:
        """Decode the body as JSON, validated into ``target`` when given.

        ``target`` may be any type pydantic can validate: a model class,
        ``dict[str, int]``, a dataclass, and so on.
        """
        body = self.bytes()
        if not body:
            raise NoContentError("empty response body")
        try:
            if target is None:
                return _json.loads(body)
            return TypeAdapter(target).validate_json(body)
        except (ValueError, ValidationError) as exc:
            raise ResponseError("failed to decode response body", cause=exc) from exc
