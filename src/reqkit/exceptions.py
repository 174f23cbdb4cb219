"""Error taxonomy shared by dispatch and response materialization."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .response import Response


class ReqkitError(Exception):
    """Base exception for all reqkit failures."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        if self.cause is None:
            return str(self.args[0])
        return f"{self.args[0]}: {self.cause}"


class RequestBuildError(ReqkitError):
    """Raised when a request cannot be built; no network I/O has happened."""


class NetworkError(ReqkitError):
    """Raised for transport-level failures like DNS, TCP and TLS errors."""


class RequestTimeoutError(ReqkitError):
    """Raised when a request exceeds its configured timeout."""


class StatusError(ReqkitError):
    """Raised for final responses outside the 2xx range.

    The wrapped response is still open, so callers can inspect an API error
    payload through ``err.response``.
    """

    def __init__(self, status_code: int, response: Response) -> None:
        super().__init__(f"unexpected status: {status_code}")
        self.status_code = status_code
        self.response = response

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        return str(self.args[0])


class ResponseError(ReqkitError):
    """Raised when reading or decoding a response body fails."""


class NilResponseError(ReqkitError):
    """Raised when a body is requested from a wrapper without a response."""


class NoContentError(ReqkitError):
    """Raised when structured decoding is attempted on an empty body."""
