from __future__ import annotations

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Iterator

import httpx
import pytest

from reqkit import Option, with_transport


Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it was asked to send."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def option(self) -> Option:
        return with_transport(self)


@pytest.fixture
def ok_transport() -> RecordingTransport:
    return RecordingTransport(lambda request: httpx.Response(200, text="ok"))


@pytest.fixture
def serve() -> Iterator[Callable[..., str]]:
    """Start throwaway local HTTP servers answering every request the same way.

    With ``redirects=n`` the path ``/hop<i>`` answers ``302`` to ``/hop<i+1>``
    until ``i`` reaches ``n``; ``delay`` is paid on every hop.
    """
    servers: list[ThreadingHTTPServer] = []

    def start(status: int = 200, body: bytes = b"", delay: float = 0.0, redirects: int = 0) -> str:
        class Handler(BaseHTTPRequestHandler):
            def _reply(self) -> None:
                if delay:
                    time.sleep(delay)
                hop = int(self.path[4:]) if self.path.startswith("/hop") else 0
                try:
                    if hop < redirects:
                        self.send_response(302)
                        self.send_header("Location", f"/hop{hop + 1}")
                        self.send_header("Content-Length", "0")
                        self.end_headers()
                        return
                    self.send_response(status)
                    self.send_header("Content-Length", str(len(body)))
                    self.end_headers()
                    if self.command != "HEAD":
                        self.wfile.write(body)
                except (BrokenPipeError, ConnectionResetError):
                    pass

            do_GET = do_POST = do_PUT = do_HEAD = _reply

            def log_message(self, *args: object) -> None:
                pass

        server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        host, port = server.server_address[:2]
        return f"http://{host}:{port}"

    yield start

    for server in servers:
        server.shutdown()
        server.server_close()


@pytest.fixture
def make_transport() -> Callable[[Handler], RecordingTransport]:
    return RecordingTransport


@pytest.fixture(autouse=True)
def _no_environment_proxies(monkeypatch) -> None:
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
