"""Shared fixtures for void-cloud tests."""

import json
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from void_cloud.cli.platform.auth import MemoryCredentialStore


@dataclass
class RecordedRequest:
    """A request received by the fake platform."""

    method: str
    path: str
    headers: dict[str, str]
    body: bytes


@dataclass
class Reply:
    """Canned response for the fake platform."""

    status: int = 200
    body: bytes | str | list | dict = b""
    headers: dict[str, str] = field(default_factory=dict)

    def encoded(self) -> bytes:
        if isinstance(self.body, (list, dict)):
            return json.dumps(self.body).encode()
        if isinstance(self.body, str):
            return self.body.encode()
        return self.body


class FakePlatform:
    """Minimal stand-in for the platform API, served over loopback.

    Set ``handler`` to a function taking a RecordedRequest and returning a
    Reply. Every request is kept in ``requests``.
    """

    def __init__(self) -> None:
        self.requests: list[RecordedRequest] = []
        self.handler: Callable[[RecordedRequest], Reply] = lambda req: Reply(404)
        self._lock = threading.Lock()
        platform = self

        class Handler(BaseHTTPRequestHandler):
            def _serve(self) -> None:
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length else b""
                req = RecordedRequest(
                    self.command, self.path, dict(self.headers.items()), body
                )
                with platform._lock:
                    platform.requests.append(req)
                reply = platform.handler(req)
                payload = reply.encoded()
                self.send_response(reply.status)
                for name, value in reply.headers.items():
                    self.send_header(name, value)
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)

            do_GET = _serve
            do_POST = _serve

            def log_message(self, format, *args):
                pass

        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self._httpd.daemon_threads = True
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self._httpd.server_address[1]}/"

    def requests_to(self, method: str, prefix: str) -> list[RecordedRequest]:
        with self._lock:
            return [
                r
                for r in self.requests
                if r.method == method and r.path.startswith(prefix)
            ]

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()


@pytest.fixture
def platform():
    """Run a fake platform API for the duration of a test."""
    fake = FakePlatform()
    fake.start()
    yield fake
    fake.stop()


@pytest.fixture
def store():
    """Provide an empty in-memory credential store."""
    return MemoryCredentialStore()
