"""Browser-based login handshake.

The CLI binds a throwaway HTTP listener on loopback, opens the platform's
login page in the user's browser with the listener's callback URL, and
waits for the page to redirect back with a token. The token is checked
against ``account/me`` before it is stored.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlencode, urlparse

from pydantic import ValidationError

from .auth import CredentialStore
from .browser import Browser
from .client import PlatformClient
from .config import LOGIN_TIMEOUT, TOKEN_KEY
from .errors import (
    CallbackError,
    LoginTimeoutError,
    PlatformAPIError,
    PreconditionError,
    UnauthorizedError,
    VoidCloudError,
)
from .types import User

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/callback"

LOGIN_SUCCESS_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Login Complete</title>
  <style>
    body {
      font-family: sans-serif;
      text-align: center;
      padding-top: 50px;
    }
  </style>
  <script>
  history.replaceState(null, '', location.pathname)
  </script>
</head>
<body>
  <h2>Login Successful</h2>
  <p>You can now close this window</p>
</body>
</html>
"""


@dataclass
class LoginCommand:
    """Inputs for :func:`login`.

    Attributes:
        server: Platform endpoint, e.g. https://play.void.dev/.
        browser: Used to open the login page.
        store: Where the validated token is kept.
        timeout: Seconds to wait for the browser callback.
    """

    server: str
    browser: Browser | None = None
    store: CredentialStore | None = None
    timeout: float | None = LOGIN_TIMEOUT


class _CallbackHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int]) -> None:
        super().__init__(address, _CallbackHandler)
        # One slot: the first token or error wins, later ones are dropped
        self.signals: queue.Queue[str | Exception] = queue.Queue(maxsize=1)

    def signal(self, value: str | Exception) -> None:
        try:
            self.signals.put_nowait(value)
        except queue.Full:
            logger.debug("Ignoring extra login callback")


class _CallbackHandler(BaseHTTPRequestHandler):
    server: _CallbackHTTPServer

    def do_GET(self) -> None:
        self._handle(b"")

    def do_POST(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        self._handle(self.rfile.read(length) if length else b"")

    def _handle(self, body: bytes) -> None:
        url = urlparse(self.path)
        if url.path != CALLBACK_PATH:
            self.send_error(404)
            return

        params = parse_qs(url.query)
        content_type = self.headers.get("Content-Type", "")
        if body and content_type.startswith("application/x-www-form-urlencoded"):
            for key, values in parse_qs(body.decode("utf-8")).items():
                params.setdefault(key, []).extend(values)

        token = next((v for v in params.get(TOKEN_KEY, []) if v), None)
        if not token:
            self.send_error(400, "Missing JWT")
            self.server.signal(CallbackError())
            return

        page = LOGIN_SUCCESS_PAGE.encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(page)))
        self.end_headers()
        self.wfile.write(page)
        self.server.signal(token)

    def log_message(self, format: str, *args) -> None:
        logger.debug("callback: " + format, *args)


class CallbackServer:
    """Loopback listener that receives the token from the login page.

    Use as a context manager; the listener is shut down on exit whether or
    not a token arrived.
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 0) -> None:
        self._httpd = _CallbackHTTPServer((host, port))
        self._thread: threading.Thread | None = None
        self._stopped = False

    @property
    def port(self) -> int:
        return self._httpd.server_address[1]

    @property
    def callback_url(self) -> str:
        return f"http://127.0.0.1:{self.port}{CALLBACK_PATH}"

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._httpd.serve_forever, name="login-callback", daemon=True
        )
        self._thread.start()
        logger.debug("Listening for login callback on %s", self.callback_url)

    def stop(self) -> None:
        """Stop serving and close the socket. Idempotent."""
        if self._stopped:
            return
        self._stopped = True
        if self._thread:
            self._httpd.shutdown()
            self._thread.join()
        self._httpd.server_close()
        logger.debug("Login callback listener closed")

    def wait(self, timeout: float) -> str:
        """Block until the callback fires or the timeout elapses.

        Returns:
            The token from the callback.

        Raises:
            CallbackError: The callback arrived without a token.
            LoginTimeoutError: Nothing arrived in time.
        """
        try:
            value = self._httpd.signals.get(timeout=max(timeout, 0))
        except queue.Empty:
            raise LoginTimeoutError() from None
        if isinstance(value, Exception):
            raise value
        return value

    def __enter__(self) -> CallbackServer:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()


def login(cmd: LoginCommand) -> User:
    """Log in, reusing a cached token when the server still accepts it.

    Raises:
        PreconditionError: Server, browser or store missing.
        LoginTimeoutError: The browser never called back.
        CallbackError: The callback carried no token.
        UnauthorizedError: The server rejected the new token.
        PlatformAPIError: Any other unexpected response.
    """
    if not cmd.server:
        raise PreconditionError("missing server")
    if cmd.browser is None:
        raise PreconditionError("missing browser")
    if cmd.store is None:
        raise PreconditionError("missing credential store")

    timeout = cmd.timeout or LOGIN_TIMEOUT

    cached = cmd.store.get(TOKEN_KEY)
    if cached:
        try:
            return validate_token(cmd.server, cached)
        except VoidCloudError as e:
            logger.warning("Cached token rejected (%s), starting browser login", e)
            cmd.store.delete(TOKEN_KEY)

    deadline = time.monotonic() + timeout
    with CallbackServer() as server:
        url = login_url(cmd.server, server.callback_url)
        try:
            cmd.browser.open(url)
        except Exception as e:
            logger.warning("Could not open browser for %s: %s", url, e)
        token = server.wait(deadline - time.monotonic())

    user = validate_token(cmd.server, token)
    cmd.store.set(TOKEN_KEY, token)
    logger.debug("Stored token for %s", cmd.server)
    return user


def login_url(server: str, callback_url: str) -> str:
    """Return the platform login page URL that redirects to ``callback_url``."""
    query = urlencode({"cli": "true", "origin": callback_url})
    return f"{server.rstrip('/')}/login?{query}"


def validate_token(server: str, token: str) -> User:
    """Fetch the identity behind a token.

    Raises:
        UnauthorizedError: The server answered 401.
        PlatformAPIError: Any other non-200 status, or a malformed body.
    """
    resp = PlatformClient(server, token).get("account/me")
    if resp.status_code == 401:
        raise UnauthorizedError()
    if resp.status_code != 200:
        raise PlatformAPIError(
            resp.status_code, f"unexpected status code {resp.status_code}", resp.text
        )
    try:
        return User.model_validate_json(resp.content)
    except ValidationError as e:
        raise PlatformAPIError(
            resp.status_code, f"unexpected JSON response: {e}", resp.text
        ) from e


def logout(store: CredentialStore) -> bool:
    """Forget the cached token.

    Returns:
        True if a token was stored.
    """
    if not store.has(TOKEN_KEY):
        return False
    store.delete(TOKEN_KEY)
    return True
