"""HTTP client for the Void Cloud Platform API."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any, BinaryIO
from urllib.parse import quote

import requests
from pydantic import BaseModel

from .config import DEFAULT_TIMEOUT, PLATFORM_URL, USER_AGENT
from .errors import PlatformAPIError

logger = logging.getLogger(__name__)


class PlatformClient:
    """Bearer-authenticated HTTP client for the Platform API.

    Methods return the raw ``requests.Response``; interpreting status codes
    is left to the caller. Only transport failures are raised here.
    """

    def __init__(
        self,
        server: str = PLATFORM_URL,
        token: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the Platform API client.

        Args:
            server: Server endpoint, e.g. https://play.void.dev/.
            token: Bearer token sent with every request.
            timeout: Request timeout in seconds.
        """
        self.server = server.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = requests.Session()

    @staticmethod
    def route(*parts: Any) -> str:
        """Join route segments with '/', dropping empty ones.

        >>> PlatformClient.route("org", "game", "deploy", "")
        'org/game/deploy'
        """
        return "/".join(str(p).strip("/") for p in parts if p not in (None, ""))

    def url(self, route: str) -> str:
        """Return the absolute API URL for a route.

        The route is percent-escaped, so segments taken from file names may
        contain characters such as '#', '?' or '%'.
        """
        return f"{self.server}/api/{quote(route.lstrip('/'), safe='/')}"

    def _get_headers(self, content_type: str | None = None) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def _request(
        self,
        method: str,
        route: str,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """Make a request to the Platform API.

        Raises:
            PlatformAPIError: On connection issues (status code 0).
        """
        url = self.url(route)
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=headers or self._get_headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise PlatformAPIError(0, f"Cannot connect to {self.server}") from e
        except requests.exceptions.Timeout as e:
            raise PlatformAPIError(0, f"Request to {url} timed out") from e
        except requests.exceptions.RequestException as e:
            raise PlatformAPIError(0, f"Network request to {url} failed: {e}") from e
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    def get(self, route: str) -> requests.Response:
        return self._request("GET", route)

    def post(self, route: str, data: bytes | None = None) -> requests.Response:
        """POST a raw body (or none at all)."""
        return self._request("POST", route, data=data)

    def post_json(self, route: str, payload: Any) -> requests.Response:
        """POST a JSON body. Pydantic models are serialized by alias."""
        body = json.dumps(_to_jsonable(payload)).encode("utf-8")
        return self._request(
            "POST", route, data=body, headers=self._get_headers("application/json")
        )

    def post_file(
        self, route: str, path: str | Path, content_length: int
    ) -> requests.Response:
        """Stream a file as the raw request body.

        Args:
            route: API route.
            path: File to send.
            content_length: Exact byte count to declare.
        """
        headers = self._get_headers("application/octet-stream")
        if content_length == 0:
            # requests falls back to chunked encoding for empty streams
            return self._request("POST", route, data=b"", headers=headers)
        with open(path, "rb") as f:
            return self._request(
                "POST", route, data=_FileBody(f, content_length), headers=headers
            )


class _FileBody:
    """File reader that reports, and never exceeds, a fixed length.

    requests derives Content-Length from ``len()``, so the declared size
    is the one recorded by the caller rather than a fresh stat.
    """

    def __init__(self, f: BinaryIO, length: int) -> None:
        self._f = f
        self._remaining = length
        self._length = length

    def __len__(self) -> int:
        return self._length

    def read(self, size: int = -1) -> bytes:
        if self._remaining <= 0:
            return b""
        if size is None or size < 0 or size > self._remaining:
            size = self._remaining
        chunk = self._f.read(size)
        self._remaining -= len(chunk)
        return chunk

    def __iter__(self) -> Iterator[bytes]:
        while chunk := self.read(65536):
            yield chunk


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value
