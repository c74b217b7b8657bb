"""Exception classes for the void-cloud platform layer."""

from __future__ import annotations


class VoidCloudError(Exception):
    """Base exception for all void-cloud errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PreconditionError(VoidCloudError):
    """A required argument or piece of configuration is missing."""


class PlatformAPIError(VoidCloudError):
    """Unexpected response from the platform.

    Attributes:
        status_code: HTTP status code, or 0 when no response was received.
        message: Error message.
        body: Response body text, when available.
    """

    def __init__(self, status_code: int, message: str, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class UnauthorizedError(PlatformAPIError):
    """The server rejected the bearer token."""

    def __init__(self, message: str = "unauthorized") -> None:
        super().__init__(401, message)


class LoginTimeoutError(VoidCloudError):
    """No browser callback arrived before the login deadline."""

    def __init__(self, message: str = "login timed out") -> None:
        super().__init__(message)


class CallbackError(VoidCloudError):
    """The browser callback did not carry a token."""

    def __init__(self, message: str = "missing jwt in callback") -> None:
        super().__init__(message)


class UploadError(VoidCloudError):
    """One or more file uploads failed.

    All uploads run to completion before this is raised, so ``uploaded``
    lists the files that did reach the server.

    Attributes:
        deploy_id: Deployment the uploads belonged to.
        errors: ``(path, exception)`` pairs for every failed upload.
        uploaded: Paths that uploaded successfully.
    """

    def __init__(
        self,
        deploy_id: int,
        errors: list[tuple[str, Exception]],
        uploaded: list[str] | None = None,
    ) -> None:
        self.deploy_id = deploy_id
        self.errors = errors
        self.uploaded = uploaded or []
        details = "; ".join(f"{path}: {err}" for path, err in errors)
        super().__init__(
            f"{len(errors)} upload(s) failed for deploy {deploy_id}: {details}"
        )
