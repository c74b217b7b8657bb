"""Void Cloud Platform client: login handshake and incremental deploys."""

from .auth import (
    CredentialStore,
    FileCredentialStore,
    MemoryCredentialStore,
    default_store,
)
from .browser import Browser, SystemBrowser
from .client import PlatformClient
from .config import CREDENTIALS_FILE, PLATFORM_URL, TOKEN_KEY, UPLOAD_CONCURRENCY
from .deploy import DeployCommand, build_manifest, deploy
from .errors import (
    CallbackError,
    LoginTimeoutError,
    PlatformAPIError,
    PreconditionError,
    UnauthorizedError,
    UploadError,
    VoidCloudError,
)
from .hashing import blake3_file, blake3_hex
from .login import LoginCommand, login, logout, validate_token
from .types import DeployEntry, DeployResult, Manifest, User

__all__ = [
    # Auth
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "default_store",
    # Browser
    "Browser",
    "SystemBrowser",
    # Client
    "PlatformClient",
    # Config
    "PLATFORM_URL",
    "CREDENTIALS_FILE",
    "TOKEN_KEY",
    "UPLOAD_CONCURRENCY",
    # Orchestration
    "LoginCommand",
    "login",
    "logout",
    "validate_token",
    "DeployCommand",
    "deploy",
    "build_manifest",
    # Hashing
    "blake3_hex",
    "blake3_file",
    # Errors
    "VoidCloudError",
    "PreconditionError",
    "PlatformAPIError",
    "UnauthorizedError",
    "LoginTimeoutError",
    "CallbackError",
    "UploadError",
    # Types
    "User",
    "DeployEntry",
    "DeployResult",
    "Manifest",
]
