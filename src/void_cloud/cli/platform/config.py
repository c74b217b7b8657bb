"""Platform configuration constants."""

import os
from pathlib import Path

from void_cloud import __version__

PLATFORM_URL = os.environ.get("VOID_CLOUD_SERVER", "https://play.void.dev/")
VOID_CLOUD_CONFIG_DIR = Path.home() / ".void-cloud"
CREDENTIALS_FILE = VOID_CLOUD_CONFIG_DIR / "credentials.json"
USER_AGENT = f"void-cloud-cli/{__version__}"
DEFAULT_TIMEOUT = 30  # seconds
LOGIN_TIMEOUT = 2 * 60  # seconds
UPLOAD_CONCURRENCY = 8

# Credential store key, also the form field the login page posts back
TOKEN_KEY = "jwt"
DEPLOY_ID_HEADER = "X-Deploy-ID"

# Base names with these suffixes are never uploaded
EXCLUDED_SUFFIXES = (".ssh", ".git", ".env")
