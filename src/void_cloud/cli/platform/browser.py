"""Opening URLs in the user's browser."""

import logging
import webbrowser
from typing import Protocol

logger = logging.getLogger(__name__)


class Browser(Protocol):
    """Something that can show a URL to the user."""

    def open(self, url: str) -> None: ...


class SystemBrowser:
    """Opens URLs with the platform's default browser.

    Launching is best effort: failures are logged, never raised, since the
    caller always prints the URL as a fallback.
    """

    def open(self, url: str) -> None:
        try:
            if not webbrowser.open(url):
                logger.warning("No browser available to open %s", url)
        except webbrowser.Error as e:
            logger.warning("Could not launch browser: %s", e)
