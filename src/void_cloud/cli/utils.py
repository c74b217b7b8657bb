"""Shared utility functions for CLI commands."""

import sys
import threading
import time

import click

from .platform.errors import (
    LoginTimeoutError,
    PlatformAPIError,
    PreconditionError,
    UploadError,
)


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds as human-readable duration.

    Args:
        seconds: Elapsed time in seconds.

    Returns:
        Human-readable duration string (e.g., "45s", "2m 30s").
    """
    secs = int(seconds)
    if secs < 60:
        return f"{secs}s"
    return f"{secs // 60}m {secs % 60}s"


def format_size(size_bytes: int) -> str:
    """Format byte count as human-readable size."""
    if size_bytes >= 100 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    return f"{size_bytes / 1024:.0f} KB"


class Spinner:
    """Animated terminal spinner for long-running operations.

    Displays a Braille-character spinner on stderr with a status message.

    Args:
        indent: Number of leading spaces before the spinner character.
    """

    _FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
    _INTERVAL = 0.08  # seconds between frames

    def __init__(self, indent: int = 0):
        self._text = ""
        self._running = False
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._prefix = " " * indent

    def start(self, text: str = "") -> None:
        """Start the spinner with the given status text."""
        with self._lock:
            self._text = text
            if self._running:
                return
            self._running = True
        self._thread = threading.Thread(target=self._animate, daemon=True)
        self._thread.start()

    def update(self, text: str) -> None:
        """Update the status text while spinning."""
        with self._lock:
            self._text = text

    def _stop_thread(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
        if self._thread:
            self._thread.join(timeout=0.2)
            self._thread = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def done(self, symbol: str = "✓", suffix: str = "") -> None:
        """Stop the spinner and persist the line with a symbol."""
        self._stop_thread()
        text = f"\r\033[K{self._prefix}{symbol} {self._text}"
        if suffix:
            text += f" {suffix}"
        sys.stderr.write(text + "\n")
        sys.stderr.flush()

    def fail(self, suffix: str = "") -> None:
        """Stop the spinner and persist the line with a failure symbol."""
        self.done(symbol="✗", suffix=suffix)

    def _animate(self) -> None:
        idx = 0
        while True:
            with self._lock:
                if not self._running:
                    break
                text = self._text
            frame = self._FRAMES[idx % len(self._FRAMES)]
            sys.stderr.write(f"\r\033[K{self._prefix}{frame} {text}")
            sys.stderr.flush()
            idx += 1
            time.sleep(self._INTERVAL)


def echo_error(e: Exception) -> None:
    """Print an error and a hint for it to stderr."""
    message = getattr(e, "message", None) or str(e)
    click.echo(f"Error: {message}", err=True)

    hint = None
    if isinstance(e, LoginTimeoutError):
        hint = "Hint: Run 'void-cloud login' to try again."
    elif isinstance(e, UploadError):
        for path, err in e.errors:
            click.echo(f"  failed: {path}: {err}", err=True)
        if e.uploaded:
            click.echo(f"  {len(e.uploaded)} other file(s) uploaded.", err=True)
        hint = "Hint: Nothing was activated. Run the deploy again to retry."
    elif isinstance(e, PreconditionError):
        hint = "Hint: Run with --help to see the required options."
    elif isinstance(e, PlatformAPIError):
        hint = {
            0: "Hint: Check your internet connection and try again.",
            401: "Hint: Run 'void-cloud login' to authenticate.",
            403: "Hint: You don't have permission for this action.",
            404: "Hint: Check the organization and game IDs.",
            500: "Hint: This is a server issue. Please try again later.",
            502: "Hint: The server is temporarily unavailable. Please try again later.",
            503: "Hint: The service is temporarily unavailable. Please try again later.",
        }.get(e.status_code)
    if hint:
        click.echo(hint, err=True)
