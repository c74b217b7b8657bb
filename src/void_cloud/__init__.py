"""void-cloud: command-line access to the Void Cloud game platform."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("void-cloud")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__"]
