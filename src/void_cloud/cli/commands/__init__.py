"""CLI commands."""

import click

from void_cloud.cli.platform.config import PLATFORM_URL


def server_option(f):
    """Add the shared --server option to a command."""
    return click.option(
        "--server",
        default=PLATFORM_URL,
        envvar="VOID_CLOUD_SERVER",
        show_default=True,
        help="Server endpoint URL",
    )(f)
