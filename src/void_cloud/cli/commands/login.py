"""Authenticate with Void Cloud.

The `void-cloud login` command opens the platform login page in a browser
and waits for it to hand a token back to a local callback listener.

Usage:
    void-cloud login                      # Log in to the default server
    void-cloud login --server URL         # Log in to another server
"""

import json
import sys

import click

from void_cloud.cli.platform.auth import default_store
from void_cloud.cli.platform.browser import SystemBrowser
from void_cloud.cli.platform.config import LOGIN_TIMEOUT
from void_cloud.cli.platform.errors import VoidCloudError
from void_cloud.cli.platform.login import LoginCommand
from void_cloud.cli.platform.login import login as run_login
from void_cloud.cli.utils import echo_error

from . import server_option


class _EchoingBrowser(SystemBrowser):
    """Prints the login URL before trying to open it."""

    def open(self, url: str) -> None:
        click.echo("Opening browser to sign in...")
        click.echo("If the browser doesn't open, visit this URL:\n")
        click.echo(f"  {click.style(url, bold=True)}\n")
        super().open(url)
        click.echo("Waiting for authentication...")


@click.command()
@server_option
@click.option(
    "--timeout",
    default=LOGIN_TIMEOUT,
    type=click.IntRange(min=1),
    show_default=True,
    help="Seconds to wait for the browser",
)
def login(server: str, timeout: int) -> None:
    """Tell Void Cloud who you are.

    Reuses a cached token when the server still accepts it, otherwise
    signs in through the browser. The token is stored per server in
    ~/.void-cloud/credentials.json.

    Examples:
        void-cloud login
        void-cloud login --server http://localhost:3000
    """
    click.echo(f"Logging in to {server} ...")
    try:
        user = run_login(
            LoginCommand(
                server=server,
                browser=_EchoingBrowser(),
                store=default_store(server),
                timeout=timeout,
            )
        )
    except VoidCloudError as e:
        echo_error(e)
        sys.exit(1)

    click.echo(click.style("You are logged in", fg="green"))
    click.echo(json.dumps(user.model_dump(), indent=2))
