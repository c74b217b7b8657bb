"""Log out from Void Cloud.

The `void-cloud logout` command forgets the token cached for a server.

Usage:
    void-cloud logout    # Clear stored credentials
"""

import click

from void_cloud.cli.platform.auth import default_store
from void_cloud.cli.platform.login import logout as run_logout

from . import server_option


@click.command()
@server_option
def logout(server: str) -> None:
    """Log out from Void Cloud.

    Removes the token stored for SERVER from ~/.void-cloud/credentials.json.
    """
    if not run_logout(default_store(server)):
        click.echo("Not logged in.")
        return
    click.echo("Logged out successfully.")
