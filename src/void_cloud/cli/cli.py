#!/usr/bin/env python3
"""void-cloud CLI - access to the Void Cloud Platform

Usage:
    void-cloud login [--server=URL]
    void-cloud logout [--server=URL]
    void-cloud deploy PATH [LABEL] --org=ORG --game=GAME
"""

import logging
import sys

import click

from void_cloud import __version__

from .commands.deploy import deploy
from .commands.login import login
from .commands.logout import logout
from .platform.errors import VoidCloudError
from .utils import echo_error


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log protocol details")
def cli(verbose: bool):
    """void-cloud - access to the Void Cloud Platform"""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


# Authentication
cli.add_command(login)
cli.add_command(logout)

# Sharing
cli.add_command(deploy)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except VoidCloudError as e:
        echo_error(e)
        sys.exit(1)
    except (click.Abort, KeyboardInterrupt):
        click.echo(err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(
            "Hint: If this persists, try updating with 'pip install -U void-cloud'.",
            err=True,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
