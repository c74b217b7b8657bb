"""CLI command for deploying a game build."""

import json
import sys
import time

import click

from ..platform.auth import default_store
from ..platform.client import PlatformClient
from ..platform.config import TOKEN_KEY
from ..platform.deploy import DeployCommand
from ..platform.deploy import deploy as run_deploy
from ..platform.errors import VoidCloudError
from ..platform.types import Manifest
from ..utils import Spinner, echo_error, format_elapsed, format_size
from . import server_option


@click.command("deploy")
@click.argument("path")
@click.argument("label", required=False, default="")
@server_option
@click.option("--org", envvar="VOID_CLOUD_ORG", help="Organization ID")
@click.option("--game", envvar="VOID_CLOUD_GAME", help="Game ID")
@click.option(
    "--token",
    envvar="VOID_CLOUD_TOKEN",
    help="Personal access token (defaults to the one saved by login)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def deploy(
    path: str,
    label: str,
    server: str,
    org: str | None,
    game: str | None,
    token: str | None,
    as_json: bool,
):
    """Share your game with others.

    Uploads the files in PATH that the server does not already have, then
    makes the build live. An optional LABEL publishes it under that name.

    \b
    Example:
        void-cloud deploy ./build --org acme --game space-race
        void-cloud deploy ./build beta --org acme --game space-race
    """
    if not token:
        token = default_store(server).get(TOKEN_KEY)

    client = PlatformClient(server, token)
    command = DeployCommand(
        client=client, org=org or "", game=game or "", path=path, label=label
    )

    if as_json:
        try:
            result = run_deploy(command)
        except (VoidCloudError, OSError) as e:
            click.echo(json.dumps({"error": getattr(e, "message", str(e))}), err=True)
            sys.exit(1)
        click.echo(json.dumps(result.model_dump(by_alias=True), indent=2))
        return

    click.echo(f"Deploying {path} ...")
    deploy_start = time.time()
    status = Spinner(indent=2)

    def on_started(deploy_id: int, manifest: Manifest, incremental: Manifest) -> None:
        status.done(suffix=f"({len(manifest)} files)")
        total, count = len(manifest), len(incremental)
        if total == count:
            click.echo(f"deploying ALL {total} files")
        else:
            click.echo(f"deploying {count} / {total} files")
        size = sum(e.content_length for e in incremental)
        if count:
            click.echo(f"Uploading {format_size(size)}")

    def on_upload(deploy_id: int, file_path: str) -> None:
        click.echo(f"deploying {file_path}")

    command.on_started = on_started
    command.on_upload = on_upload

    status.start("Fingerprinting files...")
    try:
        result = run_deploy(command)
    except (VoidCloudError, OSError) as e:
        if status.running:
            status.fail()
        echo_error(e)
        sys.exit(1)
    if status.running:
        status.done()

    total_time = format_elapsed(time.time() - deploy_start)
    click.echo()
    click.echo(f"Deployed {result.slug} in {total_time}")
    click.echo(f"Deployed to {result.url}")
