"""Incremental deployment of a local directory.

A deploy fingerprints every file, sends the full manifest to the server,
uploads only the files the server asks for, then activates the result.
"""

from __future__ import annotations

import logging
import os
import stat
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .client import PlatformClient
from .config import DEPLOY_ID_HEADER, EXCLUDED_SUFFIXES, UPLOAD_CONCURRENCY
from .errors import PlatformAPIError, PreconditionError, UploadError
from .hashing import blake3_file
from .types import DeployEntry, DeployResult, Manifest

logger = logging.getLogger(__name__)

# A nil list from the server arrives as JSON null
_manifest_adapter = TypeAdapter(list[DeployEntry] | None)

OnStarted = Callable[[int, Manifest, Manifest], None]
OnUpload = Callable[[int, str], None]


@dataclass
class DeployCommand:
    """Inputs for :func:`deploy`.

    Attributes:
        client: Authenticated API client.
        org: Organization ID.
        game: Game ID.
        path: Directory to publish.
        label: Optional deploy label, appended to the start route.
        on_started: Called once with (deploy_id, manifest, incremental).
        on_upload: Called with (deploy_id, path) as each upload is dispatched.
        concurrency: Maximum uploads in flight.
    """

    client: PlatformClient | None
    org: str
    game: str
    path: str | Path
    label: str = ""
    on_started: OnStarted | None = None
    on_upload: OnUpload | None = None
    concurrency: int = UPLOAD_CONCURRENCY


def deploy(cmd: DeployCommand) -> DeployResult:
    """Publish a directory and activate it.

    Returns:
        The activated deployment, with ``manifest`` set to every file sent
        for consideration.

    Raises:
        PreconditionError: Missing arguments or an invalid path.
        PlatformAPIError: The server answered unexpectedly.
        UploadError: One or more uploads failed; nothing was activated.
        OSError: The directory could not be read.
    """
    if cmd.client is None:
        raise PreconditionError("missing api client")
    if not cmd.org:
        raise PreconditionError("missing organization")
    if not cmd.game:
        raise PreconditionError("missing game")
    if not cmd.path:
        raise PreconditionError("missing path")

    root = Path(cmd.path)
    if not root.exists():
        raise PreconditionError(f"directory not found {cmd.path}")
    if not root.is_dir():
        raise PreconditionError(f"{cmd.path} is not a directory")

    manifest = build_manifest(root)
    deploy_id, incremental = start_deploy(cmd, manifest)

    if cmd.on_started:
        cmd.on_started(deploy_id, manifest, incremental)

    incremental_upload(cmd, deploy_id, manifest, incremental)

    result = activate_deploy(cmd, deploy_id)
    result.manifest = manifest
    return result


def is_excluded(name: str) -> bool:
    """True if a file's base name marks it as never uploadable."""
    return name.endswith(EXCLUDED_SUFFIXES)


def build_manifest(root: str | Path) -> Manifest:
    """Fingerprint every regular file under ``root``.

    The walk visits entries in sorted order so the manifest is stable for
    a given tree. Paths are relative to ``root`` with '/' separators.
    """
    root = Path(root)
    manifest: Manifest = []

    def _raise(err: OSError) -> None:
        raise err

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for name in sorted(filenames):
            if is_excluded(name):
                continue
            full = Path(dirpath) / name
            info = full.stat()
            if not stat.S_ISREG(info.st_mode):
                continue
            manifest.append(
                DeployEntry(
                    path=full.relative_to(root).as_posix(),
                    blake3=blake3_file(full),
                    content_length=info.st_size,
                )
            )

    logger.debug("Built manifest of %d files from %s", len(manifest), root)
    return manifest


def start_deploy(cmd: DeployCommand, manifest: Manifest) -> tuple[int, Manifest]:
    """Submit the manifest; return the deploy id and the files to upload."""
    route = PlatformClient.route(cmd.org, cmd.game, "deploy", cmd.label)
    resp = cmd.client.post_json(route, manifest)

    if resp.status_code != 202:
        raise PlatformAPIError(
            resp.status_code,
            f"unexpected status code {resp.status_code}: {resp.text}",
            resp.text,
        )

    header = resp.headers.get(DEPLOY_ID_HEADER)
    try:
        deploy_id = int(header)
    except (TypeError, ValueError):
        raise PlatformAPIError(
            resp.status_code, f"missing or invalid deploy id: {header!r}"
        ) from None

    try:
        incremental = _manifest_adapter.validate_json(resp.content or b"[]") or []
    except ValidationError as e:
        raise PlatformAPIError(
            resp.status_code, f"unexpected JSON response: {e}", resp.text
        ) from e

    logger.debug(
        "Deploy %d started: %d of %d files needed",
        deploy_id,
        len(incremental),
        len(manifest),
    )
    return deploy_id, incremental


def incremental_upload(
    cmd: DeployCommand, deploy_id: int, manifest: Manifest, incremental: Manifest
) -> None:
    """Upload the requested files with bounded concurrency.

    Every upload runs even if others fail; failures are raised together
    once the pool has drained. Sizes come from the local manifest, and a
    requested path that is not in it counts as a failed upload.

    Raises:
        UploadError: At least one upload failed.
    """
    root = Path(cmd.path)
    local = {entry.path: entry for entry in manifest}
    lock = threading.Lock()
    slots = threading.BoundedSemaphore(max(cmd.concurrency, 1))
    errors: list[tuple[str, Exception]] = []
    uploaded: list[str] = []

    def _upload(entry: DeployEntry) -> None:
        route = PlatformClient.route(
            cmd.org, cmd.game, "deploy", deploy_id, "upload", entry.path
        )
        try:
            known = local.get(entry.path)
            if known is None:
                raise PlatformAPIError(
                    0, f"server requested unknown file {entry.path}"
                )
            resp = cmd.client.post_file(
                route, root / known.path, known.content_length
            )
            if resp.status_code != 200:
                raise PlatformAPIError(
                    resp.status_code,
                    f"failed to upload to {route}: status code {resp.status_code}",
                    resp.text,
                )
        except Exception as e:
            logger.debug("Upload of %s failed: %s", entry.path, e)
            with lock:
                errors.append((entry.path, e))
        else:
            with lock:
                uploaded.append(entry.path)
        finally:
            slots.release()

    with ThreadPoolExecutor(
        max_workers=max(cmd.concurrency, 1), thread_name_prefix="upload"
    ) as pool:
        for entry in incremental:
            # Wait for a free upload slot before announcing the next file
            slots.acquire()
            if cmd.on_upload:
                cmd.on_upload(deploy_id, entry.path)
            pool.submit(_upload, entry)

    if errors:
        raise UploadError(deploy_id, errors, uploaded)


def activate_deploy(cmd: DeployCommand, deploy_id: int) -> DeployResult:
    """Make an uploaded deployment live."""
    route = PlatformClient.route(cmd.org, cmd.game, "deploy", deploy_id, "activate")
    resp = cmd.client.post(route)

    if resp.status_code != 200:
        raise PlatformAPIError(
            resp.status_code,
            f"failed to activate {route}: status code {resp.status_code}: {resp.text}",
            resp.text,
        )
    try:
        result = DeployResult.model_validate_json(resp.content)
    except ValidationError as e:
        raise PlatformAPIError(
            resp.status_code, f"unexpected JSON response: {e}", resp.text
        ) from e

    logger.debug("Deploy %d activated at %s", deploy_id, result.url)
    return result
