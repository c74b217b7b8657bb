"""BLAKE3 content hashing."""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO

from blake3 import blake3

CHUNK_SIZE = 65536  # 64KB


def blake3_hex(value: bytes | str | BinaryIO) -> str:
    """Return the hex BLAKE3 digest of bytes, a string or a binary stream.

    Strings are hashed as UTF-8, so a string and a stream carrying the same
    bytes produce the same digest.
    """
    if isinstance(value, str):
        value = value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        value = io.BytesIO(value)

    hasher = blake3()
    while True:
        chunk = value.read(CHUNK_SIZE)
        if not chunk:
            break
        hasher.update(chunk)
    return hasher.hexdigest()


def blake3_file(path: str | Path) -> str:
    """Return the hex BLAKE3 digest of a file's contents."""
    with open(path, "rb") as f:
        return blake3_hex(f)
