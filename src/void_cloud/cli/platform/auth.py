"""Credential storage for platform tokens."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from .config import CREDENTIALS_FILE
from .types import StoredCredentials


class CredentialStore(Protocol):
    """Key/value secret store, namespaced by server."""

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class FileCredentialStore:
    """Credentials kept in a JSON file readable only by the owner.

    The file maps each server name to its own ``{key: value}`` table, so
    logging in to one server never clobbers the token for another.

    Args:
        name: Namespace for this store, normally the server URL.
        path: Credentials file. Defaults to ~/.void-cloud/credentials.json.
    """

    def __init__(self, name: str, path: Path | None = None) -> None:
        self.name = name
        self.path = path or CREDENTIALS_FILE

    def _load(self) -> dict[str, dict[str, str]]:
        if not self.path.exists():
            return {}
        try:
            return StoredCredentials.model_validate_json(self.path.read_text()).root
        except (ValidationError, ValueError):
            return {}

    def _save(self, data: dict[str, dict[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(StoredCredentials(data).model_dump_json(indent=2))
        # Restrict permissions to owner only
        self.path.chmod(0o600)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""
        value = self._load().get(self.name, {}).get(key)
        return value if isinstance(value, str) and value else None

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any existing one."""
        data = self._load()
        data.setdefault(self.name, {})[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        """Remove a value. Deleting a missing key is a no-op."""
        data = self._load()
        section = data.get(self.name)
        if not section or key not in section:
            return
        del section[key]
        if not section:
            del data[self.name]
        self._save(data)


class MemoryCredentialStore:
    """In-process credential store."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def has(self, key: str) -> bool:
        return key in self.values

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


def default_store(server: str) -> FileCredentialStore:
    """Return the on-disk credential store for a server."""
    return FileCredentialStore(server)
