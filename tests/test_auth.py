"""Tests for credential stores."""

import json

import pytest

from void_cloud.cli.platform.auth import (
    FileCredentialStore,
    MemoryCredentialStore,
    default_store,
)
from void_cloud.cli.platform.config import CREDENTIALS_FILE


class TestFileCredentialStore:
    """Tests for FileCredentialStore."""

    @pytest.fixture
    def creds_file(self, tmp_path):
        """Provide a temporary credentials file path."""
        return tmp_path / ".void-cloud" / "credentials.json"

    def test_set_and_get(self, creds_file):
        """Stored values can be read back."""
        store = FileCredentialStore("https://play.void.dev/", creds_file)
        store.set("jwt", "header.payload.signature")

        assert store.get("jwt") == "header.payload.signature"
        assert store.has("jwt")

    def test_get_missing(self, creds_file):
        """Missing file reads as empty."""
        store = FileCredentialStore("https://play.void.dev/", creds_file)
        assert store.get("jwt") is None
        assert not store.has("jwt")

    def test_delete(self, creds_file):
        """Delete removes the value and tolerates repeats."""
        store = FileCredentialStore("https://play.void.dev/", creds_file)
        store.set("jwt", "token")
        store.delete("jwt")
        store.delete("jwt")

        assert store.get("jwt") is None

    def test_namespaced_by_server(self, creds_file):
        """Each server keeps its own token."""
        prod = FileCredentialStore("https://play.void.dev/", creds_file)
        local = FileCredentialStore("http://localhost:3000", creds_file)
        prod.set("jwt", "prod-token")
        local.set("jwt", "local-token")

        assert prod.get("jwt") == "prod-token"
        assert local.get("jwt") == "local-token"

        local.delete("jwt")
        assert prod.get("jwt") == "prod-token"
        assert json.loads(creds_file.read_text()) == {
            "https://play.void.dev/": {"jwt": "prod-token"}
        }

    def test_file_permissions(self, creds_file):
        """Credentials file is readable only by its owner."""
        FileCredentialStore("s", creds_file).set("jwt", "perms-test")
        mode = creds_file.stat().st_mode & 0o777
        assert mode == 0o600

    def test_corrupt_file_reads_empty(self, creds_file):
        """A corrupt file is treated as holding nothing."""
        creds_file.parent.mkdir(parents=True)
        creds_file.write_text("{not json")
        store = FileCredentialStore("s", creds_file)

        assert store.get("jwt") is None
        store.set("jwt", "fresh")
        assert store.get("jwt") == "fresh"

    @pytest.mark.parametrize(
        "content", ['["jwt"]', '{"s": "flat"}', '{"s": {"jwt": 1}}']
    )
    def test_unexpected_shape_reads_empty(self, creds_file, content):
        """A file that is valid JSON but not a server table holds nothing."""
        creds_file.parent.mkdir(parents=True)
        creds_file.write_text(content)
        assert FileCredentialStore("s", creds_file).get("jwt") is None

    def test_default_store(self):
        """Default store lives in the standard credentials file."""
        store = default_store("https://play.void.dev/")
        assert store.name == "https://play.void.dev/"
        assert store.path == CREDENTIALS_FILE


class TestMemoryCredentialStore:
    """Tests for MemoryCredentialStore."""

    def test_round_trip(self):
        store = MemoryCredentialStore({"jwt": "seed"})
        assert store.has("jwt")
        store.set("jwt", "other")
        assert store.get("jwt") == "other"
        store.delete("jwt")
        assert not store.has("jwt")
        store.delete("jwt")
