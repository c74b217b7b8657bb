"""Tests for void_cloud.cli.platform.hashing."""

import io

from blake3 import blake3

from void_cloud.cli.platform.hashing import blake3_file, blake3_hex

# BLAKE3 of the empty input, from the reference test vectors
EMPTY_DIGEST = "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"


class TestBlake3Hex:
    """Tests for blake3_hex."""

    def test_empty_input(self):
        """Empty input hashes to the published digest."""
        assert blake3_hex(b"") == EMPTY_DIGEST
        assert blake3_hex("") == EMPTY_DIGEST

    def test_same_content_same_digest(self):
        """Hashing the same bytes twice is stable."""
        assert blake3_hex(b"first") == blake3_hex(b"first")
        assert blake3_hex(b"first") != blake3_hex(b"second")

    def test_string_and_stream_agree(self):
        """A string and a stream with the same content hash identically."""
        assert blake3_hex("hello world") == blake3_hex(io.BytesIO(b"hello world"))

    def test_matches_library_digest(self):
        """Chunked streaming matches a single update."""
        data = bytes(range(256)) * 1000  # larger than one chunk
        assert blake3_hex(io.BytesIO(data)) == blake3(data).hexdigest()

    def test_digest_is_hex(self):
        """Digest is 64 lowercase hex characters."""
        digest = blake3_hex(b"void")
        assert len(digest) == 64
        int(digest, 16)


class TestBlake3File:
    """Tests for blake3_file."""

    def test_file_matches_bytes(self, tmp_path):
        """Hashing a file equals hashing its literal bytes."""
        path = tmp_path / "game.js"
        path.write_bytes(b"console.log('hi')")
        assert blake3_file(path) == blake3_hex(b"console.log('hi')")
