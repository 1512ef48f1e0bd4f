"""
Unit tests for hash providers.

Tests cover:
1. Hash function test vectors
2. Provider objects
3. Provider registry
4. Hex helpers
"""

import pytest

from incmerkle.crypto import (
    sha256,
    keccak256,
    double_sha256,
    Sha256Hasher,
    DoubleSha256Hasher,
    Keccak256Hasher,
    available_hashers,
    get_hasher,
    bytes_to_hex,
    hex_to_bytes,
)


class TestHashing:
    """Tests for hash functions."""

    def test_sha256_empty_vector(self):
        assert sha256(b"").hex() == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_keccak256_empty_vector(self):
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_double_sha256_empty_vector(self):
        assert double_sha256(b"").hex() == (
            "5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456"
        )

    def test_hashes_differ(self):
        data = b"test"
        assert sha256(data) != keccak256(data)
        assert sha256(data) != double_sha256(data)

    def test_hashes_are_32_bytes(self):
        for fn in (sha256, keccak256, double_sha256):
            assert len(fn(b"hello world")) == 32


class TestProviders:
    """Tests for provider objects."""

    @pytest.mark.parametrize("provider, fn", [
        (Sha256Hasher(), sha256),
        (DoubleSha256Hasher(), double_sha256),
        (Keccak256Hasher(), keccak256),
    ])
    def test_provider_matches_function(self, provider, fn):
        assert provider.hash(b"abc") == fn(b"abc")

    def test_provider_deterministic(self):
        provider = Keccak256Hasher()
        assert provider.hash(b"x") == provider.hash(b"x")

    def test_provider_never_empty(self):
        """b"" is reserved as the empty-leaf marker."""
        for name in available_hashers():
            assert get_hasher(name).hash(b"") != b""

    def test_repr(self):
        assert repr(Keccak256Hasher()) == "Keccak256Hasher()"


class TestRegistry:
    """Tests for get_hasher / available_hashers."""

    def test_available(self):
        assert available_hashers() == ["keccak256", "sha256", "sha256d"]

    def test_lookup(self):
        assert isinstance(get_hasher("sha256"), Sha256Hasher)
        assert isinstance(get_hasher("keccak256"), Keccak256Hasher)
        assert isinstance(get_hasher("sha256d"), DoubleSha256Hasher)

    def test_lookup_case_insensitive(self):
        assert isinstance(get_hasher("SHA256"), Sha256Hasher)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown hash algorithm"):
            get_hasher("md5")

    def test_fresh_instances(self):
        assert get_hasher("sha256") is not get_hasher("sha256")


class TestHexHelpers:
    """Tests for hex conversion."""

    def test_bytes_to_hex(self):
        assert bytes_to_hex(b"\x01\xab") == "0x01ab"

    def test_hex_to_bytes_prefixed(self):
        assert hex_to_bytes("0x01ab") == b"\x01\xab"
        assert hex_to_bytes("0X01AB") == b"\x01\xab"

    def test_hex_to_bytes_bare(self):
        assert hex_to_bytes("01ab") == b"\x01\xab"

    def test_hex_roundtrip_empty(self):
        assert hex_to_bytes(bytes_to_hex(b"")) == b""
