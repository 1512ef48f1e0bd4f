"""
Hashing capability for incmerkle.

This module provides:
- The HashProvider contract the tree is generic over
- Concrete providers (SHA-256, double SHA-256, Keccak-256)
- A small registry for selecting a provider by name
- Hex helpers

Design Notes:
-------------
The tree never calls a hash function directly. It is handed an object with a
``hash(data) -> bytes`` method and treats the result as an opaque digest that
can be compared for equality and concatenated as input to further hash calls.

A provider must be deterministic and must never return an empty byte string:
``b""`` is reserved as the tree's empty-leaf marker.
"""

import hashlib
from typing import Dict, List, Protocol, Type

from Crypto.Hash import keccak


# =============================================================================
# Hash Functions
# =============================================================================


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.

    Used for: default tree hashing, general content addressing.
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: trees whose roots are checked against EVM conventions.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def double_sha256(data: bytes) -> bytes:
    """
    Compute SHA-256(SHA-256(data)).

    Used for: Bitcoin-style trees.
    """
    return sha256(sha256(data))


# =============================================================================
# HashProvider Contract
# =============================================================================


class HashProvider(Protocol):
    """
    Capability that turns arbitrary bytes into a digest.

    Implementations must be pure: the same input always yields the same
    output, and no state is kept between calls.
    """

    def hash(self, data: bytes) -> bytes:
        ...


class Sha256Hasher:
    """SHA-256 provider."""

    name = "sha256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return sha256(data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class DoubleSha256Hasher(Sha256Hasher):
    """SHA-256d provider."""

    name = "sha256d"

    def hash(self, data: bytes) -> bytes:
        return double_sha256(data)


class Keccak256Hasher(Sha256Hasher):
    """Keccak-256 provider (pycryptodome)."""

    name = "keccak256"

    def hash(self, data: bytes) -> bytes:
        return keccak256(data)


# =============================================================================
# Registry
# =============================================================================


_HASHERS: Dict[str, Type[Sha256Hasher]] = {
    cls.name: cls for cls in (Sha256Hasher, DoubleSha256Hasher, Keccak256Hasher)
}


def available_hashers() -> List[str]:
    """Return the names of all registered providers."""
    return sorted(_HASHERS)


def get_hasher(name: str) -> HashProvider:
    """
    Look up a provider by name.

    Args:
        name: Registered algorithm name (case-insensitive)

    Returns:
        A fresh provider instance
    """
    try:
        return _HASHERS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown hash algorithm {name!r}, expected one of {available_hashers()}"
        ) from None


# =============================================================================
# Utilities
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


__all__ = [
    "sha256",
    "keccak256",
    "double_sha256",
    "HashProvider",
    "Sha256Hasher",
    "DoubleSha256Hasher",
    "Keccak256Hasher",
    "available_hashers",
    "get_hasher",
    "bytes_to_hex",
    "hex_to_bytes",
]
