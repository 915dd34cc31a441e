"""
Crypto - Hashing Utilities
Pluggable hash providers and byte/hex helpers for Merkle commitments.

This module provides:
- HashProvider: the capability every tree, proof and verifier is written against
- hashlib-backed providers (SHA-256, SHA3-256, BLAKE2b, BLAKE2s)
- Provider lookup by algorithm name
- Hex encoding/decoding with 0x prefix

Provider contract:
- digest(*data) hashes the concatenation of its arguments, in order
- digest_length() is fixed for the lifetime of the provider
- Providers are pure and deterministic; they hold no mutable state
"""
from __future__ import annotations

import hashlib
from typing import Any, Callable, Protocol, runtime_checkable

from core.schemas.errors import UnsupportedHashException


@runtime_checkable
class HashProvider(Protocol):
    """Protocol for digest functions consumed by the Merkle engine."""

    def digest(self, *data: bytes) -> bytes:
        """
        Hash the concatenation of one or more byte sequences.

        Internal nodes are hashed as digest(left, right), which is
        the same value as digest(left + right).
        """
        ...

    def digest_length(self) -> int:
        """Return the fixed length of digests in bytes."""
        ...


class HashlibHasher:
    """
    HashProvider backed by a hashlib constructor.

    The constructor is fed each argument in order, so multi-argument
    calls never build an intermediate concatenated buffer.
    """

    name: str = ""

    def __init__(self, factory: Callable[[], Any], name: str) -> None:
        self._factory = factory
        self.name = name
        self._digest_length = factory().digest_size

    def digest(self, *data: bytes) -> bytes:
        if not data:
            raise TypeError("digest() requires at least one byte sequence")
        h = self._factory()
        for chunk in data:
            h.update(chunk)
        return h.digest()

    def digest_length(self) -> int:
        return self._digest_length

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class SHA256Hasher(HashlibHasher):
    """SHA-256, 32-byte digests. Default provider."""

    def __init__(self) -> None:
        super().__init__(hashlib.sha256, "sha256")


class SHA3_256Hasher(HashlibHasher):
    """SHA3-256, 32-byte digests."""

    def __init__(self) -> None:
        super().__init__(hashlib.sha3_256, "sha3_256")


class Blake2bHasher(HashlibHasher):
    """BLAKE2b truncated to a configurable digest size (32 bytes by default)."""

    def __init__(self, digest_size: int = 32) -> None:
        super().__init__(lambda: hashlib.blake2b(digest_size=digest_size), "blake2b")


class Blake2sHasher(HashlibHasher):
    """BLAKE2s, 32-byte digests."""

    def __init__(self) -> None:
        super().__init__(hashlib.blake2s, "blake2s")


# Algorithm name -> provider class
HASH_PROVIDERS: dict[str, type[HashlibHasher]] = {
    "sha256": SHA256Hasher,
    "sha3_256": SHA3_256Hasher,
    "blake2b": Blake2bHasher,
    "blake2s": Blake2sHasher,
}

DEFAULT_HASH_ALGORITHM = "sha256"


def normalize_algorithm(name: str) -> str:
    """Canonical spelling of an algorithm name ("SHA3-256" -> "sha3_256")."""
    return name.strip().lower().replace("-", "_")


def available_hash_algorithms() -> list[str]:
    """Return the names accepted by get_hash_provider()."""
    return sorted(HASH_PROVIDERS)


def get_hash_provider(name: str = DEFAULT_HASH_ALGORITHM) -> HashProvider:
    """
    Resolve a hash provider by algorithm name.

    Names are matched case-insensitively and "-" is treated as "_",
    so "SHA3-256" and "sha3_256" resolve to the same provider.

    Args:
        name: Algorithm name (see available_hash_algorithms())

    Returns:
        A new HashProvider instance

    Raises:
        UnsupportedHashException: If the name is unknown
    """
    key = normalize_algorithm(name)
    provider_cls = HASH_PROVIDERS.get(key)
    if provider_cls is None:
        raise UnsupportedHashException(
            f"Unsupported hash algorithm: {name!r} "
            f"(available: {', '.join(available_hash_algorithms())})",
            algorithm=name,
        )
    return provider_cls()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "HashProvider",
    "HashlibHasher",
    "SHA256Hasher",
    "SHA3_256Hasher",
    "Blake2bHasher",
    "Blake2sHasher",
    "HASH_PROVIDERS",
    "DEFAULT_HASH_ALGORITHM",
    "available_hash_algorithms",
    "get_hash_provider",
    "normalize_algorithm",
    "to_hex",
    "from_hex",
]
