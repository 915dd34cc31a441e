"""
Common test fixtures shared by all modules.

Provides factory functions for core Merkle data structures:
- leaf lists (named and generated)
- trees built with the default SHA-256 provider
- expected roots computed directly with hashlib

The expected-root helpers deliberately avoid the engine so tests compare
two independent computations.
"""

import hashlib
from typing import Optional

from core.crypto.hashing import HashProvider, SHA256Hasher
from core.merkle.merkle_tree import MerkleTree


FOO_BAR_BAZ = [b"Foo", b"Bar", b"Baz"]


def make_leaves(count: int, prefix: str = "leaf") -> list[bytes]:
    """Generate count distinct leaves: b"leaf-0", b"leaf-1", ..."""
    return [f"{prefix}-{i}".encode() for i in range(count)]


def make_tree(
    leaves: Optional[list[bytes]] = None,
    hash_provider: Optional[HashProvider] = None,
) -> MerkleTree:
    """Build a tree over leaves (Foo/Bar/Baz by default) with SHA-256."""
    return MerkleTree(
        list(FOO_BAR_BAZ) if leaves is None else leaves,
        hash_provider or SHA256Hasher(),
    )


def h(*parts: bytes) -> bytes:
    """SHA-256 of the concatenated parts."""
    return hashlib.sha256(b"".join(parts)).digest()


def expected_root(leaves: list[bytes], digest_length: int = 32) -> bytes:
    """
    Reference root for SHA-256 trees.

    Pads the hashed leaf level with zero digests up to the next power of
    two, then pairs levels until one digest remains.
    """
    level = [h(leaf) for leaf in leaves]
    width = 1
    while width < len(level):
        width *= 2
    level += [bytes(digest_length)] * (width - len(level))
    while len(level) > 1:
        level = [h(level[i], level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]
