"""
Merkle Proofs and Verification
Proof value object and stateless verification against a root digest.

This module provides:
- MerkleProof: immutable sibling path + leaf ordinal index
- compute_proof_root: recompute the root a proof commits to
- verify_proof: check leaf data against an expected root
- MerkleVerifier: verifier bound to a single HashProvider

Verification needs no tree instance, only the proof, the leaf data and a
root. That allows checking against historical or externally supplied roots.

Position arithmetic matches the array-packed tree: a proof with k siblings
comes from a tree with 2**k leaf slots, so the leaf sits at absolute
position index + 2**k. At every level an even position is a left child and
an odd position is a right child.
"""
from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import HashProvider


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion proof for a single leaf.

    Attributes:
        siblings: Sibling digests, leaf level first, root level last
        index: 0-based ordinal index of the leaf in the original input
    """
    siblings: tuple[bytes, ...]
    index: int

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError(f"Leaf index must be an int, got {type(self.index).__name__}")
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        for i, sibling in enumerate(self.siblings):
            if not isinstance(sibling, (bytes, bytearray, memoryview)):
                raise TypeError(f"Sibling {i} must be bytes, got {type(sibling).__name__}")
        # Freeze whatever sequence was passed in
        object.__setattr__(self, "siblings", tuple(bytes(s) for s in self.siblings))

    @property
    def depth(self) -> int:
        """Number of levels between the leaf and the root."""
        return len(self.siblings)

    @property
    def branches(self) -> int:
        """Leaf slot count of the tree this proof was generated from."""
        return 1 << len(self.siblings)

    def __len__(self) -> int:
        return len(self.siblings)


def compute_proof_root(
    data: bytes,
    proof: MerkleProof,
    hash_provider: HashProvider,
) -> bytes:
    """
    Recompute the root digest committed to by a proof.

    Algorithm:
    1. candidate = H(data)
    2. position = index + 2**len(siblings)
    3. For each sibling (leaf level first):
       - even position: candidate = H(candidate || sibling)
       - odd position:  candidate = H(sibling || candidate)
       - position >>= 1

    Args:
        data: Raw leaf data (not its digest)
        proof: The proof to fold
        hash_provider: Provider the tree was built with

    Returns:
        The recomputed root digest
    """
    candidate = hash_provider.digest(data)
    position = proof.index + proof.branches

    for sibling in proof.siblings:
        if position % 2 == 0:
            candidate = hash_provider.digest(candidate, sibling)
        else:
            candidate = hash_provider.digest(sibling, candidate)
        position >>= 1

    return candidate


def verify_proof(
    data: bytes,
    proof: MerkleProof,
    expected_root: bytes,
    hash_provider: HashProvider,
) -> bool:
    """
    Verify that data is committed to by expected_root.

    A mismatch is an ordinary outcome and returns False; this function
    does not raise for tampered data, siblings or roots.

    Args:
        data: Raw leaf data
        proof: Proof produced by MerkleTree.generate_proof()
        expected_root: Root digest to verify against
        hash_provider: Provider the tree was built with

    Returns:
        True if the recomputed root equals expected_root byte for byte
    """
    candidate = compute_proof_root(data, proof, hash_provider)
    return hmac.compare_digest(candidate, bytes(expected_root))


class MerkleVerifier:
    """
    Verifier bound to one HashProvider.

    Holds no tree and no mutable state, so one instance can be shared
    freely across threads.

    Example:
        >>> verifier = MerkleVerifier(SHA256Hasher())
        >>> verifier.verify(b"Baz", proof, root)
        True
    """

    def __init__(self, hash_provider: HashProvider) -> None:
        self.hash_provider = hash_provider

    def verify(self, data: bytes, proof: MerkleProof, expected_root: bytes) -> bool:
        """Verify a proof object against a root."""
        return verify_proof(data, proof, expected_root, self.hash_provider)

    def verify_path(
        self,
        data: bytes,
        index: int,
        siblings: Sequence[bytes],
        expected_root: bytes,
    ) -> bool:
        """
        Verify from raw proof components.

        Convenience for callers that received the sibling path and index
        separately (e.g. from a transport layer).
        """
        proof = MerkleProof(siblings=tuple(siblings), index=index)
        return verify_proof(data, proof, expected_root, self.hash_provider)

    def root_for(self, data: bytes, proof: MerkleProof) -> bytes:
        """Return the root a proof commits data to."""
        return compute_proof_root(data, proof, self.hash_provider)


__all__ = [
    "MerkleProof",
    "compute_proof_root",
    "verify_proof",
    "MerkleVerifier",
]
