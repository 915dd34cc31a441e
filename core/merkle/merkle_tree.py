"""
Merkle Tree Implementation
Array-packed Merkle tree construction, proof generation and leaf update.

This module provides:
- MerkleTree: complete binary tree packed into a flat list of digests
- build_tree: construct a tree from raw leaves and a HashProvider
- generate_proof: sibling path for a leaf located by value
- update_leaf: replace one leaf and recompute its path to the root

Layout Rules (Hard Contracts):
1. branches = smallest power of two >= leaf count (1 for a single leaf)
2. nodes has 2 * branches slots; slot 0 is unused, slot 1 is the root
3. Leaf digests live at [branches, branches + leaf_count)
4. Remaining leaf slots hold zero digests of the provider's length and
   are hashed like real leaves
5. Internal node i stores H(nodes[2i] || nodes[2i+1])
6. The shape never changes after construction; updates only rewrite
   the digests along one leaf-to-root path

Concurrency Notes:
- A MerkleTree is unsynchronised mutable state. update_leaf concurrent
  with anything else on the same tree must be serialised by the caller
  (see core.merkle.registry.TreeRegistry)
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

from core.crypto.hashing import HashProvider
from core.merkle.merkle_proofs import MerkleProof
from core.schemas.errors import (
    IndexOutOfBoundsException,
    LeafNotFoundException,
    TreeValidationException,
)


logger = logging.getLogger(__name__)


def compute_branches(leaf_count: int) -> int:
    """
    Number of leaf slots for a tree holding leaf_count leaves.

    Smallest power of two >= leaf_count; a single leaf needs one slot.

    Example:
        >>> [compute_branches(n) for n in (1, 2, 3, 5, 8)]
        [1, 2, 4, 8, 8]
    """
    if leaf_count < 1:
        raise ValueError(f"leaf_count must be positive, got {leaf_count}")
    return 1 << (leaf_count - 1).bit_length()


def compute_proof_length(leaf_count: int) -> int:
    """Proof length for leaf_count leaves: ceil(log2(leaf_count))."""
    if leaf_count < 1:
        raise ValueError(f"leaf_count must be positive, got {leaf_count}")
    return (leaf_count - 1).bit_length()


class MerkleTree:
    """
    Merkle tree over raw byte leaves, packed into a flat digest list.

    Construction is atomic: the constructor either returns a fully
    populated tree or raises TreeValidationException.

    Example:
        >>> tree = MerkleTree([b"Foo", b"Bar", b"Baz"], SHA256Hasher())
        >>> proof = tree.generate_proof(b"Baz")
        >>> proof.index
        2
        >>> verify_proof(b"Baz", proof, tree.root, SHA256Hasher())
        True
    """

    def __init__(self, leaves: Iterable[bytes], hash_provider: HashProvider) -> None:
        if hash_provider is None:
            raise TreeValidationException(
                "please specify hash algo",
                field_path="hash_provider",
            )
        leaves = list(leaves) if leaves is not None else []
        if not leaves:
            raise TreeValidationException(
                "the merkle tree should contain at least 1 piece of input",
                field_path="leaves",
            )

        data: list[bytes] = []
        for i, leaf in enumerate(leaves):
            if not isinstance(leaf, (bytes, bytearray, memoryview)):
                raise TreeValidationException(
                    f"Leaf {i} must be bytes, got {type(leaf).__name__}",
                    field_path=f"leaves[{i}]",
                )
            data.append(bytes(leaf))

        branches = compute_branches(len(data))
        digest_length = hash_provider.digest_length()

        # Slot 0 is never read
        nodes: list[bytes] = [b""] * (2 * branches)

        for i, leaf in enumerate(data):
            nodes[branches + i] = hash_provider.digest(leaf)

        padding = bytes(digest_length)
        for i in range(branches + len(data), 2 * branches):
            nodes[i] = padding

        for i in range(branches - 1, 0, -1):
            nodes[i] = hash_provider.digest(nodes[2 * i], nodes[2 * i + 1])

        self._hash_provider = hash_provider
        self._data = data
        self._nodes = nodes
        self._branches = branches

        logger.debug(
            f"Built tree: {len(data)} leaves, {branches} branches, "
            f"{branches - len(data)} padding slots"
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def root(self) -> bytes:
        """Root digest (position 1 of the packed array)."""
        return self._nodes[1]

    @property
    def hash_provider(self) -> HashProvider:
        return self._hash_provider

    @property
    def leaf_count(self) -> int:
        return len(self._data)

    @property
    def branches(self) -> int:
        """Leaf slot count, including padding."""
        return self._branches

    @property
    def depth(self) -> int:
        """Number of siblings in every proof produced by this tree."""
        return self._branches.bit_length() - 1

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Stored leaf values in ordinal order."""
        return tuple(self._data)

    @property
    def nodes(self) -> tuple[bytes, ...]:
        """Copy of the packed digest array (slot 0 unused)."""
        return tuple(self._nodes)

    def leaf(self, index: int) -> bytes:
        """Return the stored leaf value at an ordinal index."""
        self._check_index(index)
        return self._data[index]

    def leaf_digest(self, index: int) -> bytes:
        """Return the digest stored for the leaf at an ordinal index."""
        self._check_index(index)
        return self._nodes[self._branches + index]

    def index_of(self, data: bytes) -> int:
        """
        Ordinal index of the first leaf equal to data.

        Linear scan over stored leaf bytes.

        Raises:
            LeafNotFoundException: If no leaf equals data
        """
        target = bytes(data)
        for i, leaf in enumerate(self._data):
            if leaf == target:
                return i
        raise LeafNotFoundException()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, data: object) -> bool:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            return False
        return bytes(data) in self._data

    def __iter__(self) -> Iterator[bytes]:
        return iter(tuple(self._data))

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaf_count={len(self._data)}, branches={self._branches}, "
            f"root={self.root.hex()[:16]}...)"
        )

    # ------------------------------------------------------------------
    # Proof generation
    # ------------------------------------------------------------------

    def generate_proof(self, data: bytes) -> MerkleProof:
        """
        Generate the inclusion proof for a leaf located by value.

        Raises:
            LeafNotFoundException: If data is not a leaf of this tree
        """
        return self._proof_for_index(self.index_of(data))

    def generate_proof_at(self, index: int) -> MerkleProof:
        """
        Generate the inclusion proof for the leaf at an ordinal index.

        Raises:
            IndexOutOfBoundsException: If index is outside [0, leaf_count)
        """
        self._check_index(index)
        return self._proof_for_index(index)

    def _proof_for_index(self, index: int) -> MerkleProof:
        siblings: list[bytes] = []
        position = index + self._branches
        while position > 1:
            # XOR 1 toggles the low bit: the other child of the same parent
            siblings.append(self._nodes[position ^ 1])
            position //= 2
        return MerkleProof(siblings=tuple(siblings), index=index)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update_leaf(self, index: int, new_data: bytes) -> None:
        """
        Replace the leaf at index and recompute every ancestor digest.

        Walks the same sibling/parent chain as proof generation, writing
        parents instead of reading siblings. Cost is proportional to the
        tree height.

        Raises:
            IndexOutOfBoundsException: If index >= leaf_count (or negative)
            TreeValidationException: If new_data is not bytes
        """
        self._check_index(index)
        if not isinstance(new_data, (bytes, bytearray, memoryview)):
            raise TreeValidationException(
                f"Leaf data must be bytes, got {type(new_data).__name__}",
                field_path="new_data",
            )

        h = self._hash_provider
        nodes = self._nodes
        new_leaf = bytes(new_data)

        self._data[index] = new_leaf
        node_index = index + self._branches
        nodes[node_index] = h.digest(new_leaf)

        while node_index > 1:
            sibling_index = node_index ^ 1
            parent_index = node_index // 2
            if node_index % 2 == 0:
                nodes[parent_index] = h.digest(nodes[node_index], nodes[sibling_index])
            else:
                nodes[parent_index] = h.digest(nodes[sibling_index], nodes[node_index])
            node_index = parent_index

        logger.debug(f"Updated leaf {index}; new root {self.root.hex()[:16]}...")

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexOutOfBoundsException(
                f"Leaf index must be an int, got {type(index).__name__}",
                leaf_count=len(self._data),
            )
        if index < 0 or index >= len(self._data):
            raise IndexOutOfBoundsException(
                f"index out of bounds: {index} (leaf count {len(self._data)})",
                index=index,
                leaf_count=len(self._data),
            )


# =============================================================================
# Functional API
# =============================================================================

def build_tree(leaves: Sequence[bytes], hash_provider: HashProvider) -> MerkleTree:
    """
    Build a Merkle tree from raw leaves.

    Args:
        leaves: Ordered raw leaf values. Order matters and is preserved.
        hash_provider: Digest capability used for leaves and internal nodes

    Returns:
        Fully populated MerkleTree

    Raises:
        TreeValidationException: If leaves is empty or hash_provider is None
    """
    return MerkleTree(leaves, hash_provider)


def tree_root(tree: MerkleTree) -> bytes:
    """Return the root digest of a tree."""
    return tree.root


def generate_proof(tree: MerkleTree, data: bytes) -> MerkleProof:
    """
    Generate the inclusion proof for data.

    Raises:
        LeafNotFoundException: If data is not a leaf of tree
    """
    return tree.generate_proof(data)


def update_leaf(tree: MerkleTree, index: int, new_data: bytes) -> None:
    """
    Replace the leaf at index and recompute the path to the root.

    Raises:
        IndexOutOfBoundsException: If index >= leaf count
    """
    tree.update_leaf(index, new_data)


__all__ = [
    "MerkleTree",
    "compute_branches",
    "compute_proof_length",
    "build_tree",
    "tree_root",
    "generate_proof",
    "update_leaf",
]
