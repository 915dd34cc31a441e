"""
Merkle Tree Engine
Array-packed Merkle tree construction, proofs, verification and updates.

This package provides:
- MerkleTree / build_tree: build a tree from raw leaves
- generate_proof: sibling path for a leaf located by value
- verify_proof: stateless verification against a root digest
- update_leaf: single-leaf replacement with path recomputation
- TreeRegistry: named trees with per-tree locking
- to_dot: Graphviz export of a tree and a highlighted proof

Usage:
    from core.crypto import SHA256Hasher
    from core.merkle import build_tree, generate_proof, verify_proof, update_leaf

    hasher = SHA256Hasher()
    tree = build_tree([b"Foo", b"Bar", b"Baz"], hasher)

    proof = generate_proof(tree, b"Baz")
    assert verify_proof(b"Baz", proof, tree.root, hasher)

    update_leaf(tree, 2, b"Qux")
    assert not verify_proof(b"Baz", proof, tree.root, hasher)
"""
from .merkle_proofs import (
    MerkleProof,
    MerkleVerifier,
    compute_proof_root,
    verify_proof,
)

from .merkle_tree import (
    MerkleTree,
    build_tree,
    compute_branches,
    compute_proof_length,
    generate_proof,
    tree_root,
    update_leaf,
)

from .registry import TreeRegistry

from .visual import (
    HexFormatter,
    StringFormatter,
    TruncatedHexFormatter,
    get_formatter,
    to_dot,
    write_dot,
)


__all__ = [
    # Core types
    "MerkleTree",
    "MerkleProof",
    # Core functions
    "build_tree",
    "tree_root",
    "generate_proof",
    "verify_proof",
    "update_leaf",
    "compute_proof_root",
    "compute_branches",
    "compute_proof_length",
    # Convenience classes
    "MerkleVerifier",
    "TreeRegistry",
    # Visualisation
    "to_dot",
    "write_dot",
    "get_formatter",
    "TruncatedHexFormatter",
    "HexFormatter",
    "StringFormatter",
]
