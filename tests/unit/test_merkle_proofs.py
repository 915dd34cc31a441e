"""
Merkle Proofs Unit Tests
Tests for core/merkle/merkle_proofs.py and proof generation

Tests:
1. Every leaf of every tree size verifies
2. Tamper detection - data, sibling or root changes fail verification
3. Proof by index matches proof by value
4. MerkleProof validation
5. MerkleVerifier convenience API
"""
import pytest

from core.crypto.hashing import Blake2sHasher, SHA3_256Hasher, SHA256Hasher
from core.merkle.merkle_proofs import (
    MerkleProof,
    MerkleVerifier,
    compute_proof_root,
    verify_proof,
)
from core.merkle.merkle_tree import build_tree
from core.schemas.errors import IndexOutOfBoundsException, LeafNotFoundException
from fixtures import make_leaves


def _flip(data: bytes, position: int = 0) -> bytes:
    buf = bytearray(data)
    buf[position] ^= 0x01
    return bytes(buf)


class TestProofVerification:
    """Generated proofs verify against the tree root."""

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 6, 7, 8, 9, 16, 17])
    def test_every_leaf_verifies(self, count, hasher):
        """Every real leaf verifies against the root."""
        leaves = make_leaves(count)
        tree = build_tree(leaves, hasher)

        for i, leaf in enumerate(leaves):
            proof = tree.generate_proof(leaf)
            assert proof.index == i
            assert len(proof) == tree.depth
            assert verify_proof(leaf, proof, tree.root, hasher)

    @pytest.mark.parametrize("provider", [SHA3_256Hasher(), Blake2sHasher()])
    def test_other_providers(self, provider):
        """Proofs verify with non-default providers."""
        leaves = make_leaves(6)
        tree = build_tree(leaves, provider)

        for leaf in leaves:
            assert verify_proof(leaf, tree.generate_proof(leaf), tree.root, provider)

    def test_wrong_provider_fails(self):
        """Verifying with a different provider fails."""
        leaves = make_leaves(4)
        tree = build_tree(leaves, SHA256Hasher())
        proof = tree.generate_proof(leaves[0])

        assert not verify_proof(leaves[0], proof, tree.root, SHA3_256Hasher())

    def test_proof_at_matches_proof_by_value(self, hasher):
        """Proof by index equals proof by value."""
        leaves = make_leaves(5)
        tree = build_tree(leaves, hasher)

        for i, leaf in enumerate(leaves):
            assert tree.generate_proof_at(i) == tree.generate_proof(leaf)

    def test_compute_proof_root(self, foo_bar_baz_tree, hasher):
        """The folded proof reproduces the tree root."""
        proof = foo_bar_baz_tree.generate_proof(b"Bar")

        assert compute_proof_root(b"Bar", proof, hasher) == foo_bar_baz_tree.root


class TestTamperDetection:
    """Any changed byte makes verification return False."""

    @pytest.fixture
    def setup(self, hasher):
        leaves = make_leaves(6)
        tree = build_tree(leaves, hasher)
        return leaves[3], tree.generate_proof(leaves[3]), tree.root

    def test_tampered_data(self, setup, hasher):
        """Flipping a data byte fails verification."""
        data, proof, root = setup

        assert not verify_proof(_flip(data), proof, root, hasher)

    def test_tampered_sibling(self, setup, hasher):
        """Flipping a byte in any sibling fails verification."""
        data, proof, root = setup

        for level in range(len(proof)):
            siblings = list(proof.siblings)
            siblings[level] = _flip(siblings[level], 5)
            tampered = MerkleProof(siblings=tuple(siblings), index=proof.index)
            assert not verify_proof(data, tampered, root, hasher)

    def test_tampered_root(self, setup, hasher):
        """Flipping a root byte fails verification."""
        data, proof, root = setup

        assert not verify_proof(data, proof, _flip(root, 31), hasher)

    def test_wrong_index(self, setup, hasher):
        """Moving the proof to the neighbouring index fails verification."""
        data, proof, root = setup
        moved = MerkleProof(siblings=proof.siblings, index=proof.index ^ 1)

        assert not verify_proof(data, moved, root, hasher)

    def test_truncated_proof(self, setup, hasher):
        """Dropping the top sibling fails verification."""
        data, proof, root = setup
        short = MerkleProof(siblings=proof.siblings[:-1], index=proof.index)

        assert not verify_proof(data, short, root, hasher)


class TestProofErrors:
    """Proof generation errors."""

    def test_missing_data(self, foo_bar_baz_tree):
        """Proving a value the tree does not hold raises."""
        with pytest.raises(LeafNotFoundException):
            foo_bar_baz_tree.generate_proof(b"Qux")

    @pytest.mark.parametrize("index", [3, 4, -1])
    def test_index_out_of_bounds(self, foo_bar_baz_tree, index):
        """Proof by index rejects padding and negative positions."""
        with pytest.raises(IndexOutOfBoundsException):
            foo_bar_baz_tree.generate_proof_at(index)

    def test_padding_slot_not_provable(self, foo_bar_baz_tree):
        """The zero digest in a padding slot is not a leaf value."""
        with pytest.raises(LeafNotFoundException):
            foo_bar_baz_tree.generate_proof(bytes(32))


class TestMerkleProof:
    """Tests for the MerkleProof value object."""

    def test_properties(self):
        """Siblings are frozen into a tuple; depth and branches follow."""
        proof = MerkleProof(siblings=[b"\x00" * 32, b"\x01" * 32], index=3)

        assert proof.siblings == (b"\x00" * 32, b"\x01" * 32)
        assert proof.depth == 2
        assert proof.branches == 4

    def test_negative_index(self):
        """Negative indexes are rejected."""
        with pytest.raises(ValueError):
            MerkleProof(siblings=(), index=-1)

    def test_non_int_index(self):
        """String and bool indexes are rejected."""
        with pytest.raises(TypeError):
            MerkleProof(siblings=(), index="0")
        with pytest.raises(TypeError):
            MerkleProof(siblings=(), index=True)

    @pytest.mark.parametrize("sibling", [5, "00" * 32, None])
    def test_non_bytes_sibling(self, sibling):
        """Siblings must be bytes; ints are not coerced to zero-filled buffers."""
        with pytest.raises(TypeError, match="Sibling 1"):
            MerkleProof(siblings=(b"\x00" * 32, sibling), index=0)

    def test_bytearray_sibling_frozen(self):
        """bytearray siblings are accepted and copied to bytes."""
        proof = MerkleProof(siblings=[bytearray(b"\x01" * 32)], index=1)

        assert proof.siblings == (b"\x01" * 32,)
        assert type(proof.siblings[0]) is bytes

    def test_frozen(self):
        """Proofs are immutable."""
        proof = MerkleProof(siblings=(), index=0)

        with pytest.raises(AttributeError):
            proof.index = 1


class TestMerkleVerifier:
    """Tests for the MerkleVerifier convenience class."""

    def test_verify_and_root_for(self, foo_bar_baz_tree, hasher):
        """Bound verifier verifies and recomputes the root."""
        verifier = MerkleVerifier(hasher)
        proof = foo_bar_baz_tree.generate_proof(b"Foo")

        assert verifier.verify(b"Foo", proof, foo_bar_baz_tree.root)
        assert verifier.root_for(b"Foo", proof) == foo_bar_baz_tree.root

    def test_verify_path(self, foo_bar_baz_tree, hasher):
        """Raw sibling lists verify only at the right index."""
        verifier = MerkleVerifier(hasher)
        proof = foo_bar_baz_tree.generate_proof(b"Baz")

        assert verifier.verify_path(b"Baz", 2, list(proof.siblings), foo_bar_baz_tree.root)
        assert not verifier.verify_path(b"Baz", 1, list(proof.siblings), foo_bar_baz_tree.root)
