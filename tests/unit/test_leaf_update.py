"""
Leaf Update Unit Tests
Tests for MerkleTree.update_leaf / update_leaf

Tests:
1. Updated tree equals a fresh build over the new leaves
2. Old proof fails against the new root; new proof verifies
3. Untouched leaves still verify
4. Bounds checking
"""
import pytest

from core.merkle.merkle_proofs import verify_proof
from core.merkle.merkle_tree import build_tree, update_leaf
from core.schemas.errors import (
    ErrorCodes,
    IndexOutOfBoundsException,
    TreeValidationException,
)
from fixtures import FOO_BAR_BAZ, expected_root, h, make_leaves


class TestUpdateMatchesRebuild:
    """An update leaves the tree identical to a rebuild."""

    @pytest.mark.parametrize("count", [1, 2, 3, 5, 8])
    def test_each_index(self, count, hasher):
        """Updating any index gives the same nodes as a fresh build."""
        leaves = make_leaves(count)

        for index in range(count):
            tree = build_tree(leaves, hasher)
            update_leaf(tree, index, b"replacement")

            rebuilt = list(leaves)
            rebuilt[index] = b"replacement"
            assert tree.root == expected_root(rebuilt)
            assert tree.nodes == build_tree(rebuilt, hasher).nodes

    def test_shape_unchanged(self, hasher):
        """Branches, leaf count and padding survive an update."""
        tree = build_tree(make_leaves(5), hasher)
        update_leaf(tree, 4, b"new")

        assert tree.branches == 8
        assert tree.leaf_count == 5
        assert tree.nodes[13:16] == (bytes(32),) * 3

    def test_same_value_keeps_root(self, foo_bar_baz_tree):
        """Rewriting a leaf with its own value keeps the root."""
        before = foo_bar_baz_tree.root
        foo_bar_baz_tree.update_leaf(0, b"Foo")

        assert foo_bar_baz_tree.root == before


class TestFooBarBazUpdate:
    """Replace Baz with Qux in the three-leaf example."""

    def test_baz_to_qux(self, foo_bar_baz_tree, hasher):
        """Replacing Baz with Qux invalidates the old proof against the new root."""
        old_root = foo_bar_baz_tree.root
        old_proof = foo_bar_baz_tree.generate_proof(b"Baz")
        assert verify_proof(b"Baz", old_proof, old_root, hasher)

        update_leaf(foo_bar_baz_tree, 2, b"Qux")

        assert foo_bar_baz_tree.root != old_root
        assert foo_bar_baz_tree.root == h(h(h(b"Foo"), h(b"Bar")), h(h(b"Qux"), bytes(32)))
        assert not verify_proof(b"Baz", old_proof, foo_bar_baz_tree.root, hasher)
        # Historical roots still verify historical proofs
        assert verify_proof(b"Baz", old_proof, old_root, hasher)

        new_proof = foo_bar_baz_tree.generate_proof(b"Qux")
        assert new_proof.index == 2
        assert verify_proof(b"Qux", new_proof, foo_bar_baz_tree.root, hasher)
        assert foo_bar_baz_tree.leaf(2) == b"Qux"
        assert b"Baz" not in foo_bar_baz_tree

    def test_untouched_leaves_verify(self, foo_bar_baz_tree, hasher):
        """Leaves that were not replaced still verify with fresh proofs."""
        update_leaf(foo_bar_baz_tree, 2, b"Qux")

        for leaf in (b"Foo", b"Bar"):
            proof = foo_bar_baz_tree.generate_proof(leaf)
            assert verify_proof(leaf, proof, foo_bar_baz_tree.root, hasher)

    def test_sibling_proof_changes(self, foo_bar_baz_tree, hasher):
        """A proof for a leaf in the other subtree fails after update."""
        foo_proof = foo_bar_baz_tree.generate_proof(b"Foo")
        update_leaf(foo_bar_baz_tree, 2, b"Qux")

        assert not verify_proof(b"Foo", foo_proof, foo_bar_baz_tree.root, hasher)


class TestUpdateErrors:
    """Bounds and type checking."""

    @pytest.mark.parametrize("index", [3, 4, 100, -1])
    def test_out_of_bounds(self, foo_bar_baz_tree, index):
        """Out-of-range indexes raise and leave the tree unchanged."""
        before = foo_bar_baz_tree.nodes

        with pytest.raises(IndexOutOfBoundsException) as exc_info:
            update_leaf(foo_bar_baz_tree, index, b"x")

        assert exc_info.value.code == ErrorCodes.INDEX_OUT_OF_BOUNDS
        assert exc_info.value.details["leaf_count"] == 3
        assert foo_bar_baz_tree.nodes == before

    def test_padding_slot_is_out_of_bounds(self, foo_bar_baz_tree):
        """Index 3 addresses a padding slot and is rejected."""
        with pytest.raises(IndexOutOfBoundsException, match="index out of bounds"):
            foo_bar_baz_tree.update_leaf(3, b"x")

    def test_non_int_index(self, foo_bar_baz_tree):
        """A string index is rejected."""
        with pytest.raises(IndexOutOfBoundsException):
            foo_bar_baz_tree.update_leaf("1", b"x")

    def test_non_bytes_data(self, foo_bar_baz_tree):
        """Text data is rejected."""
        with pytest.raises(TreeValidationException):
            foo_bar_baz_tree.update_leaf(0, "text")

    def test_leaves_unchanged_on_error(self, foo_bar_baz_tree):
        """A rejected update does not touch the stored leaves."""
        with pytest.raises(TreeValidationException):
            foo_bar_baz_tree.update_leaf(0, 42)

        assert list(foo_bar_baz_tree) == FOO_BAR_BAZ
