"""
Test fixtures package for Merkle engine tests.

Usage:
    from fixtures import make_leaves, make_tree, expected_root

    def test_something():
        tree = make_tree(make_leaves(5))
        assert tree.root == expected_root(make_leaves(5))
"""

from .common import (
    FOO_BAR_BAZ,
    expected_root,
    h,
    make_leaves,
    make_tree,
)

__all__ = [
    "FOO_BAR_BAZ",
    "expected_root",
    "h",
    "make_leaves",
    "make_tree",
]
