"""
CLI Build Command

Build a tree from leaves and report its root and shape.

Usage:
    merkle build --leaves leaves.json [--algorithm sha256] [--json]
    merkle build --leaf Foo --leaf Bar --leaf Baz
"""

from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any

from core.crypto.hashing import to_hex
from core.merkle.merkle_tree import build_tree
from merkle_cli.commands.common import (
    EXIT_SUCCESS,
    load_leaves,
    print_json,
    resolve_algorithm,
    resolve_provider,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    """Summary of a built tree for CLI output."""
    root: str = ""
    algorithm: str = ""
    leaf_count: int = 0
    branches: int = 0
    depth: int = 0
    padding: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    print(f"root: {summary.root}")
    print(f"algorithm: {summary.algorithm}")
    print(f"leaf_count: {summary.leaf_count}")
    print(f"branches: {summary.branches}")
    print(f"depth: {summary.depth}")
    print(f"padding: {summary.padding}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    leaves = load_leaves(args)
    algorithm = resolve_algorithm(args)
    tree = build_tree(leaves, resolve_provider(args))
    logger.info(f"Built tree with {tree.leaf_count} leaves using {algorithm}")

    summary = BuildSummary(
        root=to_hex(tree.root),
        algorithm=algorithm,
        leaf_count=tree.leaf_count,
        branches=tree.branches,
        depth=tree.depth,
        padding=tree.branches - tree.leaf_count,
    )

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
