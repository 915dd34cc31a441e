"""
CLI Visual Command

Render a tree as Graphviz DOT, optionally highlighting the proof for
one leaf.

Usage:
    merkle visual --leaves leaves.json [Baz] [--out tree.dot]
    dot -Tpng tree.dot -o tree.png
"""

from __future__ import annotations

import logging
from argparse import Namespace

from core.merkle.merkle_tree import build_tree
from core.merkle.visual import get_formatter, to_dot, write_dot
from merkle_cli.commands.common import (
    EXIT_SUCCESS,
    decode_value,
    load_leaves,
    resolve_provider,
)


logger = logging.getLogger(__name__)


def visual_cmd(args: Namespace) -> int:
    """
    Execute the visual command.

    Returns:
        Exit code
    """
    tree = build_tree(load_leaves(args), resolve_provider(args))

    proof = None
    if args.data is not None:
        proof = tree.generate_proof(decode_value(args.data, args.hex))

    visual_config = args.cli_config.runtime.visual
    leaf_formatter = get_formatter(args.leaf_format or visual_config.leaf_format)
    branch_formatter = get_formatter(args.branch_format or visual_config.branch_format)

    if args.out:
        path = write_dot(args.out, tree, proof, leaf_formatter, branch_formatter)
        logger.info(f"Wrote DOT graph to {path}")
        print(f"Wrote graph: {path}")
    else:
        print(to_dot(tree, proof, leaf_formatter, branch_formatter))

    return EXIT_SUCCESS
