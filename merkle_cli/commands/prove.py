"""
CLI Prove Command

Generate an inclusion proof for one leaf and emit it as a proof document.

Usage:
    merkle prove Baz --leaves leaves.json [--out proof.json]
    merkle prove --index 2 --leaves leaves.json
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.merkle.merkle_tree import build_tree
from core.schemas.transport import ProofDocument
from merkle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    decode_value,
    load_leaves,
    resolve_algorithm,
    resolve_provider,
)


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Exactly one of the positional DATA or --index selects the leaf.

    Returns:
        Exit code
    """
    if (args.data is None) == (args.index is None):
        print("Error: give either DATA or --index", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    algorithm = resolve_algorithm(args)
    tree = build_tree(load_leaves(args), resolve_provider(args))

    if args.index is not None:
        proof = tree.generate_proof_at(args.index)
    else:
        proof = tree.generate_proof(decode_value(args.data, args.hex))

    document = ProofDocument.from_proof(proof, algorithm=algorithm, root=tree.root)
    text = document.to_json()

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote proof for leaf {proof.index} to {out_path}")
        print(f"Wrote proof: {out_path}")
    else:
        print(text)

    return EXIT_SUCCESS
