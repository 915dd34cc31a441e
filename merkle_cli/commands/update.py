"""
CLI Update Command

Replace one leaf, report the old and new roots and emit a proof for the
new leaf. The leaves file itself is left untouched unless --write-leaves
is given.

Usage:
    merkle update 2 Qux --leaves leaves.json [--proof-out proof.json] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from core.crypto.hashing import to_hex
from core.merkle.merkle_tree import build_tree, update_leaf
from core.schemas.transport import ProofDocument
from merkle_cli.commands.common import (
    EXIT_SUCCESS,
    decode_value,
    load_leaves,
    print_json,
    resolve_algorithm,
    resolve_provider,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class UpdateSummary:
    """Summary of a leaf update for CLI output."""
    index: int = 0
    old_root: str = ""
    new_root: str = ""
    algorithm: str = ""
    proof: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: UpdateSummary) -> None:
    """Print summary in human-readable format."""
    print(f"index: {summary.index}")
    print(f"old_root: {summary.old_root}")
    print(f"new_root: {summary.new_root}")
    print(f"algorithm: {summary.algorithm}")
    siblings = summary.proof.get("siblings", [])
    print(f"\nproof ({len(siblings)} siblings):")
    for sibling in siblings:
        print(f"  - {sibling}")


def update_cmd(args: Namespace) -> int:
    """
    Execute the update command.

    Returns:
        Exit code
    """
    algorithm = resolve_algorithm(args)
    tree = build_tree(load_leaves(args), resolve_provider(args))
    old_root = tree.root

    new_data = decode_value(args.data, args.hex)
    update_leaf(tree, args.index, new_data)
    logger.info(f"Replaced leaf {args.index}")

    document = ProofDocument.from_proof(
        tree.generate_proof_at(args.index),
        algorithm=algorithm,
        root=tree.root,
    )

    if args.proof_out:
        proof_path = Path(args.proof_out)
        proof_path.parent.mkdir(parents=True, exist_ok=True)
        proof_path.write_text(document.to_json() + "\n", encoding="utf-8")

    if args.write_leaves:
        leaves_path = Path(args.write_leaves)
        values = [to_hex(v) if args.hex else v.decode("utf-8") for v in tree.leaves]
        leaves_path.write_text(json.dumps(values, indent=2) + "\n", encoding="utf-8")
        logger.info(f"Wrote updated leaves to {leaves_path}")

    summary = UpdateSummary(
        index=args.index,
        old_root=to_hex(old_root),
        new_root=to_hex(tree.root),
        algorithm=algorithm,
        proof=document.model_dump(exclude_none=True),
    )

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
