"""
CLI Verify Command

Verify leaf data against a root using a stored proof document.
No leaves and no tree are needed, so historical roots can be checked.
The root always comes from the caller; the root and algorithm recorded in
the proof document are annotations and never trusted.

Usage:
    merkle verify Baz --proof proof.json --root 0x... [--algorithm sha256] [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.crypto.hashing import from_hex, get_hash_provider, normalize_algorithm, to_hex
from core.merkle.merkle_proofs import compute_proof_root, verify_proof
from core.schemas.transport import ProofDocument
from merkle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    decode_value,
    print_json,
    resolve_algorithm,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    verified: bool = False
    index: int = 0
    depth: int = 0
    algorithm: str = ""
    expected_root: str = ""
    computed_root: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"verified: {str(summary.verified).lower()}")
    print(f"index: {summary.index}")
    print(f"depth: {summary.depth}")
    print(f"algorithm: {summary.algorithm}")
    print(f"expected_root: {summary.expected_root}")
    if not summary.verified:
        print(f"computed_root: {summary.computed_root}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        EXIT_SUCCESS if verified, EXIT_VERIFICATION_FAILED if not,
        EXIT_RUNTIME_ERROR for unusable input
    """
    proof_path = Path(args.proof)
    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    document = ProofDocument.from_json(proof_path.read_text(encoding="utf-8"))

    try:
        expected_root = from_hex(args.root)
    except ValueError as e:
        print(f"Error: invalid --root: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if document.root is not None and document.root_bytes() != expected_root:
        logger.info("Proof document records a different root than --root; using --root")

    # The document's algorithm is an annotation; it may only confirm the choice
    algorithm = resolve_algorithm(args)
    if document.algorithm is not None and (
        normalize_algorithm(document.algorithm) != normalize_algorithm(algorithm)
    ):
        print(
            f"Error: proof was generated with {document.algorithm}, "
            f"verifying with {algorithm} (pass --algorithm to choose)",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR
    provider = get_hash_provider(algorithm)

    data = decode_value(args.data, args.hex)
    proof = document.to_proof()
    verified = verify_proof(data, proof, expected_root, provider)
    computed = compute_proof_root(data, proof, provider)

    summary = VerifySummary(
        verified=verified,
        index=proof.index,
        depth=proof.depth,
        algorithm=algorithm,
        expected_root=to_hex(expected_root),
        computed_root=to_hex(computed),
    )

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if verified else EXIT_VERIFICATION_FAILED
