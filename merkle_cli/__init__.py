"""
Merkle CLI

Command-line interface for building Merkle trees, generating and verifying
inclusion proofs, updating leaves and exporting DOT graphs.

Usage:
    python -m merkle_cli build --leaves leaves.json
    python -m merkle_cli prove Baz --leaves leaves.json --out proof.json
    python -m merkle_cli verify Baz --proof proof.json --root 0x...
    python -m merkle_cli update 2 Qux --leaves leaves.json
    python -m merkle_cli visual Baz --leaves leaves.json --out tree.dot
"""

__version__ = "0.1.0"
