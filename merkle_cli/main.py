"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkle_cli build  (--leaves FILE | --leaf V ...) [--json]
    python -m merkle_cli prove  [DATA | --index N] (--leaves FILE | --leaf V ...) [--out PATH]
    python -m merkle_cli verify DATA --proof PATH --root HEX [--json]
    python -m merkle_cli update INDEX DATA (--leaves FILE | --leaf V ...) [--proof-out PATH]
    python -m merkle_cli visual [DATA] (--leaves FILE | --leaf V ...) [--out PATH]
    python -m merkle_cli config --init

Environment Variables:
    MERKLE_HASH_ALGORITHM        Hash algorithm (default: sha256)
    MERKLE_LOG_LEVEL             Log level (default: INFO)
    MERKLE_LOG_FILE              Optional log file
    MERKLE_OUTPUT_FORMAT         human or json (default: human)
    MERKLE_VISUAL_LEAF_FORMAT    DOT leaf labels: truncated, hex, string
    MERKLE_VISUAL_BRANCH_FORMAT  DOT digest labels: truncated, hex, string
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.crypto.hashing import available_hash_algorithms
from core.merkle.visual import FORMATTERS
from core.schemas.errors import MerkleException
from merkle_cli.commands import build, prove, update, verify, visual
from merkle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    InputError,
    wants_json,
)
from merkle_cli.config import get_default_config_template, load_config


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_RUNTIME_ERROR",
    "EXIT_VERIFICATION_FAILED",
    "create_parser",
    "main",
    "setup_logging",
]


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_leaf_source(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--leaves", "-l",
        type=str,
        default=None,
        help="File with leaf values (JSON array of strings, or one value per line)",
    )
    parser.add_argument(
        "--leaf",
        action="append",
        default=None,
        help="Leaf value (repeatable; appended after --leaves)",
    )


def _add_common(parser: argparse.ArgumentParser, json_output: bool = True) -> None:
    parser.add_argument(
        "--algorithm", "-a",
        type=str,
        default=None,
        help=f"Hash algorithm ({', '.join(available_hash_algorithms())}; default: from config)",
    )
    parser.add_argument(
        "--hex",
        action="store_true",
        default=False,
        help="Treat leaf and data values as 0x-prefixed hex instead of UTF-8 text",
    )
    if json_output:
        parser.add_argument(
            "--json",
            action="store_true",
            default=False,
            help="Output machine-readable JSON",
        )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Show tracebacks on errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle",
        description="Merkle tree CLI - build trees, generate and verify proofs, update leaves.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merkle.json or ~/.config/merkle/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree and print its root",
        description="Build a Merkle tree from leaves and report root, shape and padding.",
    )
    _add_leaf_source(build_parser)
    _add_common(build_parser)
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an inclusion proof",
        description="Generate the sibling path for a leaf, located by value or by --index.",
    )
    prove_parser.add_argument(
        "data",
        type=str,
        nargs="?",
        default=None,
        help="Leaf value to prove",
    )
    prove_parser.add_argument(
        "--index", "-i",
        type=int,
        default=None,
        help="Prove the leaf at this ordinal index instead of looking up DATA",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof document to this path instead of stdout",
    )
    _add_leaf_source(prove_parser)
    _add_common(prove_parser, json_output=False)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify data against a root with a proof",
        description="Recompute the root from data and a proof document; no tree needed.",
    )
    verify_parser.add_argument(
        "data",
        type=str,
        help="Leaf value to verify",
    )
    verify_parser.add_argument(
        "--proof", "-p",
        type=str,
        required=True,
        help="Path to a proof document (as written by 'prove')",
    )
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        required=True,
        help="Trusted root as 0x-prefixed hex; the root recorded in the proof is never used",
    )
    _add_common(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- update command ---
    update_parser = subparsers.add_parser(
        "update",
        help="Replace one leaf and print the new root",
        description="Replace the leaf at INDEX with DATA and recompute its path to the root.",
    )
    update_parser.add_argument(
        "index",
        type=int,
        help="Ordinal index of the leaf to replace",
    )
    update_parser.add_argument(
        "data",
        type=str,
        help="New leaf value",
    )
    update_parser.add_argument(
        "--proof-out",
        type=str,
        default=None,
        help="Write the proof for the new leaf to this path",
    )
    update_parser.add_argument(
        "--write-leaves",
        type=str,
        default=None,
        help="Write the updated leaf list (JSON array) to this path",
    )
    _add_leaf_source(update_parser)
    _add_common(update_parser)
    update_parser.set_defaults(func=update.update_cmd)

    # --- visual command ---
    visual_parser = subparsers.add_parser(
        "visual",
        help="Export the tree as Graphviz DOT",
        description="Render the tree, optionally highlighting the proof for DATA.",
    )
    visual_parser.add_argument(
        "data",
        type=str,
        nargs="?",
        default=None,
        help="Leaf value whose proof should be highlighted",
    )
    visual_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write DOT to this path instead of stdout",
    )
    visual_parser.add_argument(
        "--leaf-format",
        type=str,
        choices=sorted(FORMATTERS),
        default=None,
        help="Leaf label format (default: from config)",
    )
    visual_parser.add_argument(
        "--branch-format",
        type=str,
        choices=sorted(FORMATTERS),
        default=None,
        help="Digest label format (default: from config)",
    )
    _add_leaf_source(visual_parser)
    _add_common(visual_parser, json_output=False)
    visual_parser.set_defaults(func=visual.visual_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkle.json",
        help="Path for config file (default: merkle.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: merkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def _report_error(args: argparse.Namespace, exc: Exception) -> None:
    if getattr(args, "debug", False):
        traceback.print_exc()
    if isinstance(exc, MerkleException) and wants_json(args):
        print(json.dumps(exc.to_error_model().model_dump(), indent=2))
    else:
        print(f"Error: {exc}", file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (MerkleException, InputError, ValueError, OSError) as e:
        _report_error(args, e)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
