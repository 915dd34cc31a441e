"""
Shared helpers for CLI commands: leaf loading, value decoding, output.
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.crypto.hashing import HashProvider, from_hex, get_hash_provider
from merkle_cli.config import CLIConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


class InputError(Exception):
    """Command input could not be read or decoded."""
    pass


def decode_value(text: str, hex_mode: bool = False) -> bytes:
    """
    Turn a command-line value into leaf bytes.

    Plain values are UTF-8 encoded. With hex_mode the value must be
    0x-prefixed hex.
    """
    if not hex_mode:
        return text.encode("utf-8")
    try:
        return from_hex(text)
    except ValueError as e:
        raise InputError(str(e)) from e


def read_leaves_file(path: Path) -> list[str]:
    """
    Read leaf values from a file.

    A file whose content parses as a JSON array of strings is read as
    that array; anything else is read as one leaf per line (blank lines
    skipped).
    """
    if not path.exists():
        raise InputError(f"Leaves file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None

    if isinstance(data, list):
        if not all(isinstance(item, str) for item in data):
            raise InputError(f"JSON leaves file must hold an array of strings: {path}")
        return data

    return [line for line in text.splitlines() if line.strip()]


def load_leaves(args: Namespace) -> list[bytes]:
    """Collect leaves from --leaves FILE and repeated --leaf options."""
    values: list[str] = []
    if getattr(args, "leaves", None):
        values.extend(read_leaves_file(Path(args.leaves)))
    values.extend(getattr(args, "leaf", None) or [])

    hex_mode = getattr(args, "hex", False)
    leaves = [decode_value(v, hex_mode) for v in values]
    logger.debug(f"Loaded {len(leaves)} leaves")
    return leaves


def resolve_algorithm(args: Namespace) -> str:
    """--algorithm wins over the configured algorithm."""
    algorithm = getattr(args, "algorithm", None)
    if algorithm:
        return algorithm
    config: CLIConfig | None = getattr(args, "cli_config", None)
    if config is not None:
        return config.runtime.hash.algorithm
    return "sha256"


def resolve_provider(args: Namespace) -> HashProvider:
    return get_hash_provider(resolve_algorithm(args))


def wants_json(args: Namespace) -> bool:
    if getattr(args, "json", False):
        return True
    config: CLIConfig | None = getattr(args, "cli_config", None)
    return config is not None and config.default_output_format == "json"


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))
