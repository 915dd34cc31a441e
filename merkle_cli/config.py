"""
CLI Configuration

Configuration management for the merkle CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import ENV_PREFIX, RuntimeConfig


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Engine settings (hash algorithm, visual formatters, logging)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Output
    default_output_format: str = "human"  # "human" or "json"

    @property
    def log_level(self) -> str:
        return self.runtime.log_level

    @property
    def log_file(self) -> str | None:
        return self.runtime.log_file

    def to_dict(self) -> dict[str, Any]:
        data = self.runtime.to_dict()
        data["output_format"] = self.default_output_format
        return data


def default_config_paths() -> list[Path]:
    """Locations searched when no --config is given, in priority order."""
    return [
        Path.cwd() / "merkle.json",
        Path.cwd() / ".merkle.json",
        Path.home() / ".config" / "merkle" / "config.json",
    ]


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig(runtime=RuntimeConfig.from_dict(data))
    config.default_output_format = data.get("output_format", config.default_output_format)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file. When omitted, the
                     default locations are searched.

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config.runtime = config.runtime.with_env_overrides()
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "hash": {
    "algorithm": "sha256"
  },
  "visual": {
    "leaf_format": "string",
    "branch_format": "truncated"
  },
  "log_level": "INFO",
  "log_file": null,
  "output_format": "human"
}
"""
