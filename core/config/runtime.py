"""
Runtime Configuration

Central configuration for hashing, visualisation and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashProvider, get_hash_provider

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "MERKLE_"


@dataclass
class HashConfig:
    """Configuration for the hash provider."""
    algorithm: str = DEFAULT_HASH_ALGORITHM


@dataclass
class VisualConfig:
    """Configuration for DOT export labels."""
    leaf_format: str = "truncated"
    branch_format: str = "truncated"


def _section(data: dict[str, Any], name: str, section_cls: type) -> dict[str, Any]:
    """Return data[name] after checking it only holds section_cls fields."""
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(value).__name__}")
    unknown = sorted(set(value) - {f.name for f in fields(section_cls)})
    if unknown:
        raise ValueError(f"Unknown key(s) in config section '{name}': {', '.join(unknown)}")
    return value


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the Merkle engine.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hash: HashConfig = field(default_factory=HashConfig)
    visual: VisualConfig = field(default_factory=VisualConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - MERKLE_HASH_ALGORITHM: Hash algorithm name (sha256, sha3_256, blake2b, blake2s)
        - MERKLE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR)
        - MERKLE_LOG_FILE: Optional log file path
        - MERKLE_VISUAL_LEAF_FORMAT: Leaf label formatter (truncated, hex, string)
        - MERKLE_VISUAL_BRANCH_FORMAT: Digest label formatter
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("hash", {})["algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")

        if os.getenv(f"{ENV_PREFIX}VISUAL_LEAF_FORMAT"):
            overrides.setdefault("visual", {})["leaf_format"] = os.getenv(f"{ENV_PREFIX}VISUAL_LEAF_FORMAT")
        if os.getenv(f"{ENV_PREFIX}VISUAL_BRANCH_FORMAT"):
            overrides.setdefault("visual", {})["branch_format"] = os.getenv(f"{ENV_PREFIX}VISUAL_BRANCH_FORMAT")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """
        Load configuration from a dictionary (supports partial data).

        Raises:
            ValueError: If a section is not a mapping or holds unknown keys
        """
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        hash_data = _section(data, "hash", HashConfig)
        visual_data = _section(data, "visual", VisualConfig)

        # Accept the flat spelling {"hash_algorithm": "..."} as well
        if "hash_algorithm" in data and "algorithm" not in hash_data:
            hash_data = {**hash_data, "algorithm": data["hash_algorithm"]}

        hash_config = HashConfig(**hash_data) if hash_data else HashConfig()
        visual = VisualConfig(**visual_data) if visual_data else VisualConfig()

        return cls(
            hash=hash_config,
            visual=visual,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "hash" in overrides:
            for key, value in overrides["hash"].items():
                setattr(new_config.hash, key, value)

        if "visual" in overrides:
            for key, value in overrides["visual"].items():
                setattr(new_config.visual, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def hash_provider(self) -> HashProvider:
        """
        Build the configured hash provider.

        Raises:
            UnsupportedHashException: If the configured algorithm is unknown
        """
        return get_hash_provider(self.hash.algorithm)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash": {
                "algorithm": self.hash.algorithm,
            },
            "visual": {
                "leaf_format": self.visual.leaf_format,
                "branch_format": self.visual.branch_format,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig | None) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
