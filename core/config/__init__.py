"""
Runtime Configuration Module

Provides configuration loading and management for the Merkle engine.
"""

from .runtime import (
    HashConfig,
    RuntimeConfig,
    VisualConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "HashConfig",
    "VisualConfig",
    "get_default_config",
    "set_default_config",
]
