"""
CLI command modules.
"""

from merkle_cli.commands import build, prove, verify, update, visual

__all__ = ["build", "prove", "verify", "update", "visual"]
