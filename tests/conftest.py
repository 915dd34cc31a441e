"""
Pytest configuration and shared fixtures for Merkle engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

FOO_BAR_BAZ = _common.FOO_BAR_BAZ
make_leaves = _common.make_leaves
make_tree = _common.make_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def hasher():
    """Provide the default SHA-256 provider."""
    from core.crypto.hashing import SHA256Hasher
    return SHA256Hasher()


@pytest.fixture
def foo_bar_baz_tree():
    """Provide a tree over [Foo, Bar, Baz] built with SHA-256."""
    return make_tree()


@pytest.fixture
def leaves_file(tmp_path):
    """Provide a JSON leaves file holding ["Foo", "Bar", "Baz"]."""
    path = tmp_path / "leaves.json"
    path.write_text('["Foo", "Bar", "Baz"]\n', encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep MERKLE_* variables and stray config files out of every test."""
    import os
    for key in list(os.environ):
        if key.startswith("MERKLE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
