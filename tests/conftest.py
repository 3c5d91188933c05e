"""
Pytest configuration and shared fixtures for blocktree tests.

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

_streams = importlib.import_module("fixtures.streams")

scenario_bytes = _streams.scenario_bytes
scenario_stream = _streams.scenario_stream
patterned_bytes = _streams.patterned_bytes


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def scenario_data() -> bytes:
    """The 130-byte mixed-content stream."""
    return scenario_bytes()


@pytest.fixture
def scenario_tree():
    """Tree over the 130-byte stream with block size 10 and BLAKE2b-256."""
    from blocktree.crypto import default_hasher
    from blocktree.merkle import merklefy

    return merklefy(scenario_stream(), default_hasher(), 10)


@pytest.fixture
def data_file(tmp_path):
    """A 5000-byte file on disk and its contents."""
    data = patterned_bytes(5000)
    path = tmp_path / "data.bin"
    path.write_bytes(data)
    return path, data


@pytest.fixture(autouse=True)
def _clear_blocktree_env(monkeypatch):
    """Keep a developer's BLOCKTREE_* environment out of the tests."""
    for name in (
        "BLOCKTREE_BLOCK_SIZE",
        "BLOCKTREE_HASH_ALGORITHM",
        "BLOCKTREE_DIGEST_SIZE",
        "BLOCKTREE_READ_BUFFER",
        "BLOCKTREE_LOG_LEVEL",
        "BLOCKTREE_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
