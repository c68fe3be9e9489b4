"""
Pytest configuration and shared fixtures for sparse Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used tree fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from core.merkle import HashableString, MerkleTree  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def empty_tree():
    """Fresh height-8 tree over string leaves (128 leaf slots)."""
    return MerkleTree(8, HashableString)


@pytest.fixture
def ten_leaf_tree():
    """Height-128 tree with leaves "0".."9" at indices 0..9."""
    tree = MerkleTree(128, HashableString)
    for i in range(10):
        tree.set_leaf(i, HashableString(i))
    return tree


@pytest.fixture(autouse=True)
def _isolate_merkle_env(monkeypatch):
    """Keep MERKLE_* variables from the developer's shell out of tests."""
    for key in [
        "MERKLE_TREE_HEIGHT",
        "MERKLE_HASH_SCHEME",
        "MERKLE_LEAF_COUNT",
        "MERKLE_PROOF_INDEX",
        "MERKLE_PROOF_PATH",
        "MERKLE_EXPECTED_VALID",
        "MERKLE_LOG_LEVEL",
        "MERKLE_LOG_FILE",
    ]:
        monkeypatch.delenv(key, raising=False)
