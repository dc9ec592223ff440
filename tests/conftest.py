"""
Pytest configuration and shared fixtures for memory anchor tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

FIXED_NOW = _common.FIXED_NOW
make_record = _common.make_record
make_workspace = _common.make_workspace
FlakyStore = _common.FlakyStore


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def now() -> datetime:
    """A fixed UTC timestamp for deterministic records."""
    return FIXED_NOW


@pytest.fixture
def record():
    """Default three-leaf keccak256 checkpoint record."""
    return make_record()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace directory with top-level files and a memory/ directory."""
    return make_workspace(tmp_path / "workspace")


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Empty directory for a local checkpoint store."""
    return tmp_path / "checkpoints"


@pytest.fixture
def clean_env(monkeypatch):
    """Remove ANCHOR_* variables so config tests start from defaults."""
    for name in [
        "ANCHOR_CONFIG",
        "ANCHOR_HASH_ALGORITHM",
        "ANCHOR_WORKSPACE",
        "ANCHOR_STORE_DIR",
        "ANCHOR_REGISTRY_URL",
        "ANCHOR_AGENT_ID",
        "ANCHOR_NETWORK",
        "ANCHOR_MAX_RETRIES",
        "ANCHOR_RETRY_DELAY",
        "ANCHOR_LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


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
