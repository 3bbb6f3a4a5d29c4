"""
Pytest configuration and shared fixtures for ethnet tests.

Provides:
- Enclave service fixtures (see ``tests/fixtures/services.py``)
- A mock orchestrator built from ``AsyncMock``
- Logging configuration for the ``ethnet`` namespace
"""

import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from ethnet.core.logger import LOGGER_NAMESPACE
from tests.fixtures.services import SNAPSHOT_YAML


pytest_plugins = ["tests.fixtures.services"]


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.getLogger(LOGGER_NAMESPACE).setLevel(logging.DEBUG)


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_orchestrator() -> MagicMock:
    """Orchestrator double whose async methods are ``AsyncMock``s."""
    orchestrator = MagicMock()
    orchestrator.run_package = AsyncMock()
    orchestrator.get_services = AsyncMock(return_value={})
    orchestrator.stop_enclave = AsyncMock(return_value=None)
    orchestrator.destroy_enclave = AsyncMock(return_value=None)
    orchestrator.wait_for_services = AsyncMock(return_value=None)
    return orchestrator


# ============================================================================
# File Fixtures
# ============================================================================


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """Snapshot YAML of a small enclave written to a temp file."""
    path = tmp_path / "snapshot.yaml"
    path.write_text(SNAPSHOT_YAML, encoding="utf-8")
    return path
