"""
Repository-level pytest configuration.

Why this exists:
  - Initialize the shared Loguru logger once per test session
  - Provide the repository root to tests that need real project files

Important:
  config/config.yaml holds placeholders only. Real credentials belong in
  CREDENTIALS__EMAIL / CREDENTIALS__PASSWORD provided by the user or CI.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ninja_tools.common import init_logger


def pytest_configure(config):
    init_logger()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
