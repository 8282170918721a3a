"""
pytest configuration for refresh_fetch tests.

Adds src directory to Python path for imports and isolates global state.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from refresh_fetch.config import reset_config  # noqa: E402
from refresh_fetch.logging.context import clear_log_context  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests from reading a config.yaml in the working directory."""
    monkeypatch.setenv("REFRESH_FETCH_CONFIG", str(tmp_path / "absent.yaml"))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after setup_logging() calls."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_log_context()
