"""
Pytest configuration and fixtures for thread-panel tests.
"""

import sys
from pathlib import Path

# Ensure project root is in sys.path for 'threadpanel' imports
# This must happen before any imports from threadpanel
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

from threadpanel.kv_store import MemoryKeyValueStore
from threadpanel.models import ThreadSummary
from threadpanel.thread_store import InMemoryThreadStore


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "tui: marks TUI tests")


@pytest.fixture
def temp_state_dir(tmp_path_factory, monkeypatch) -> Path:
    """Create and return a temporary state directory.

    Sets THREAD_PANEL_STATE and THREAD_PANEL_BASE, clears any debug level
    override, and resets the debug logger so it picks up the new path.
    """
    home = tmp_path_factory.mktemp("home")
    state_dir = home / ".local" / "state" / "thread-panel"
    state_dir.mkdir(parents=True)
    config_dir = home / ".config" / "thread-panel"
    config_dir.mkdir(parents=True)
    monkeypatch.setenv("THREAD_PANEL_STATE", str(state_dir))
    monkeypatch.setenv("THREAD_PANEL_BASE", str(config_dir))
    monkeypatch.delenv("THREAD_PANEL_DEBUG", raising=False)
    monkeypatch.delenv("THREAD_PANEL_SETTINGS", raising=False)
    monkeypatch.delenv("THREAD_PANEL_STORE", raising=False)

    from threadpanel.debug_logger import reset_logger
    reset_logger()

    return state_dir


@pytest.fixture(autouse=True)
def isolate_state_dir(temp_state_dir: Path):
    """Autouse fixture that keeps every test away from the real state directory."""
    yield temp_state_dir

    from threadpanel.debug_logger import reset_logger
    reset_logger()


@pytest.fixture
def sample_threads():
    """Three threads in display order: a, b, c."""
    return [
        ThreadSummary(id="a", preview_text="Plan the launch"),
        ThreadSummary(id="b", preview_text="Debug the flaky test"),
        ThreadSummary(id="c", preview_text="Write release notes"),
    ]


@pytest.fixture
def memory_store(sample_threads) -> InMemoryThreadStore:
    return InMemoryThreadStore(sample_threads)


@pytest.fixture
def memory_kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()
