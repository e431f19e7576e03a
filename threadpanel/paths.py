# SPDX-License-Identifier: MIT
"""Centralized path resolution for the thread panel.

All path resolution should go through this module to ensure consistency.
"""
import os
from pathlib import Path


class PathResolver:
    """Resolves paths for thread panel components."""

    @staticmethod
    def config_dir() -> Path:
        """Get the configuration directory.

        Resolution order:
        1. THREAD_PANEL_BASE env var
        2. ~/.config/thread-panel
        """
        base = os.environ.get("THREAD_PANEL_BASE")
        if base:
            return Path(base)
        return Path.home() / ".config" / "thread-panel"

    @staticmethod
    def state_dir() -> Path:
        """Get the state directory for mutable data (panel state, logs).

        Resolution order:
        1. THREAD_PANEL_STATE env var
        2. XDG_STATE_HOME/thread-panel
        3. ~/.local/state/thread-panel
        """
        state = os.environ.get("THREAD_PANEL_STATE")
        if state:
            return Path(state)
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            return Path(xdg_state) / "thread-panel"
        return Path.home() / ".local" / "state" / "thread-panel"

    @staticmethod
    def store_dir() -> Path:
        """Get the directory holding thread JSON files.

        Resolution order:
        1. THREAD_PANEL_STORE env var
        2. threadPanel.storeDir setting
        3. <config_dir>/threads
        """
        store = os.environ.get("THREAD_PANEL_STORE")
        if store:
            return Path(store)

        from threadpanel.config import get_setting

        configured = get_setting("threadPanel.storeDir")
        if isinstance(configured, str) and configured:
            return Path(configured).expanduser()
        return PathResolver.config_dir() / "threads"
