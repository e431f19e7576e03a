# SPDX-License-Identifier: MIT
"""Configuration reader for the thread panel.

Settings live in a single JSON file and are addressed with dot-notation keys
such as ``threadPanel.debugLevel``. Environment variables take precedence
over the file for the few values that are commonly overridden.
"""
import json
import os
from pathlib import Path
from typing import Any

from threadpanel.paths import PathResolver

DEFAULT_DEBUG_LEVEL = 1
DEFAULT_WIDE_LAYOUT_COLUMNS = 100


def get_settings_path() -> Path:
    """Get path to settings.json.

    Returns:
        Path to settings.json, respecting THREAD_PANEL_SETTINGS env var.
    """
    custom = os.environ.get("THREAD_PANEL_SETTINGS")
    if custom:
        return Path(custom)
    return PathResolver.config_dir() / "settings.json"


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value by dot-notation key.

    Args:
        key: Dot-notation key like "threadPanel.debugLevel"
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    settings_path = get_settings_path()

    if not settings_path.exists():
        return default

    try:
        with open(settings_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError):
        return default

    parts = key.split(".")
    current = data
    for part in parts:
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]

    return current


def get_int_setting(key: str, default: int = 0) -> int:
    """Get an integer setting.

    Args:
        key: Dot-notation key
        default: Default value if key not found or invalid

    Returns:
        Integer value or default if conversion fails.
    """
    value = get_setting(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_debug_level() -> int:
    """Resolve the debug logging level.

    THREAD_PANEL_DEBUG wins over the threadPanel.debugLevel setting.
    Anything unparsable falls back to the default level.
    """
    env_level = os.environ.get("THREAD_PANEL_DEBUG")
    if env_level is not None:
        try:
            return max(0, int(env_level))
        except ValueError:
            return DEFAULT_DEBUG_LEVEL
    return max(0, get_int_setting("threadPanel.debugLevel", DEFAULT_DEBUG_LEVEL))


def get_wide_layout_columns() -> int:
    """Terminal width (in columns) at which the panel becomes a sidebar."""
    columns = get_int_setting("threadPanel.wideLayoutColumns", DEFAULT_WIDE_LAYOUT_COLUMNS)
    return columns if columns > 0 else DEFAULT_WIDE_LAYOUT_COLUMNS
