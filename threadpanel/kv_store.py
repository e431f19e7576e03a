#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Opaque string key/value persistence for panel settings.

The panel only stores one value (its width), but keeps the contract generic:
``get(key)`` returns a string or None, ``set(key, value)`` stores a string.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional


class KeyValueStore(ABC):
    """Synchronous string key/value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileKeyValueStore(KeyValueStore):
    """Flat string map persisted to a JSON file.

    The file is read once and cached; every ``set`` rewrites it atomically
    (temp file + os.replace) so an interrupted write never leaves a
    truncated file behind. Write errors propagate as OSError.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._cache: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._cache is not None:
            return self._cache

        data: Dict[str, str] = {}
        try:
            raw = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            raw = {}
        if isinstance(raw, dict):
            data = {str(k): v for k, v in raw.items() if isinstance(v, str)}

        self._cache = data
        return data

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        if data.get(key) == value:
            return
        updated = dict(data)
        updated[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=".panel_state.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(updated, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
            self._cache = updated
        except OSError:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
