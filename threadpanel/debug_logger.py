# SPDX-License-Identifier: MIT
"""
Structured debug logger for the thread panel.

Appends one JSON object per line to ``<state_dir>/debug.log``. Each public
method records one kind of event and declares the minimum debug level at
which it is written:

- Level 0: nothing is logged
- Level 1 (default): loads, deletes, failures, width restore
- Level 2: selection changes and drag start/end

Logging must never break the panel, so write failures are dropped.
"""

import json
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from threadpanel.config import get_debug_level
from threadpanel.paths import PathResolver

MAX_MESSAGE_LEN = 500


def _truncate(text: str, limit: int = MAX_MESSAGE_LEN) -> str:
    return text if len(text) <= limit else text[:limit]


class DebugLogger:
    """JSON-lines event logger."""

    def __init__(self, log_path: Optional[Path] = None) -> None:
        self.level = get_debug_level()
        self.log_path = log_path or (PathResolver.state_dir() / "debug.log")
        self.session_id = uuid.uuid4().hex[:8]

    def _write(self, event: Dict[str, Any], min_level: int = 1) -> None:
        """Append an event if the configured level allows it."""
        if self.level < min_level:
            return

        record = {
            "event": event.get("event", "unknown"),
            "level": "debug" if min_level >= 2 else "info",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "session_id": self.session_id,
            "pid": os.getpid(),
        }
        record.update(event)

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a") as f:
                f.write(json.dumps(record) + "\n")
        except OSError:
            pass

    # ------------------------------------------------------------------
    # Thread list
    # ------------------------------------------------------------------

    def threads_loaded(self, count: int, ms: float) -> None:
        self._write({"event": "threads_loaded", "count": count, "ms": round(ms, 2)})

    def threads_load_failed(self, message: str) -> None:
        self._write(
            {"event": "threads_load_failed", "level": "error", "err": _truncate(message)}
        )

    def selection_changed(self, mode: str, selected_count: int) -> None:
        self._write(
            {"event": "selection_changed", "mode": mode, "selected": selected_count},
            min_level=2,
        )

    # ------------------------------------------------------------------
    # Delete workflow
    # ------------------------------------------------------------------

    def delete_requested(self, kind: str, thread_ids: Iterable[str]) -> None:
        self._write(
            {"event": "delete_requested", "kind": kind, "thread_ids": list(thread_ids)}
        )

    def delete_cancelled(self, kind: str, count: int) -> None:
        self._write({"event": "delete_cancelled", "kind": kind, "count": count})

    def thread_deleted(self, thread_id: str) -> None:
        self._write({"event": "thread_deleted", "thread_id": thread_id})

    def delete_failed(self, thread_id: str, message: str) -> None:
        self._write(
            {
                "event": "delete_failed",
                "level": "error",
                "thread_id": thread_id,
                "err": _truncate(message),
            }
        )

    def batch_delete_finished(self, requested: int, succeeded: int, ms: float) -> None:
        self._write(
            {
                "event": "batch_delete_finished",
                "requested": requested,
                "succeeded": succeeded,
                "ms": round(ms, 2),
            }
        )

    # ------------------------------------------------------------------
    # Panel width
    # ------------------------------------------------------------------

    def width_restored(self, width: int, source: str) -> None:
        self._write({"event": "width_restored", "width": width, "source": source})

    def width_persist_failed(self, message: str) -> None:
        self._write(
            {"event": "width_persist_failed", "level": "error", "err": _truncate(message)}
        )

    def drag_started(self, width: int) -> None:
        self._write({"event": "drag_started", "width": width}, min_level=2)

    def drag_ended(self, width: int) -> None:
        self._write({"event": "drag_ended", "width": width}, min_level=2)

    def error(self, op: str, message: str) -> None:
        self._write({"event": "error", "level": "error", "op": op, "err": _truncate(message)})


_logger: Optional[DebugLogger] = None


def get_logger() -> DebugLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = DebugLogger()
    return _logger


def reset_logger() -> None:
    """Drop the cached logger so the next get_logger() re-reads the environment."""
    global _logger
    _logger = None
