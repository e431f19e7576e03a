#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Tests for the JSON-lines debug logger.

Level 0 writes nothing, level 1 writes workflow events, level 2 adds
selection and drag events.
"""

import json
from pathlib import Path

import pytest

from threadpanel.debug_logger import DebugLogger, get_logger, reset_logger


def _entries(state_dir: Path):
    log_file = state_dir / "debug.log"
    if not log_file.exists():
        return []
    return [json.loads(line) for line in log_file.read_text().splitlines() if line]


class TestLevels:
    def test_level_1_writes_delete_events(self, temp_state_dir: Path, monkeypatch):
        monkeypatch.setenv("THREAD_PANEL_DEBUG", "1")
        logger = DebugLogger()

        logger.thread_deleted("a")

        entries = _entries(temp_state_dir)
        assert len(entries) == 1
        assert entries[0]["event"] == "thread_deleted"
        assert entries[0]["thread_id"] == "a"
        assert "timestamp" in entries[0]
        assert "pid" in entries[0]

    def test_level_0_writes_nothing(self, temp_state_dir: Path, monkeypatch):
        monkeypatch.setenv("THREAD_PANEL_DEBUG", "0")
        logger = DebugLogger()

        logger.thread_deleted("a")
        logger.threads_load_failed("boom")

        assert not (temp_state_dir / "debug.log").exists()

    def test_level_1_skips_debug_events(self, temp_state_dir: Path, monkeypatch):
        monkeypatch.setenv("THREAD_PANEL_DEBUG", "1")
        logger = DebugLogger()

        logger.selection_changed("selecting", 2)
        logger.drag_started(30)

        assert _entries(temp_state_dir) == []

    def test_level_2_writes_debug_events(self, temp_state_dir: Path, monkeypatch):
        monkeypatch.setenv("THREAD_PANEL_DEBUG", "2")
        logger = DebugLogger()

        logger.selection_changed("selecting", 2)
        logger.drag_ended(44)

        events = [(e["event"], e["level"]) for e in _entries(temp_state_dir)]
        assert events == [("selection_changed", "debug"), ("drag_ended", "debug")]


class TestEventFields:
    def test_errors_are_marked_and_truncated(self, temp_state_dir: Path):
        logger = DebugLogger()

        logger.delete_failed("a", "X" * 1000)

        entry = _entries(temp_state_dir)[0]
        assert entry["level"] == "error"
        assert entry["err"].count("X") == 500

    def test_batch_finished_records_counts(self, temp_state_dir: Path):
        logger = DebugLogger()

        logger.batch_delete_finished(requested=3, succeeded=2, ms=12.3456)

        entry = _entries(temp_state_dir)[0]
        assert entry["requested"] == 3
        assert entry["succeeded"] == 2
        assert entry["ms"] == 12.35

    def test_delete_requested_lists_ids_in_order(self, temp_state_dir: Path):
        DebugLogger().delete_requested("batch", ("c", "a"))

        assert _entries(temp_state_dir)[0]["thread_ids"] == ["c", "a"]


class TestWriteFailures:
    def test_unwritable_path_is_ignored(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        logger = DebugLogger(log_path=blocker / "debug.log")

        logger.thread_deleted("a")  # must not raise


class TestSingleton:
    def test_get_logger_is_cached(self):
        assert get_logger() is get_logger()

    def test_reset_logger_rereads_environment(self, temp_state_dir: Path, monkeypatch):
        monkeypatch.setenv("THREAD_PANEL_DEBUG", "2")
        reset_logger()
        assert get_logger().level == 2

        monkeypatch.setenv("THREAD_PANEL_DEBUG", "0")
        reset_logger()
        assert get_logger().level == 0
