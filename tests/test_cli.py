#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for the thread-panel command line."""

import json
from pathlib import Path

import pytest

from threadpanel import __version__
from threadpanel.tui_cli import main


@pytest.fixture
def thread_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "threads"
    directory.mkdir()
    (directory / "t1.json").write_text(
        json.dumps(
            {
                "thread_id": "t1",
                "values": {"messages": [{"content": "Line one\nline two"}]},
                "updated_at": "2026-05-01",
            }
        )
    )
    return directory


class TestListCommand:
    def test_prints_id_and_preview(self, thread_dir: Path, capsys):
        assert main(["list", "--store", str(thread_dir)]) == 0
        assert capsys.readouterr().out == "t1\tLine one line two\n"

    def test_missing_store_exits_nonzero(self, tmp_path: Path, capsys):
        assert main(["list", "--store", str(tmp_path / "missing")]) == 1
        assert "Error:" in capsys.readouterr().err


class TestVersion:
    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestWatchCommand:
    def test_launches_tui_with_store(self, thread_dir: Path, monkeypatch):
        launched = []
        monkeypatch.setattr("threadpanel.tui.app.run_app", launched.append)

        assert main(["watch", "--store", str(thread_dir)]) == 0

        assert len(launched) == 1
        assert launched[0].directory == thread_dir

    def test_state_dir_override(self, thread_dir: Path, tmp_path: Path, monkeypatch):
        state = tmp_path / "alt-state"
        monkeypatch.setenv("THREAD_PANEL_STATE", str(tmp_path))
        monkeypatch.setattr("threadpanel.tui.app.run_app", lambda store: None)

        main(["watch", "--store", str(thread_dir), "--state", str(state)])

        from threadpanel.debug_logger import get_logger

        assert get_logger().log_path == state / "debug.log"

    def test_no_subcommand_defaults_to_watch(self, thread_dir: Path, monkeypatch):
        launched = []
        monkeypatch.setenv("THREAD_PANEL_STORE", str(thread_dir))
        monkeypatch.setattr("threadpanel.tui.app.run_app", launched.append)

        assert main([]) == 0

        assert launched[0].directory == thread_dir
