#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Command-line entry point for the thread panel.

Usage:
    thread-panel                      # Full TUI mode
    thread-panel watch --store DIR    # TUI over a specific thread directory
    thread-panel list                 # Print threads without a TUI
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from threadpanel import __version__
from threadpanel.debug_logger import reset_logger
from threadpanel.errors import StoreUnavailableError
from threadpanel.paths import PathResolver
from threadpanel.thread_store import JsonDirThreadStore
from threadpanel.tui.formatting import format_preview


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thread-panel",
        description="Thread History - browse and delete conversation threads",
    )
    parser.add_argument(
        "--version", action="version", version=f"thread-panel {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    watch_parser = subparsers.add_parser("watch", help="Launch the thread panel TUI")
    watch_parser.add_argument("--store", help="Directory of thread JSON files")
    watch_parser.add_argument("--state", help="Directory for panel state and logs")

    list_parser = subparsers.add_parser("list", help="Print threads and exit")
    list_parser.add_argument("--store", help="Directory of thread JSON files")

    return parser


def _list_threads(store: JsonDirThreadStore) -> int:
    try:
        threads = asyncio.run(store.list_threads())
    except StoreUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    for thread in threads:
        print(f"{thread.id}\t{format_preview(thread.preview_text)}")
    return 0


def main(argv=None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Default to watch (TUI) when no subcommand given
    if not args.command:
        args.command = "watch"
        args.store = None
        args.state = None

    store_dir = Path(args.store) if args.store else PathResolver.store_dir()
    store = JsonDirThreadStore(store_dir)

    if args.command == "list":
        return _list_threads(store)

    if args.state:
        os.environ["THREAD_PANEL_STATE"] = args.state
        reset_logger()

    from threadpanel.tui.app import run_app

    run_app(store)
    return 0


if __name__ == "__main__":
    sys.exit(main())
