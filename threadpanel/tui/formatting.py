#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Shared text formatting for the thread panel.

Keeps user-facing strings (row previews, footer counts, confirmation and
notification messages) in one place so the controllers and the Textual
widgets agree on wording.
"""

from typing import Tuple

from threadpanel.models import PREVIEW_MAX_LEN


def pluralize(count: int, noun: str = "thread") -> str:
    """Return "1 thread" / "2 threads"."""
    return f"{count} {noun}{'' if count == 1 else 's'}"


def format_preview(text: str, max_len: int = PREVIEW_MAX_LEN) -> str:
    """Collapse whitespace to one line and truncate with an ellipsis."""
    one_line = " ".join(text.split())
    if len(one_line) <= max_len:
        return one_line
    return one_line[: max(0, max_len - 1)] + "…"


def format_selection_count(selected: int, total: int) -> str:
    return f"{selected} of {total} selected"


def single_confirm_text() -> Tuple[str, str]:
    """Title and body for the single-delete confirmation."""
    return (
        "Delete Thread",
        "Are you sure you want to delete this thread? This action cannot be undone.",
    )


def batch_confirm_text(count: int) -> Tuple[str, str]:
    """Title and body for the batch-delete confirmation."""
    return (
        "Delete Threads",
        f"Are you sure you want to delete {pluralize(count)}? This action cannot be undone.",
    )


def batch_result_message(succeeded: int, requested: int) -> Tuple[str, str]:
    """Notification text and severity for a finished batch delete.

    Returns:
        (message, severity) where severity is a Textual notify severity.
    """
    if succeeded == requested:
        return f"Deleted {pluralize(requested)}", "information"
    if succeeded == 0:
        return "Failed to delete threads. Please try again.", "error"
    return (
        f"Deleted {succeeded} of {requested} threads. "
        "Some deletions may not have completed.",
        "warning",
    )
