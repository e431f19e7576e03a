#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for the thread panel.

Contains the thread summary record, the open-thread reference shared with
the main view, panel constants, and preview derivation.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional


# =============================================================================
# Constants
# =============================================================================

# Panel width bounds, in terminal cells
MIN_WIDTH = 20
MAX_WIDTH = 60
DEFAULT_WIDTH = 30

# Key under which the chosen panel width is persisted
PANEL_WIDTH_KEY = "threadHistoryPanelWidth"

PREVIEW_MAX_LEN = 80


# =============================================================================
# Thread records
# =============================================================================


@dataclass(frozen=True)
class ThreadSummary:
    """One row of the thread list.

    Attributes:
        id: Unique thread identifier
        preview_text: First message text, or the id when there is none
        updated_at: ISO timestamp from the store, used for ordering only
    """

    id: str
    preview_text: str
    updated_at: str = ""


def content_to_string(content: Any) -> str:
    """Flatten message content to plain text.

    String content is returned unchanged. A list of content blocks is
    reduced to the text of its ``{"type": "text"}`` blocks, joined by a
    single space. Anything else yields an empty string.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = [
            block.get("text", "")
            for block in content
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        return " ".join(t for t in texts if isinstance(t, str))
    return ""


def derive_preview(thread_id: str, values: Any) -> str:
    """Derive the list-row text for a thread.

    Args:
        thread_id: The thread identifier (fallback text)
        values: The thread's value payload, possibly holding ``messages``

    Returns:
        Content of the first message, or the thread id if there is no
        non-empty message list.
    """
    if not isinstance(values, dict):
        return thread_id
    messages = values.get("messages")
    if not isinstance(messages, list) or not messages:
        return thread_id
    first = messages[0]
    if not isinstance(first, dict):
        return thread_id
    return content_to_string(first.get("content"))


# =============================================================================
# Open thread reference
# =============================================================================


class OpenThreadRef:
    """Holds the id of the thread shown in the main view.

    Owned by the embedding application; the panel reads it to highlight the
    open row, sets it on navigation, and clears it when that thread is deleted.
    """

    def __init__(self, thread_id: Optional[str] = None) -> None:
        self._thread_id = thread_id
        self._listeners: List[Callable[[Optional[str]], None]] = []

    def get(self) -> Optional[str]:
        return self._thread_id

    def set(self, thread_id: Optional[str]) -> None:
        if thread_id == self._thread_id:
            return
        self._thread_id = thread_id
        for listener in list(self._listeners):
            listener(thread_id)

    def clear(self) -> None:
        self.set(None)

    def subscribe(self, listener: Callable[[Optional[str]], None]) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
