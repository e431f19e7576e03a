# SPDX-License-Identifier: MIT
"""
Selection mode state machine.

Two states: Browsing (row clicks open a thread) and Selecting (row clicks
toggle membership in the selection). Entering is explicit; leaving happens
on cancel or after a batch delete completes. The selection is always empty
while browsing.
"""

from typing import Callable, Iterable, List, Optional

from threadpanel.debug_logger import get_logger
from threadpanel.models import OpenThreadRef
from threadpanel.tui.app_state import SelectionMode, SelectionState


class SelectionController:
    """Owns the selection mode flag and the selected thread ids."""

    def __init__(self, open_thread: Optional[OpenThreadRef] = None) -> None:
        self.state = SelectionState()
        self.open_thread = open_thread if open_thread is not None else OpenThreadRef()
        self._listeners: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def selecting(self) -> bool:
        return self.state.mode is SelectionMode.SELECTING

    @property
    def selected_count(self) -> int:
        return len(self.state.selected)

    def is_selected(self, thread_id: str) -> bool:
        return thread_id in self.state.selected

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self) -> None:
        get_logger().selection_changed(self.state.mode.value, self.selected_count)
        for listener in list(self._listeners):
            listener()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def enter_selection_mode(self) -> None:
        if self.selecting:
            return
        self.state.mode = SelectionMode.SELECTING
        self._changed()

    def exit_selection_mode(self) -> None:
        self.state.mode = SelectionMode.BROWSING
        self.state.selected.clear()
        self._changed()

    def toggle_selection_mode(self) -> None:
        if self.selecting:
            self.exit_selection_mode()
        else:
            self.enter_selection_mode()

    def toggle_select(self, thread_id: str) -> None:
        """Add or remove one id. Ignored while browsing."""
        if not self.selecting:
            return
        if thread_id in self.state.selected:
            del self.state.selected[thread_id]
        else:
            self.state.selected[thread_id] = None
        self._changed()

    def select_all(self, known_ids: Iterable[str]) -> None:
        """Replace the selection with ``known_ids``, in their order."""
        if not self.selecting:
            return
        self.state.selected = dict.fromkeys(known_ids)
        self._changed()

    def deselect_all(self) -> None:
        self.state.selected.clear()
        self._changed()

    def prune(self, known_ids: Iterable[str]) -> None:
        """Drop selected ids that are no longer in the thread list."""
        known = set(known_ids)
        stale = [tid for tid in self.state.selected if tid not in known]
        if not stale:
            return
        for tid in stale:
            del self.state.selected[tid]
        self._changed()

    def activate(self, thread_id: str) -> bool:
        """Handle a row click.

        While selecting, the click toggles the row. While browsing, it opens
        the thread through the open-thread reference.

        Returns:
            True if the click was a navigation (browsing mode).
        """
        if self.selecting:
            self.toggle_select(thread_id)
            return False
        if self.open_thread.get() != thread_id:
            self.open_thread.set(thread_id)
        return True
