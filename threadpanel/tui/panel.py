# SPDX-License-Identifier: MIT
"""
Panel controller: the widget-free core of the thread history panel.

Composes the selection, delete, resize, and layout controllers around one
thread list. The Textual widgets in ``app.py`` render from this object and
forward user input to it; tests drive it directly.
"""

import time
from typing import List, Optional

from threadpanel.debug_logger import get_logger
from threadpanel.kv_store import KeyValueStore
from threadpanel.models import OpenThreadRef, ThreadSummary
from threadpanel.thread_store import ThreadStore
from threadpanel.tui.app_state import DeleteOutcome, DeleteRequest, PanelState
from threadpanel.tui.delete_workflow import DeleteWorkflow, Notifier
from threadpanel.tui.resize import ResizeAffordance, ResizeController, WidthSink
from threadpanel.tui.responsive import ResponsiveViewSwitcher
from threadpanel.tui.selection import SelectionController


class PanelController:
    """Top-level interaction state for the panel.

    Args:
        store: Thread store to list and delete from
        kv_store: Persistence for the panel width
        open_thread: Reference to the thread open in the main view
        notify: ``notify(message, severity)`` used for user feedback
        on_width_change: Sink for width updates
        affordance: Drag cursor affordance
        is_wide_layout: Initial viewport signal
    """

    def __init__(
        self,
        store: ThreadStore,
        kv_store: KeyValueStore,
        open_thread: Optional[OpenThreadRef] = None,
        notify: Optional[Notifier] = None,
        on_width_change: Optional[WidthSink] = None,
        affordance: Optional[ResizeAffordance] = None,
        is_wide_layout: bool = True,
    ) -> None:
        self.store = store
        self.notify = notify
        self.state = PanelState()
        self.open_thread = open_thread if open_thread is not None else OpenThreadRef()
        self.selection = SelectionController(self.open_thread)
        self.delete = DeleteWorkflow(self.selection, store, notify=notify)
        self.resize = ResizeController(
            kv_store, on_width_change=on_width_change, affordance=affordance
        )
        self.view = ResponsiveViewSwitcher(is_wide_layout=is_wide_layout)

    @property
    def threads(self) -> List[ThreadSummary]:
        return self.state.threads

    @property
    def known_ids(self) -> List[str]:
        return [t.id for t in self.state.threads]

    def _notify(self, message: str, severity: str) -> None:
        if self.notify is not None:
            self.notify(message, severity)

    # ------------------------------------------------------------------
    # Thread list
    # ------------------------------------------------------------------

    async def load_threads(self) -> List[ThreadSummary]:
        """Refresh the thread list from the store.

        A failing store is reported and leaves the previous list in place.
        """
        self.state.loading = True
        start = time.perf_counter()
        try:
            threads = await self.store.list_threads()
        except Exception as e:
            message = str(e) or type(e).__name__
            self.state.load_error = message
            get_logger().threads_load_failed(message)
            self._notify(f"Error loading threads: {message}", "error")
            return self.state.threads
        finally:
            self.state.loading = False

        self.state.threads = list(threads)
        self.state.load_error = None
        get_logger().threads_loaded(len(self.state.threads), (time.perf_counter() - start) * 1000)
        self.selection.prune(self.known_ids)
        return self.state.threads

    def find(self, thread_id: str) -> Optional[ThreadSummary]:
        for thread in self.state.threads:
            if thread.id == thread_id:
                return thread
        return None

    # ------------------------------------------------------------------
    # Row interaction
    # ------------------------------------------------------------------

    def activate(self, thread_id: str) -> bool:
        """Handle a row click.

        Returns:
            True if the click closed the overlay.
        """
        was_selecting = self.selection.selecting
        self.selection.activate(thread_id)
        if was_selecting:
            return False
        return self.view.thread_chosen(selecting=False)

    def toggle_select_all(self) -> None:
        """Select every thread, or clear the selection once all are selected."""
        if self.delete.deleting:
            return
        if self.selection.selected_count < len(self.state.threads):
            self.selection.select_all(self.known_ids)
        else:
            self.selection.deselect_all()

    def cancel_selection(self) -> None:
        if self.delete.deleting:
            return
        self.selection.exit_selection_mode()

    # ------------------------------------------------------------------
    # Deletes
    # ------------------------------------------------------------------

    def request_delete(self, thread_id: Optional[str] = None) -> Optional[DeleteRequest]:
        """Batch-delete the selection while selecting, otherwise delete ``thread_id``."""
        if self.selection.selecting:
            return self.delete.request_batch_delete()
        if thread_id is None:
            return None
        return self.delete.request_single_delete(thread_id)

    async def confirm_delete(self) -> Optional[DeleteOutcome]:
        outcome = await self.delete.confirm()
        if outcome is not None and outcome.deleted:
            gone = set(outcome.deleted)
            self.state.threads = [t for t in self.state.threads if t.id not in gone]
        return outcome

    def cancel_delete(self) -> bool:
        return self.delete.cancel()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> int:
        """Restore the persisted width. Returns the adopted width."""
        return self.resize.mount()

    def close(self) -> None:
        self.resize.close()
