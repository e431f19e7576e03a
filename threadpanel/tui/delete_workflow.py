# SPDX-License-Identifier: MIT
"""
Confirm-then-delete workflow for single and batch thread deletion.

States::

    Idle -> ConfirmingSingle(id) -> Deleting -> Idle
    Idle -> ConfirmingBatch(ids) -> Deleting -> Idle
    Confirming* -> Idle            (cancel)

Once Deleting starts it runs to completion. A batch calls the store once per
id, sequentially and in captured order. Individual failures do not stop the
batch; the outcome is reported as a count, and selection mode is always left
afterwards. No store error escapes confirm().
"""

import time
from typing import Callable, List, Optional

from threadpanel.debug_logger import get_logger
from threadpanel.models import OpenThreadRef
from threadpanel.thread_store import ThreadStore
from threadpanel.tui.app_state import DeleteKind, DeleteOutcome, DeletePhase, DeleteRequest
from threadpanel.tui.formatting import batch_result_message
from threadpanel.tui.selection import SelectionController

Notifier = Callable[[str, str], None]


class DeleteWorkflow:
    """Orchestrates confirmation and execution of deletes.

    Args:
        selection: Source of the batch ids; left after a batch completes
        store: Thread store performing the deletes
        notify: Optional ``notify(message, severity)`` for user feedback
        open_thread: Reference cleared when the open thread is deleted;
            defaults to the one held by ``selection``
    """

    def __init__(
        self,
        selection: SelectionController,
        store: ThreadStore,
        notify: Optional[Notifier] = None,
        open_thread: Optional[OpenThreadRef] = None,
    ) -> None:
        self.selection = selection
        self.store = store
        self.notify = notify
        self.open_thread = open_thread if open_thread is not None else selection.open_thread
        self.phase = DeletePhase.IDLE
        self.request: Optional[DeleteRequest] = None
        self._listeners: List[Callable[[], None]] = []

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_phase(self, phase: DeletePhase) -> None:
        self.phase = phase
        for listener in list(self._listeners):
            listener()

    def _notify(self, message: str, severity: str) -> None:
        if self.notify is not None:
            self.notify(message, severity)

    @property
    def deleting(self) -> bool:
        return self.phase is DeletePhase.DELETING

    @property
    def confirming(self) -> bool:
        return self.phase in (DeletePhase.CONFIRMING_SINGLE, DeletePhase.CONFIRMING_BATCH)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def request_single_delete(self, thread_id: str) -> Optional[DeleteRequest]:
        """Ask to delete one thread. Only valid while idle and browsing."""
        if self.phase is not DeletePhase.IDLE or self.selection.selecting:
            return None
        self.request = DeleteRequest(kind=DeleteKind.SINGLE, thread_ids=(thread_id,))
        get_logger().delete_requested(DeleteKind.SINGLE.value, self.request.thread_ids)
        self._set_phase(DeletePhase.CONFIRMING_SINGLE)
        return self.request

    def request_batch_delete(self) -> Optional[DeleteRequest]:
        """Ask to delete the current selection.

        Only valid while idle, selecting, with at least one id selected.
        The ids are captured now, in selection order.
        """
        if (
            self.phase is not DeletePhase.IDLE
            or not self.selection.selecting
            or self.selection.selected_count == 0
        ):
            return None
        self.request = DeleteRequest(
            kind=DeleteKind.BATCH, thread_ids=self.selection.state.ordered_ids
        )
        get_logger().delete_requested(DeleteKind.BATCH.value, self.request.thread_ids)
        self._set_phase(DeletePhase.CONFIRMING_BATCH)
        return self.request

    def cancel(self) -> bool:
        """Discard a pending request. Has no effect once deleting has begun."""
        if not self.confirming or self.request is None:
            return False
        get_logger().delete_cancelled(self.request.kind.value, len(self.request.thread_ids))
        self.request = None
        self._set_phase(DeletePhase.IDLE)
        return True

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def _delete_one(self, thread_id: str, outcome: DeleteOutcome) -> None:
        try:
            result = await self.store.delete_thread(thread_id)
        except Exception as e:
            outcome.failed[thread_id] = str(e) or type(e).__name__
            get_logger().delete_failed(thread_id, outcome.failed[thread_id])
            return
        if result is False:
            outcome.failed[thread_id] = "store reported failure"
            get_logger().delete_failed(thread_id, outcome.failed[thread_id])
            return
        outcome.deleted.append(thread_id)
        get_logger().thread_deleted(thread_id)

    async def confirm(self) -> Optional[DeleteOutcome]:
        """Run the pending delete.

        Returns:
            The outcome, or None if nothing was awaiting confirmation.
        """
        if not self.confirming or self.request is None:
            return None

        request = self.request
        request.confirmed = True
        request.in_flight = True
        self._set_phase(DeletePhase.DELETING)
        outcome = DeleteOutcome(kind=request.kind, requested=request.thread_ids)

        try:
            if request.kind is DeleteKind.SINGLE:
                await self._run_single(request, outcome)
            else:
                await self._run_batch(request, outcome)
        finally:
            request.in_flight = False
            self.request = None
            self._set_phase(DeletePhase.IDLE)

        return outcome

    async def _run_single(self, request: DeleteRequest, outcome: DeleteOutcome) -> None:
        thread_id = request.thread_ids[0]
        await self._delete_one(thread_id, outcome)
        if outcome.deleted:
            if self.open_thread.get() == thread_id:
                self.open_thread.clear()
        else:
            self._notify(f"Failed to delete thread: {outcome.failed[thread_id]}", "error")

    async def _run_batch(self, request: DeleteRequest, outcome: DeleteOutcome) -> None:
        start = time.perf_counter()
        try:
            for thread_id in request.thread_ids:
                await self._delete_one(thread_id, outcome)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            get_logger().batch_delete_finished(
                len(request.thread_ids), outcome.succeeded, elapsed_ms
            )
            open_id = self.open_thread.get()
            if open_id is not None and open_id in outcome.deleted:
                self.open_thread.clear()
            self.selection.exit_selection_mode()

        message, severity = batch_result_message(outcome.succeeded, len(request.thread_ids))
        self._notify(message, severity)
