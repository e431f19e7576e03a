# SPDX-License-Identifier: MIT
"""Exceptions raised by thread panel collaborators."""


class ThreadPanelError(Exception):
    """Base class for thread panel errors."""


class StoreUnavailableError(ThreadPanelError):
    """The thread store could not list threads."""


class DeleteFailedError(ThreadPanelError):
    """A single thread could not be deleted."""

    def __init__(self, thread_id: str, reason: str = "") -> None:
        self.thread_id = thread_id
        self.reason = reason
        message = f"Could not delete thread {thread_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
