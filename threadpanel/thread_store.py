#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Thread store collaborators.

The panel only needs two operations from a backing store: list the known
threads and delete one thread by id. Both are async so network-backed
stores can be dropped in; the file-based store runs its I/O in a thread.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from threadpanel.debug_logger import get_logger
from threadpanel.errors import DeleteFailedError, StoreUnavailableError
from threadpanel.models import ThreadSummary, derive_preview


class ThreadStore(ABC):
    """Async source of thread summaries."""

    @abstractmethod
    async def list_threads(self) -> List[ThreadSummary]:
        """Return known threads in display order.

        Raises:
            StoreUnavailableError: if the store cannot be read
        """

    @abstractmethod
    async def delete_thread(self, thread_id: str) -> Optional[bool]:
        """Delete one thread.

        Failure is reported by raising or by returning False.
        """


def _summary_from_record(record: dict, fallback_id: str) -> ThreadSummary:
    thread_id = str(record.get("thread_id") or fallback_id)
    return ThreadSummary(
        id=thread_id,
        preview_text=derive_preview(thread_id, record.get("values")),
        updated_at=str(record.get("updated_at") or ""),
    )


class JsonDirThreadStore(ThreadStore):
    """Threads stored as one ``<thread_id>.json`` file each.

    Each file holds ``{"thread_id": ..., "values": {"messages": [...]},
    "updated_at": ...}``. Threads are listed newest first.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path_for(self, thread_id: str) -> Path:
        return self.directory / f"{thread_id}.json"

    def _read_all(self) -> List[ThreadSummary]:
        if not self.directory.is_dir():
            raise StoreUnavailableError(f"Thread directory not found: {self.directory}")

        summaries = []
        try:
            paths = sorted(self.directory.glob("*.json"))
        except OSError as e:
            raise StoreUnavailableError(str(e)) from e

        for path in paths:
            try:
                record = json.loads(path.read_text())
            except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                get_logger().error("read_thread", f"{path.name}: {e}")
                continue
            if not isinstance(record, dict):
                continue
            summaries.append(_summary_from_record(record, path.stem))

        # Stable sort keeps file-name order among equal timestamps
        summaries.sort(key=lambda s: s.updated_at, reverse=True)
        return summaries

    def _delete(self, thread_id: str) -> bool:
        path = self._path_for(thread_id)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise DeleteFailedError(thread_id, "not found") from e
        except OSError as e:
            raise DeleteFailedError(thread_id, str(e)) from e
        return True

    async def list_threads(self) -> List[ThreadSummary]:
        return await asyncio.to_thread(self._read_all)

    async def delete_thread(self, thread_id: str) -> Optional[bool]:
        return await asyncio.to_thread(self._delete, thread_id)


class InMemoryThreadStore(ThreadStore):
    """Store backed by a list, for demos and tests.

    Args:
        threads: Initial thread summaries, in display order
        fail_ids: Ids whose deletion raises DeleteFailedError
        unavailable: When True, list_threads raises StoreUnavailableError
    """

    def __init__(
        self,
        threads: Optional[Iterable[ThreadSummary]] = None,
        fail_ids: Optional[Set[str]] = None,
        unavailable: bool = False,
    ) -> None:
        self._threads: Dict[str, ThreadSummary] = {t.id: t for t in (threads or [])}
        self.fail_ids: Set[str] = set(fail_ids or ())
        self.unavailable = unavailable
        self.delete_calls: List[str] = []

    async def list_threads(self) -> List[ThreadSummary]:
        if self.unavailable:
            raise StoreUnavailableError("Thread store is unavailable")
        return list(self._threads.values())

    async def delete_thread(self, thread_id: str) -> Optional[bool]:
        self.delete_calls.append(thread_id)
        if thread_id in self.fail_ids:
            raise DeleteFailedError(thread_id, "rejected by store")
        if self._threads.pop(thread_id, None) is None:
            raise DeleteFailedError(thread_id, "not found")
        return True
