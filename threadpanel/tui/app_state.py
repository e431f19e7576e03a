# SPDX-License-Identifier: MIT
"""State containers for the thread panel controllers.

The dataclasses group related state together semantically:

- SelectionState: Browsing/Selecting mode and the selected thread ids
- ResizeState: Panel width and whether a drag is in progress
- DeleteRequest: The pending single or batch delete
- DeleteOutcome: What a confirmed delete actually did
- PanelState: Thread list and loading flag owned by the panel
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from threadpanel.models import DEFAULT_WIDTH, ThreadSummary


class SelectionMode(str, Enum):
    """Whether rows navigate (browsing) or toggle (selecting)."""

    BROWSING = "browsing"
    SELECTING = "selecting"


class DeleteKind(str, Enum):
    SINGLE = "single"
    BATCH = "batch"


class DeletePhase(str, Enum):
    """Delete workflow states."""

    IDLE = "idle"
    CONFIRMING_SINGLE = "confirming_single"
    CONFIRMING_BATCH = "confirming_batch"
    DELETING = "deleting"


@dataclass
class SelectionState:
    """Selection mode and selected ids.

    ``selected`` is a dict used as an insertion-ordered set so a batch
    delete runs in the order ids were picked. Always empty while browsing.
    """

    mode: SelectionMode = SelectionMode.BROWSING
    selected: Dict[str, None] = field(default_factory=dict)

    @property
    def ordered_ids(self) -> Tuple[str, ...]:
        return tuple(self.selected)


@dataclass
class ResizeState:
    """Panel width (cells) and drag flag."""

    width: int = DEFAULT_WIDTH
    dragging: bool = False


@dataclass
class DeleteRequest:
    """A delete awaiting confirmation or in flight.

    ``thread_ids`` holds one id for a single delete, or the captured
    selection (in order) for a batch.
    """

    kind: DeleteKind
    thread_ids: Tuple[str, ...]
    confirmed: bool = False
    in_flight: bool = False


@dataclass
class DeleteOutcome:
    """Result of a confirmed delete."""

    kind: DeleteKind
    requested: Tuple[str, ...]
    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> int:
        return len(self.deleted)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


@dataclass
class PanelState:
    """Thread list owned by the panel controller."""

    threads: List[ThreadSummary] = field(default_factory=list)
    loading: bool = False
    load_error: Optional[str] = None
