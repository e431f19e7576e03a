# SPDX-License-Identifier: MIT
"""
Drag-to-resize state machine for the panel.

The controller owns the panel width and the drag flag. Every pointer move
during a drag clamps the width to [MIN_WIDTH, MAX_WIDTH] and writes it to
the key/value store straight away, so an interrupted drag keeps the last
width. The resize cursor affordance is switched on in begin_drag() and is
switched off by end_drag() or close(), whichever comes first.
"""

from typing import Callable, Optional

from threadpanel.debug_logger import get_logger
from threadpanel.kv_store import KeyValueStore
from threadpanel.models import DEFAULT_WIDTH, MAX_WIDTH, MIN_WIDTH, PANEL_WIDTH_KEY
from threadpanel.tui.app_state import ResizeState

WidthSink = Callable[[int], None]


def clamp_width(x: int, min_width: int = MIN_WIDTH, max_width: int = MAX_WIDTH) -> int:
    return min(max(x, min_width), max_width)


def parse_width(raw: Optional[str]) -> Optional[int]:
    """Parse a persisted width. Returns None for missing or non-integer values."""
    if not raw:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


class ResizeAffordance:
    """Global visual cue shown while a drag is active.

    The base class does nothing; the Textual panel subclasses it to toggle a
    CSS class on the screen.
    """

    def enter(self) -> None:
        pass

    def exit(self) -> None:
        pass


class ResizeController:
    """Owns panel width, drag state, and width persistence.

    Args:
        store: Key/value store holding the persisted width
        on_width_change: Optional sink told the adopted width on mount and
            every change after that
        affordance: Visual cue toggled for the duration of a drag
    """

    def __init__(
        self,
        store: KeyValueStore,
        on_width_change: Optional[WidthSink] = None,
        affordance: Optional[ResizeAffordance] = None,
        min_width: int = MIN_WIDTH,
        max_width: int = MAX_WIDTH,
        default_width: int = DEFAULT_WIDTH,
    ) -> None:
        self.store = store
        self.on_width_change = on_width_change
        self.affordance = affordance or ResizeAffordance()
        self.min_width = min_width
        self.max_width = max_width
        self.state = ResizeState(width=default_width)
        self._mounted = False

    @property
    def width(self) -> int:
        return self.state.width

    @property
    def dragging(self) -> bool:
        return self.state.dragging

    def _emit(self) -> None:
        if self.on_width_change is not None:
            self.on_width_change(self.state.width)

    def mount(self) -> int:
        """Adopt the persisted width, if any, and report it once.

        A persisted value is trusted as-is, without clamping. Calling this
        more than once has no further effect.

        Returns:
            The adopted width.
        """
        if self._mounted:
            return self.state.width
        self._mounted = True

        saved = parse_width(self.store.get(PANEL_WIDTH_KEY))
        if saved is not None:
            self.state.width = saved
            get_logger().width_restored(saved, "persisted")
        else:
            get_logger().width_restored(self.state.width, "default")
        self._emit()
        return self.state.width

    def begin_drag(self) -> None:
        if self.state.dragging:
            return
        self.state.dragging = True
        self.affordance.enter()
        get_logger().drag_started(self.state.width)

    def on_pointer_move(self, x: int) -> None:
        """Resize to pointer column ``x`` while dragging; ignored otherwise."""
        if not self.state.dragging:
            return

        clamped = clamp_width(int(x), self.min_width, self.max_width)
        changed = clamped != self.state.width
        self.state.width = clamped
        try:
            self.store.set(PANEL_WIDTH_KEY, str(clamped))
        except OSError as e:
            get_logger().width_persist_failed(str(e))
        if changed:
            self._emit()

    def end_drag(self) -> None:
        if not self.state.dragging:
            return
        self.state.dragging = False
        self.affordance.exit()
        get_logger().drag_ended(self.state.width)

    def close(self) -> None:
        """Teardown hook: end any drag in progress and revert the affordance."""
        self.end_drag()
