#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Main TUI application for the thread history panel.

Provides a resizable sidebar listing conversation threads with:
- Browsing: open a thread in the main view, delete one with confirmation
- Selection mode: pick several threads and delete them as a batch
- Drag-to-resize with the width remembered between runs
- An overlay version of the panel on narrow terminals
"""

from typing import Iterable, List, Optional

from rich.markup import escape
from textual import events, work
from textual.app import App, ComposeResult, SystemCommand
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen, Screen
from textual.widget import Widget
from textual.widgets import (
    Button,
    Footer,
    Header,
    Label,
    ListItem,
    ListView,
    LoadingIndicator,
    Static,
)

from threadpanel.config import get_wide_layout_columns
from threadpanel.kv_store import JsonFileKeyValueStore, KeyValueStore
from threadpanel.models import OpenThreadRef, ThreadSummary
from threadpanel.paths import PathResolver
from threadpanel.thread_store import JsonDirThreadStore, ThreadStore
from threadpanel.tui.app_state import DeleteKind
from threadpanel.tui.formatting import (
    batch_confirm_text,
    format_preview,
    format_selection_count,
    single_confirm_text,
)
from threadpanel.tui.panel import PanelController
from threadpanel.tui.resize import ResizeAffordance, ResizeController, WidthSink


# ============================================================================
# Thread list widgets
# ============================================================================


def _row_text(thread: ThreadSummary, controller: PanelController) -> str:
    preview = format_preview(thread.preview_text or thread.id)
    if controller.selection.selecting:
        mark = "☑" if controller.selection.is_selected(thread.id) else "☐"
    else:
        mark = "●" if controller.open_thread.get() == thread.id else " "
    return f"{mark} {preview}"


class ThreadRow(ListItem):
    """One thread in the list. Keeps the id off the DOM id (ids may start with digits)."""

    def __init__(self, thread: ThreadSummary, controller: PanelController) -> None:
        super().__init__()
        self.thread = thread
        self.controller = controller

    @property
    def thread_id(self) -> str:
        return self.thread.id

    def compose(self) -> ComposeResult:
        yield Label(_row_text(self.thread, self.controller), markup=False)

    def on_mount(self) -> None:
        self.sync()

    def sync(self) -> None:
        selection = self.controller.selection
        self.set_class(selection.is_selected(self.thread.id), "-selected")
        self.set_class(self.controller.open_thread.get() == self.thread.id, "-open")
        try:
            self.query_one(Label).update(_row_text(self.thread, self.controller))
        except NoMatches:
            pass


class ThreadListView(ListView):
    """ListView of ThreadRow items bound to a PanelController."""

    def __init__(self, controller: PanelController, **kwargs) -> None:
        super().__init__(*[ThreadRow(t, controller) for t in controller.threads], **kwargs)
        self.controller = controller

    @property
    def rows(self) -> List[ThreadRow]:
        return list(self.query(ThreadRow))

    @property
    def highlighted_thread_id(self) -> Optional[str]:
        child = self.highlighted_child
        if isinstance(child, ThreadRow):
            return child.thread_id
        return None

    def sync_rows(self) -> None:
        for row in self.rows:
            row.sync()

    async def rebuild(self) -> None:
        """Replace all rows with the controller's current thread list."""
        previous = self.index or 0
        await self.clear()
        await self.extend(ThreadRow(t, self.controller) for t in self.controller.threads)
        count = len(self.controller.threads)
        if count:
            self.index = min(previous, count - 1)


class SelectionFooter(Horizontal):
    """Selection-mode footer: count, select all/deselect, delete, cancel."""

    def __init__(self, controller: PanelController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def compose(self) -> ComposeResult:
        yield Static("", id="selection-count")
        yield Button("Select All", id="select-all")
        yield Button("Delete (0)", id="delete-selected", variant="error")
        yield Button("Cancel", id="cancel-selection")

    def sync(self) -> None:
        controller = self.controller
        selection = controller.selection
        deleting = controller.delete.deleting
        total = len(controller.threads)

        self.display = selection.selecting
        try:
            self.query_one("#selection-count", Static).update(
                format_selection_count(selection.selected_count, total)
            )
            select_all = self.query_one("#select-all", Button)
            select_all.label = "Select All" if selection.selected_count < total else "Deselect"
            select_all.disabled = deleting

            delete = self.query_one("#delete-selected", Button)
            delete.label = "Deleting…" if deleting else f"Delete ({selection.selected_count})"
            delete.disabled = deleting or selection.selected_count == 0

            self.query_one("#cancel-selection", Button).disabled = deleting
        except NoMatches:
            pass


class ThreadListPane(Vertical):
    """Toolbar, thread list, and selection footer.

    Rendered once in the sidebar and once in the narrow-layout overlay; both
    instances share the same PanelController so selection is never duplicated.
    """

    def __init__(self, controller: PanelController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def compose(self) -> ComposeResult:
        with Horizontal(classes="pane-toolbar"):
            yield Button("Select", id="toggle-select")
        yield LoadingIndicator(id="thread-loading")
        yield Static("No threads yet", id="thread-empty")
        yield ThreadListView(self.controller, id="thread-list")
        yield SelectionFooter(self.controller, id="selection-footer")

    def on_mount(self) -> None:
        self.sync()

    @property
    def list_view(self) -> ThreadListView:
        return self.query_one("#thread-list", ThreadListView)

    def sync(self) -> None:
        controller = self.controller
        loading = controller.state.loading
        has_threads = bool(controller.threads)
        try:
            toggle = self.query_one("#toggle-select", Button)
            toggle.display = has_threads
            toggle.label = "Exit Select" if controller.selection.selecting else "Select"
            toggle.set_class(controller.selection.selecting, "-active")

            self.query_one("#thread-loading", LoadingIndicator).display = loading
            self.query_one("#thread-empty", Static).display = not loading and not has_threads
            list_view = self.list_view
            list_view.display = not loading
            list_view.sync_rows()
            self.query_one("#selection-footer", SelectionFooter).sync()
        except NoMatches:
            pass

    async def rebuild(self) -> None:
        try:
            list_view = self.list_view
        except NoMatches:
            return
        await list_view.rebuild()
        self.sync()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        event.stop()
        if isinstance(event.item, ThreadRow):
            self.app.activate_thread(event.item.thread_id)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "toggle-select":
            self.app.action_toggle_select_mode()
        elif button_id == "select-all":
            self.app.action_select_all()
        elif button_id == "delete-selected":
            self.app.action_delete()
        elif button_id == "cancel-selection":
            self.app.action_exit_select_mode()
        else:
            return
        event.stop()


# ============================================================================
# Resizing
# ============================================================================


class ScreenResizeAffordance(ResizeAffordance):
    """Marks the active screen with ``-resizing`` for the length of a drag."""

    def __init__(self, app: App) -> None:
        self.app = app
        self._screen: Optional[Screen] = None

    def enter(self) -> None:
        self._screen = self.app.screen
        self._screen.add_class("-resizing")

    def exit(self) -> None:
        if self._screen is not None:
            self._screen.remove_class("-resizing")
            self._screen = None


class ResizeHandle(Widget):
    """Drag handle on the panel's right edge.

    The mouse is captured only for the duration of a drag, so pointer moves
    anywhere on screen reach the handle until the button is released.
    """

    def __init__(self, controller: ResizeController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def render(self) -> str:
        return "┃"

    def on_mouse_down(self, event: events.MouseDown) -> None:
        event.stop()
        self.capture_mouse()
        self.controller.begin_drag()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.controller.dragging:
            # Panel spans columns 0..screen_x, so its width is screen_x + 1
            self.controller.on_pointer_move(event.screen_x + 1)

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self.release_mouse()
        self.controller.end_drag()

    def on_mouse_release(self, event: events.MouseRelease) -> None:
        # Capture lost without a mouse up
        self.controller.end_drag()

    def on_unmount(self) -> None:
        self.controller.close()


# ============================================================================
# Panel, overlay, and confirmation screens
# ============================================================================


class ThreadHistoryPanel(Vertical):
    """Persistent sidebar used in the wide layout."""

    def __init__(self, controller: PanelController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller
        self.pane = ThreadListPane(controller, id="sidebar-pane")

    def compose(self) -> ComposeResult:
        with Horizontal(classes="panel-header"):
            yield Button(self._toggle_label(), id="panel-toggle")
            yield Static("[bold]Thread History[/bold]", classes="panel-title")
        yield self.pane
        yield ResizeHandle(self.controller.resize, id="resize-handle")

    def _toggle_label(self) -> str:
        return "◀" if self.controller.view.panel_open else "▶"

    def sync_toggle(self) -> None:
        try:
            self.query_one("#panel-toggle", Button).label = self._toggle_label()
        except NoMatches:
            pass

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "panel-toggle":
            event.stop()
            self.app.action_toggle_panel()


class ThreadHistoryOverlay(ModalScreen):
    """Dismissible panel shown on narrow terminals.

    A modal screen does not see the app's bindings, so the panel keys are
    repeated here and forwarded to the app actions.
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("s", "app.toggle_select_mode", "Select"),
        Binding("space", "app.toggle_row", "Toggle", show=False),
        Binding("a", "app.select_all", "All", show=False),
        Binding("d", "app.delete", "Delete"),
        Binding("delete", "app.delete", "Delete", show=False),
        Binding("b", "app.toggle_panel", "Panel"),
        Binding("r", "app.refresh", "Refresh"),
        Binding("q", "app.quit", "Quit"),
    ]

    def __init__(self, controller: PanelController) -> None:
        super().__init__()
        self.controller = controller
        self.pane = ThreadListPane(controller, id="overlay-pane")
        # Set when the app drops this overlay while another screen covers it
        self.retired = False

    def compose(self) -> ComposeResult:
        with Vertical(id="thread-overlay"):
            yield Static("[bold]Thread History[/bold]", classes="modal-title")
            yield self.pane

    def on_mount(self) -> None:
        try:
            self.pane.list_view.focus()
        except NoMatches:
            pass

    def on_screen_resume(self) -> None:
        if self.retired:
            self.app.pop_screen()

    def action_close(self) -> None:
        """Leave selection mode first, then close the overlay."""
        if self.controller.selection.selecting:
            self.app.action_exit_select_mode()
        else:
            self.app.close_overlay()


class ConfirmDeleteModal(ModalScreen[bool]):
    """Confirmation dialog for single and batch deletes.

    Dismisses with True to delete, False to cancel.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, kind: DeleteKind, count: int = 1) -> None:
        super().__init__()
        self.kind = kind
        self.count = count

    def compose(self) -> ComposeResult:
        if self.kind is DeleteKind.BATCH:
            title, body = batch_confirm_text(self.count)
        else:
            title, body = single_confirm_text()
        with Vertical(id="confirm-delete-modal"):
            yield Static(f"[bold]{title}[/bold]", classes="modal-title")
            yield Static(body, id="confirm-body")
            with Horizontal(classes="modal-buttons"):
                yield Button("Cancel", id="cancel-delete")
                yield Button("Delete", id="confirm-delete", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "confirm-delete":
            self.dismiss(True)
        elif event.button.id == "cancel-delete":
            self.dismiss(False)

    def action_cancel(self) -> None:
        self.dismiss(False)


# ============================================================================
# Application
# ============================================================================


class ThreadHistoryApp(App):
    """
    Textual application hosting the thread history panel.

    The app owns the PanelController, feeds it the viewport width, and
    shows the open thread id in the main view.
    """

    TITLE = "Thread History"
    CSS_PATH = "styles/app.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "toggle_select_mode", "Select"),
        Binding("space", "toggle_row", "Toggle", show=False),
        Binding("a", "select_all", "All", show=False),
        Binding("d", "delete", "Delete"),
        Binding("delete", "delete", "Delete", show=False),
        Binding("escape", "exit_select_mode", "Exit Select", show=False),
        Binding("b", "toggle_panel", "Panel"),
        Binding("r", "refresh", "Refresh"),
    ]

    def __init__(
        self,
        store: Optional[ThreadStore] = None,
        kv_store: Optional[KeyValueStore] = None,
        open_thread: Optional[OpenThreadRef] = None,
        on_width_change: Optional[WidthSink] = None,
        wide_layout_columns: Optional[int] = None,
    ) -> None:
        """
        Initialize the app.

        Args:
            store: Thread store (defaults to the JSON thread directory)
            kv_store: Panel state store (defaults to panel_state.json in the state dir)
            open_thread: Shared reference to the open thread
            on_width_change: Extra sink notified of panel width changes
            wide_layout_columns: Terminal width at which the sidebar is used
        """
        super().__init__()
        if store is None:
            store = JsonDirThreadStore(PathResolver.store_dir())
        if kv_store is None:
            kv_store = JsonFileKeyValueStore(PathResolver.state_dir() / "panel_state.json")
        self.wide_layout_columns = wide_layout_columns or get_wide_layout_columns()
        self._external_width_sink = on_width_change
        self.controller = PanelController(
            store,
            kv_store,
            open_thread=open_thread,
            notify=self._notify_user,
            on_width_change=self._on_width_change,
            affordance=ScreenResizeAffordance(self),
        )
        self.sidebar = ThreadHistoryPanel(self.controller, id="thread-panel")
        self.open_label = Static("", id="open-thread")
        self._overlay: Optional[ThreadHistoryOverlay] = None
        self._unsubscribe_open = None

    def get_system_commands(self, screen: Screen) -> Iterable[SystemCommand]:
        """Add custom commands to the command palette."""
        yield from super().get_system_commands(screen)
        yield SystemCommand("Refresh", "Reload threads from the store", self.action_refresh)
        yield SystemCommand(
            "Toggle Selection Mode",
            "Switch between browsing and selecting threads",
            self.action_toggle_select_mode,
        )
        yield SystemCommand("Toggle Panel", "Show or hide the thread panel", self.action_toggle_panel)

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        with Horizontal(id="main-layout"):
            yield self.sidebar
            with Vertical(id="main-view"):
                yield self.open_label
        yield Footer()

    def on_mount(self) -> None:
        """Restore width, hook controller listeners, and start loading."""
        self.controller.selection.add_listener(self._sync_panes)
        self.controller.delete.add_listener(self._sync_panes)
        self._unsubscribe_open = self.controller.open_thread.subscribe(self._on_open_thread)
        self.controller.mount()
        self._apply_layout(self.size.width)
        self._update_open_label()
        self._load_threads()

    def on_unmount(self) -> None:
        if self._unsubscribe_open is not None:
            self._unsubscribe_open()
            self._unsubscribe_open = None
        self.controller.selection.remove_listener(self._sync_panes)
        self.controller.delete.remove_listener(self._sync_panes)
        self.controller.close()

    def on_resize(self, event: events.Resize) -> None:
        self._apply_layout(event.size.width)

    # ------------------------------------------------------------------
    # Controller callbacks
    # ------------------------------------------------------------------

    def _notify_user(self, message: str, severity: str) -> None:
        self.notify(escape(message), severity=severity)

    def _on_width_change(self, width: int) -> None:
        self.sidebar.styles.width = width
        if self._external_width_sink is not None:
            self._external_width_sink(width)

    def _on_open_thread(self, thread_id: Optional[str]) -> None:
        self._update_open_label()
        self._sync_panes()

    def _update_open_label(self) -> None:
        thread_id = self.controller.open_thread.get()
        if thread_id is None:
            self.open_label.update("[dim]No thread open[/dim]")
            return
        thread = self.controller.find(thread_id)
        preview = format_preview(thread.preview_text) if thread else ""
        self.open_label.update(
            f"[bold]Thread:[/bold] {escape(thread_id)}\n{escape(preview)}"
        )

    def _panes(self) -> List[ThreadListPane]:
        panes = [self.sidebar.pane]
        if self._overlay is not None:
            panes.append(self._overlay.pane)
        return panes

    def _sync_panes(self) -> None:
        for pane in self._panes():
            pane.sync()
        self.sidebar.sync_toggle()

    async def _rebuild_panes(self) -> None:
        for pane in self._panes():
            await pane.rebuild()
        self._update_open_label()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _apply_layout(self, width: int) -> None:
        view = self.controller.view
        view.set_wide_layout(width >= self.wide_layout_columns)
        decision = view.view
        self.sidebar.display = decision.sidebar_visible
        if decision.overlay_visible and self._overlay is None:
            self._open_overlay()
        elif not decision.overlay_visible and self._overlay is not None:
            self._dismiss_overlay()

    def _open_overlay(self) -> None:
        self._overlay = ThreadHistoryOverlay(self.controller)
        self.push_screen(self._overlay)

    def _dismiss_overlay(self) -> None:
        overlay = self._overlay
        self._overlay = None
        if overlay is None:
            return
        if self.screen is overlay:
            self.pop_screen()
        elif overlay in self.screen_stack:
            # Covered by a dialog; pops itself once it is back on top
            overlay.retired = True

    def close_overlay(self) -> None:
        self.controller.view.request_overlay_open(False)
        self._dismiss_overlay()
        self.sidebar.sync_toggle()

    def activate_thread(self, thread_id: str) -> None:
        """Row click from either pane."""
        if self.controller.activate(thread_id):
            self._dismiss_overlay()
            self.sidebar.sync_toggle()

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    @work(exclusive=True, group="load")
    async def _load_threads(self) -> None:
        """Load threads from the store and rebuild both lists."""
        self.controller.state.loading = True
        self._sync_panes()
        await self.controller.load_threads()
        await self._rebuild_panes()
        self._focus_list()

    @work(group="delete")
    async def _run_delete(self) -> None:
        """Execute the confirmed delete and drop removed rows."""
        outcome = await self.controller.confirm_delete()
        if outcome is not None and outcome.deleted:
            await self._rebuild_panes()
        else:
            self._sync_panes()

    def _focus_list(self) -> None:
        pane = self._panes()[-1]
        try:
            pane.list_view.focus()
        except NoMatches:
            pass

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _focused_list(self) -> Optional[ThreadListView]:
        if isinstance(self.focused, ThreadListView):
            return self.focused
        try:
            return self._panes()[-1].list_view
        except NoMatches:
            return None

    def _highlighted_thread_id(self) -> Optional[str]:
        list_view = self._focused_list()
        return list_view.highlighted_thread_id if list_view is not None else None

    def action_toggle_select_mode(self) -> None:
        controller = self.controller
        if controller.delete.deleting:
            return
        if controller.selection.selecting:
            controller.cancel_selection()
        elif controller.threads:
            controller.selection.enter_selection_mode()

    def action_exit_select_mode(self) -> None:
        if self.controller.selection.selecting:
            self.controller.cancel_selection()

    def action_toggle_row(self) -> None:
        if not self.controller.selection.selecting or self.controller.delete.deleting:
            return
        thread_id = self._highlighted_thread_id()
        if thread_id is not None:
            self.controller.selection.toggle_select(thread_id)

    def action_select_all(self) -> None:
        if self.controller.selection.selecting:
            self.controller.toggle_select_all()

    def action_delete(self) -> None:
        controller = self.controller
        selecting = controller.selection.selecting
        request = controller.request_delete(None if selecting else self._highlighted_thread_id())
        if request is None:
            if selecting and controller.selection.selected_count == 0:
                self.notify("No threads selected", severity="warning")
            return
        self.push_screen(
            ConfirmDeleteModal(request.kind, len(request.thread_ids)),
            callback=self._on_delete_confirmed,
        )

    def _on_delete_confirmed(self, confirmed: Optional[bool]) -> None:
        if confirmed:
            self._run_delete()
        else:
            self.controller.cancel_delete()

    def action_toggle_panel(self) -> None:
        view = self.controller.view
        view.toggle_panel()
        self.sidebar.sync_toggle()
        self._apply_layout(self.size.width)

    def action_refresh(self) -> None:
        self._load_threads()
        self.notify("Refreshing threads")


def run_app(store: Optional[ThreadStore] = None) -> None:
    """
    Run the TUI application.

    Args:
        store: Thread store to browse (defaults to the configured directory)
    """
    app = ThreadHistoryApp(store=store)
    app.run()


if __name__ == "__main__":
    run_app()
