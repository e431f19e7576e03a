# SPDX-License-Identifier: MIT
"""Sidebar vs. overlay layout decision for the thread panel."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ViewDecision:
    """How the panel renders for one (is_wide_layout, panel_open) pair.

    Attributes:
        sidebar_visible: Persistent sidebar is shown
        overlay_visible: Dismissible overlay is shown
        close_on_choose: Choosing a thread should close the panel
    """

    sidebar_visible: bool
    overlay_visible: bool
    close_on_choose: bool


def resolve_view(is_wide_layout: bool, panel_open: bool) -> ViewDecision:
    """Decide how the panel renders.

    Wide layouts always show the sidebar; ``panel_open`` only drives the
    header toggle there. Narrow layouts show the overlay exactly when the
    panel is open, and a choice made in the overlay closes it.
    """
    if is_wide_layout:
        return ViewDecision(sidebar_visible=True, overlay_visible=False, close_on_choose=False)
    return ViewDecision(
        sidebar_visible=False, overlay_visible=panel_open, close_on_choose=True
    )


class ResponsiveViewSwitcher:
    """Tracks the viewport signal and the panel-open flag."""

    def __init__(self, is_wide_layout: bool = True, panel_open: bool = False) -> None:
        self.is_wide_layout = is_wide_layout
        self.panel_open = panel_open

    @property
    def view(self) -> ViewDecision:
        return resolve_view(self.is_wide_layout, self.panel_open)

    def set_wide_layout(self, is_wide_layout: bool) -> bool:
        """Feed the viewport signal. Returns True if the value changed."""
        if is_wide_layout == self.is_wide_layout:
            return False
        self.is_wide_layout = is_wide_layout
        return True

    def toggle_panel(self) -> bool:
        self.panel_open = not self.panel_open
        return self.panel_open

    def request_overlay_open(self, open_: bool) -> None:
        """Overlay open/close requests are ignored in the wide layout."""
        if self.is_wide_layout:
            return
        self.panel_open = open_

    def thread_chosen(self, selecting: bool) -> bool:
        """A row was clicked. Closes the overlay for a non-selection click.

        Returns:
            True if the panel was closed as a result.
        """
        if selecting or not self.view.close_on_choose or not self.panel_open:
            return False
        self.panel_open = False
        return True
