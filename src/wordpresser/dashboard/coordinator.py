"""RenderCoordinator — the only code that touches widgets or paints.

Key presses and finished fetches both arrive as DashboardEvents on one
asyncio queue. A single task drains it, handling one event at a time, so
widget state and terminal output are never mutated from two places.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from wordpresser.dashboard.events import DashboardEvent, EventType
from wordpresser.dashboard.screen import CHART_TITLE, Pane
from wordpresser.dashboard.store import DisplayModel, SiteStatsStore

logger = logging.getLogger(__name__)


class Screen(Protocol):
    def set_rows(self, rows: Sequence[str], selected: int) -> None: ...
    def set_detail(self, title: str, text: str) -> None: ...
    def set_chart(self, title: str, series: Sequence[int]) -> None: ...
    def paint(self, pane: Pane) -> None: ...


def is_all_zeros(series: Sequence[int]) -> bool:
    """True for a non-empty series with no non-zero entry.

    Charts of such a series must not be drawn.
    """
    return bool(series) and not any(series)


@dataclass
class SelectionState:
    """Sorted site urls and the highlighted row."""

    ordered_urls: tuple[str, ...]
    selected_index: int = 0

    def __post_init__(self) -> None:
        if not self.ordered_urls:
            raise ValueError("SelectionState needs at least one url")
        self.selected_index = min(max(self.selected_index, 0), len(self.ordered_urls) - 1)

    @property
    def selected_url(self) -> str:
        return self.ordered_urls[self.selected_index]

    def scroll_down(self) -> bool:
        """Move to the next row. Returns False at the last row."""
        if self.selected_index >= len(self.ordered_urls) - 1:
            return False
        self.selected_index += 1
        return True

    def scroll_up(self) -> bool:
        """Move to the previous row. Returns False at the first row."""
        if self.selected_index <= 0:
            return False
        self.selected_index -= 1
        return True


class RenderCoordinator:
    """Single consumer of dashboard events and sole owner of the screen."""

    def __init__(self, store: SiteStatsStore, screen: Screen) -> None:
        self._store = store
        self._screen = screen
        self._queue: asyncio.Queue[DashboardEvent] = asyncio.Queue()
        self.selection = SelectionState(tuple(store.sorted_keys()))

    # --- producers (any task) ---

    def submit(self, event: DashboardEvent) -> None:
        """Enqueue an event for the render task."""
        self._queue.put_nowait(event)

    def data_ready(self, url: str) -> None:
        self.submit(DashboardEvent(EventType.DATA_READY, url=url))

    # --- consumer (render task only) ---

    async def run(self) -> None:
        """Paint the initial screen, then handle events until EXIT."""
        self.initialize()
        while True:
            event = await self._queue.get()
            try:
                if not self.handle(event):
                    break
            finally:
                self._queue.task_done()
        logger.info("Render coordinator stopped")

    def initialize(self) -> None:
        self._screen.paint(Pane.HEADER)
        self._show_list()
        model = self._show_detail()
        self._show_chart(model)

    def handle(self, event: DashboardEvent) -> bool:
        """Apply one event. Returns False once the dashboard should stop."""
        logger.debug("Event %s", event)
        if event.type is EventType.EXIT:
            return False

        if event.type is EventType.SCROLL_DOWN:
            if self.selection.scroll_down():
                self._show_selection()
        elif event.type is EventType.SCROLL_UP:
            if self.selection.scroll_up():
                self._show_selection()
        elif event.type is EventType.DATA_READY:
            # Updates for rows that are not on display need no paint
            if event.url == self.selection.selected_url:
                model = self._show_detail()
                self._show_chart(model)
        return True

    def _show_selection(self) -> None:
        self._show_list()
        model = self._show_detail()
        self._show_chart(model)

    def _show_list(self) -> None:
        self._screen.set_rows(self.selection.ordered_urls, self.selection.selected_index)
        self._screen.paint(Pane.LIST)

    def _show_detail(self) -> DisplayModel:
        url = self.selection.selected_url
        model = self._store.get(url)
        self._screen.set_detail(url, model.description)
        self._screen.paint(Pane.DETAIL)
        return model

    def _show_chart(self, model: DisplayModel) -> None:
        if is_all_zeros(model.series):
            logger.debug("Skipping chart for %s: all-zero series", self.selection.selected_url)
            return
        self._screen.set_chart(
            f"{CHART_TITLE} · {self.selection.selected_url}", model.series,
        )
        self._screen.paint(Pane.CHART)
