"""Rich-based screen: site list, detail pane and views bar chart.

Content setters only record state; nothing reaches the terminal until
``paint`` is called for a pane. Live runs without auto refresh, so the
caller of ``paint`` is the only code that ever draws.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

TITLE = "WordPresser"
HELP_TEXT = "Press up/down keys to scroll list, esc to exit."
CHART_TITLE = "Views last 20 days"

HEADER_HEIGHT = 3
BODY_HEIGHT = 10
CHART_HEIGHT = 10
LIST_WIDTH = 45

BAR_WIDTH = 3


class Pane(str, Enum):
    HEADER = "header"
    LIST = "list"
    DETAIL = "detail"
    CHART = "chart"


def _compact(value: int) -> str:
    """Short number label: 999, 12k, 3M."""
    if value < 1000:
        return str(value)
    if value < 1_000_000:
        return f"{value // 1000}k"
    return f"{value // 1_000_000}M"


def bar_chart(series: Sequence[int], height: int = CHART_HEIGHT - 3) -> Text:
    """Vertical bar chart drawn with block characters, value labels underneath."""
    if not series:
        return Text("No views data", style="dim")

    peak = max(series) or 1
    levels = [max(1, round(v / peak * height)) if v else 0 for v in series]

    lines: list[Text] = []
    for row in range(height, 0, -1):
        bars = " ".join(
            ("█" * BAR_WIDTH) if level >= row else (" " * BAR_WIDTH)
            for level in levels
        )
        lines.append(Text(bars, style="cyan"))
    labels = " ".join(_compact(v).rjust(BAR_WIDTH) for v in series)
    lines.append(Text(labels, style="white"))
    return Text("\n").join(lines)


def visible_window(total: int, selected: int, height: int) -> range:
    """Indexes of the rows to draw so the selected row is on screen."""
    start = max(0, selected - height + 1)
    return range(start, min(total, start + height))


def build_layout() -> Layout:
    layout = Layout()
    layout.split_column(
        Layout(name=Pane.HEADER.value, size=HEADER_HEIGHT),
        Layout(name="body", size=BODY_HEIGHT),
        Layout(name=Pane.CHART.value, size=CHART_HEIGHT),
        Layout(name="rest"),
    )
    layout["body"].split_row(
        Layout(name=Pane.LIST.value, size=LIST_WIDTH),
        Layout(name=Pane.DETAIL.value),
    )
    layout["rest"].update(Text(""))
    return layout


class RichScreen:
    """Terminal screen with a header, site list, detail pane and bar chart."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._layout = build_layout()
        self._live: Live | None = None

        self._rows: list[str] = []
        self._selected = 0
        self._detail_title = ""
        self._detail_text = ""
        self._chart_title = CHART_TITLE
        self._series: tuple[int, ...] = ()

    def __enter__(self) -> RichScreen:
        self._live = Live(
            self._layout,
            console=self.console,
            screen=True,
            auto_refresh=False,
        )
        self._live.start()
        return self

    def __exit__(self, *args: Any) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    # --- content ---

    def set_rows(self, rows: Sequence[str], selected: int) -> None:
        self._rows = list(rows)
        self._selected = selected

    def set_detail(self, title: str, text: str) -> None:
        self._detail_title = title
        self._detail_text = text

    def set_chart(self, title: str, series: Sequence[int]) -> None:
        self._chart_title = title
        self._series = tuple(series)

    # --- painting ---

    def paint(self, pane: Pane) -> None:
        """Redraw one pane on the terminal."""
        self._layout[pane.value].update(self.render(pane))
        if self._live is not None:
            self._live.refresh()

    def render(self, pane: Pane) -> RenderableType:
        if pane is Pane.HEADER:
            return Panel(Text(HELP_TEXT), title=TITLE, border_style="cyan")
        if pane is Pane.LIST:
            return self._render_list()
        if pane is Pane.DETAIL:
            return Panel(
                Text(self._detail_text),
                title=self._detail_title,
                border_style="bright_blue",
            )
        return Panel(
            bar_chart(self._series),
            title=self._chart_title,
            border_style="bright_blue",
        )

    def _render_list(self) -> Panel:
        text = Text(no_wrap=True, overflow="ellipsis")
        window = visible_window(len(self._rows), self._selected, BODY_HEIGHT - 2)
        for i in window:
            style = "bold black on yellow" if i == self._selected else "yellow"
            text.append(self._rows[i], style=style)
            if i != window[-1]:
                text.append("\n")
        return Panel(text, title="List", border_style="bright_blue")
