"""Shared test doubles."""

from collections.abc import Sequence

import pytest

from wordpresser.dashboard.screen import Pane


class FakeScreen:
    """Records every content change and paint."""

    def __init__(self) -> None:
        self.rows: list[str] = []
        self.selected = -1
        self.detail_title = ""
        self.detail_text = ""
        self.chart_title = ""
        self.series: tuple[int, ...] = ()
        self.paints: list[Pane] = []

    def set_rows(self, rows: Sequence[str], selected: int) -> None:
        self.rows = list(rows)
        self.selected = selected

    def set_detail(self, title: str, text: str) -> None:
        self.detail_title = title
        self.detail_text = text

    def set_chart(self, title: str, series: Sequence[int]) -> None:
        self.chart_title = title
        self.series = tuple(series)

    def paint(self, pane: Pane) -> None:
        self.paints.append(pane)


@pytest.fixture
def screen() -> FakeScreen:
    return FakeScreen()
