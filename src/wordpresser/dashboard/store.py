"""Per-site display models shared between fetch tasks and the renderer."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass

from wordpresser.models import StatsSnapshot

# Bars shown in the chart
SERIES_WINDOW = 20

PLACEHOLDER_TEXT = "fetching…"


@dataclass(frozen=True)
class DisplayModel:
    """Render-ready view of one site's stats. Replaced, never mutated."""

    description: str = ""
    series: tuple[int, ...] = ()

    @classmethod
    def placeholder(cls) -> DisplayModel:
        return cls(description=PLACEHOLDER_TEXT)

    @classmethod
    def from_snapshot(cls, snapshot: StatsSnapshot) -> DisplayModel:
        return cls(
            description=format_stats(snapshot),
            series=tuple(snapshot.views_by_day[-SERIES_WINDOW:]),
        )

    @classmethod
    def failed(cls, reason: object) -> DisplayModel:
        text = str(reason) or type(reason).__name__
        return cls(description=f"Failed to fetch stats: {text}")


def format_stats(snapshot: StatsSnapshot) -> str:
    """Multi-line stats summary for the detail pane."""
    lines = [f"Stats for {snapshot.date}:" if snapshot.date else "Stats:", ""]
    lines.append(
        f"Today:      Views: {snapshot.views_today:<6,} "
        f"Visitors: {snapshot.visitors_today:,}"
    )
    lines.append(
        f"Yesterday:  Views: {snapshot.views_yesterday:<6,} "
        f"Visitors: {snapshot.visitors_yesterday:,}"
    )
    if snapshot.views_by_day:
        days = len(snapshot.views_by_day)
        lines.append("")
        lines.append(f"Last {days} days: {sum(snapshot.views_by_day):,} views")
    return "\n".join(lines)


class SiteStatsStore:
    """Thread-safe mapping of site url to its current DisplayModel.

    Every access goes through one lock, so a reader always sees a whole
    model as some writer stored it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._models: dict[str, DisplayModel] = {}

    @classmethod
    def seeded(cls, urls: Iterable[str]) -> SiteStatsStore:
        """Store holding a placeholder for each url."""
        store = cls()
        for url in urls:
            store.set(url, DisplayModel.placeholder())
        return store

    def set(self, url: str, model: DisplayModel) -> None:
        with self._lock:
            self._models[url] = model

    def get(self, url: str) -> DisplayModel:
        with self._lock:
            return self._models.get(url, DisplayModel())

    def sorted_keys(self) -> list[str]:
        with self._lock:
            return sorted(self._models)

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)
