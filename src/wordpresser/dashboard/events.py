"""Dashboard events: the single stream consumed by the render coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventType(str, Enum):
    """Everything that can make the dashboard change."""

    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    DATA_READY = "data_ready"
    EXIT = "exit"


@dataclass(frozen=True)
class DashboardEvent:
    """A key press translated by the input loop, or a finished fetch."""

    type: EventType
    # Set for DATA_READY: the site whose display model was replaced
    url: str | None = None

    def __str__(self) -> str:
        if self.url is None:
            return self.type.value
        return f"{self.type.value}({self.url})"
