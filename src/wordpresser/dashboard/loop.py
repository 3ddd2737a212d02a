"""InteractiveLoop: keyboard input → dashboard events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from wordpresser.dashboard.events import DashboardEvent, EventType
from wordpresser.dashboard.keys import DOWN, ESCAPE, UP

logger = logging.getLogger(__name__)

KEY_BINDINGS: dict[str, EventType] = {
    UP: EventType.SCROLL_UP,
    "k": EventType.SCROLL_UP,
    DOWN: EventType.SCROLL_DOWN,
    "j": EventType.SCROLL_DOWN,
    ESCAPE: EventType.EXIT,
    "q": EventType.EXIT,
}


class KeySource(Protocol):
    async def read_key(self) -> str: ...


class LoopState(str, Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class InteractiveLoop:
    """Reads keys until Exit, forwarding each bound key as an event."""

    def __init__(
        self,
        keys: KeySource,
        submit: Callable[[DashboardEvent], None],
    ) -> None:
        self._keys = keys
        self._submit = submit
        self.state = LoopState.RUNNING

    async def run(self) -> None:
        while self.state is LoopState.RUNNING:
            try:
                key = await self._keys.read_key()
            except EOFError:
                logger.info("Input closed, exiting")
                key = ESCAPE
            event_type = KEY_BINDINGS.get(key)
            if event_type is None:
                continue
            self._submit(DashboardEvent(event_type))
            if event_type is EventType.EXIT:
                self.state = LoopState.TERMINATED
        logger.info("Input loop terminated")
