"""Terminal key source: stdin in cbreak mode, read from the event loop.

Keys are reported with symbolic names for the special keys the dashboard
uses (``<Up>``, ``<Down>``, ``<Escape>``) and as the literal character
otherwise. Any other escape sequence (other arrows, Home/End, PgUp/PgDn,
function keys) is reported as ``<Unknown>``.
"""

from __future__ import annotations

import asyncio
import os
import sys
import termios
import tty
from collections import deque
from typing import Any

UP = "<Up>"
DOWN = "<Down>"
ESCAPE = "<Escape>"
UNKNOWN = "<Unknown>"

# Seconds to wait for the rest of a sequence before a lone ESC counts as Escape
ESCAPE_TIMEOUT = 0.05

ESC = 0x1b

_SEQUENCES: dict[bytes, str] = {
    b"\x1b[A": UP,
    b"\x1b[B": DOWN,
    b"\x1bOA": UP,
    b"\x1bOB": DOWN,
}

# CSI (ESC [) and SS3 (ESC O) introducers
_INTRODUCERS = (ord("["), ord("O"))


def _is_parameter(byte: int) -> bool:
    return 0x20 <= byte <= 0x3f


def _is_final(byte: int) -> bool:
    return 0x40 <= byte <= 0x7e


def decode_keys(data: bytes) -> tuple[list[str], bytes]:
    """Decode complete keys from ``data``.

    Returns the key names and the trailing bytes of an escape sequence
    that has not fully arrived yet.
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        if data[i] != ESC:
            keys.append(data[i:i + 1].decode("utf-8", errors="replace"))
            i += 1
            continue

        if i + 1 == len(data):
            return keys, data[i:]
        if data[i + 1] == ESC:
            keys.append(ESCAPE)
            i += 1
            continue
        if data[i + 1] not in _INTRODUCERS:
            # Alt+key
            keys.append(UNKNOWN)
            i += 2
            continue

        end = i + 2
        while end < len(data) and _is_parameter(data[end]):
            end += 1
        if end == len(data):
            return keys, data[i:]
        if _is_final(data[end]):
            keys.append(_SEQUENCES.get(data[i:end + 1], UNKNOWN))
            i = end + 1
        else:
            keys.append(UNKNOWN)
            i = end
    return keys, b""


def split_keys(data: bytes) -> list[str]:
    """Split bytes into key names, treating an unfinished tail as complete.

    A lone trailing ESC is the Escape key; a cut-off sequence is unknown.
    """
    keys, rest = decode_keys(data)
    if rest:
        keys.append(ESCAPE if rest == b"\x1b" else UNKNOWN)
    return keys


class TerminalKeys:
    """Async key reader over a terminal file descriptor.

    Bytes of an escape sequence split across reads are kept until the
    rest arrives.

    Usage:
        with TerminalKeys() as keys:
            key = await keys.read_key()
    """

    def __init__(
        self,
        fd: int | None = None,
        *,
        escape_timeout: float = ESCAPE_TIMEOUT,
    ) -> None:
        self._fd = sys.stdin.fileno() if fd is None else fd
        self._escape_timeout = escape_timeout
        self._old_settings: list[Any] | None = None
        self._pending: deque[str] = deque()
        self._partial = b""

    def __enter__(self) -> TerminalKeys:
        self._old_settings = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._old_settings is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)
            self._old_settings = None

    async def read_key(self) -> str:
        """Wait until a key is pressed and return its name."""
        while not self._pending:
            if self._partial:
                if not await self._readable(self._escape_timeout):
                    self._flush_partial()
                    continue
            else:
                await self._readable()

            data = os.read(self._fd, 32)
            if not data:
                if not self._partial:
                    raise EOFError("terminal input closed")
                self._flush_partial()
                continue

            keys, self._partial = decode_keys(self._partial + data)
            self._pending.extend(keys)
        return self._pending.popleft()

    def _flush_partial(self) -> None:
        self._pending.extend(split_keys(self._partial))
        self._partial = b""

    async def _readable(self, timeout: float | None = None) -> bool:
        """Wait for input. Returns False if ``timeout`` passes first."""
        loop = asyncio.get_running_loop()
        ready: asyncio.Future[None] = loop.create_future()

        def _on_readable() -> None:
            if not ready.done():
                ready.set_result(None)

        loop.add_reader(self._fd, _on_readable)
        try:
            await asyncio.wait_for(ready, timeout)
        except asyncio.TimeoutError:
            return False
        finally:
            loop.remove_reader(self._fd)
        return True
