# src/housekeeper/core/idle.py

from __future__ import annotations

import time
from collections.abc import Callable


class IdleClock:
    """
    Tracks the time of the last user input.

    Connectors call touch() for every input line; the idle loop asks
    idle_seconds() once per tick. Uses a monotonic clock so wall-clock
    jumps do not produce negative or huge idle durations.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._last_input = clock()

    def touch(self, now: float | None = None) -> None:
        self._last_input = self._clock() if now is None else now

    def idle_seconds(self, now: float | None = None) -> float:
        if now is None:
            now = self._clock()
        return max(0.0, now - self._last_input)
