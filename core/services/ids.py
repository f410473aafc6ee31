"""Project id generators."""

from __future__ import annotations

from collections.abc import Callable
import time
import uuid


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class TimeIdGenerator:
    """Epoch-millisecond ids, bumped so consecutive ids never repeat."""

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        value = max(self._clock(), self._last + 1)
        self._last = value
        return str(value)


class UuidIdGenerator:
    """Random UUID4 hex ids."""

    def __call__(self) -> str:
        return uuid.uuid4().hex
