"""Time sources for estimators.

Estimators never read the system time directly. They call a clock, which is
any zero-argument callable returning seconds as a float. Production code uses
:func:`wall_clock`; replays and tests drive a :class:`ManualClock` so that
elapsed time between samples is deterministic.
"""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def wall_clock() -> float:
    """Return the current wall-clock time in seconds."""

    return time.time()


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move the clock forward and return the new time."""

        if seconds < 0:
            raise ValueError("seconds must be non-negative")
        self._now += seconds
        return self._now

    def set(self, now: float) -> None:
        """Jump to an absolute time, e.g. a timestamp read from a recording."""

        self._now = now
