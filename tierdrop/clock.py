from __future__ import annotations

"""
tierdrop.clock
--------------

Time sources for the drop. A clock is any zero-argument callable returning
UNIX seconds as an int. The coordinator reads it exactly once per operation
and passes that value down, so a tier cannot flip state halfway through a
mint or a remediation.

- `system_clock` reads wall-clock time.
- `ManualClock` is a deterministic, non-decreasing clock for tests, devnet
  simulations and replay tooling.
"""

import time
from typing import Callable

Clock = Callable[[], int]


def system_clock() -> int:
    """Current UNIX time in whole seconds."""
    return int(time.time())


class ManualClock:
    """
    Deterministic clock that only moves when told to.

    >>> clk = ManualClock(1_700_000_000)
    >>> clk.advance(3600)
    1700003600
    """

    __slots__ = ("_now",)

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be >= 0")
        self._now = int(start)

    def __call__(self) -> int:
        return self._now

    @property
    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self._now += int(seconds)
        return self._now

    def set(self, when: int) -> int:
        if when < self._now:
            raise ValueError(f"clock cannot move backwards ({when} < {self._now})")
        self._now = int(when)
        return self._now


__all__ = ["Clock", "system_clock", "ManualClock"]
