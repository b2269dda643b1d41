"""Deterministic fake scheduler for testing.

Satisfies :class:`carledger.timing.Scheduler` with a manually advanced
clock, so delayed drives complete without real waiting.
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(order=True)
class _Timer:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)


class FakeScheduler:
    """Test double for :class:`carledger.timing.Scheduler`.

    Callbacks fire only from :meth:`advance` or :meth:`run_all`, in
    deadline order; timers with the same deadline fire in the order
    they were armed.

    Example::

        scheduler = FakeScheduler()
        car = Car("toyota", "prius", scheduler=scheduler)
        handle = car.delayed_drive(1000, 1, 2, 3)
        scheduler.advance(0.0216)
        assert await handle == 6
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._timers: list[_Timer] = []
        self._seq = itertools.count()
        self._delays: list[float] = []

    @property
    def now(self) -> float:
        """Current fake time in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of armed timers that have not fired."""
        return len(self._timers)

    @property
    def delays(self) -> list[float]:
        """Every delay (seconds) passed to :meth:`call_later`, in order.

        This property is for test assertions only.
        """
        return list(self._delays)

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self._delays.append(delay)
        heapq.heappush(self._timers, _Timer(self._now + delay, next(self._seq), callback))

    def advance(self, seconds: float) -> int:
        """Move time forward by *seconds*, firing every timer that comes due.

        Returns the number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError("cannot move time backwards")
        target = self._now + seconds
        fired = 0
        while self._timers and self._timers[0].due <= target:
            timer = heapq.heappop(self._timers)
            self._now = timer.due
            timer.callback()
            fired += 1
        self._now = target
        return fired

    def run_all(self) -> int:
        """Fire every armed timer, jumping time to the last deadline."""
        fired = 0
        while self._timers:
            timer = heapq.heappop(self._timers)
            self._now = max(self._now, timer.due)
            timer.callback()
            fired += 1
        return fired
