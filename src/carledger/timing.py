"""Wait formula and timer scheduling for delayed drives.

The wait for a delayed drive is a pure function of distance and speed
(:func:`travel_time_ms`).  Arming the timer goes through a
:class:`Scheduler` so tests can substitute
:class:`carledger.testing.FakeScheduler` for the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

from carledger.config import DEFAULT_WAIT_SCALE_MS
from carledger.exceptions import DriveTimeoutError, InvalidArgumentError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Milliseconds in one hour; the default scale of the wait formula.
MS_PER_HOUR: float = DEFAULT_WAIT_SCALE_MS

DelayFunction = Callable[[float, float], float]
"""``(distance, speed) -> wait in milliseconds``."""


def travel_time_ms(distance: float, speed: float, *, ms_per_unit: float = MS_PER_HOUR) -> float:
    """Return the wait in milliseconds for covering *distance* at *speed*.

    ``time = distance / speed``, scaled by *ms_per_unit*.  The inputs
    carry no units: with the default scale a speed of ``1000`` and a
    distance of ``6`` wait 21.6 ms, while ``60`` and ``120`` wait two
    hours.  Callers wanting real-world units pre-scale their inputs.
    """
    if speed <= 0:
        raise InvalidArgumentError(f"speed must be positive, got {speed!r}", argument="speed")
    if distance < 0:
        raise InvalidArgumentError(f"distance must not be negative, got {distance!r}", argument="distance")
    try:
        wait_ms = float(distance / speed) * ms_per_unit
    except OverflowError as exc:
        raise InvalidArgumentError("wait is too long to schedule", argument="speed") from exc
    if not math.isfinite(wait_ms):
        raise InvalidArgumentError("wait is too long to schedule", argument="speed")
    return wait_ms


class Scheduler(Protocol):
    """One-shot timer capability used by delayed drives."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """Run *callback* once, no earlier than *delay* seconds from now."""
        ...


class AsyncioScheduler:
    """Schedule callbacks on an ``asyncio`` event loop.

    The loop may wake a handle up to one clock resolution before its
    deadline; such early wake-ups are re-armed so the callback never
    runs before the deadline measured on ``loop.time()``.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        deadline = loop.time() + delay
        loop.call_at(deadline, self._fire, loop, deadline, callback)

    def _fire(self, loop: asyncio.AbstractEventLoop, deadline: float, callback: Callable[[], None]) -> None:
        remaining = deadline - loop.time()
        if remaining > 0:
            _logger.debug("Timer woke %.6fs early; re-arming", remaining)
            loop.call_later(remaining, self._fire, loop, deadline, callback)
            return
        callback()


async def wait_for_arrival(handle: Awaitable[T], timeout: float) -> T:
    """Wait for a delayed drive, giving up after *timeout* seconds.

    The drive is shielded: when the timeout wins, the drive keeps going
    and still updates the odometer when its timer fires.

    Raises
    ------
    DriveTimeoutError
        If *handle* has not resolved within *timeout* seconds.
    """
    try:
        return await asyncio.wait_for(asyncio.shield(handle), timeout)
    except TimeoutError as exc:
        _logger.debug("Drive did not arrive within %.3fs", timeout)
        raise DriveTimeoutError(f"drive did not arrive within {timeout}s", timeout=timeout) from exc
