"""Tests for the wait formula and schedulers."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from carledger import MS_PER_HOUR, AsyncioScheduler, InvalidArgumentError, travel_time_ms
from carledger.testing import FakeScheduler


class TestTravelTime:
    def test_small_inputs_give_short_waits(self) -> None:
        assert travel_time_ms(6, 1000) == pytest.approx(21.6)

    def test_realistic_inputs_give_long_waits(self) -> None:
        # 120 at 60 per hour: two hours.
        assert travel_time_ms(120, 60) == pytest.approx(2 * MS_PER_HOUR)

    def test_zero_distance_waits_nothing(self) -> None:
        assert travel_time_ms(0, 50) == 0

    def test_custom_scale(self) -> None:
        assert travel_time_ms(10, 5, ms_per_unit=1.0) == pytest.approx(2.0)

    @pytest.mark.parametrize("speed", [0, -1, -0.001])
    def test_non_positive_speed_rejected(self, speed: float) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            travel_time_ms(6, speed)
        assert exc_info.value.argument == "speed"

    def test_overflowing_wait_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            travel_time_ms(10**400, 1)
        assert exc_info.value.argument == "speed"

    def test_negative_distance_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            travel_time_ms(-1, 10)
        assert exc_info.value.argument == "distance"


class TestFakeScheduler:
    def test_fires_in_deadline_order(self) -> None:
        scheduler = FakeScheduler()
        fired: list[str] = []

        scheduler.call_later(0.3, lambda: fired.append("slow"))
        scheduler.call_later(0.1, lambda: fired.append("fast"))
        scheduler.call_later(0.1, lambda: fired.append("fast-second"))

        assert scheduler.advance(0.05) == 0
        assert scheduler.advance(0.1) == 2
        assert fired == ["fast", "fast-second"]
        assert scheduler.pending == 1

        assert scheduler.run_all() == 1
        assert fired == ["fast", "fast-second", "slow"]
        assert scheduler.now == pytest.approx(0.3)

    def test_records_delays(self) -> None:
        scheduler = FakeScheduler()
        scheduler.call_later(1.5, lambda: None)
        scheduler.call_later(0.0, lambda: None)
        assert scheduler.delays == [1.5, 0.0]

    def test_cannot_move_backwards(self) -> None:
        with pytest.raises(ValueError):
            FakeScheduler().advance(-1)


@pytest.mark.asyncio
async def test_asyncio_scheduler_never_fires_before_deadline() -> None:
    loop = asyncio.get_running_loop()
    scheduler = AsyncioScheduler()
    delay = 0.02
    fired_at: asyncio.Future[float] = loop.create_future()

    start = loop.time()
    scheduler.call_later(delay, lambda: fired_at.set_result(loop.time()))
    end = await fired_at

    assert end - start >= delay


class _StubLoop:
    """Records timer requests instead of running them; ``now`` is set by the test."""

    def __init__(self, now: float) -> None:
        self.now = now
        self.call_at_calls: list[tuple[float, Any, tuple[Any, ...]]] = []
        self.call_later_calls: list[tuple[float, Any, tuple[Any, ...]]] = []

    def time(self) -> float:
        return self.now

    def call_at(self, when: float, callback: Any, *args: Any) -> None:
        self.call_at_calls.append((when, callback, args))

    def call_later(self, delay: float, callback: Any, *args: Any) -> None:
        self.call_later_calls.append((delay, callback, args))


def test_asyncio_scheduler_rearms_when_woken_early() -> None:
    loop = _StubLoop(now=10.0)
    scheduler = AsyncioScheduler(loop=loop)  # type: ignore[arg-type]
    fired: list[float] = []

    scheduler.call_later(1.0, lambda: fired.append(loop.now))
    [(when, fire, args)] = loop.call_at_calls
    assert when == pytest.approx(11.0)

    # Loop wakes the handle just before its deadline.
    loop.now = 10.9995
    fire(*args)

    assert fired == []
    [(delay, refire, reargs)] = loop.call_later_calls
    assert delay == pytest.approx(0.0005)

    loop.now = 11.0
    refire(*reargs)

    assert fired == [11.0]
    assert len(loop.call_later_calls) == 1


def test_asyncio_scheduler_fires_at_deadline_without_rearming() -> None:
    loop = _StubLoop(now=0.0)
    scheduler = AsyncioScheduler(loop=loop)  # type: ignore[arg-type]
    fired: list[bool] = []

    scheduler.call_later(0.5, lambda: fired.append(True))
    [(_when, fire, args)] = loop.call_at_calls
    loop.now = 0.5
    fire(*args)

    assert fired == [True]
    assert loop.call_later_calls == []
