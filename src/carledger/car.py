"""The car: an odometer ledger with immediate and delayed drives."""

from __future__ import annotations

import asyncio
import functools
import logging
import math
from typing import Any, TypeVar

from pydantic import ValidationError

from carledger.config import LedgerConfig
from carledger.exceptions import InvalidArgumentError
from carledger.models import CarIdentity, DelayedDrive, Drive
from carledger.models._base import LedgerBaseModel
from carledger.timing import AsyncioScheduler, DelayFunction, Scheduler, travel_time_ms

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=LedgerBaseModel)


def _validate(model_cls: type[M], **data: Any) -> M:
    """Build *model_cls* from *data*, mapping validation failures to ``InvalidArgumentError``."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        error = exc.errors()[0]
        loc = error.get("loc") or ("",)
        raise InvalidArgumentError(error["msg"], argument=str(loc[0])) from exc


class Car:
    """A car that keeps a running total of the distance it has driven.

    Usage::

        car = Car("toyota", "prius")
        car.drive(1, 2, 3)                       # -> 6
        distance = await car.delayed_drive(1000, 1, 2, 3)

    ``make`` and ``model`` are fixed at creation.  ``odometer`` starts
    at ``0`` and only grows, by exactly the distances driven.

    Parameters
    ----------
    make : str
        Manufacturer label.
    model : str
        Model label.
    config : LedgerConfig or None
        Ledger configuration.  Defaults to ``LedgerConfig()``.
    scheduler : Scheduler or None
        Timer capability for delayed drives.  Defaults to an
        :class:`~carledger.timing.AsyncioScheduler` on the running loop.
    delay_fn : callable or None
        ``(distance, speed) -> milliseconds``.  Defaults to
        :func:`~carledger.timing.travel_time_ms` scaled by
        ``config.wait_scale_ms``.
    """

    def __init__(
        self,
        make: str,
        model: str,
        *,
        config: LedgerConfig | None = None,
        scheduler: Scheduler | None = None,
        delay_fn: DelayFunction | None = None,
    ) -> None:
        self._config = config or LedgerConfig()
        self._identity = _validate(CarIdentity, make=make, model=model)
        self._scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._delay_fn: DelayFunction = delay_fn or functools.partial(
            travel_time_ms,
            ms_per_unit=self._config.wait_scale_ms,
        )
        self._odometer: int | float = 0
        self._pending = 0

    def __repr__(self) -> str:
        return f"Car(make={self.make!r}, model={self.model!r}, odometer={self._odometer!r})"

    # ------------------------------------------------------------------
    # Identity and state
    # ------------------------------------------------------------------

    @property
    def make(self) -> str:
        return self._identity.make

    @property
    def model(self) -> str:
        return self._identity.model

    @property
    def odometer(self) -> int | float:
        """Total distance driven so far."""
        return self._odometer

    @property
    def pending_drives(self) -> int:
        """Delayed drives that are armed but have not arrived yet."""
        return self._pending

    # ------------------------------------------------------------------
    # Drives
    # ------------------------------------------------------------------

    def drive(self, *legs: int | float) -> int | float:
        """Drive *legs* now and return the total distance.

        Raises
        ------
        InvalidArgumentError
            If no legs are given, a leg is negative, non-finite or not
            a number, or the total does not fit in a float.  The
            odometer is left untouched.
        """
        trip = _validate(Drive, legs=legs)
        distance = trip.distance
        self._record(distance)
        return distance

    def delayed_drive(self, speed: int | float, *legs: int | float) -> asyncio.Future[int | float]:
        """Drive *legs* at *speed*, arriving after a wait.

        The wait is ``delay_fn(distance, speed)`` milliseconds, by
        default ``(distance / speed) * 3_600_000``, and is a lower bound.
        A future is returned at once; when the timer fires the distance
        is added to the odometer and the future resolves with it.

        There is no cancellation: cancelling the returned future only
        drops the result, the distance is still recorded on arrival.

        Must be called from a coroutine or callback running on an event
        loop.

        Raises
        ------
        InvalidArgumentError
            If *speed* is not a finite positive number, the legs are
            invalid as for :meth:`drive`, or the wait does not fit in a
            finite float.  No timer is armed.
        """
        trip = _validate(DelayedDrive, speed=speed, legs=legs)
        distance = trip.distance
        try:
            wait_ms = float(self._delay_fn(distance, trip.speed))
        except OverflowError as exc:
            raise InvalidArgumentError("wait is too long to schedule", argument="speed") from exc
        if not math.isfinite(wait_ms):
            raise InvalidArgumentError(
                f"wait must be a finite number of milliseconds, got {wait_ms!r}",
                argument="speed",
            )
        wait_ms = max(wait_ms, 0.0)

        future: asyncio.Future[int | float] = asyncio.get_running_loop().create_future()

        def _arrive() -> None:
            self._pending -= 1
            self._record(distance)
            if future.cancelled():
                _logger.debug("Drive of %s arrived after its handle was cancelled", distance)
                return
            future.set_result(distance)

        self._pending += 1
        self._scheduler.call_later(wait_ms / 1000.0, _arrive)
        _logger.debug(
            "Delayed drive armed: %s %s distance=%s speed=%s wait_ms=%.3f",
            self.make,
            self.model,
            distance,
            trip.speed,
            wait_ms,
        )
        return future

    record_immediate = drive
    record_delayed = delayed_drive

    def _record(self, distance: int | float) -> None:
        self._odometer += distance
        if self._config.log_drives:
            _logger.info("%s %s drove %s (odometer=%s)", self.make, self.model, distance, self._odometer)
        else:
            _logger.debug("%s %s drove %s (odometer=%s)", self.make, self.model, distance, self._odometer)


def create(make: str, model: str, **options: Any) -> Car:
    """Create a new car with an odometer at zero.

    *options* are passed to :class:`Car` (``config``, ``scheduler``,
    ``delay_fn``).
    """
    return Car(make, model, **options)
