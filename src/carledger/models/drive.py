"""Drive request models.

A drive is a non-empty sequence of legs.  The models only validate and
total the request; applying it to an odometer is the car's job.
"""

from __future__ import annotations

from pydantic import field_validator

from carledger.models._base import LedgerBaseModel, Number, is_finite


class Drive(LedgerBaseModel):
    """An immediate drive over one or more legs."""

    legs: tuple[Number, ...]
    """Leg distances, in the order given."""

    @field_validator("legs")
    @classmethod
    def _check_legs(cls, value: tuple[int | float, ...]) -> tuple[int | float, ...]:
        if not value:
            raise ValueError("at least one leg is required")
        for index, leg in enumerate(value):
            if not is_finite(leg):
                raise ValueError(f"leg {index} is not a finite number: {leg!r}")
            if leg < 0:
                raise ValueError(f"leg {index} is negative: {leg!r}")
        try:
            total = float(sum(value))
        except OverflowError as exc:
            raise ValueError("total distance is too large") from exc
        if not is_finite(total):
            raise ValueError("total distance is too large")
        return value

    @property
    def distance(self) -> int | float:
        """Total distance over all legs."""
        return sum(self.legs)


class DelayedDrive(Drive):
    """A drive that completes after a wait derived from *speed*."""

    speed: Number
    """Speed used to derive the wait; any finite positive number."""

    @field_validator("speed")
    @classmethod
    def _check_speed(cls, value: int | float) -> int | float:
        if not is_finite(value) or value <= 0:
            raise ValueError(f"speed must be a finite positive number: {value!r}")
        return value
