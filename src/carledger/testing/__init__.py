"""Test doubles for code that drives a :class:`carledger.Car`."""

from carledger.testing._scheduler import FakeScheduler

__all__ = ["FakeScheduler"]
