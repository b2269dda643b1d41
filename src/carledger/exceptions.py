"""Custom exception hierarchy for carledger."""

from __future__ import annotations


class CarLedgerError(Exception):
    """Base exception for all carledger errors."""


class CarLedgerConfigError(CarLedgerError):
    """Invalid or missing configuration."""


class InvalidArgumentError(CarLedgerError, ValueError):
    """A drive was requested with arguments it cannot accept.

    Raised for an empty leg list, a negative, non-finite or non-numeric
    leg, and a speed that is not a finite positive number.  Nothing is
    recorded on the odometer when this is raised.
    """

    def __init__(self, message: str, *, argument: str = "") -> None:
        self.argument = argument
        super().__init__(message)


class DriveTimeoutError(CarLedgerError, TimeoutError):
    """A delayed drive did not arrive before the caller's timeout."""

    def __init__(self, message: str, *, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(message)
