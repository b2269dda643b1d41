"""carledger - Async odometer ledger for a single car."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("carledger")
except PackageNotFoundError:
    __version__ = "0+local"
from carledger.car import Car, create
from carledger.config import LedgerConfig
from carledger.exceptions import (
    CarLedgerConfigError,
    CarLedgerError,
    DriveTimeoutError,
    InvalidArgumentError,
)
from carledger.models import CarIdentity, DelayedDrive, Drive
from carledger.timing import (
    MS_PER_HOUR,
    AsyncioScheduler,
    DelayFunction,
    Scheduler,
    travel_time_ms,
    wait_for_arrival,
)

__all__ = [
    "__version__",
    "MS_PER_HOUR",
    "AsyncioScheduler",
    "Car",
    "CarIdentity",
    "CarLedgerConfigError",
    "CarLedgerError",
    "DelayFunction",
    "DelayedDrive",
    "Drive",
    "DriveTimeoutError",
    "InvalidArgumentError",
    "LedgerConfig",
    "Scheduler",
    "create",
    "travel_time_ms",
    "wait_for_arrival",
]
