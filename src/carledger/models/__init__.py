"""Input models for carledger."""

from carledger.models.drive import DelayedDrive, Drive
from carledger.models.identity import CarIdentity

__all__ = [
    "CarIdentity",
    "DelayedDrive",
    "Drive",
]
