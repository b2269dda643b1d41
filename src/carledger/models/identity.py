"""Car identity model."""

from __future__ import annotations

from pydantic import StrictStr

from carledger.models._base import LedgerBaseModel


class CarIdentity(LedgerBaseModel):
    """The immutable labels a car is created with.

    Both labels are opaque: they are stored exactly as given.
    """

    make: StrictStr
    """Manufacturer label (e.g. ``"toyota"``)."""
    model: StrictStr
    """Model label (e.g. ``"prius"``)."""
