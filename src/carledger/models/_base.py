"""Base model and numeric types for carledger inputs.

Every input model inherits from :class:`LedgerBaseModel`, which is
frozen and rejects unknown fields.  Numbers are declared with
:data:`Number` so ``bool`` and numeric strings are refused instead of
being coerced.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt

Number = StrictInt | StrictFloat
"""A real ``int`` or ``float``; ``bool`` and ``str`` are rejected."""


def is_finite(value: int | float) -> bool:
    """Return ``True`` unless *value* is NaN or infinite."""
    if isinstance(value, int):
        # Ints are always finite; math.isfinite overflows on very large ones.
        return True
    return math.isfinite(value)


class LedgerBaseModel(BaseModel):
    """Base for carledger input models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
