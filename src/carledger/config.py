"""Ledger configuration for carledger."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

from carledger.exceptions import CarLedgerConfigError

#: Milliseconds per unit of ``distance / speed``.  With speed read as
#: "per hour" this turns the ratio into a wait in milliseconds.
DEFAULT_WAIT_SCALE_MS: float = 3600 * 1000


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise CarLedgerConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class LedgerConfig:
    """Car ledger configuration.

    Parameters
    ----------
    wait_scale_ms : float
        Milliseconds a delayed drive waits per unit of ``distance / speed``.
        Defaults to ``3_600_000`` (one hour).  Tests and demos keep the
        default and pass large speeds instead of changing the scale.
    log_drives : bool
        Emit an INFO record for every completed drive.  DEBUG records
        are always emitted.
    """

    wait_scale_ms: float = DEFAULT_WAIT_SCALE_MS
    log_drives: bool = False

    def __post_init__(self) -> None:
        scale = self.wait_scale_ms
        if isinstance(scale, bool) or not isinstance(scale, (int, float)):
            raise CarLedgerConfigError(f"wait_scale_ms must be a number, got {scale!r}")
        if not math.isfinite(scale) or scale <= 0:
            raise CarLedgerConfigError(f"wait_scale_ms must be a finite positive number, got {scale!r}")

    @classmethod
    def from_env(cls, **overrides: Any) -> LedgerConfig:
        """Create configuration from environment variables.

        Reads ``CARLEDGER_WAIT_SCALE_MS`` and ``CARLEDGER_LOG_DRIVES``.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        LedgerConfig
            Populated configuration.

        Raises
        ------
        CarLedgerConfigError
            If an environment value cannot be used.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        scale_env = env.get("CARLEDGER_WAIT_SCALE_MS")
        if scale_env is not None and "wait_scale_ms" not in overrides:
            config_kwargs["wait_scale_ms"] = _env_float("CARLEDGER_WAIT_SCALE_MS", scale_env)

        if "log_drives" not in overrides:
            config_kwargs["log_drives"] = _env_bool(env.get("CARLEDGER_LOG_DRIVES"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
