"""Interval resolution entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IntervalErrorKind(str, Enum):
    """Reasons a cadence text cannot be scheduled."""

    TOO_SHORT = "sync_interval_too_short"
    INVALID = "sync_interval_invalid"


@dataclass(frozen=True)
class IntervalSpec:
    """Normalized interval plus the phase offset inside the current window."""

    interval: str
    interval_ms: int
    offset_ms: int


@dataclass(frozen=True)
class IntervalError:
    """Structured cadence failure."""

    kind: IntervalErrorKind
    cadence: str

    @property
    def message(self) -> str:
        if self.kind is IntervalErrorKind.TOO_SHORT:
            return f'The interval "{self.cadence}" is too short. The minimum interval is 5 minutes.'
        return f'The interval "{self.cadence}" is not a valid interval.'


@dataclass(frozen=True)
class IntervalResolution:
    """Outcome of resolving one cadence text."""

    spec: IntervalSpec | None
    error: IntervalError | None

    @property
    def ok(self) -> bool:
        return self.error is None

    @staticmethod
    def resolved(spec: IntervalSpec) -> IntervalResolution:
        return IntervalResolution(spec=spec, error=None)

    @staticmethod
    def failed(kind: IntervalErrorKind, cadence: str) -> IntervalResolution:
        return IntervalResolution(spec=None, error=IntervalError(kind=kind, cadence=cadence))
