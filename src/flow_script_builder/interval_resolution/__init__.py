"""Interval resolution exports."""

from .interval_models import IntervalError, IntervalErrorKind, IntervalResolution, IntervalSpec
from .interval_resolver import (
    NAMED_CADENCES,
    compute_offset_ms,
    parse_duration_ms,
    resolve_interval,
)

__all__ = [
    "IntervalError",
    "IntervalErrorKind",
    "IntervalResolution",
    "IntervalSpec",
    "NAMED_CADENCES",
    "compute_offset_ms",
    "parse_duration_ms",
    "resolve_interval",
]
