"""Cadence text to interval and phase offset resolution."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType

from .interval_models import IntervalErrorKind, IntervalResolution, IntervalSpec

_SECOND_MS = 1000
_MINUTE_MS = 60 * _SECOND_MS
_HOUR_MS = 60 * _MINUTE_MS
_DAY_MS = 24 * _HOUR_MS
_WEEK_MS = 7 * _DAY_MS
_YEAR_MS = 365.25 * _DAY_MS

MINIMUM_INTERVAL_MS = 5 * _MINUTE_MS

NAMED_CADENCES: Mapping[str, str] = MappingProxyType(
    {
        "every half day": "12h",
        "every half hour": "30m",
        "every quarter hour": "15m",
        "every hour": "1h",
        "every day": "1d",
        "every month": "30d",
        "every week": "1w",
    }
)

_UNIT_MS: Mapping[str, float] = MappingProxyType(
    {
        "years": _YEAR_MS,
        "year": _YEAR_MS,
        "yrs": _YEAR_MS,
        "yr": _YEAR_MS,
        "y": _YEAR_MS,
        "weeks": _WEEK_MS,
        "week": _WEEK_MS,
        "w": _WEEK_MS,
        "days": _DAY_MS,
        "day": _DAY_MS,
        "d": _DAY_MS,
        "hours": _HOUR_MS,
        "hour": _HOUR_MS,
        "hrs": _HOUR_MS,
        "hr": _HOUR_MS,
        "h": _HOUR_MS,
        "minutes": _MINUTE_MS,
        "minute": _MINUTE_MS,
        "mins": _MINUTE_MS,
        "min": _MINUTE_MS,
        "m": _MINUTE_MS,
        "seconds": _SECOND_MS,
        "second": _SECOND_MS,
        "secs": _SECOND_MS,
        "sec": _SECOND_MS,
        "s": _SECOND_MS,
        "milliseconds": 1,
        "millisecond": 1,
        "msecs": 1,
        "msec": 1,
        "ms": 1,
    }
)

_DURATION_PATTERN = re.compile(r"^(-?(?:\d+)?\.?\d+) *([a-z]+)?$", re.IGNORECASE)
_EVERY_PREFIX = "every "


def resolve_interval(cadence: str, now: datetime) -> IntervalResolution:
    """Resolve cadence text such as ``every half hour`` or ``every 45m``.

    Named cadences map to a canonical duration. Anything else is read as
    ``every <duration>``; durations below five minutes are rejected as too short
    and unreadable text as invalid. The offset is how far ``now`` sits inside
    the current interval window, measured from the top of the hour.
    """
    text = " ".join(cadence.split())
    canonical = NAMED_CADENCES.get(text.lower())
    if canonical is not None:
        interval_ms = parse_duration_ms(canonical)
        assert interval_ms is not None
        return IntervalResolution.resolved(
            IntervalSpec(
                interval=canonical,
                interval_ms=interval_ms,
                offset_ms=compute_offset_ms(interval_ms, now),
            )
        )

    interval = text[len(_EVERY_PREFIX) :] if text.lower().startswith(_EVERY_PREFIX) else text
    interval_ms = parse_duration_ms(interval)
    if interval_ms is None:
        return IntervalResolution.failed(IntervalErrorKind.INVALID, cadence)
    if interval_ms < MINIMUM_INTERVAL_MS:
        return IntervalResolution.failed(IntervalErrorKind.TOO_SHORT, cadence)

    return IntervalResolution.resolved(
        IntervalSpec(
            interval=interval,
            interval_ms=interval_ms,
            offset_ms=compute_offset_ms(interval_ms, now),
        )
    )


def parse_duration_ms(text: str) -> int | None:
    """Return the duration in milliseconds, or None when the text is not a duration.

    A bare number is read as milliseconds.
    """
    if not text or len(text) > 100:
        return None
    match = _DURATION_PATTERN.match(text.strip())
    if match is None:
        return None
    unit = (match.group(2) or "ms").lower()
    multiplier = _UNIT_MS.get(unit)
    if multiplier is None:
        return None
    return int(float(match.group(1)) * multiplier)


def compute_offset_ms(interval_ms: int | None, now: datetime) -> int:
    """Milliseconds elapsed inside the current interval window."""
    if not interval_ms or interval_ms <= 0:
        return 0
    elapsed_in_hour = (
        now.minute * _MINUTE_MS + now.second * _SECOND_MS + now.microsecond // 1000
    )
    return elapsed_in_hour % interval_ms
