"""Interval resolution tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from flow_script_builder.interval_resolution import (
    NAMED_CADENCES,
    IntervalErrorKind,
    compute_offset_ms,
    parse_duration_ms,
    resolve_interval,
)

_NOW = datetime(2024, 1, 1, 15, 36, 12, 345000, tzinfo=UTC)
_ELAPSED_IN_HOUR_MS = 36 * 60_000 + 12 * 1000 + 345


@pytest.mark.parametrize(
    ("cadence", "interval", "interval_ms"),
    [
        ("every half day", "12h", 12 * 3_600_000),
        ("every half hour", "30m", 30 * 60_000),
        ("every quarter hour", "15m", 15 * 60_000),
        ("every hour", "1h", 3_600_000),
        ("every day", "1d", 86_400_000),
        ("every month", "30d", 30 * 86_400_000),
        ("every week", "1w", 7 * 86_400_000),
    ],
)
def test_named_cadences_resolve_to_canonical_durations(
    cadence: str, interval: str, interval_ms: int
) -> None:
    resolution = resolve_interval(cadence, _NOW)

    assert resolution.ok
    assert resolution.spec is not None
    assert resolution.spec.interval == interval
    assert resolution.spec.interval_ms == interval_ms
    assert 0 <= resolution.spec.offset_ms < interval_ms


def test_named_cadence_vocabulary_is_closed() -> None:
    assert set(NAMED_CADENCES) == {
        "every half day",
        "every half hour",
        "every quarter hour",
        "every hour",
        "every day",
        "every month",
        "every week",
    }


def test_offset_is_position_inside_current_window() -> None:
    resolution = resolve_interval("every half hour", _NOW)

    assert resolution.spec is not None
    assert resolution.spec.offset_ms == _ELAPSED_IN_HOUR_MS - 30 * 60_000


def test_free_text_duration_keeps_written_interval() -> None:
    resolution = resolve_interval("every 45m", _NOW)

    assert resolution.spec is not None
    assert resolution.spec.interval == "45m"
    assert resolution.spec.interval_ms == 45 * 60_000
    assert resolution.spec.offset_ms == _ELAPSED_IN_HOUR_MS


def test_long_unit_names_are_accepted() -> None:
    resolution = resolve_interval("every 2 hours", _NOW)

    assert resolution.spec is not None
    assert resolution.spec.interval_ms == 2 * 3_600_000


@pytest.mark.parametrize("cadence", ["every 1m", "every 2m", "every 4m", "every 30s", "every 0m"])
def test_durations_below_five_minutes_are_too_short(cadence: str) -> None:
    resolution = resolve_interval(cadence, _NOW)

    assert not resolution.ok
    assert resolution.error is not None
    assert resolution.error.kind is IntervalErrorKind.TOO_SHORT
    assert "too short" in resolution.error.message


def test_five_minutes_is_the_minimum_accepted_interval() -> None:
    resolution = resolve_interval("every 5m", _NOW)

    assert resolution.ok


@pytest.mark.parametrize("cadence", ["every monday", "whenever", "every", "every 3 fortnights", ""])
def test_unparseable_text_is_invalid(cadence: str) -> None:
    resolution = resolve_interval(cadence, _NOW)

    assert resolution.error is not None
    assert resolution.error.kind is IntervalErrorKind.INVALID
    assert resolution.spec is None


def test_builds_at_different_times_converge_on_same_phase() -> None:
    first = resolve_interval("every 15m", datetime(2024, 1, 1, 9, 7, 0, tzinfo=UTC))
    second = resolve_interval("every 15m", datetime(2024, 3, 9, 22, 52, 0, tzinfo=UTC))

    assert first.spec is not None and second.spec is not None
    assert first.spec.offset_ms == second.spec.offset_ms == 7 * 60_000


def test_parse_duration_reads_bare_numbers_as_milliseconds() -> None:
    assert parse_duration_ms("1500") == 1500
    assert parse_duration_ms("1.5h") == 5_400_000
    assert parse_duration_ms("soon") is None


def test_offset_defaults_to_zero_without_a_usable_interval() -> None:
    assert compute_offset_ms(0, _NOW) == 0
    assert compute_offset_ms(None, _NOW) == 0
