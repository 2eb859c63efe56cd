"""Sky gradient table and local-time resolution tests."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from arriva_sky.sky.clock import resolve_time
from arriva_sky.sky.gradient import SKY_SEGMENTS, adjust_brightness, find_segment, lookup


def test_segments_partition_the_day_without_gaps_or_overlaps() -> None:
    assert SKY_SEGMENTS[0].start_hour == 0.0
    assert SKY_SEGMENTS[-1].end_hour == 24.0
    for previous, current in zip(SKY_SEGMENTS, SKY_SEGMENTS[1:]):
        assert previous.end_hour == current.start_hour
        assert previous.start_hour < previous.end_hour


def test_every_minute_of_the_day_maps_to_exactly_one_segment() -> None:
    for minute in range(24 * 60):
        hours = minute / 60
        matching = [segment for segment in SKY_SEGMENTS if segment.contains(hours)]
        assert len(matching) == 1
        assert find_segment(hours) is matching[0]


@pytest.mark.parametrize(
    ("hours", "phase"),
    [
        (0.0, "night"),
        (2.0, "night"),
        (4.9, "astronomical"),
        (5.5, "nautical"),
        (6.0, "civil"),
        (6.117, "daylight"),
        (12.0, "daylight"),
        (17.99, "daylight"),
        (18.0, "civil"),
        (18.5, "nautical"),
        (19.0, "astronomical"),
        (19.25, "night"),
        (23.99, "night"),
    ],
)
def test_lookup_phase_boundaries(hours: float, phase: str) -> None:
    assert lookup(hours).phase == phase


def test_lookup_wraps_out_of_range_hours() -> None:
    assert lookup(24.0).phase == lookup(0.0).phase
    assert lookup(36.0).phase == "daylight"
    assert lookup(-2.0).phase == lookup(22.0).phase


def test_lookup_rejects_non_finite_input() -> None:
    with pytest.raises(ValueError):
        lookup(math.nan)
    with pytest.raises(ValueError):
        lookup(math.inf)


def test_mid_and_bottom_are_progressively_lighter_blends_of_top() -> None:
    gradient = lookup(12.0)
    assert gradient.top == "#424242"
    assert gradient.mid == adjust_brightness("#424242", 0.1)
    assert gradient.bottom == adjust_brightness("#424242", 0.2)
    assert int(gradient.top[1:3], 16) < int(gradient.mid[1:3], 16) < int(gradient.bottom[1:3], 16)


def test_adjust_brightness_blends_toward_white() -> None:
    assert adjust_brightness("#000000", 0.0) == "#000000"
    assert adjust_brightness("#000000", 1.0) == "#ffffff"
    assert adjust_brightness("#0c0c0e", 0.1) == "#242426"
    with pytest.raises(ValueError):
        adjust_brightness("424242", 0.1)


def test_resolve_time_applies_fixed_offset() -> None:
    sample = resolve_time(datetime(2026, 3, 1, 7, 30, tzinfo=UTC), utc_offset_hours=5)
    assert sample.decimal_hours == pytest.approx(12.5)
    assert sample.local_time.utcoffset() == timedelta(hours=5)


def test_resolve_time_rolls_calendar_date_forward() -> None:
    sample = resolve_time(datetime(2026, 3, 1, 21, 0, tzinfo=UTC), utc_offset_hours=5)
    assert sample.calendar_date.isoformat() == "2026-03-02"
    assert sample.decimal_hours == pytest.approx(2.0)


def test_resolve_time_treats_naive_as_utc_and_accepts_other_zones() -> None:
    naive = resolve_time(datetime(2026, 3, 1, 0, 0), utc_offset_hours=5)
    assert naive.decimal_hours == pytest.approx(5.0)
    eastern = datetime(2026, 3, 1, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert resolve_time(eastern, utc_offset_hours=5).decimal_hours == pytest.approx(10.0)
    assert 0 <= resolve_time(utc_offset_hours=5).decimal_hours < 24
