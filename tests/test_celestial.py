"""Sun/moon position and lunar phase tests."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from arriva_sky.sky.celestial import (
    SUNRISE_HOUR,
    SUNSET_HOUR,
    SYNODIC_MONTH_DAYS,
    astronomy_times,
    illumination_percent,
    julian_date,
    julian_day_number,
    lunar_phase,
    moon_state,
    moon_window_progress,
    sun_state,
)


def _circular_distance(a: float, b: float) -> float:
    diff = abs(a - b) % 1.0
    return min(diff, 1.0 - diff)


def test_sun_at_noon_is_visible_near_center_and_high() -> None:
    sun = sun_state(12.0)
    assert sun.visible is True
    assert sun.position is not None
    assert sun.position.x == pytest.approx(0.5, abs=0.01)
    assert sun.position.y == pytest.approx(0.6, abs=0.01)
    assert sun.brightness == 0.8


def test_sun_visibility_window_is_half_open() -> None:
    assert sun_state(SUNRISE_HOUR).visible is True
    assert sun_state(SUNRISE_HOUR).position.x == pytest.approx(0.0)
    assert sun_state(SUNRISE_HOUR - 0.01).visible is False
    assert sun_state(SUNSET_HOUR - 0.01).visible is True
    assert sun_state(SUNSET_HOUR).visible is False


def test_invisible_sun_has_no_position_instead_of_sentinel() -> None:
    sun = sun_state(2.0)
    assert sun.visible is False
    assert sun.position is None
    assert sun.brightness == 0.0


def test_sun_positions_stay_normalized_over_the_day() -> None:
    for minute in range(24 * 60):
        sun = sun_state(minute / 60)
        if sun.position is not None:
            assert 0.0 <= sun.position.x <= 1.0
            assert 0.0 <= sun.position.y <= 1.0


def test_moon_window_straddles_midnight() -> None:
    assert moon_window_progress(18.5) == pytest.approx(0.0)
    assert moon_window_progress(0.0) == pytest.approx(5.5 / 11.5)
    assert moon_window_progress(6.0) == pytest.approx(1.0)
    assert moon_window_progress(12.0) is None
    assert moon_window_progress(18.4) is None


def test_moon_state_reports_phase_even_when_below_horizon() -> None:
    moon = moon_state(12.0, date(2024, 1, 25))
    assert moon.visible is False
    assert moon.position is None
    assert moon.illumination >= 97


def test_moon_arc_mirrors_sun_arc() -> None:
    moon = moon_state(6.0, date(2024, 1, 11))
    assert moon.visible is True
    assert moon.position is not None
    assert moon.position.x == pytest.approx(1.0)
    assert moon.position.y == pytest.approx(0.85)


def test_julian_day_number_reference_dates() -> None:
    assert julian_day_number(date(2000, 1, 1)) == 2451545
    assert julian_day_number(date(2024, 1, 11)) == 2460321
    assert julian_day_number(date(1970, 1, 1)) == 2440588


@pytest.mark.parametrize("new_moon", [date(2024, 1, 11), date(2025, 3, 29)])
def test_documented_new_moons_are_dark(new_moon: date) -> None:
    moon = moon_state(22.0, new_moon)
    assert moon.illumination <= 3
    assert _circular_distance(moon.phase, 0.0) < 0.03


@pytest.mark.parametrize("full_moon", [date(2024, 1, 25), date(2025, 3, 14)])
def test_documented_full_moons_are_lit(full_moon: date) -> None:
    moon = moon_state(22.0, full_moon)
    assert moon.illumination >= 97
    assert moon.phase == pytest.approx(0.5, abs=0.03)


def test_lunar_phase_is_periodic_over_one_lunation() -> None:
    for offset in range(0, 400, 7):
        jd = 2460000.5 + offset
        assert _circular_distance(
            lunar_phase(jd), lunar_phase(jd + SYNODIC_MONTH_DAYS)
        ) < 1e-6
        assert 0.0 <= lunar_phase(jd) < 1.0


def test_illumination_percent_extremes() -> None:
    assert illumination_percent(0.0) == 0
    assert illumination_percent(0.5) == 100
    assert illumination_percent(0.25) == 50


def test_astronomy_times_match_fixed_windows() -> None:
    times = astronomy_times()
    assert times.sunrise == "06:07"
    assert times.sunset == "18:00"
    assert times.moonrise == "18:30"
    assert times.moonset == "06:00"
    assert times.day_length == "11h 53m"


def test_julian_date_is_fractional() -> None:
    assert julian_date(datetime(2000, 1, 1, 12, 0, tzinfo=UTC)) == pytest.approx(2451545.0)
    assert julian_date(datetime(2000, 1, 1, 0, 0)) == pytest.approx(2451544.5)


def test_phase_is_continuous_across_local_midnight() -> None:
    male = timezone(timedelta(hours=5))
    before = moon_state(23.99, datetime(2024, 1, 20, 23, 59, 30, tzinfo=male))
    after = moon_state(0.01, datetime(2024, 1, 21, 0, 0, 30, tzinfo=male))

    assert after.phase > before.phase
    assert after.phase - before.phase < 0.001


def test_datetime_phase_tracks_time_of_day() -> None:
    morning = moon_state(6.0, datetime(2024, 1, 20, 1, 0, tzinfo=UTC))
    evening = moon_state(18.5, datetime(2024, 1, 20, 13, 0, tzinfo=UTC))
    assert evening.phase - morning.phase == pytest.approx(0.5 / SYNODIC_MONTH_DAYS, abs=1e-6)
