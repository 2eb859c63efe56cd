"""Sun/moon visibility, screen arcs and lunar phase.

Rise and set hours are fixed for the tracked location rather than computed
from a seasonal ephemeris; the lunar phase is real, derived from the
fractional Julian date of the composition instant.
"""

from __future__ import annotations

import math
from datetime import UTC, date, datetime

from ..models import AstronomyTimes, MoonState, Position, SunState

SUNRISE_HOUR = 6.117
SUNSET_HOUR = 18.0
MOONRISE_HOUR = 18.5
MOONSET_HOUR = 6.0

SUN_BRIGHTNESS = 0.8

SYNODIC_MONTH_DAYS = 29.53058867
UNIX_EPOCH_JD = 2440587.5
# New moon of 2000-01-06 18:14 UTC.
REFERENCE_NEW_MOON_JD = 2451550.1


def _arc_position(progress: float, base: float, height: float) -> Position:
    elevation = base + height * math.sin(progress * math.pi)
    return Position(x=progress, y=1.0 - elevation)


def sun_state(decimal_hours: float) -> SunState:
    """Sun is up on ``[SUNRISE_HOUR, SUNSET_HOUR)`` and peaks at mid-day."""
    if not (SUNRISE_HOUR <= decimal_hours < SUNSET_HOUR):
        return SunState(visible=False, position=None, brightness=0.0)

    progress = (decimal_hours - SUNRISE_HOUR) / (SUNSET_HOUR - SUNRISE_HOUR)
    return SunState(
        visible=True,
        position=_arc_position(progress, base=0.1, height=0.3),
        brightness=SUN_BRIGHTNESS,
    )


def moon_window_progress(decimal_hours: float) -> float | None:
    """Fraction of the moon's overnight window elapsed, or None when it is down."""
    if not (decimal_hours >= MOONRISE_HOUR or decimal_hours <= MOONSET_HOUR):
        return None
    window = 24.0 - MOONRISE_HOUR + MOONSET_HOUR
    if decimal_hours >= MOONRISE_HOUR:
        elapsed = decimal_hours - MOONRISE_HOUR
    else:
        elapsed = decimal_hours + 24.0 - MOONRISE_HOUR
    return min(elapsed / window, 1.0)


def julian_day_number(day: date) -> int:
    """Civil (Gregorian) date to Julian Day Number."""
    a = (14 - day.month) // 12
    y = day.year + 4800 - a
    m = day.month + 12 * a - 3
    return day.day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045


def julian_date(moment: datetime) -> float:
    """Fractional Julian date of an instant; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return UNIX_EPOCH_JD + moment.timestamp() / 86400.0


def lunar_phase(julian_day: float) -> float:
    """Position in the synodic cycle: 0 new moon, 0.5 full moon, always in ``[0, 1)``."""
    days_since_new = julian_day - REFERENCE_NEW_MOON_JD
    phase = (days_since_new % SYNODIC_MONTH_DAYS) / SYNODIC_MONTH_DAYS
    # Float modulo can land exactly on the period for tiny negative inputs.
    return phase if phase < 1.0 else 0.0


def illumination_percent(phase: float) -> int:
    return round((1 - math.cos(phase * 2 * math.pi)) / 2 * 100)


def moon_state(decimal_hours: float, moment: date | datetime) -> MoonState:
    """Phase follows the exact instant for datetimes, the day number for plain dates."""
    if isinstance(moment, datetime):
        phase = lunar_phase(julian_date(moment))
    else:
        phase = lunar_phase(julian_day_number(moment))
    illumination = illumination_percent(phase)
    progress = moon_window_progress(decimal_hours)
    if progress is None:
        return MoonState(visible=False, position=None, phase=phase, illumination=illumination)
    return MoonState(
        visible=True,
        position=_arc_position(progress, base=0.15, height=0.25),
        phase=phase,
        illumination=illumination,
    )


def format_clock(decimal_hours: float) -> str:
    total_minutes = round(decimal_hours * 60) % (24 * 60)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def format_duration(hours: float) -> str:
    total_minutes = round(hours * 60)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def astronomy_times() -> AstronomyTimes:
    return AstronomyTimes(
        sunrise=format_clock(SUNRISE_HOUR),
        sunset=format_clock(SUNSET_HOUR),
        moonrise=format_clock(MOONRISE_HOUR),
        moonset=format_clock(MOONSET_HOUR),
        day_length=format_duration(SUNSET_HOUR - SUNRISE_HOUR),
    )
