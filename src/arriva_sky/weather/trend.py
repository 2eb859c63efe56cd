"""Detect the next condition change in an hourly forecast."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo

from .conditions import RAIN_LIKE, normalize_condition
from .models import ForecastPoint

RAIN_PRECIPITATION_MM = 0.1


@dataclass(frozen=True, slots=True)
class ForecastTrend:
    next_condition: str
    minutes_until_change: int
    change_time: str | None
    chance_of_rain: int

    @property
    def change_expected(self) -> bool:
        return self.change_time is not None


def format_change_time(moment: datetime) -> str:
    """12-hour clock text such as ``3:00 PM``."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


class ForecastTrendDetector:
    """Scan forward for the first differing condition and estimate rain odds."""

    def __init__(self, *, lookahead: int = 12, local_tz: tzinfo | None = None) -> None:
        if lookahead <= 0:
            raise ValueError("lookahead must be > 0.")
        self.lookahead = lookahead
        self.local_tz = local_tz

    def detect(
        self,
        current_condition: str,
        points: Sequence[ForecastPoint],
        now: datetime,
        *,
        local_tz: tzinfo | None = None,
    ) -> ForecastTrend:
        """``change_time`` is rendered in ``local_tz``, else the detector default, else UTC."""
        zone = local_tz or self.local_tz
        current = normalize_condition(current_condition)
        upcoming = sorted(
            (point for point in points if point.time > now),
            key=lambda point: point.time,
        )

        for point in upcoming:
            if point.condition == current:
                continue
            minutes = round((point.time - now).total_seconds() / 60)
            if minutes <= 0:
                continue
            local = point.time.astimezone(zone) if zone else point.time
            return ForecastTrend(
                next_condition=point.condition,
                minutes_until_change=minutes,
                change_time=format_change_time(local),
                chance_of_rain=self.chance_of_rain(upcoming),
            )

        return ForecastTrend(
            next_condition=current,
            minutes_until_change=0,
            change_time=None,
            chance_of_rain=self.chance_of_rain(upcoming),
        )

    def chance_of_rain(self, points: Sequence[ForecastPoint]) -> int:
        """Percent of the first ``lookahead`` points that are rainy."""
        window = list(points[: self.lookahead])
        if not window:
            return 0
        rainy = sum(
            1
            for point in window
            if point.condition in RAIN_LIKE or point.precipitation_mm > RAIN_PRECIPITATION_MM
        )
        return round(rainy / len(window) * 100)
