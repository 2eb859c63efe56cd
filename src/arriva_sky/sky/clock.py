"""Wall-clock to fixed-offset local time conversion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, timezone


@dataclass(frozen=True, slots=True)
class TimeSample:
    """Local time at the tracked location, reduced to what the sky math needs."""

    decimal_hours: float
    local_time: datetime

    @property
    def calendar_date(self) -> date:
        return self.local_time.date()


def local_timezone(utc_offset_hours: float) -> timezone:
    return timezone(timedelta(hours=utc_offset_hours))


def resolve_time(instant: datetime | None = None, *, utc_offset_hours: float = 5.0) -> TimeSample:
    """Convert ``instant`` (naive values are taken as UTC) to a ``TimeSample``.

    ``decimal_hours`` is always in ``[0, 24)``.
    """
    if instant is None:
        instant = datetime.now(UTC)
    elif instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)

    local = instant.astimezone(local_timezone(utc_offset_hours))
    decimal_hours = local.hour + local.minute / 60 + local.second / 3600
    return TimeSample(decimal_hours=decimal_hours, local_time=local)
