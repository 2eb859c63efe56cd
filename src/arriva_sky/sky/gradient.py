"""Time-of-day sky gradient table."""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SkySegment:
    start_hour: float
    end_hour: float
    anchor_color: str
    phase_name: str

    def contains(self, decimal_hours: float) -> bool:
        return self.start_hour <= decimal_hours < self.end_hour


@dataclass(frozen=True, slots=True)
class SkyGradient:
    top: str
    mid: str
    bottom: str
    phase: str


# Ordered, gapless partition of [0, 24) for the tracked location.
SKY_SEGMENTS: tuple[SkySegment, ...] = (
    SkySegment(0.0, 4.867, "#0c0c0e", "night"),  # 00:00-04:52
    SkySegment(4.867, 5.3, "#141416", "astronomical"),  # 04:52-05:18
    SkySegment(5.3, 5.733, "#1c1c1f", "nautical"),  # 05:18-05:44
    SkySegment(5.733, 6.117, "#272730", "civil"),  # 05:44-06:07
    SkySegment(6.117, 18.0, "#424242", "daylight"),  # 06:07-18:00
    SkySegment(18.0, 18.383, "#272730", "civil"),  # 18:00-18:23
    SkySegment(18.383, 18.817, "#1c1c1f", "nautical"),  # 18:23-18:49
    SkySegment(18.817, 19.25, "#141416", "astronomical"),  # 18:49-19:15
    SkySegment(19.25, 24.0, "#0c0c0e", "night"),  # 19:15-24:00
)
_SEGMENT_STARTS = [segment.start_hour for segment in SKY_SEGMENTS]

MID_BLEND = 0.1
BOTTOM_BLEND = 0.2

NIGHT_PHASES = frozenset({"night", "astronomical", "nautical"})


def adjust_brightness(hex_color: str, factor: float) -> str:
    """Blend each RGB channel of ``#rrggbb`` toward white by ``factor``."""
    if len(hex_color) != 7 or not hex_color.startswith("#"):
        raise ValueError(f"Expected #rrggbb color, got {hex_color!r}.")
    if not (0.0 <= factor <= 1.0):
        raise ValueError(f"Blend factor must be between 0 and 1, got {factor}.")

    channels = [int(hex_color[i : i + 2], 16) for i in (1, 3, 5)]
    blended = [min(255, math.floor(c + (255 - c) * factor)) for c in channels]
    return "#" + "".join(f"{c:02x}" for c in blended)


def find_segment(decimal_hours: float) -> SkySegment:
    """Return the segment containing ``decimal_hours``, wrapping modulo 24."""
    if not math.isfinite(decimal_hours):
        raise ValueError(f"decimal_hours must be finite, got {decimal_hours}.")
    hours = decimal_hours % 24.0
    index = bisect_right(_SEGMENT_STARTS, hours) - 1
    return SKY_SEGMENTS[index]


def lookup(decimal_hours: float) -> SkyGradient:
    segment = find_segment(decimal_hours)
    return SkyGradient(
        top=segment.anchor_color,
        mid=adjust_brightness(segment.anchor_color, MID_BLEND),
        bottom=adjust_brightness(segment.anchor_color, BOTTOM_BLEND),
        phase=segment.phase_name,
    )


def is_night_phase(phase: str) -> bool:
    return phase in NIGHT_PHASES
