"""Deterministic sky appearance: local time, gradient table, celestial bodies."""

from .celestial import astronomy_times, moon_state, sun_state
from .clock import TimeSample, resolve_time
from .gradient import SKY_SEGMENTS, SkyGradient, SkySegment, lookup

__all__ = [
    "SKY_SEGMENTS",
    "SkyGradient",
    "SkySegment",
    "TimeSample",
    "astronomy_times",
    "lookup",
    "moon_state",
    "resolve_time",
    "sun_state",
]
