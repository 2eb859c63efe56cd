"""Typed models for normalized weather observations."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Condition = Literal[
    "clear",
    "partly cloudy",
    "cloudy",
    "rain",
    "drizzle",
    "thunderstorm",
    "fog",
    "snow",
]


class WeatherObservation(BaseModel):
    """Provider-agnostic current conditions."""

    model_config = ConfigDict(allow_inf_nan=False)

    condition: Condition
    description: str = ""
    temperature_c: float
    humidity_pct: float = Field(ge=0.0, le=100.0)
    wind_speed_kmh: float = Field(ge=0.0)
    wind_direction_deg: float
    precipitation_mm: float = Field(ge=0.0)
    cloud_coverage_pct: float = Field(ge=0.0, le=100.0)


class ForecastPoint(BaseModel):
    """One future forecast step, timezone-aware."""

    time: datetime
    condition: Condition
    description: str = ""
    precipitation_mm: float = 0.0
    temperature_c: float | None = None


class ProviderResult(BaseModel):
    """Normalized output of a single provider adapter."""

    provider: str
    observation: WeatherObservation
    forecast: list[ForecastPoint] = Field(default_factory=list)


DEFAULT_OBSERVATION = WeatherObservation(
    condition="clear",
    description="clear",
    temperature_c=28.0,
    humidity_pct=75.0,
    wind_speed_kmh=5.0,
    wind_direction_deg=180.0,
    precipitation_mm=0.0,
    cloud_coverage_pct=20.0,
)
