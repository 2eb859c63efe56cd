"""Typed models for the composed sky/weather payload.

Field names are snake_case in Python and serialize to camelCase, which is the
shape the rendering layer reads.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CloudLayer = Literal["high", "mid", "low"]


class PayloadModel(BaseModel):
    """Base for every object that crosses the HTTP boundary."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class Position(PayloadModel):
    """Normalized screen position; (0, 0) is the top-left corner."""

    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)


class Gradient(PayloadModel):
    top: str
    mid: str
    bottom: str


class SunState(PayloadModel):
    visible: bool
    position: Position | None = None
    brightness: float = Field(ge=0.0, le=1.0)


class MoonState(PayloadModel):
    visible: bool
    position: Position | None = None
    phase: float = Field(ge=0.0, lt=1.0, description="0 new, 0.5 full")
    illumination: int = Field(ge=0, le=100, description="Illuminated fraction in percent")


class CelestialObjects(PayloadModel):
    sun: SunState
    moon: MoonState


class Cloud(PayloadModel):
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)
    layer: CloudLayer
    opacity: float = Field(ge=0.0, le=1.0)
    width: float = Field(ge=0.0, le=1.0)


class RainState(PayloadModel):
    active: bool
    intensity: float = Field(ge=0.0, le=1.0)
    wind_speed: float
    wind_direction: float


class LightningEvent(PayloadModel):
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)
    time: int = Field(description="Epoch milliseconds at which the strike should render")


class LightningState(PayloadModel):
    active: bool
    events: list[LightningEvent] = Field(default_factory=list)


class Star(PayloadModel):
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)
    brightness: float = Field(ge=0.0, le=1.0)


class WeatherSummary(PayloadModel):
    condition: str
    description: str
    temperature: float
    humidity: float
    wind_speed: float
    wind_direction: float
    precipitation: float
    cloud_coverage: float
    source: str


class AstronomyTimes(PayloadModel):
    sunrise: str
    sunset: str
    moonrise: str
    moonset: str
    day_length: str


class HourlyForecastEntry(PayloadModel):
    time: str
    condition: str
    temperature: float | None = None
    precipitation: float = 0.0


class ForecastSummary(PayloadModel):
    next_condition: str
    time_to_change: int = Field(ge=0, description="Minutes until the next condition change")
    change_time: str | None = None
    chance_of_rain: int = Field(ge=0, le=100)
    hourly_forecast: list[HourlyForecastEntry] = Field(default_factory=list)


class WeatherPayload(PayloadModel):
    """Complete scene description returned by the engine."""

    gradient: Gradient
    sky_phase: str
    celestial_objects: CelestialObjects
    clouds: list[Cloud] = Field(default_factory=list)
    rain: RainState
    lightning: LightningState
    stars: list[Star] = Field(default_factory=list)
    weather: WeatherSummary
    astronomy: AstronomyTimes
    forecast: ForecastSummary
    cached: bool = False

    def to_response(self) -> dict:
        """Serialize with camelCase keys for JSON output."""
        return self.model_dump(mode="json", by_alias=True)
