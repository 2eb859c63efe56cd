"""Procedural scene parameters derived from weather and sky phase."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

from ..models import Cloud, CloudLayer, LightningEvent, LightningState, RainState, Star
from ..sky.gradient import is_night_phase
from ..weather.conditions import RAIN_LIKE, is_stormy
from ..weather.models import WeatherObservation

DEFAULT_STAR_COUNT = 150
MAX_CLOUDS_FROM_COVERAGE = 12
MIN_CLOUDS = 2
UNREPORTED_RAIN_INTENSITY = 0.5
FULL_INTENSITY_MM = 10.0
LIGHTNING_WINDOW_MS = 5000

_CLOUD_LAYERS: tuple[CloudLayer, ...] = ("high", "mid", "low")
# (y_min, y_span, opacity_min, opacity_span); lower clouds sit lower and denser.
_LAYER_BANDS: dict[CloudLayer, tuple[float, float, float, float]] = {
    "high": (0.0, 0.2, 0.2, 0.2),
    "mid": (0.2, 0.3, 0.3, 0.3),
    "low": (0.5, 0.3, 0.4, 0.3),
}


@dataclass(slots=True)
class SceneParameters:
    rain: RainState
    lightning: LightningState
    clouds: list[Cloud] = field(default_factory=list)
    stars: list[Star] = field(default_factory=list)


class SceneParameterSynthesizer:
    """Turn an observation into star, cloud, rain and lightning parameters.

    All randomness comes from the injected ``rng`` so a seeded generator
    reproduces the same scene for the same inputs.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        star_count: int = DEFAULT_STAR_COUNT,
    ) -> None:
        self.rng = rng or random.Random()
        self.star_count = star_count

    def synthesize(
        self,
        observation: WeatherObservation,
        sky_phase: str,
        now_ms: int,
    ) -> SceneParameters:
        return SceneParameters(
            stars=self.stars(sky_phase),
            clouds=self.clouds(observation.cloud_coverage_pct),
            rain=self.rain(observation),
            lightning=self.lightning(observation, now_ms),
        )

    def stars(self, sky_phase: str) -> list[Star]:
        if not is_night_phase(sky_phase):
            return []
        rng = self.rng
        return [
            Star(x=rng.random(), y=rng.random() * 0.6, brightness=0.3 + rng.random() * 0.7)
            for _ in range(self.star_count)
        ]

    def clouds(self, cloud_coverage_pct: float) -> list[Cloud]:
        coverage = max(0.0, min(100.0, cloud_coverage_pct))
        count = math.floor(coverage / 100 * MAX_CLOUDS_FROM_COVERAGE) + MIN_CLOUDS
        rng = self.rng
        clouds: list[Cloud] = []
        for index in range(count):
            layer = _CLOUD_LAYERS[index % len(_CLOUD_LAYERS)]
            y_min, y_span, opacity_min, opacity_span = _LAYER_BANDS[layer]
            clouds.append(
                Cloud(
                    x=rng.random(),
                    y=y_min + rng.random() * y_span,
                    layer=layer,
                    opacity=opacity_min + rng.random() * opacity_span,
                    width=0.1 + rng.random() * 0.2,
                )
            )
        return clouds

    @staticmethod
    def rain(observation: WeatherObservation) -> RainState:
        precipitation = observation.precipitation_mm
        active = observation.condition in RAIN_LIKE or precipitation > 0
        if precipitation > 0:
            intensity = min(precipitation / FULL_INTENSITY_MM, 1.0)
        elif active:
            intensity = UNREPORTED_RAIN_INTENSITY
        else:
            intensity = 0.0
        return RainState(
            active=active,
            intensity=intensity,
            wind_speed=observation.wind_speed_kmh,
            wind_direction=observation.wind_direction_deg,
        )

    def lightning(self, observation: WeatherObservation, now_ms: int) -> LightningState:
        active = observation.condition == "thunderstorm" or is_stormy(observation.description)
        if not active:
            return LightningState(active=False, events=[])
        rng = self.rng
        events = [
            LightningEvent(
                x=rng.random(),
                y=rng.random() * 0.5,
                time=now_ms + rng.randint(1, LIGHTNING_WINDOW_MS),
            )
            for _ in range(rng.randint(1, 2))
        ]
        events.sort(key=lambda event: event.time)
        return LightningState(active=True, events=events)
