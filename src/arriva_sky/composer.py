"""Compose sky state, live weather and scene parameters into one payload."""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable
from datetime import UTC, datetime

from .cache import ResponseCache
from .config import Settings
from .models import (
    CelestialObjects,
    ForecastSummary,
    Gradient,
    HourlyForecastEntry,
    LightningState,
    MoonState,
    RainState,
    SunState,
    WeatherPayload,
    WeatherSummary,
)
from .scene import SceneParameterSynthesizer
from .sky import astronomy_times, lookup, moon_state, resolve_time, sun_state
from .sky.clock import local_timezone
from .weather.chain import ChainResult, WeatherProviderChain, build_provider_chain
from .weather.models import DEFAULT_OBSERVATION, ForecastPoint, WeatherObservation
from .weather.trend import ForecastTrendDetector

DEFAULT_SOURCE = "default"
HOURLY_FORECAST_LIMIT = 24

_FALLBACK_GRADIENT = Gradient(top="#0c0c0e", mid="#141416", bottom="#1c1c1f")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class PayloadComposer:
    """Runs the pipeline on cache misses and always hands back a full payload."""

    def __init__(
        self,
        *,
        chain: WeatherProviderChain,
        cache: ResponseCache,
        scene: SceneParameterSynthesizer,
        trend: ForecastTrendDetector,
        utc_offset_hours: float = 5.0,
        clock: Callable[[], datetime] = _utc_now,
        logger: logging.Logger | None = None,
    ) -> None:
        self.chain = chain
        self.cache = cache
        self.scene = scene
        self.trend = trend
        self.utc_offset_hours = utc_offset_hours
        self._clock = clock
        self.logger = logger or logging.getLogger("arriva_sky.composer")
        self._miss_lock = threading.Lock()
        self.last_chain_result: ChainResult | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        logger: logging.Logger | None = None,
        *,
        chain: WeatherProviderChain | None = None,
    ) -> PayloadComposer:
        return cls(
            chain=chain or build_provider_chain(settings),
            cache=ResponseCache(ttl_seconds=settings.cache_ttl_seconds),
            scene=SceneParameterSynthesizer(
                random.Random(settings.random_seed),
                star_count=settings.star_count,
            ),
            trend=ForecastTrendDetector(
                lookahead=settings.forecast_lookahead,
                local_tz=local_timezone(settings.utc_offset_hours),
            ),
            utc_offset_hours=settings.utc_offset_hours,
            logger=logger,
        )

    def get_payload(self, now: datetime | None = None) -> WeatherPayload:
        """Cached payload if fresh, else a newly composed one; never raises."""
        try:
            cached = self.cache.get()
            if cached is not None:
                self.logger.debug("Returning cached sky payload", extra={"cached": True})
                return cached
            # One pipeline run per miss; concurrent callers wait for its result.
            with self._miss_lock:
                cached = self.cache.get()
                if cached is not None:
                    return cached
                payload = self.compose(now)
                self.cache.set(payload)
                return payload
        except Exception:
            self.logger.exception("Sky payload composition failed; serving default payload")
            return self.default_payload(now)

    def compose(self, now: datetime | None = None) -> WeatherPayload:
        """Run the full pipeline once. Provider failures degrade to defaults."""
        instant = self._normalize_instant(now)
        sample = resolve_time(instant, utc_offset_hours=self.utc_offset_hours)
        gradient = lookup(sample.decimal_hours)
        sun = sun_state(sample.decimal_hours)
        moon = moon_state(sample.decimal_hours, instant)

        chain_result = self.chain.fetch()
        self.last_chain_result = chain_result
        if chain_result.result is not None:
            observation = chain_result.result.observation
            forecast_points = chain_result.result.forecast
            source = chain_result.result.provider
        else:
            observation = DEFAULT_OBSERVATION
            forecast_points = []
            source = DEFAULT_SOURCE

        local_tz = local_timezone(self.utc_offset_hours)
        trend = self.trend.detect(
            observation.condition, forecast_points, instant, local_tz=local_tz
        )
        scene = self.scene.synthesize(
            observation,
            gradient.phase,
            now_ms=int(instant.timestamp() * 1000),
        )

        self.logger.info(
            "Sky payload composed: phase=%s condition=%s source=%s rain=%s lightning=%s "
            "chance_of_rain=%d",
            gradient.phase,
            observation.condition,
            source,
            scene.rain.active,
            scene.lightning.active,
            trend.chance_of_rain,
            extra={"sky_phase": gradient.phase, "condition": observation.condition, "source": source},
        )
        return WeatherPayload(
            gradient=Gradient(top=gradient.top, mid=gradient.mid, bottom=gradient.bottom),
            sky_phase=gradient.phase,
            celestial_objects=CelestialObjects(sun=sun, moon=moon),
            clouds=scene.clouds,
            rain=scene.rain,
            lightning=scene.lightning,
            stars=scene.stars,
            weather=self._weather_summary(observation, source),
            astronomy=astronomy_times(),
            forecast=ForecastSummary(
                next_condition=trend.next_condition,
                time_to_change=trend.minutes_until_change,
                change_time=trend.change_time,
                chance_of_rain=trend.chance_of_rain,
                hourly_forecast=self._hourly_entries(forecast_points, instant),
            ),
        )

    def default_payload(self, now: datetime | None = None) -> WeatherPayload:
        """Structurally complete payload built without any fallible step."""
        gradient = _FALLBACK_GRADIENT
        phase = "night"
        try:
            sample = resolve_time(self._normalize_instant(now), utc_offset_hours=self.utc_offset_hours)
            sky = lookup(sample.decimal_hours)
            gradient = Gradient(top=sky.top, mid=sky.mid, bottom=sky.bottom)
            phase = sky.phase
        except Exception:
            self.logger.exception("Gradient lookup failed while building default payload")

        observation = DEFAULT_OBSERVATION
        return WeatherPayload(
            gradient=gradient,
            sky_phase=phase,
            celestial_objects=CelestialObjects(
                sun=SunState(visible=False, position=None, brightness=0.0),
                moon=MoonState(visible=False, position=None, phase=0.5, illumination=50),
            ),
            clouds=[],
            rain=RainState(
                active=False,
                intensity=0.0,
                wind_speed=observation.wind_speed_kmh,
                wind_direction=observation.wind_direction_deg,
            ),
            lightning=LightningState(active=False, events=[]),
            stars=[],
            weather=self._weather_summary(observation, DEFAULT_SOURCE),
            astronomy=astronomy_times(),
            forecast=ForecastSummary(
                next_condition=observation.condition,
                time_to_change=0,
                change_time=None,
                chance_of_rain=0,
                hourly_forecast=[],
            ),
        )

    def close(self) -> None:
        self.chain.close()

    def _normalize_instant(self, now: datetime | None) -> datetime:
        instant = now if now is not None else self._clock()
        if instant.tzinfo is None:
            return instant.replace(tzinfo=UTC)
        return instant

    @staticmethod
    def _weather_summary(observation: WeatherObservation, source: str) -> WeatherSummary:
        return WeatherSummary(
            condition=observation.condition,
            description=observation.description or observation.condition,
            temperature=observation.temperature_c,
            humidity=observation.humidity_pct,
            wind_speed=observation.wind_speed_kmh,
            wind_direction=observation.wind_direction_deg,
            precipitation=observation.precipitation_mm,
            cloud_coverage=observation.cloud_coverage_pct,
            source=source,
        )

    def _hourly_entries(
        self, points: list[ForecastPoint], instant: datetime
    ) -> list[HourlyForecastEntry]:
        tz = local_timezone(self.utc_offset_hours)
        upcoming = sorted(
            (point for point in points if point.time > instant), key=lambda point: point.time
        )
        return [
            HourlyForecastEntry(
                time=point.time.astimezone(tz).isoformat(timespec="minutes"),
                condition=point.condition,
                temperature=point.temperature_c,
                precipitation=point.precipitation_mm,
            )
            for point in upcoming[:HOURLY_FORECAST_LIMIT]
        ]
