"""MET Norway (api.met.no) locationforecast provider."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from ..config import Settings
from .base import HttpWeatherProvider
from .conditions import normalize_condition
from .models import DEFAULT_OBSERVATION, ForecastPoint, ProviderResult, WeatherObservation

MS_TO_KMH = 3.6


class MetNorwayProvider(HttpWeatherProvider):
    """Free gridded forecast; the first timeseries step stands in for "now"."""

    name = "met_no"
    BASE_URL = "https://api.met.no/weatherapi/locationforecast/2.0/compact"
    FORECAST_STEPS = 24

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(
            settings,
            logger,
            client=client,
            # MET Norway rejects requests without an identifying User-Agent.
            headers={
                "Accept": "application/json",
                "User-Agent": settings.met_no_user_agent,
            },
        )

    def fetch(self) -> dict[str, Any]:
        # The API asks for at most four decimals so responses stay cacheable.
        params = {"lat": f"{self.latitude:.4f}", "lon": f"{self.longitude:.4f}"}
        return self._request_json(self.BASE_URL, context="locationforecast", params=params)

    def normalize(self, raw: dict[str, Any]) -> ProviderResult:
        properties = raw.get("properties")
        if not isinstance(properties, dict):
            raise self._error("payload missing 'properties' object.")
        timeseries = properties.get("timeseries")
        if not isinstance(timeseries, list):
            raise self._error("payload missing 'properties.timeseries' list.")
        steps = [item for item in timeseries if isinstance(item, dict)]
        if not steps:
            raise self._error("payload contained no timeseries steps.")

        observation = self._normalize_current(steps[0])
        forecast: list[ForecastPoint] = []
        for step in steps[1 : 1 + self.FORECAST_STEPS]:
            point = self._normalize_step(step)
            if point is not None:
                forecast.append(point)
        return ProviderResult(provider=self.name, observation=observation, forecast=forecast)

    def _normalize_current(self, step: dict[str, Any]) -> WeatherObservation:
        details = self._instant_details(step)
        temperature = self._as_float(details.get("air_temperature"))
        if temperature is None:
            raise self._error("current step missing 'air_temperature'.")

        symbol, precipitation = self._period_summary(step)
        humidity = self._as_float(details.get("relative_humidity"))
        wind_speed = self._as_float(details.get("wind_speed"))
        wind_direction = self._as_float(details.get("wind_from_direction"))
        cloud_cover = self._as_float(details.get("cloud_area_fraction"))
        return WeatherObservation(
            condition=normalize_condition(symbol),
            description=symbol or "",
            temperature_c=temperature,
            humidity_pct=(
                self._clamp_pct(humidity) if humidity is not None
                else DEFAULT_OBSERVATION.humidity_pct
            ),
            wind_speed_kmh=(
                wind_speed * MS_TO_KMH if wind_speed is not None
                else DEFAULT_OBSERVATION.wind_speed_kmh
            ),
            wind_direction_deg=(
                wind_direction if wind_direction is not None
                else DEFAULT_OBSERVATION.wind_direction_deg
            ),
            precipitation_mm=max(0.0, precipitation or 0.0),
            cloud_coverage_pct=(
                self._clamp_pct(cloud_cover) if cloud_cover is not None
                else DEFAULT_OBSERVATION.cloud_coverage_pct
            ),
        )

    def _normalize_step(self, step: dict[str, Any]) -> ForecastPoint | None:
        step_time: datetime | None = self._parse_datetime(step.get("time"))
        if step_time is None:
            self.logger.debug("met_no step without parseable time skipped")
            return None
        symbol, precipitation = self._period_summary(step)
        details = self._instant_details(step)
        return ForecastPoint(
            time=step_time,
            condition=normalize_condition(symbol),
            description=symbol or "",
            precipitation_mm=max(0.0, precipitation or 0.0),
            temperature_c=self._as_float(details.get("air_temperature")),
        )

    @staticmethod
    def _instant_details(step: dict[str, Any]) -> dict[str, Any]:
        data = step.get("data")
        if not isinstance(data, dict):
            return {}
        instant = data.get("instant")
        if not isinstance(instant, dict):
            return {}
        details = instant.get("details")
        return details if isinstance(details, dict) else {}

    def _period_summary(self, step: dict[str, Any]) -> tuple[str | None, float | None]:
        """Symbol code and precipitation of the shortest period the step carries."""
        data = step.get("data")
        if not isinstance(data, dict):
            return None, None
        for key in ("next_1_hours", "next_6_hours", "next_12_hours"):
            period = data.get(key)
            if not isinstance(period, dict):
                continue
            summary = period.get("summary")
            details = period.get("details")
            symbol = self._as_str(summary.get("symbol_code")) if isinstance(summary, dict) else None
            precipitation = (
                self._as_float(details.get("precipitation_amount"))
                if isinstance(details, dict)
                else None
            )
            return symbol, precipitation
        return None, None
