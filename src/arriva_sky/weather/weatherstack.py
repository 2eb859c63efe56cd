"""Weatherstack current-conditions provider (keyed)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from .base import HttpWeatherProvider
from .conditions import normalize_condition
from .models import DEFAULT_OBSERVATION, ProviderResult, WeatherObservation


class WeatherstackProvider(HttpWeatherProvider):
    """Current conditions only; contributes no forecast points."""

    name = "weatherstack"
    BASE_URL = "http://api.weatherstack.com/current"

    def __init__(
        self,
        settings: Settings,
        api_key: str,
        logger: logging.Logger | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(settings, logger, client=client)
        self._api_key = api_key

    def fetch(self) -> dict[str, Any]:
        params = {
            "access_key": self._api_key,
            "query": f"{self.latitude},{self.longitude}",
            "units": "m",
        }
        payload = self._request_json(self.BASE_URL, context="current fetch", params=params)
        # Weatherstack reports quota and key problems with HTTP 200.
        if payload.get("success") is False or isinstance(payload.get("error"), dict):
            error = payload.get("error") if isinstance(payload.get("error"), dict) else {}
            raise self._error(
                f"API error {error.get('code', 'unknown')}: "
                f"{error.get('info') or error.get('type') or 'no detail'}"
            )
        return payload

    def normalize(self, raw: dict[str, Any]) -> ProviderResult:
        current = raw.get("current")
        if not isinstance(current, dict):
            raise self._error("payload missing 'current' object.")

        descriptions = current.get("weather_descriptions")
        description = None
        if isinstance(descriptions, list) and descriptions:
            description = self._as_str(descriptions[0])

        temperature = self._as_float(current.get("temperature"))
        humidity = self._as_float(current.get("humidity"))
        wind_speed = self._as_float(current.get("wind_speed"))
        wind_direction = self._as_float(current.get("wind_degree"))
        precipitation = self._as_float(current.get("precip"))
        cloud_cover = self._as_float(current.get("cloudcover"))
        if temperature is None and description is None:
            raise self._error("'current' carried neither temperature nor description.")

        defaults = DEFAULT_OBSERVATION
        observation = WeatherObservation(
            condition=normalize_condition(description),
            description=(description or defaults.description).lower(),
            temperature_c=temperature if temperature is not None else defaults.temperature_c,
            humidity_pct=(
                self._clamp_pct(humidity) if humidity is not None else defaults.humidity_pct
            ),
            wind_speed_kmh=max(0.0, wind_speed) if wind_speed is not None else defaults.wind_speed_kmh,
            wind_direction_deg=(
                wind_direction if wind_direction is not None else defaults.wind_direction_deg
            ),
            precipitation_mm=max(0.0, precipitation) if precipitation is not None else 0.0,
            cloud_coverage_pct=(
                self._clamp_pct(cloud_cover) if cloud_cover is not None
                else defaults.cloud_coverage_pct
            ),
        )
        return ProviderResult(provider=self.name, observation=observation, forecast=[])
