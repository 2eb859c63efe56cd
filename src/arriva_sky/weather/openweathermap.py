"""OpenWeatherMap current + 3-hourly forecast provider (keyed)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherProviderError
from .base import HttpWeatherProvider
from .conditions import normalize_condition
from .models import DEFAULT_OBSERVATION, ForecastPoint, ProviderResult, WeatherObservation

MS_TO_KMH = 3.6


class OpenWeatherMapProvider(HttpWeatherProvider):
    """Current weather is required; the forecast is best-effort."""

    name = "openweathermap"
    CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
    FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
    FORECAST_COUNT = 8

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

    def _params(self, **extra: Any) -> dict[str, Any]:
        params: dict[str, Any] = {
            "lat": self.latitude,
            "lon": self.longitude,
            "appid": self._api_key,
            "units": "metric",
        }
        params.update(extra)
        return params

    def fetch(self) -> dict[str, Any]:
        current = self._request_json(self.CURRENT_URL, context="current fetch", params=self._params())
        forecast: dict[str, Any] | None
        try:
            forecast = self._request_json(
                self.FORECAST_URL,
                context="forecast fetch",
                params=self._params(cnt=self.FORECAST_COUNT),
            )
        except WeatherProviderError as exc:
            self.logger.warning("openweathermap forecast unavailable: %s", exc)
            forecast = None
        return {"current": current, "forecast": forecast}

    def normalize(self, raw: dict[str, Any]) -> ProviderResult:
        current = raw.get("current")
        if not isinstance(current, dict):
            raise self._error("payload missing current weather object.")
        observation = self._normalize_current(current)

        forecast_points: list[ForecastPoint] = []
        forecast = raw.get("forecast")
        if isinstance(forecast, dict) and isinstance(forecast.get("list"), list):
            for item in forecast["list"]:
                if isinstance(item, dict):
                    point = self._normalize_forecast_item(item)
                    if point is not None:
                        forecast_points.append(point)
        forecast_points.sort(key=lambda point: point.time)
        return ProviderResult(
            provider=self.name,
            observation=observation,
            forecast=forecast_points,
        )

    def _normalize_current(self, current: dict[str, Any]) -> WeatherObservation:
        description = self._description(current)
        if description is None:
            raise self._error("current weather missing 'weather[0].description'.")

        main = current.get("main") if isinstance(current.get("main"), dict) else {}
        wind = current.get("wind") if isinstance(current.get("wind"), dict) else {}
        clouds = current.get("clouds") if isinstance(current.get("clouds"), dict) else {}
        rain = current.get("rain") if isinstance(current.get("rain"), dict) else {}

        temperature = self._as_float(main.get("temp"))
        humidity = self._as_float(main.get("humidity"))
        wind_speed = self._as_float(wind.get("speed"))
        wind_direction = self._as_float(wind.get("deg"))
        precipitation = self._as_float(rain.get("1h"))
        cloud_cover = self._as_float(clouds.get("all"))

        defaults = DEFAULT_OBSERVATION
        return WeatherObservation(
            condition=normalize_condition(description),
            description=description.lower(),
            temperature_c=temperature if temperature is not None else defaults.temperature_c,
            humidity_pct=(
                self._clamp_pct(humidity) if humidity is not None else defaults.humidity_pct
            ),
            wind_speed_kmh=(
                max(0.0, wind_speed) * MS_TO_KMH if wind_speed is not None
                else defaults.wind_speed_kmh
            ),
            wind_direction_deg=(
                wind_direction if wind_direction is not None else defaults.wind_direction_deg
            ),
            precipitation_mm=max(0.0, precipitation) if precipitation is not None else 0.0,
            cloud_coverage_pct=(
                self._clamp_pct(cloud_cover) if cloud_cover is not None
                else defaults.cloud_coverage_pct
            ),
        )

    def _normalize_forecast_item(self, item: dict[str, Any]) -> ForecastPoint | None:
        item_time = self._parse_datetime(item.get("dt"))
        if item_time is None:
            return None
        description = self._description(item)
        main = item.get("main") if isinstance(item.get("main"), dict) else {}
        rain = item.get("rain") if isinstance(item.get("rain"), dict) else {}
        precipitation = self._as_float(rain.get("3h"))
        return ForecastPoint(
            time=item_time,
            condition=normalize_condition(description),
            description=(description or "").lower(),
            precipitation_mm=max(0.0, precipitation) if precipitation is not None else 0.0,
            temperature_c=self._as_float(main.get("temp")),
        )

    def _description(self, payload: dict[str, Any]) -> str | None:
        weather = payload.get("weather")
        if not isinstance(weather, list) or not weather or not isinstance(weather[0], dict):
            return None
        return self._as_str(weather[0].get("description")) or self._as_str(weather[0].get("main"))
