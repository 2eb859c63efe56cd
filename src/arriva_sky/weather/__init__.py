"""Weather provider integrations and forecast analysis."""

from .base import HttpWeatherProvider, WeatherProvider
from .chain import ChainResult, ProviderAttempt, WeatherProviderChain, build_provider_chain
from .conditions import is_rain_like, is_stormy, normalize_condition
from .met_no import MetNorwayProvider
from .models import (
    DEFAULT_OBSERVATION,
    ForecastPoint,
    ProviderResult,
    WeatherObservation,
)
from .openweathermap import OpenWeatherMapProvider
from .trend import ForecastTrend, ForecastTrendDetector
from .weatherstack import WeatherstackProvider

__all__ = [
    "DEFAULT_OBSERVATION",
    "ChainResult",
    "ForecastPoint",
    "ForecastTrend",
    "ForecastTrendDetector",
    "HttpWeatherProvider",
    "MetNorwayProvider",
    "OpenWeatherMapProvider",
    "ProviderAttempt",
    "ProviderResult",
    "WeatherObservation",
    "WeatherProvider",
    "WeatherProviderChain",
    "WeatherstackProvider",
    "build_provider_chain",
    "is_rain_like",
    "is_stormy",
    "normalize_condition",
]
