"""Ordered fallback over weather providers."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from pydantic import BaseModel, Field

from ..config import Settings
from ..exceptions import WeatherProviderError
from ..redaction import sanitize_text
from .base import WeatherProvider
from .met_no import MetNorwayProvider
from .models import ProviderResult
from .openweathermap import OpenWeatherMapProvider
from .weatherstack import WeatherstackProvider


class ProviderAttempt(BaseModel):
    """Outcome of trying one provider."""

    provider: str
    ok: bool
    elapsed_ms: float
    error: str | None = None


class ChainResult(BaseModel):
    """What the chain produced; ``result`` is None once every provider failed."""

    result: ProviderResult | None = None
    attempts: list[ProviderAttempt] = Field(default_factory=list)

    @property
    def live(self) -> bool:
        return self.result is not None

    @property
    def provider(self) -> str | None:
        return self.result.provider if self.result is not None else None


class WeatherProviderChain:
    """Try providers strictly in order and return the first usable result.

    Never raises: every adapter failure is logged, recorded as an attempt and
    skipped.
    """

    def __init__(
        self,
        providers: Sequence[WeatherProvider],
        logger: logging.Logger | None = None,
    ) -> None:
        self._providers = list(providers)
        self.logger = logger or logging.getLogger("arriva_sky.weather.chain")

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self._providers]

    def fetch(self) -> ChainResult:
        attempts: list[ProviderAttempt] = []
        for provider in self._providers:
            started = time.perf_counter()
            try:
                result = provider.fetch_observation()
            except WeatherProviderError as exc:
                attempts.append(self._failed(provider, started, str(exc)))
                self.logger.warning(
                    "Weather provider %s failed: %s",
                    provider.name,
                    exc,
                    extra={"provider": provider.name, "elapsed_ms": attempts[-1].elapsed_ms},
                )
                continue
            except Exception as exc:
                # An adapter bug must not take the rest of the chain down with it.
                attempts.append(
                    self._failed(provider, started, f"{type(exc).__name__}: {exc}")
                )
                self.logger.warning(
                    "Weather provider %s raised unexpectedly (%s): %s",
                    provider.name, type(exc).__name__, exc,
                    extra={"provider": provider.name, "elapsed_ms": attempts[-1].elapsed_ms},
                )
                continue

            attempts.append(
                ProviderAttempt(
                    provider=provider.name,
                    ok=True,
                    elapsed_ms=_elapsed_ms(started),
                )
            )
            self.logger.info(
                "Weather data supplied by %s (condition=%s, forecast_points=%d)",
                provider.name,
                result.observation.condition,
                len(result.forecast),
                extra={"provider": provider.name, "elapsed_ms": attempts[-1].elapsed_ms},
            )
            return ChainResult(result=result, attempts=attempts)

        self.logger.warning(
            "No live weather data: all %d provider(s) failed; using defaults",
            len(self._providers),
        )
        return ChainResult(result=None, attempts=attempts)

    def close(self) -> None:
        for provider in self._providers:
            provider.close()

    @staticmethod
    def _failed(provider: WeatherProvider, started: float, error: str) -> ProviderAttempt:
        return ProviderAttempt(
            provider=provider.name,
            ok=False,
            elapsed_ms=_elapsed_ms(started),
            error=sanitize_text(error),
        )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


def build_provider_chain(
    settings: Settings,
    logger: logging.Logger | None = None,
) -> WeatherProviderChain:
    """Free gridded source first, then keyed commercial APIs whose keys are set."""
    providers: list[WeatherProvider] = []
    if settings.met_no_enabled:
        providers.append(MetNorwayProvider(settings))
    if settings.weatherstack_api_key:
        providers.append(WeatherstackProvider(settings, settings.weatherstack_api_key))
    if settings.openweathermap_api_key:
        providers.append(OpenWeatherMapProvider(settings, settings.openweathermap_api_key))
    return WeatherProviderChain(providers, logger=logger)
