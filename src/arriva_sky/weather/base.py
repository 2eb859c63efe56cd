"""Provider-agnostic weather interface and shared HTTP plumbing."""

from __future__ import annotations

import logging
import math
import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherProviderError
from ..redaction import redact_url, sanitize_text
from .models import ProviderResult


class WeatherProvider(ABC):
    """Base contract for one source in the provider chain."""

    name: str = "base"

    @abstractmethod
    def fetch(self) -> dict[str, Any]:
        """Fetch the raw provider payload for the configured location."""

    @abstractmethod
    def normalize(self, raw: dict[str, Any]) -> ProviderResult:
        """Map a raw payload onto the common observation/forecast schema."""

    @abstractmethod
    def close(self) -> None:
        """Release provider resources."""

    def fetch_observation(self) -> ProviderResult:
        return self.normalize(self.fetch())

    def __enter__(self) -> WeatherProvider:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()


class HttpWeatherProvider(WeatherProvider):
    """JSON-over-HTTP provider with a per-call timeout and bounded retries.

    Retried: transport errors, 5xx and 429. Every other 4xx fails at once,
    since a bad key or bad query will not fix itself.
    """

    RETRYABLE_STATUS = frozenset({429})

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | None = None,
        *,
        client: httpx.Client | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger(f"arriva_sky.weather.{self.name}")
        self.latitude = settings.latitude
        self.longitude = settings.longitude
        self._max_retries = settings.weather_max_retries
        self._retry_delay = settings.weather_retry_delay_seconds
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(timeout=settings.weather_timeout_seconds)
        if headers:
            client.headers.update(headers)
        self._client = client

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _is_retryable(self, exc: httpx.HTTPError) -> bool:
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            return status >= 500 or status in self.RETRYABLE_STATUS
        return True

    def _describe_failure(self, exc: httpx.HTTPError, context: str, target: str) -> str:
        if isinstance(exc, httpx.HTTPStatusError):
            body = sanitize_text(exc.response.text[:300])
            return (
                f"{self.name} {context} failed with status "
                f"{exc.response.status_code} ({target}): {body}"
            )
        return f"{self.name} {context} request failed ({target}): {sanitize_text(str(exc))}"

    def _request_json(
        self,
        url: str,
        context: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        target = redact_url(httpx.URL(url, params=params))
        attempts = self._max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                response = self._client.get(url, params=params)
                response.raise_for_status()
                break
            except httpx.HTTPError as exc:
                message = self._describe_failure(exc, context, target)
                if attempt == attempts or not self._is_retryable(exc):
                    raise WeatherProviderError(message, provider=self.name) from exc
                self.logger.warning(
                    "%s (attempt %d/%d); retrying in %.1fs",
                    message, attempt, attempts, self._retry_delay,
                    extra={"provider": self.name},
                )
                time.sleep(self._retry_delay)

        try:
            body = response.json()
        except ValueError as exc:
            raise self._error(f"{context} returned non-JSON response.") from exc
        if not isinstance(body, dict):
            raise self._error(
                f"{context} returned a JSON {type(body).__name__}, expected an object."
            )
        return body

    def _error(self, message: str) -> WeatherProviderError:
        return WeatherProviderError(f"{self.name}: {message}", provider=self.name)

    @staticmethod
    def _as_str(value: Any) -> str | None:
        return value.strip() if isinstance(value, str) and value.strip() else None

    @staticmethod
    def _as_float(value: Any) -> float | None:
        # JSON true/false would otherwise pass as 1.0/0.0; json also parses 1e999 and NaN.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        number = float(value)
        return number if math.isfinite(number) else None

    @staticmethod
    def _clamp_pct(value: float) -> float:
        return max(0.0, min(100.0, value))

    @staticmethod
    def _parse_datetime(value: Any) -> datetime | None:
        """ISO-8601 text (``Z`` allowed) or epoch seconds, as an aware UTC datetime."""
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=UTC)
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str) and value.strip():
            try:
                parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            except ValueError:
                return None
        else:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
