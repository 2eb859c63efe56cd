"""Typed settings loader for the sky synthesis engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

# Malé, Maldives.
DEFAULT_LATITUDE = 4.1918
DEFAULT_LONGITUDE = 73.5291


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")

    latitude: float = Field(default=DEFAULT_LATITUDE, alias="SKY_LATITUDE")
    longitude: float = Field(default=DEFAULT_LONGITUDE, alias="SKY_LONGITUDE")
    utc_offset_hours: float = Field(default=5.0, alias="SKY_UTC_OFFSET_HOURS")

    cache_ttl_seconds: float = Field(default=300.0, alias="SKY_CACHE_TTL_SECONDS")
    star_count: int = Field(default=150, alias="SKY_STAR_COUNT")
    forecast_lookahead: int = Field(default=12, alias="SKY_FORECAST_LOOKAHEAD")
    random_seed: int | None = Field(default=None, alias="SKY_RANDOM_SEED")

    weather_timeout_seconds: float = Field(default=5.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_max_retries: int = Field(default=0, alias="WEATHER_MAX_RETRIES")
    weather_retry_delay_seconds: float = Field(
        default=0.5,
        alias="WEATHER_RETRY_DELAY_SECONDS",
    )

    met_no_enabled: bool = Field(default=True, alias="MET_NO_ENABLED")
    met_no_user_agent: str = Field(
        default="arriva-sky/0.1 (contact: ops@example.com)",
        alias="MET_NO_USER_AGENT",
    )
    weatherstack_api_key: str | None = Field(
        default=None, alias="WEATHERSTACK_API_KEY", repr=False
    )
    openweathermap_api_key: str | None = Field(
        default=None, alias="OPENWEATHERMAP_API_KEY", repr=False
    )

    journal_dir: Path = Field(default=Path("./data/journal"), alias="JOURNAL_DIR")
    cors_allow_origins: str = Field(default="*", alias="CORS_ALLOW_ORIGINS")

    @field_validator(
        "weatherstack_api_key",
        "openweathermap_api_key",
        "random_seed",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Reject values that would break the pipeline's numeric contracts."""
        if not (-90 <= self.latitude <= 90):
            raise ValueError("SKY_LATITUDE must be between -90 and 90.")
        if not (-180 <= self.longitude <= 180):
            raise ValueError("SKY_LONGITUDE must be between -180 and 180.")
        if not (-12 <= self.utc_offset_hours <= 14):
            raise ValueError("SKY_UTC_OFFSET_HOURS must be between -12 and 14.")
        if self.cache_ttl_seconds <= 0:
            raise ValueError("SKY_CACHE_TTL_SECONDS must be > 0.")
        if self.star_count < 0:
            raise ValueError("SKY_STAR_COUNT must be >= 0.")
        if self.forecast_lookahead <= 0:
            raise ValueError("SKY_FORECAST_LOOKAHEAD must be > 0.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.weather_max_retries < 0:
            raise ValueError("WEATHER_MAX_RETRIES must be >= 0.")
        if self.weather_retry_delay_seconds < 0:
            raise ValueError("WEATHER_RETRY_DELAY_SECONDS must be >= 0.")
        if self.met_no_enabled and not self.met_no_user_agent.strip():
            raise ValueError("MET_NO_USER_AGENT must not be empty when MET_NO_ENABLED.")
        return self

    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for journaling (no credentials)."""
        return {
            "app_env": self.app_env,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "utc_offset_hours": self.utc_offset_hours,
            "cache_ttl_seconds": self.cache_ttl_seconds,
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "weather_max_retries": self.weather_max_retries,
            "met_no_enabled": self.met_no_enabled,
            "weatherstack_enabled": self.weatherstack_api_key is not None,
            "openweathermap_enabled": self.openweathermap_api_key is not None,
            "seeded": self.random_seed is not None,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
