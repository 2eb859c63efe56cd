"""Errors raised inside the engine; none of them reach an HTTP client."""


class ConfigError(Exception):
    """Settings could not be loaded or failed validation."""


class WeatherProviderError(Exception):
    """One provider could not supply usable data; the chain moves on."""

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class JournalError(Exception):
    """The CLI audit journal could not be created or appended to."""
