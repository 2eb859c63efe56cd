"""HTTP endpoint tests using FastAPI's TestClient."""

from __future__ import annotations

import random
from collections.abc import Iterator
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from arriva_sky.api import create_app
from arriva_sky.cache import ResponseCache
from arriva_sky.composer import PayloadComposer
from arriva_sky.config import Settings
from arriva_sky.exceptions import WeatherProviderError
from arriva_sky.scene import SceneParameterSynthesizer
from arriva_sky.weather.base import WeatherProvider
from arriva_sky.weather.chain import WeatherProviderChain
from arriva_sky.weather.models import ProviderResult
from arriva_sky.weather.trend import ForecastTrendDetector
from arriva_sky.weather.weatherstack import WeatherstackProvider

PAYLOAD_KEYS = {
    "gradient",
    "skyPhase",
    "celestialObjects",
    "clouds",
    "rain",
    "lightning",
    "stars",
    "weather",
    "astronomy",
    "forecast",
    "cached",
}


class _DownProvider(WeatherProvider):
    name = "met_no"

    def fetch(self) -> dict[str, Any]:
        raise WeatherProviderError("met_no unavailable", provider=self.name)

    def normalize(self, raw: dict[str, Any]) -> ProviderResult:
        raise AssertionError("unreachable")

    def close(self) -> None:
        return None


class _BrokenComposer(PayloadComposer):
    def get_payload(self, now=None):
        raise RuntimeError("composer bug")


def _settings() -> Settings:
    return Settings(_env_file=None, met_no_enabled=False)


def _composer(cls: type[PayloadComposer] = PayloadComposer) -> PayloadComposer:
    return cls(
        chain=WeatherProviderChain([_DownProvider()]),
        cache=ResponseCache(),
        scene=SceneParameterSynthesizer(random.Random(0)),
        trend=ForecastTrendDetector(),
    )


@pytest.fixture
def client() -> Iterator[TestClient]:
    app = create_app(_settings(), _composer())
    with TestClient(app) as test_client:
        yield test_client


def test_get_returns_full_payload(client: TestClient) -> None:
    response = client.get("/weather-astronomy")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == PAYLOAD_KEYS
    assert body["weather"]["source"] == "default"
    assert set(body["celestialObjects"]) == {"sun", "moon"}


def test_post_is_accepted_and_second_call_is_cached(client: TestClient) -> None:
    first = client.post("/weather-astronomy", json={"ignored": True})
    second = client.get("/weather-astronomy")

    assert first.status_code == 200
    assert first.json()["cached"] is False
    assert second.json()["cached"] is True


def test_cors_headers_allow_any_origin(client: TestClient) -> None:
    response = client.get("/weather-astronomy", headers={"Origin": "https://example.org"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_cors_preflight(client: TestClient) -> None:
    response = client.options(
        "/weather-astronomy",
        headers={
            "Origin": "https://example.org",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert response.status_code == 200
    assert "POST" in response.headers["access-control-allow-methods"]


def test_broken_composer_still_returns_default_payload() -> None:
    app = create_app(_settings(), _composer(_BrokenComposer))
    with TestClient(app) as test_client:
        response = test_client.get("/weather-astronomy")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == PAYLOAD_KEYS
    assert body["celestialObjects"]["sun"]["position"] is None
    assert body["forecast"]["changeTime"] is None


def test_healthz_lists_providers(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "providers": ["met_no"]}


def _provider_settings() -> Any:
    return SimpleNamespace(
        latitude=4.1918,
        longitude=73.5291,
        weather_timeout_seconds=5.0,
        weather_max_retries=0,
        weather_retry_delay_seconds=0.0,
    )


def test_non_finite_provider_numbers_still_return_200() -> None:
    body = (
        b'{"current": {"weather_descriptions": ["Sunny"], "temperature": 1e999,'
        b' "humidity": 70, "wind_speed": 10, "wind_degree": 90, "precip": 0, "cloudcover": 5}}'
    )
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            200, content=body, headers={"Content-Type": "application/json"}
        )
    )
    provider = WeatherstackProvider(
        _provider_settings(), "ws-key", client=httpx.Client(transport=transport)
    )
    composer = PayloadComposer(
        chain=WeatherProviderChain([provider]),
        cache=ResponseCache(),
        scene=SceneParameterSynthesizer(random.Random(0)),
        trend=ForecastTrendDetector(),
    )

    with TestClient(create_app(_settings(), composer)) as test_client:
        first = test_client.get("/weather-astronomy")
        second = test_client.get("/weather-astronomy")

    assert first.status_code == 200
    assert second.status_code == 200
    weather = first.json()["weather"]
    assert weather["source"] == "weatherstack"
    assert weather["temperature"] == 28.0
    assert weather["humidity"] == 70.0


class _UnencodableComposer(PayloadComposer):
    def get_payload(self, now=None):
        payload = self.default_payload(now)
        weather = payload.weather.model_copy(update={"temperature": float("inf")})
        return payload.model_copy(update={"weather": weather})


def test_unencodable_payload_falls_back_to_default() -> None:
    with TestClient(create_app(_settings(), _composer(_UnencodableComposer))) as test_client:
        response = test_client.get("/weather-astronomy")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == PAYLOAD_KEYS
    assert body["weather"]["temperature"] in (28.0, None)
