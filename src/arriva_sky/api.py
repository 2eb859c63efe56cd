"""HTTP surface for the sky payload."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .composer import PayloadComposer
from .config import Settings, load_settings
from .log_setup import setup_logger

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

logger = logging.getLogger("arriva_sky.api")


def get_composer(request: Request) -> PayloadComposer:
    return request.app.state.composer


def create_app(
    settings: Settings | None = None,
    composer: PayloadComposer | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    setup_logger()
    composer = composer or PayloadComposer.from_settings(settings)
    logger.info("Provider chain: %s", ", ".join(composer.chain.provider_names) or "(none)")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.composer.close()

    app = FastAPI(title="Arriva Sky API", version="0.1.0", lifespan=lifespan)
    app.state.composer = composer
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @app.api_route("/weather-astronomy", methods=["GET", "POST"])
    def weather_astronomy(
        payload_composer: PayloadComposer = Depends(get_composer),
    ) -> JSONResponse:
        try:
            return JSONResponse(payload_composer.get_payload().to_response())
        except Exception:
            # Covers composer overrides and payloads that cannot be encoded as JSON.
            logger.exception("Unhandled payload failure; serving default payload")
            payload_composer.cache.clear()
            return JSONResponse(payload_composer.default_payload().to_response())

    @app.get("/healthz")
    def healthz(payload_composer: PayloadComposer = Depends(get_composer)) -> dict:
        return {"status": "ok", "providers": payload_composer.chain.provider_names}

    return app
