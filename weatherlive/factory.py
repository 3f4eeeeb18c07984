from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from weatherlive.api.router import api_router
from weatherlive.clients.http import AsyncHttpClient
from weatherlive.core.config import Settings, load_settings
from weatherlive.core.logging import configure_logging
from weatherlive.services.images import ImageFetcher, ImageSlot
from weatherlive.services.weather import WeatherQueryService

logger = logging.getLogger(__name__)


def _log_change(name: str, value: Any) -> None:
    logger.debug("%s changed: %r", name, value)


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        http = AsyncHttpClient(
            user_agent=settings.weather_user_agent,
            timeout_seconds=settings.weather_timeout_seconds,
            transport=transport,
        )
        icon_http = http if settings.icon_fetch_enabled else None
        image_slot = ImageSlot()
        service = WeatherQueryService(
            http=http,
            image_sink=image_slot,
            query_url=settings.weather_query_url,
            query_suffix=settings.weather_query_suffix,
            image_fetcher_factory=lambda pending: ImageFetcher(icon_http, pending),
        )
        unsubscribe = service.report.subscribe(_log_change)

        app.state.http_client = http
        app.state.image_slot = image_slot
        app.state.weather_service = service

        yield
        unsubscribe()
        await service.join()
        await http.aclose()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="Weather Live API",
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.get("/", tags=["meta"])
    def root():
        return {"name": "weatherlive", "status": "ok"}

    app.include_router(api_router)
    return app
