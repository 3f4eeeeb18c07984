from __future__ import annotations

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from weatherlive.clients.http import AsyncHttpClient
from weatherlive.core.config import Settings
from weatherlive.factory import create_app
from weatherlive.models.report import WeatherReport
from weatherlive.services.images import ImageSlot
from weatherlive.services.weather import WeatherQueryService
from tests.fakes import (
    ICON_URL,
    WEATHER_QUERY_URL,
    ChangeLog,
    FakeServer,
    RecordingImageFetcher,
    make_png_bytes,
)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        log_level="DEBUG",
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        weather_query_url=WEATHER_QUERY_URL,
        weather_query_suffix=".xml",
        weather_user_agent="test-agent",
        weather_timeout_seconds=1.0,
    )


@pytest.fixture()
def server() -> FakeServer:
    server = FakeServer()
    server.add(ICON_URL, content=make_png_bytes())
    return server


@pytest_asyncio.fixture()
async def http(server: FakeServer):
    client = AsyncHttpClient(
        user_agent="test-agent", timeout_seconds=1.0, transport=server.transport
    )
    yield client
    await client.aclose()


@pytest.fixture()
def report() -> WeatherReport:
    return WeatherReport()


@pytest.fixture()
def changes(report: WeatherReport) -> ChangeLog:
    return ChangeLog(report)


@pytest.fixture()
def icon_calls() -> list[str]:
    return []


@pytest.fixture()
def image_slot() -> ImageSlot:
    return ImageSlot()


@pytest.fixture()
def service(
    http: AsyncHttpClient,
    report: WeatherReport,
    image_slot: ImageSlot,
    icon_calls: list[str],
) -> WeatherQueryService:
    return WeatherQueryService(
        http=http,
        image_sink=image_slot,
        query_url=WEATHER_QUERY_URL,
        report=report,
        image_fetcher_factory=lambda pending: RecordingImageFetcher(icon_calls),
    )


@pytest.fixture()
def client(settings: Settings, server: FakeServer) -> TestClient:
    app = create_app(settings, transport=server.transport)
    with TestClient(app) as client:
        yield client
