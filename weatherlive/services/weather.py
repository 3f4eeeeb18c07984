from __future__ import annotations

import asyncio
import functools
import logging
from typing import Callable

from weatherlive.clients.http import AsyncHttpClient
from weatherlive.clients.wunderground import build_query_url, parse_current_observation
from weatherlive.core.errors import (
    CityValidationError,
    EmptyResponseError,
    TransportError,
    WeatherLiveError,
)
from weatherlive.models.report import WeatherReport
from weatherlive.models.weather import HttpResult
from weatherlive.services.images import (
    ImageFetcher,
    ImageSink,
    PendingReplies,
    drain_replies,
)

logger = logging.getLogger(__name__)


class WeatherQueryService:
    """Runs live weather queries and publishes the outcome on a ``WeatherReport``.

    ``request`` is synchronous: it resets the report, marks it active and
    schedules the GET on the running event loop. ``on_response`` runs as the
    task's done callback on the same loop thread and is the only other writer
    of the report.

    Outstanding requests are never cancelled. A late reply to an older request
    still writes into the report, even after a newer request was issued.
    """

    def __init__(
        self,
        *,
        http: AsyncHttpClient,
        image_sink: ImageSink,
        query_url: str,
        query_suffix: str = ".xml",
        report: WeatherReport | None = None,
        image_fetcher_factory: Callable[[PendingReplies], ImageFetcher] | None = None,
    ) -> None:
        self._http = http
        self._image_sink = image_sink
        self._query_url = query_url
        self._query_suffix = query_suffix
        self._report = report or WeatherReport()
        self._image_fetcher_factory = image_fetcher_factory or (
            lambda pending: ImageFetcher(http, pending)
        )
        self._pending: set[asyncio.Task[HttpResult]] = set()
        self._icon_replies: PendingReplies = set()

    @property
    def report(self) -> WeatherReport:
        return self._report

    def request(self, city: str) -> None:
        try:
            city = _validate_city(city)
        except CityValidationError as e:
            self._fail(e)
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("request(%r) called without a running event loop", city)
            self._report.reset()
            self._fail(TransportError(0))
            return

        self._report.reset()
        self._report.active = True

        url = build_query_url(self._query_url, city, self._query_suffix)
        logger.info("Requesting weather for %r", city)
        task = loop.create_task(self._http.get(url))
        self._pending.add(task)
        task.add_done_callback(functools.partial(self._on_task_done, url))

    request_weather_data = request

    def on_response(self, result: HttpResult) -> None:
        try:
            self._process_response(result)
        except WeatherLiveError as e:
            self._fail(e)

    async def join(self) -> None:
        """Wait until every issued request and icon fetch has completed."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
            await asyncio.sleep(0)
        await drain_replies(self._icon_replies)

    def _on_task_done(self, url: str, task: asyncio.Task[HttpResult]) -> None:
        try:
            if task.cancelled():
                logger.debug("Weather request task was cancelled")
                return
            exc = task.exception()
            if exc is not None:
                logger.error("Weather request to %s raised", url, exc_info=exc)
                result = HttpResult(url=url, status_code=0, error=repr(exc))
            else:
                result = task.result()
            self.on_response(result)
        finally:
            self._pending.discard(task)

    def _process_response(self, result: HttpResult) -> None:
        if not result.ok:
            raise TransportError(result.status_code)

        blank = not result.text.strip()
        report = self._report
        report.error = ""
        report.succeeded = True

        if not blank:
            self._extract_weather_data(result.body)

        if blank:
            raise EmptyResponseError()

    def _extract_weather_data(self, body: bytes) -> None:
        logger.debug("response=%r", body)
        observation = parse_current_observation(body)

        report = self._report
        report.weather_description = observation.description
        report.temperature = observation.temperature_c
        report.temperature_feel_like = observation.feels_like_c
        report.humidity = observation.humidity
        report.wind_direction = observation.wind_direction
        report.wind_speed = observation.wind_speed_kph

        fetcher = self._image_fetcher_factory(self._icon_replies)
        if not fetcher.fetch(observation.icon_url, self._image_sink):
            logger.debug("Icon not requested for %r", observation.icon_url)

        report.active = False

    def _fail(self, error: WeatherLiveError) -> None:
        logger.warning("Weather query failed: %s", error)
        report = self._report
        report.succeeded = False
        report.active = False
        report.error = str(error)


def _validate_city(city: str) -> str:
    city = (city or "").strip()
    if not city:
        raise CityValidationError()
    return city
