from __future__ import annotations

import asyncio
import io
import logging
from typing import Callable, Protocol

import httpx
from PIL import Image

from weatherlive.clients.http import AsyncHttpClient
from weatherlive.core.errors import ImageFetchError
from weatherlive.models.weather import HttpResult

logger = logging.getLogger(__name__)

# Replies in flight, held until their completion callback has run.
PendingReplies = set[asyncio.Task[HttpResult]]


class ImageSink(Protocol):
    def set_image(self, image: Image.Image) -> None: ...


class ImageSlot:
    """Holds the most recently published icon and notifies subscribers."""

    def __init__(self) -> None:
        self._image: Image.Image | None = None
        self._observers: list[Callable[[Image.Image], None]] = []

    @property
    def image(self) -> Image.Image | None:
        return self._image

    def set_image(self, image: Image.Image) -> None:
        self._image = image
        for observer in list(self._observers):
            observer(image)

    def subscribe(self, observer: Callable[[Image.Image], None]) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def to_png(self) -> bytes | None:
        if self._image is None:
            return None
        buf = io.BytesIO()
        self._image.save(buf, format="PNG")
        return buf.getvalue()


def is_valid_image_url(url: str) -> bool:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.host)


def decode_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, Image.DecompressionBombError) as e:
        raise ImageFetchError(f"Unable to decode image: {e}") from e
    return image


class ImageFetcher:
    """Fetches a single image and publishes it to a sink.

    One instance serves one ``fetch`` call. The reply task is kept in
    ``pending`` until its completion callback has run; the owner of that
    registry can await it with :func:`drain_replies`. Failures of any kind are
    logged and leave the sink untouched; nothing is raised to the caller.
    """

    def __init__(
        self, http: AsyncHttpClient | None, pending: PendingReplies | None = None
    ) -> None:
        self._http = http
        self._pending: PendingReplies = set() if pending is None else pending
        self._sink: ImageSink | None = None

    def fetch(self, url: str, sink: ImageSink) -> bool:
        if not is_valid_image_url(url):
            logger.debug("Skipping icon fetch for invalid URL %r", url)
            return False
        if self._http is None:
            return True

        self._sink = sink
        task = asyncio.get_running_loop().create_task(self._http.get(url))
        self._pending.add(task)
        task.add_done_callback(self._on_reply)
        return True

    def _on_reply(self, task: asyncio.Task[HttpResult]) -> None:
        try:
            if task.cancelled():
                return
            exc = task.exception()
            if exc is not None:
                raise ImageFetchError(f"icon request raised {exc!r}") from exc
            self._publish(task.result())
        except ImageFetchError as e:
            logger.warning("Icon fetch failed: %s", e)
        finally:
            self._pending.discard(task)
            self._sink = None

    def _publish(self, result: HttpResult) -> None:
        if not result.ok:
            raise ImageFetchError(f"{result.url}: {result.error}")
        if not result.body:
            logger.debug("Icon reply from %s was empty", result.url)
            return
        image = decode_image(result.body)
        if self._sink is not None:
            self._sink.set_image(image)


async def drain_replies(pending: PendingReplies) -> None:
    while pending:
        await asyncio.gather(*list(pending), return_exceptions=True)
        # let the done callbacks run
        await asyncio.sleep(0)
