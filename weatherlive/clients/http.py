from __future__ import annotations

import logging

import httpx

from weatherlive.models.weather import HttpResult

logger = logging.getLogger(__name__)


class AsyncHttpClient:
    """Async GET over ``httpx`` that reports failures as values.

    ``get`` never raises for network or HTTP-status problems. The caller
    inspects ``HttpResult.error`` instead. Each response is streamed inside
    ``async with`` so the connection is released on every exit path.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str) -> HttpResult:
        try:
            async with self._client.stream("GET", url) as resp:
                body = await resp.aread()
                status_code = resp.status_code
                success = resp.is_success
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("GET %s failed: %s", url, e)
            return HttpResult(url=url, status_code=0, error=str(e) or type(e).__name__)

        if not success:
            logger.warning("GET %s returned HTTP %s", url, status_code)
            return HttpResult(
                url=url, status_code=status_code, body=body, error=f"HTTP {status_code}"
            )
        return HttpResult(url=url, status_code=status_code, body=body)
