from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentObservation:
    description: str = ""
    temperature_c: str = ""
    feels_like_c: str = ""
    humidity: str = ""
    wind_direction: str = ""
    wind_speed_kph: str = ""
    icon_url: str = ""


@dataclass(frozen=True)
class HttpResult:
    url: str
    status_code: int
    body: bytes = b""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
