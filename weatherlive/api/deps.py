from __future__ import annotations

from fastapi import Request

from weatherlive.services.images import ImageSlot
from weatherlive.services.weather import WeatherQueryService


async def get_weather_service(request: Request) -> WeatherQueryService:
    return request.app.state.weather_service


async def get_image_slot(request: Request) -> ImageSlot:
    return request.app.state.image_slot
