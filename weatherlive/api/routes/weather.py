from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from weatherlive.api.deps import get_image_slot, get_weather_service
from weatherlive.schemas.weather import WeatherRequest, WeatherState
from weatherlive.services.images import ImageSlot
from weatherlive.services.weather import WeatherQueryService

router = APIRouter(prefix="/weather")


@router.get("", response_model=WeatherState)
async def current_weather(
    service: Annotated[WeatherQueryService, Depends(get_weather_service)],
) -> WeatherState:
    return WeatherState.model_validate(service.report.snapshot())


@router.post("/request", response_model=WeatherState)
async def request_weather(
    payload: WeatherRequest,
    service: Annotated[WeatherQueryService, Depends(get_weather_service)],
    wait: bool = False,
) -> WeatherState:
    service.request_weather_data(payload.city)
    if wait:
        await service.join()
    return WeatherState.model_validate(service.report.snapshot())


@router.get("/icon")
async def weather_icon(slot: Annotated[ImageSlot, Depends(get_image_slot)]) -> Response:
    data = slot.to_png()
    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No icon yet")
    return Response(content=data, media_type="image/png")
