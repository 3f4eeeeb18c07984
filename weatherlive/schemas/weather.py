from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WeatherRequest(BaseModel):
    city: str = Field(default="", max_length=128)


class WeatherState(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    weather_description: str = ""
    temperature: str = ""
    temperature_feel_like: str = ""
    humidity: str = ""
    wind_direction: str = ""
    wind_speed: str = ""
    active: bool = False
    succeeded: bool = False
    error: str = ""
