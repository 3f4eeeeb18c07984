from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_WEATHER_QUERY_URL = (
    "http://api.wunderground.com/api/your-api-key/geolookup/conditions/forecast/q/Germany/"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="WEATHERLIVE_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    host: str = Field(default="0.0.0.0", min_length=1)
    port: int = Field(default=8000, ge=1, le=65535)

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    weather_query_url: str = Field(default=DEFAULT_WEATHER_QUERY_URL, min_length=8)
    weather_query_suffix: str = Field(default=".xml", max_length=32)
    weather_user_agent: str = Field(
        default="weatherlive/0.1 (contact: you@example.com)",
        min_length=3,
        max_length=256,
    )
    weather_timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)
    icon_fetch_enabled: bool = Field(default=True)

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings
