"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field

GEOCODING_BASE_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_BASE_URL = "https://api.open-meteo.com/v1/forecast"


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class GeocodingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = GEOCODING_BASE_URL
    count: int = Field(default=5, ge=1, le=100)
    language: str = "en"
    min_query_length: int = Field(default=2, ge=0)
    debounce_ms: int = Field(default=300, ge=0)
    timeout: float = Field(default=10.0, gt=0.0)
    max_retries: int = Field(default=0, ge=0)
    retry_base_delay: float = Field(default=0.5, ge=0.0)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = FORECAST_BASE_URL
    timeout: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=1.0, ge=0.0)


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    window_days: int = Field(default=7, ge=1, le=16)
    hourly_hours: int = Field(default=24, ge=1, le=384)


class LoggingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    level: LogLevel = LogLevel.WARNING


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    geocoding: GeocodingConfig = GeocodingConfig()
    forecast: ForecastConfig = ForecastConfig()
    display: DisplayConfig = DisplayConfig()
    logging: LoggingConfig = LoggingConfig()
