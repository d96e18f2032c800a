"""Forecast fetcher: retrieves and validates Open-Meteo forecasts for coordinates."""

import logging

from weathersearch.errors import IncompleteForecastData
from weathersearch.ingest.forecast_client import ForecastClient
from weathersearch.models.common import utc_now_iso
from weathersearch.models.forecast import (
    CurrentConditions,
    DailyBlock,
    ForecastResult,
    HourlyBlock,
)
from weathersearch.models.location import Coordinates

logger = logging.getLogger(__name__)

INCOMPLETE_DATA = "Incomplete weather data received"


class ForecastFetcher:
    def __init__(self, client: ForecastClient):
        self.client = client

    async def fetch(self, coords: Coordinates) -> ForecastResult:
        """Fetch the forecast for a coordinate pair.

        Raises ForecastServiceError for transport/service failures and
        IncompleteForecastData when a required block is missing or malformed.
        """
        raw = await self.client.get_forecast(coords.latitude, coords.longitude)
        forecast = parse_forecast(raw)
        logger.info(
            "Fetched forecast for %.2f,%.2f (%s): %d hourly, %d daily entries",
            forecast.latitude, forecast.longitude, forecast.timezone,
            len(forecast.hourly), len(forecast.daily),
        )
        return forecast


def parse_forecast(raw: dict) -> ForecastResult:
    """Validate a raw forecast response into a ForecastResult. Raises IncompleteForecastData."""
    current = raw.get("current")
    hourly = raw.get("hourly")
    daily = raw.get("daily")
    if not current or not hourly or not daily:
        missing = [k for k in ("current", "hourly", "daily") if not raw.get(k)]
        logger.warning("Forecast response missing blocks: %s", missing)
        raise IncompleteForecastData(INCOMPLETE_DATA)

    try:
        return ForecastResult(
            latitude=float(raw["latitude"]),
            longitude=float(raw["longitude"]),
            timezone=str(raw.get("timezone") or "GMT"),
            utc_offset_seconds=raw.get("utc_offset_seconds"),
            current=CurrentConditions(
                time=current.get("time", ""),
                temperature=current["temperature_2m"],
                weather_code=current["weather_code"],
                wind_speed=current["wind_speed_10m"],
            ),
            hourly=HourlyBlock(
                time=tuple(hourly["time"]),
                temperature=tuple(hourly["temperature_2m"]),
                weather_code=tuple(hourly["weather_code"]),
            ),
            daily=DailyBlock(
                time=tuple(daily["time"]),
                weather_code=tuple(daily["weather_code"]),
                temperature_max=tuple(daily["temperature_2m_max"]),
                temperature_min=tuple(daily["temperature_2m_min"]),
            ),
            fetched_at=utc_now_iso(),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Malformed forecast response: %s", e)
        raise IncompleteForecastData(INCOMPLETE_DATA) from e
