"""Open-Meteo forecast API client."""

import logging

import httpx

from weathersearch import __version__
from weathersearch.config.schema import FORECAST_BASE_URL
from weathersearch.errors import ForecastServiceError
from weathersearch.ingest.retry import get_with_retry

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"weathersearch/{__version__}"
DEFAULT_FAILURE = "Failed to fetch weather data"

CURRENT_VARIABLES = ("temperature_2m", "weather_code", "wind_speed_10m")
HOURLY_VARIABLES = ("temperature_2m", "weather_code")
DAILY_VARIABLES = ("weather_code", "temperature_2m_max", "temperature_2m_min")
TEMPERATURE_UNIT = "fahrenheit"
WIND_SPEED_UNIT = "mph"


class ForecastClient:
    def __init__(
        self,
        base_url: str = FORECAST_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        max_retries: int = 2,
        retry_base_delay: float = 1.0,
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    async def get_forecast(self, latitude: float, longitude: float) -> dict:
        """Fetch current, hourly and daily weather for a coordinate pair.

        Units are Fahrenheit and mph; the timezone is inferred server-side.
        Raises ForecastServiceError on transport failure, non-success status
        or a body carrying `error: true`, using the body's `reason` if given.
        """
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": ",".join(CURRENT_VARIABLES),
            "hourly": ",".join(HOURLY_VARIABLES),
            "daily": ",".join(DAILY_VARIABLES),
            "temperature_unit": TEMPERATURE_UNIT,
            "wind_speed_unit": WIND_SPEED_UNIT,
            "timezone": "auto",
        }
        try:
            resp = await get_with_retry(
                self.base_url,
                params,
                timeout=self.timeout,
                max_retries=self.max_retries,
                retry_base_delay=self.retry_base_delay,
                headers={"User-Agent": self.user_agent},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Forecast request failed for %s,%s: %s", latitude, longitude, e)
            raise ForecastServiceError(DEFAULT_FAILURE) from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            logger.error("Forecast API %d returned a non-object body", resp.status_code)
            raise ForecastServiceError(DEFAULT_FAILURE, resp.status_code)

        if not resp.is_success or data.get("error"):
            reason = data.get("reason") or DEFAULT_FAILURE
            logger.error("Forecast API %d: %s", resp.status_code, reason)
            raise ForecastServiceError(reason, resp.status_code)

        return data
