"""Open-Meteo geocoding API client."""

import logging

import httpx

from weathersearch import __version__
from weathersearch.config.schema import GEOCODING_BASE_URL
from weathersearch.errors import SuggestionServiceError
from weathersearch.ingest.retry import get_with_retry

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"weathersearch/{__version__}"
SERVICE_UNAVAILABLE = "Location service unavailable"


class GeocodingClient:
    def __init__(
        self,
        base_url: str = GEOCODING_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        max_retries: int = 0,
        retry_base_delay: float = 0.5,
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    async def search(
        self, name: str, count: int = 5, language: str = "en"
    ) -> list[dict]:
        """Search places by name. Returns the raw `results` list, empty if none.

        Raises SuggestionServiceError on transport failure, non-success
        status or an undecodable body.
        """
        params = {"name": name, "count": count, "language": language, "format": "json"}
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
            logger.error("Geocoding request failed for name=%r: %s", name, e)
            raise SuggestionServiceError(SERVICE_UNAVAILABLE) from e

        if not resp.is_success:
            logger.error("Geocoding API %d for name=%r", resp.status_code, name)
            raise SuggestionServiceError(SERVICE_UNAVAILABLE, resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Geocoding API returned invalid JSON for name=%r", name)
            raise SuggestionServiceError(SERVICE_UNAVAILABLE, resp.status_code) from e

        results = data.get("results") if isinstance(data, dict) else None
        return results if isinstance(results, list) else []
