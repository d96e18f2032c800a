"""Debounced place suggestions from the geocoding service."""

import asyncio
import logging
import math
from dataclasses import dataclass

from weathersearch.errors import SuggestionServiceError
from weathersearch.ingest.geocoding_client import GeocodingClient
from weathersearch.models.location import Coordinates, Suggestion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuggestionResult:
    query: str
    suggestions: tuple[Suggestion, ...] = ()
    error: str | None = None


class SuggestionResolver:
    """Turns free-text queries into at most one suggestion list per quiet window.

    `schedule()` cancels any pending lookup before starting a new one, so a
    burst of keystrokes issues a single geocoding request for the final text.
    Must be called from a running event loop.
    """

    def __init__(
        self,
        client: GeocodingClient,
        debounce_seconds: float = 0.3,
        min_query_length: int = 2,
        count: int = 5,
        language: str = "en",
    ):
        self.client = client
        self.debounce_seconds = debounce_seconds
        self.min_query_length = min_query_length
        self.count = count
        self.language = language
        self._pending: asyncio.Task[SuggestionResult] | None = None

    @property
    def pending(self) -> asyncio.Task[SuggestionResult] | None:
        return self._pending

    def schedule(self, query: str) -> asyncio.Task[SuggestionResult]:
        """Start a debounced lookup, cancelling the previous one."""
        self.cancel()
        self._pending = asyncio.ensure_future(self._debounced(query))
        return self._pending

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _debounced(self, query: str) -> SuggestionResult:
        if self._too_short(query):
            return SuggestionResult(query=query)
        await asyncio.sleep(self.debounce_seconds)
        return await self.lookup(query)

    async def lookup(self, query: str) -> SuggestionResult:
        """Query the geocoder immediately. Service failures become an error result."""
        if self._too_short(query):
            return SuggestionResult(query=query)

        try:
            raw = await self.client.search(query, count=self.count, language=self.language)
        except SuggestionServiceError as e:
            return SuggestionResult(query=query, error=str(e))

        suggestions = tuple(
            s for s in (_parse_suggestion(r) for r in raw) if s is not None
        )
        if len(suggestions) < len(raw):
            logger.debug(
                "Dropped %d malformed geocoding results for %r",
                len(raw) - len(suggestions), query,
            )
        return SuggestionResult(query=query, suggestions=suggestions)

    def _too_short(self, query: str) -> bool:
        return len(query.strip()) < self.min_query_length


def select(suggestion: Suggestion) -> Coordinates:
    """Resolve a chosen suggestion to coordinates. Raises InvalidCoordinates."""
    return Coordinates.from_suggestion(suggestion)


def _parse_suggestion(raw: object) -> Suggestion | None:
    """Build a Suggestion from a geocoding result, or None if it is unusable."""
    if not isinstance(raw, dict) or not raw.get("name"):
        return None
    lat = _as_number(raw.get("latitude"))
    lon = _as_number(raw.get("longitude"))
    if lat is None or lon is None or abs(lat) > 90 or abs(lon) > 180:
        return None
    return Suggestion(
        id=raw.get("id", ""),
        name=raw["name"],
        admin1=raw.get("admin1") or None,
        country_code=raw.get("country_code", ""),
        latitude=raw["latitude"],
        longitude=raw["longitude"],
    )


def _as_number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
