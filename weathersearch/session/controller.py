"""Weather session: wires suggestions, selection and forecast fetches to the reducer."""

import asyncio
import logging
from datetime import datetime

from weathersearch.config.schema import AppConfig
from weathersearch.errors import ForecastError, InvalidCoordinates
from weathersearch.ingest.forecast_client import ForecastClient
from weathersearch.ingest.forecast_fetcher import ForecastFetcher
from weathersearch.ingest.geocoding_client import GeocodingClient
from weathersearch.ingest.suggestion_resolver import (
    SuggestionResolver,
    SuggestionResult,
    select,
)
from weathersearch.models.forecast import DailyBlock, HourlyBlock
from weathersearch.models.location import Coordinates, Suggestion
from weathersearch.projection.daily_window import DEFAULT_WINDOW_DAYS, project_forecast
from weathersearch.session.state import (
    Event,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    LocationSelected,
    QueryChanged,
    SelectionRejected,
    SessionState,
    SuggestionsArrived,
    SuggestionsFailed,
    reduce,
)

logger = logging.getLogger(__name__)


class WeatherSession:
    """Single-user session driven from one asyncio event loop.

    Every mutation goes through `dispatch()`; forecast responses carry the
    generation they were issued under and stale ones are dropped by the
    reducer.
    """

    def __init__(
        self,
        resolver: SuggestionResolver,
        fetcher: ForecastFetcher,
        window_days: int = DEFAULT_WINDOW_DAYS,
        hourly_hours: int = 24,
    ):
        self.resolver = resolver
        self.fetcher = fetcher
        self.window_days = window_days
        self.hourly_hours = hourly_hours
        self.state = SessionState()
        self._generation = 0
        self._fetch_task: asyncio.Task[None] | None = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "WeatherSession":
        geo = config.geocoding
        resolver = SuggestionResolver(
            GeocodingClient(
                base_url=geo.base_url,
                timeout=geo.timeout,
                max_retries=geo.max_retries,
                retry_base_delay=geo.retry_base_delay,
            ),
            debounce_seconds=geo.debounce_ms / 1000,
            min_query_length=geo.min_query_length,
            count=geo.count,
            language=geo.language,
        )
        fc = config.forecast
        fetcher = ForecastFetcher(
            ForecastClient(
                base_url=fc.base_url,
                timeout=fc.timeout,
                max_retries=fc.max_retries,
                retry_base_delay=fc.retry_base_delay,
            )
        )
        return cls(
            resolver,
            fetcher,
            window_days=config.display.window_days,
            hourly_hours=config.display.hourly_hours,
        )

    def dispatch(self, event: Event) -> SessionState:
        self.state = reduce(self.state, event)
        return self.state

    # --- Search ---

    def input(self, text: str) -> None:
        """Record new query text and schedule a debounced suggestion lookup."""
        self.dispatch(QueryChanged(text))
        task = self.resolver.schedule(text)
        task.add_done_callback(self._on_suggestions)

    def _on_suggestions(self, task: asyncio.Task[SuggestionResult]) -> None:
        if task.cancelled():
            return
        result = task.result()
        if result.error is not None:
            logger.debug("Suggestion lookup failed for %r: %s", result.query, result.error)
            self.dispatch(SuggestionsFailed(result.query, result.error))
        else:
            self.dispatch(SuggestionsArrived(result.query, result.suggestions))

    def select(self, suggestion: Suggestion) -> bool:
        """Select a suggestion and start a forecast fetch. Returns False if rejected."""
        try:
            coords = select(suggestion)
        except InvalidCoordinates as e:
            logger.warning("Rejected selection %r: %s", suggestion.name, e)
            self.dispatch(SelectionRejected(str(e)))
            return False

        self.resolver.cancel()
        self.dispatch(LocationSelected(suggestion, coords))
        self._start_fetch()
        return True

    def select_first(self) -> bool:
        if not self.state.suggestions:
            return False
        return self.select(self.state.suggestions[0])

    # --- Forecast ---

    def refresh(self) -> bool:
        """Re-fetch for the current coordinates. No-op without coordinates or while loading."""
        if not self.state.can_refresh:
            return False
        self._start_fetch()
        return True

    def _start_fetch(self) -> None:
        coords = self.state.coordinates
        assert coords is not None
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        self._generation += 1
        generation = self._generation
        self.dispatch(FetchStarted(generation))
        self._fetch_task = asyncio.ensure_future(self._run_fetch(generation, coords))

    async def _run_fetch(self, generation: int, coords: Coordinates) -> None:
        try:
            forecast = await self.fetcher.fetch(coords)
        except ForecastError as e:
            logger.error("Forecast fetch failed (generation %d): %s", generation, e)
            self.dispatch(FetchFailed(generation, str(e)))
            return
        self.dispatch(FetchSucceeded(generation, forecast))

    # --- Lifecycle ---

    async def settle(self) -> SessionState:
        """Wait for the pending suggestion lookup and forecast fetch to finish."""
        pending = [
            t for t in (self.resolver.pending, self._fetch_task)
            if t is not None and not t.done()
        ]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        # let done-callbacks run
        await asyncio.sleep(0)
        return self.state

    async def close(self) -> None:
        self.resolver.cancel()
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
            try:
                await self._fetch_task
            except asyncio.CancelledError:
                pass
        self._fetch_task = None

    # --- Views ---

    def daily_window(self, now: datetime | None = None) -> DailyBlock:
        return project_forecast(self.state.forecast, now=now, days=self.window_days)

    def hourly_window(self) -> HourlyBlock:
        if self.state.forecast is None:
            return HourlyBlock()
        return self.state.forecast.hourly.head(self.hourly_hours)
