"""Tests for the weather session controller."""

import asyncio
import copy
from datetime import UTC, datetime

import httpx
import pytest
import respx

from weathersearch.config.schema import AppConfig
from weathersearch.ingest.forecast_fetcher import parse_forecast
from weathersearch.models.location import Coordinates, Suggestion
from weathersearch.session.controller import WeatherSession
from weathersearch.tests.conftest import FORECAST_URL, GEO_URL

SPR_PAYLOAD = {
    "results": [
        {
            "id": 1,
            "name": "Springfield",
            "admin1": "Illinois",
            "country_code": "US",
            "latitude": 39.8,
            "longitude": -89.6,
        }
    ]
}


@pytest.fixture
def session(test_config: AppConfig) -> WeatherSession:
    return WeatherSession.from_config(test_config)


class FakeFetcher:
    """Returns a forecast per call; the first call is slow."""

    def __init__(self, payload: dict):
        self.payload = payload
        self.calls: list[Coordinates] = []

    async def fetch(self, coords: Coordinates):
        self.calls.append(coords)
        if len(self.calls) == 1:
            await asyncio.sleep(0.05)
        payload = copy.deepcopy(self.payload)
        payload["latitude"] = coords.latitude
        payload["longitude"] = coords.longitude
        return parse_forecast(payload)


class TestSearchAndSelect:
    @respx.mock
    def test_spr_scenario(self, session: WeatherSession, forecast_payload: dict):
        respx.get(GEO_URL).mock(return_value=httpx.Response(200, json=SPR_PAYLOAD))
        forecast_route = respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )

        async def scenario():
            session.input("Spr")
            state = await session.settle()
            assert len(state.suggestions) == 1
            assert session.select(state.suggestions[0])
            assert session.state.loading
            return await session.settle()

        state = asyncio.run(scenario())
        assert state.coordinates == Coordinates(39.8, -89.6)
        assert state.suggestions == ()
        assert state.query == "Springfield, Illinois US"
        assert state.forecast is not None
        assert state.forecast.timezone == "America/Chicago"
        assert not state.loading
        assert state.error == ""
        params = forecast_route.calls[0].request.url.params
        assert params["latitude"] == "39.8"
        assert params["longitude"] == "-89.6"

    @respx.mock
    def test_keystroke_burst_one_request(self, test_config: AppConfig):
        config = test_config.model_copy(
            update={"geocoding": test_config.geocoding.model_copy(update={"debounce_ms": 50})}
        )
        session = WeatherSession.from_config(config)
        route = respx.get(GEO_URL).mock(return_value=httpx.Response(200, json=SPR_PAYLOAD))

        async def burst():
            for text in ("S", "Sp", "Spr"):
                session.input(text)
                await asyncio.sleep(0.005)
            return await session.settle()

        state = asyncio.run(burst())
        assert route.call_count == 1
        assert route.calls[0].request.url.params["name"] == "Spr"
        assert state.query == "Spr"
        assert len(state.suggestions) == 1

    def test_short_query_empties_suggestions(self, session: WeatherSession):
        async def short():
            session.input("Spr")
            await session.settle()
            session.input("S")
            return await session.settle()

        with respx.mock(assert_all_called=False) as router:
            route = router.get(GEO_URL).mock(
                return_value=httpx.Response(200, json=SPR_PAYLOAD)
            )
            state = asyncio.run(short())
        assert route.call_count == 1
        assert state.suggestions == ()

    @respx.mock
    def test_geocoding_failure_surfaces_error(self, session: WeatherSession):
        respx.get(GEO_URL).mock(return_value=httpx.Response(500))

        async def failing():
            session.input("Spr")
            return await session.settle()

        state = asyncio.run(failing())
        assert state.suggestions == ()
        assert state.error == "Location service unavailable"

    @respx.mock
    def test_malformed_url_error_surfaces(self, session: WeatherSession):
        respx.get(GEO_URL).mock(side_effect=httpx.InvalidURL("Invalid host"))

        async def failing():
            session.input("Spr")
            return await session.settle()

        state = asyncio.run(failing())
        assert state.suggestions == ()
        assert state.error == "Location service unavailable"

    def test_invalid_selection_rejected(self, session: WeatherSession):
        bad = Suggestion(id=9, name="Nowhere", country_code="ZZ", latitude="x", longitude=0)

        assert session.select(bad) is False
        assert session.state.coordinates is None
        assert session.state.error == "Invalid location coordinates"
        assert not session.state.loading

    def test_select_first_without_suggestions(self, session: WeatherSession):
        assert session.select_first() is False


class TestForecastFetching:
    @respx.mock
    def test_incomplete_forecast(self, session: WeatherSession, forecast_payload: dict):
        payload = copy.deepcopy(forecast_payload)
        del payload["hourly"]
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=payload))

        async def run():
            session.select(Suggestion(id=1, name="S", country_code="US", latitude=1, longitude=2))
            return await session.settle()

        state = asyncio.run(run())
        assert state.forecast is None
        assert state.error == "Incomplete weather data received"
        assert not state.loading

    @respx.mock
    def test_service_error_reason(self, session: WeatherSession):
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(400, json={"error": True, "reason": "Parameter X invalid"})
        )

        async def run():
            session.select(Suggestion(id=1, name="S", country_code="US", latitude=1, longitude=2))
            return await session.settle()

        state = asyncio.run(run())
        assert state.forecast is None
        assert state.error == "Parameter X invalid"

    @respx.mock
    def test_malformed_url_error_clears_loading(self, session: WeatherSession):
        respx.get(FORECAST_URL).mock(side_effect=httpx.InvalidURL("Invalid host"))

        async def run():
            session.select(Suggestion(id=1, name="S", country_code="US", latitude=1, longitude=2))
            return await session.settle()

        state = asyncio.run(run())
        assert state.error == "Failed to fetch weather data"
        assert not state.loading
        assert state.can_refresh

    @respx.mock
    def test_refresh_refetches(self, session: WeatherSession, forecast_payload: dict):
        route = respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )

        async def run():
            session.select(Suggestion(id=1, name="S", country_code="US", latitude=1, longitude=2))
            assert session.refresh() is False  # still loading
            await session.settle()
            assert session.refresh() is True
            return await session.settle()

        state = asyncio.run(run())
        assert route.call_count == 2
        assert state.fetch_generation == 2
        assert state.forecast is not None

    def test_refresh_without_coordinates_is_noop(self, session: WeatherSession):
        assert session.refresh() is False
        assert session.state.fetch_generation == 0

    def test_latest_selection_wins(self, session: WeatherSession, forecast_payload: dict):
        fetcher = FakeFetcher(forecast_payload)
        session.fetcher = fetcher
        first = Suggestion(id=1, name="A", country_code="US", latitude=10, longitude=10)
        second = Suggestion(id=2, name="B", country_code="US", latitude=20, longitude=20)

        async def run():
            session.select(first)
            await asyncio.sleep(0)
            session.select(second)
            state = await session.settle()
            # give a stale response time to land, if any
            await asyncio.sleep(0.1)
            return state

        state = asyncio.run(run())
        assert len(fetcher.calls) == 2
        assert state.coordinates == Coordinates(20, 20)
        assert session.state.forecast.latitude == 20
        assert session.state.fetch_generation == 2

    @respx.mock
    def test_windows(self, session: WeatherSession, forecast_payload: dict):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=forecast_payload))

        async def run():
            session.select(Suggestion(id=1, name="S", country_code="US", latitude=1, longitude=2))
            await session.settle()

        asyncio.run(run())
        assert len(session.hourly_window()) == 24
        window = session.daily_window(now=datetime(2024, 1, 2, 18, 0, tzinfo=UTC))
        assert window.time[0] == "2024-01-02"
        assert len(window) == 6

    def test_windows_without_forecast(self, session: WeatherSession):
        assert len(session.hourly_window()) == 0
        assert len(session.daily_window()) == 0


class TestClose:
    def test_close_cancels_pending(self, session: WeatherSession, forecast_payload: dict):
        fetcher = FakeFetcher(forecast_payload)
        session.fetcher = fetcher

        async def run():
            session.select(Suggestion(id=1, name="A", country_code="US", latitude=1, longitude=1))
            await asyncio.sleep(0)
            await session.close()

        asyncio.run(run())
        assert session.state.forecast is None
        assert session.resolver.pending is None
