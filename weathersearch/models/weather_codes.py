"""WMO weather interpretation codes used by Open-Meteo."""

import logging
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherCodeEntry:
    description: str
    icon: str


UNKNOWN = WeatherCodeEntry("Unknown", "❔")

WEATHER_CODES: dict[int, WeatherCodeEntry] = {
    0: WeatherCodeEntry("Clear sky", "☀️"),
    1: WeatherCodeEntry("Mainly clear", "🌤️"),
    2: WeatherCodeEntry("Partly cloudy", "⛅"),
    3: WeatherCodeEntry("Overcast", "☁️"),
    45: WeatherCodeEntry("Fog", "🌫️"),
    48: WeatherCodeEntry("Rime fog", "🌫️"),
    51: WeatherCodeEntry("Light drizzle", "🌧️"),
    53: WeatherCodeEntry("Moderate drizzle", "🌧️"),
    55: WeatherCodeEntry("Dense drizzle", "🌧️"),
    56: WeatherCodeEntry("Light freezing drizzle", "🌨️"),
    57: WeatherCodeEntry("Dense freezing drizzle", "🌨️"),
    61: WeatherCodeEntry("Slight rain", "🌦️"),
    63: WeatherCodeEntry("Moderate rain", "🌧️"),
    65: WeatherCodeEntry("Heavy rain", "🌧️"),
    66: WeatherCodeEntry("Light freezing rain", "🌨️"),
    67: WeatherCodeEntry("Heavy freezing rain", "🌨️"),
    71: WeatherCodeEntry("Slight snow", "❄️"),
    73: WeatherCodeEntry("Moderate snow", "❄️"),
    75: WeatherCodeEntry("Heavy snow", "❄️"),
    77: WeatherCodeEntry("Snow grains", "🌨️"),
    80: WeatherCodeEntry("Slight rain showers", "🌦️"),
    81: WeatherCodeEntry("Moderate rain showers", "🌧️"),
    82: WeatherCodeEntry("Violent rain showers", "🌧️"),
    85: WeatherCodeEntry("Slight snow showers", "🌨️"),
    86: WeatherCodeEntry("Heavy snow showers", "🌨️"),
    95: WeatherCodeEntry("Thunderstorm", "⛈️"),
    96: WeatherCodeEntry("Thunderstorm with hail", "⛈️"),
    99: WeatherCodeEntry("Heavy thunderstorm with hail", "⛈️"),
}


def describe(code: int | None) -> WeatherCodeEntry:
    """Look up a weather code, falling back to UNKNOWN for unmapped codes."""
    entry = WEATHER_CODES.get(code) if code is not None else None
    if entry is None:
        _warn_unknown(code)
        return UNKNOWN
    return entry


@lru_cache(maxsize=None)
def _warn_unknown(code: int | None) -> None:
    # Cached so each distinct code is logged once per process
    logger.warning("Unknown weather code %r, showing placeholder", code)
