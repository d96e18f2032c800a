"""Output formatters for suggestions and forecasts."""

import json
from datetime import UTC, datetime, tzinfo

from weathersearch.errors import ProjectionFailure
from weathersearch.ingest.forecast_client import TEMPERATURE_UNIT, WIND_SPEED_UNIT
from weathersearch.models.forecast import DailyBlock, ForecastResult, HourlyBlock
from weathersearch.models.location import Suggestion
from weathersearch.models.weather_codes import describe
from weathersearch.projection.daily_window import local_date, resolve_timezone

ATTRIBUTION = "Weather data from Open-Meteo (https://open-meteo.com/)"
TEMPERATURE_SYMBOL = "°F" if TEMPERATURE_UNIT == "fahrenheit" else "°C"


def format_suggestions(suggestions: tuple[Suggestion, ...] | list[Suggestion]) -> str:
    """Numbered suggestion list, 1-based."""
    if not suggestions:
        return "No matching locations"
    return "\n".join(f"{i}. {s.label}" for i, s in enumerate(suggestions, 1))


def format_coordinates(forecast: ForecastResult) -> str:
    return f"{forecast.latitude:.2f}°N, {forecast.longitude:.2f}°E"


def format_current(forecast: ForecastResult) -> str:
    c = forecast.current
    entry = describe(c.weather_code)
    return "\n".join([
        f"{c.temperature}{TEMPERATURE_SYMBOL}",
        f"{entry.icon} {entry.description}",
        f"Wind: {c.wind_speed} {WIND_SPEED_UNIT}",
    ])


def format_hour(stamp: str, tz: tzinfo) -> str:
    """'HH:00' for an hourly timestamp, in the location timezone."""
    try:
        dt = datetime.fromisoformat(stamp)
    except (TypeError, ValueError):
        return str(stamp)
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return f"{dt.hour:02d}:00"


def format_day(stamp: str, tz: tzinfo) -> str:
    """'Mon, Jan 1' for a daily timestamp."""
    try:
        d = local_date(stamp, tz)
    except ProjectionFailure:
        return str(stamp)
    return f"{d:%a}, {d:%b} {d.day}"


def format_hourly(hourly: HourlyBlock, tz: tzinfo) -> str:
    lines = [f"{len(hourly)}-Hour Forecast"]
    for time, temp, code in zip(hourly.time, hourly.temperature, hourly.weather_code):
        entry = describe(code)
        lines.append(
            f"  {format_hour(time, tz)}  {temp}{TEMPERATURE_SYMBOL}  "
            f"{entry.description} {entry.icon}"
        )
    return "\n".join(lines)


def format_daily(daily: DailyBlock, tz: tzinfo) -> str:
    lines = ["Week Forecast"]
    for time, code, t_max, t_min in zip(
        daily.time, daily.weather_code, daily.temperature_max, daily.temperature_min
    ):
        entry = describe(code)
        lines.append(
            f"  {format_day(time, tz)}  {entry.icon} {entry.description}  "
            f"{t_max}°/{t_min}°"
        )
    return "\n".join(lines)


def format_forecast_text(
    forecast: ForecastResult,
    hourly: HourlyBlock,
    daily: DailyBlock,
    label: str = "",
) -> str:
    """Plain text rendering of a forecast: location, current, hourly, daily."""
    tz = _display_tz(forecast)
    lines = []
    if label:
        lines.append(label)
    lines.extend([
        format_coordinates(forecast),
        "",
        format_current(forecast),
        "",
        format_hourly(hourly, tz),
        "",
        format_daily(daily, tz),
        "",
        ATTRIBUTION,
    ])
    return "\n".join(lines)


def format_forecast_json(
    forecast: ForecastResult,
    hourly: HourlyBlock,
    daily: DailyBlock,
    label: str = "",
) -> str:
    """JSON rendering for programmatic consumption."""
    tz = _display_tz(forecast)
    current = describe(forecast.current.weather_code)
    data = {
        "location": label,
        "latitude": forecast.latitude,
        "longitude": forecast.longitude,
        "timezone": forecast.timezone,
        "current": {
            "time": forecast.current.time,
            "temperature": forecast.current.temperature,
            "weather_code": forecast.current.weather_code,
            "description": current.description,
            "icon": current.icon,
            "wind_speed": forecast.current.wind_speed,
        },
        "hourly": [
            {
                "time": time,
                "hour": format_hour(time, tz),
                "temperature": temp,
                "weather_code": code,
                "description": describe(code).description,
            }
            for time, temp, code in zip(
                hourly.time, hourly.temperature, hourly.weather_code
            )
        ],
        "daily": [
            {
                "time": time,
                "label": format_day(time, tz),
                "weather_code": code,
                "description": describe(code).description,
                "temperature_max": t_max,
                "temperature_min": t_min,
            }
            for time, code, t_max, t_min in zip(
                daily.time,
                daily.weather_code,
                daily.temperature_max,
                daily.temperature_min,
            )
        ],
        "units": {"temperature": TEMPERATURE_UNIT, "wind_speed": WIND_SPEED_UNIT},
        "attribution": ATTRIBUTION,
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def _display_tz(forecast: ForecastResult) -> tzinfo:
    try:
        return resolve_timezone(forecast.timezone, forecast.utc_offset_seconds)
    except ProjectionFailure:
        return UTC
