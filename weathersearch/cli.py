"""CLI entry point for the weather search client."""

import argparse
import asyncio
import logging

from weathersearch.config.loader import get_config_value, load_config
from weathersearch.config.schema import AppConfig
from weathersearch.errors import ForecastError, InvalidCoordinates
from weathersearch.models.location import Coordinates
from weathersearch.projection.daily_window import project_forecast
from weathersearch.reporting.formatters import (
    format_forecast_json,
    format_forecast_text,
    format_suggestions,
)
from weathersearch.session.controller import WeatherSession

INTERACTIVE_HELP = (
    "Type a place name to search, a number to pick a suggestion, "
    "an empty line for the first one, 'r' to refresh, 'q' to quit."
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weathersearch",
        description="Search places and show Open-Meteo weather forecasts",
    )
    parser.add_argument("--config", default=None, help="Config YAML path")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # search
    search_p = sub.add_parser("search", help="List matching places")
    search_p.add_argument("query", help="Place name")

    # forecast
    forecast_p = sub.add_parser("forecast", help="Show the forecast for a place")
    forecast_p.add_argument("query", help="Place name")
    forecast_p.add_argument(
        "--pick", type=int, default=1, help="Suggestion number to use (1-based)"
    )
    forecast_p.add_argument("--json", action="store_true", help="JSON output")

    # coords
    coords_p = sub.add_parser("coords", help="Show the forecast for coordinates")
    coords_p.add_argument("latitude")
    coords_p.add_argument("longitude")
    coords_p.add_argument("--json", action="store_true", help="JSON output")

    # interactive
    sub.add_parser("interactive", help="Search-as-you-type session")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display effective config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. geocoding.debounce_ms")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    config = load_config(args.config)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.logging.level.value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "search":
        return asyncio.run(_cmd_search(config, args))
    elif args.command == "forecast":
        return asyncio.run(_cmd_forecast(config, args))
    elif args.command == "coords":
        return asyncio.run(_cmd_coords(config, args))
    elif args.command == "interactive":
        return asyncio.run(_cmd_interactive(config))
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


async def _cmd_search(config: AppConfig, args) -> int:
    session = WeatherSession.from_config(config)
    result = await session.resolver.lookup(args.query)
    if result.error:
        print(f"Error: {result.error}")
        return 1
    print(format_suggestions(result.suggestions))
    return 0


async def _cmd_forecast(config: AppConfig, args) -> int:
    session = WeatherSession.from_config(config)
    try:
        session.input(args.query)
        state = await session.settle()
        if state.error:
            print(f"Error: {state.error}")
            return 1
        if not state.suggestions:
            print(f"No matching locations for {args.query!r}")
            return 1
        if not 1 <= args.pick <= len(state.suggestions):
            print(f"Error: --pick must be between 1 and {len(state.suggestions)}")
            return 1
        if not session.select(state.suggestions[args.pick - 1]):
            print(f"Error: {session.state.error}")
            return 1
        state = await session.settle()
    finally:
        await session.close()

    if state.forecast is None:
        print(f"Error: {state.error}")
        return 1
    render = format_forecast_json if args.json else format_forecast_text
    print(render(
        state.forecast,
        session.hourly_window(),
        session.daily_window(),
        label=state.location_label,
    ))
    return 0


async def _cmd_coords(config: AppConfig, args) -> int:
    try:
        coords = Coordinates.parse(args.latitude, args.longitude)
    except InvalidCoordinates as e:
        print(f"Error: {e}")
        return 1

    session = WeatherSession.from_config(config)
    try:
        forecast = await session.fetcher.fetch(coords)
    except ForecastError as e:
        print(f"Error: {e}")
        return 1

    render = format_forecast_json if args.json else format_forecast_text
    print(render(
        forecast,
        forecast.hourly.head(config.display.hourly_hours),
        project_forecast(forecast, days=config.display.window_days),
    ))
    return 0


async def _cmd_interactive(config: AppConfig) -> int:
    session = WeatherSession.from_config(config)
    print(INTERACTIVE_HELP)
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            line = line.strip()

            if line == "q":
                break
            elif line == "r":
                if not session.refresh():
                    print("Nothing to refresh yet")
                    continue
            elif line == "":
                if not session.select_first():
                    print("No suggestions to pick from")
                    continue
            elif line.isdigit() and session.state.suggestions:
                index = int(line) - 1
                if not 0 <= index < len(session.state.suggestions):
                    print(f"Pick 1-{len(session.state.suggestions)}")
                    continue
                session.select(session.state.suggestions[index])
            else:
                session.input(line)

            state = await session.settle()
            _print_state(session, state)
    finally:
        await session.close()
    return 0


def _print_state(session: WeatherSession, state) -> None:
    if state.error:
        print(f"Error: {state.error}")
    if state.suggestions:
        print(format_suggestions(state.suggestions))
    elif state.forecast is not None and state.query == state.location_label:
        print(format_forecast_text(
            state.forecast,
            session.hourly_window(),
            session.daily_window(),
            label=state.location_label,
        ))


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            print(get_config_value(config, args.key))
            return 0
        except KeyError as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config get KEY")
        return 1
