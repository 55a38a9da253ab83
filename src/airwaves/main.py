"""Airwaves - talk to an AI air traffic controller from the terminal.

The terminal stands in for the host game's UI: "tune" selects a frequency
(defaulting to the nearest airport) and anything else is transmitted to the
tuned controller.

Typical usage:
    airwaves --airports data/airports.json --position 40.64 -73.78
    airwaves --debug
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from airwaves.airports.directory import AirportDirectory
from airwaves.core.event_bus import MESSAGE_REQUESTED, TUNE_REQUESTED, EventBus
from airwaves.core.logging_system import get_logger, initialize_logging
from airwaves.exceptions import ATCError
from airwaves.navigation.geolocation import Position
from airwaves.services.atc.conversation import ConversationStore
from airwaves.services.atc.dialogue_engine import DialogueEngine
from airwaves.services.atc.game_state import StaticGameState
from airwaves.services.atc.presentation import ConsoleSink
from airwaves.services.atc.prompt import load_prompt_template
from airwaves.services.atc.session import ATCSession
from airwaves.services.weather.weather_feed import WeatherFeed
from airwaves.settings.atc_settings import ATCSettings
from airwaves.version import get_version

logger = get_logger(__name__)

AIRPORT_CACHE = Path.home() / ".airwaves" / "airports.json"

HELP_TEXT = """Commands:
  tune [ICAO]       set ATC frequency (default: nearest airport)
  pos LAT LON       move the aircraft
  where             show position and distance to the tuned airport
  quit              exit
Anything else is transmitted to the tuned controller."""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="AI ATC radio with live METAR")
    parser.add_argument("--airports", type=Path, help="Airport directory JSON file")
    parser.add_argument(
        "--position",
        nargs=2,
        type=float,
        metavar=("LAT", "LON"),
        help="Initial aircraft position (default: first airport in the directory)",
    )
    parser.add_argument("--settings", type=Path, help="Settings file to load")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"airwaves {get_version()}")
    return parser.parse_args(argv)


def load_directory(args: argparse.Namespace, settings: ATCSettings) -> AirportDirectory:
    directory = AirportDirectory()
    if args.airports is not None:
        loaded = directory.load(args.airports)
    else:
        loaded = directory.download(settings.airports_url, cache_path=AIRPORT_CACHE)

    if not loaded or len(directory) == 0:
        raise SystemExit("No airports available, cannot start the radio")
    return directory


def build_session(
    settings: ATCSettings, directory: AirportDirectory, position: Position
) -> tuple[ATCSession, StaticGameState]:
    """Wire a session from settings."""
    game_state = StaticGameState(directory, position)
    feed = WeatherFeed(settings.weather_url_template, timeout=settings.weather_timeout)
    conversations = ConversationStore(
        template=load_prompt_template(settings.persona_file),
        max_history=settings.max_history_messages,
    )
    engine = DialogueEngine(
        settings.chat_model,
        api_base=settings.chat_api_base,
        timeout=settings.chat_timeout,
    )
    session = ATCSession(
        game_state,
        feed,
        conversations,
        engine,
        sink=ConsoleSink(),
        range_limit_nm=settings.range_limit_nm,
        refresh_interval=settings.weather_refresh_seconds,
    )
    return session, game_state


async def handle_line(
    line: str, session: ATCSession, game_state: StaticGameState, bus: EventBus
) -> bool:
    """Handle one line of user input.

    Returns:
        False when the user asked to quit.
    """
    command, _, rest = line.partition(" ")
    command = command.lower()

    if command in ("quit", "exit", "q"):
        return False

    if command in ("help", "?"):
        print(HELP_TEXT)
    elif command == "tune":
        code = rest.strip() or session.nearest_airport().code
        for airport in await bus.publish(TUNE_REQUESTED, code):
            print(f"Radio tuned to {airport.code}")
    elif command == "pos":
        try:
            lat, lon = (float(v) for v in rest.split())
        except ValueError:
            print("Usage: pos LAT LON")
        else:
            game_state.move_to(Position(lat, lon))
    elif command == "where":
        position = game_state.current_position()
        print(f"Position {position.lat:.4f}, {position.lon:.4f}")
        code = session.tuning.active_code
        if code is not None:
            print(f"{code} is {session.distance_to(code):.1f} nm away")
    else:
        await bus.publish(MESSAGE_REQUESTED, line)

    return True


async def run(args: argparse.Namespace) -> int:
    settings = ATCSettings()
    settings.load(args.settings)

    directory = load_directory(args, settings)
    if args.position is not None:
        position = Position(*args.position)
    else:
        position = next(iter(directory)).position

    session, game_state = build_session(settings, directory, position)
    bus = EventBus()
    session.attach(bus)

    print(HELP_TEXT)
    try:
        while True:
            try:
                line = (await asyncio.to_thread(input, "\n> ")).strip()
            except EOFError:
                break
            if not line:
                continue

            try:
                if not await handle_line(line, session, game_state, bus):
                    break
            except ATCError as e:
                print(e)
    finally:
        session.detach(bus)
        await session.close()

    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    initialize_logging(logging.DEBUG if args.debug else logging.WARNING, args.log_file)

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        print("\nGoodbye!")


if __name__ == "__main__":
    main()
