"""ATC radio session.

Ties tuning, range gating, weather grounding and the dialogue engine
together. One session serves one player with one active frequency.

Flow of a transmission:
    1. Reject if nothing is tuned (NotTuned).
    2. Reject if the aircraft is beyond the range limit (OutOfRange).
    3. Rewrite the system prompt with the latest METAR.
    4. Record the pilot turn and send the conversation.
    5. Record the controller reply and present it.

Checks 1-2 have no side effects. If step 4 fails, the pilot turn stays in
the history and the error propagates.

Transmissions to the same airport are serialized, so a second message waits
for the first reply before it is recorded.

Typical usage:
    session = ATCSession(game_state, WeatherFeed(), ConversationStore(), engine)
    await session.tune("KJFK")
    reply = await session.handle_message("request taxi")
"""

import asyncio
from enum import Enum

from airwaves.airports.directory import Airport
from airwaves.core.event_bus import MESSAGE_REQUESTED, TUNE_REQUESTED, EventBus
from airwaves.core.logging_system import get_logger
from airwaves.exceptions import EmptyMessage, NotTuned, OutOfRange, UnknownAirport
from airwaves.navigation.geolocation import NearestAirport, distance_nm, nearest_airport
from airwaves.services.atc.conversation import ConversationContext, ConversationStore
from airwaves.services.atc.dialogue_engine import DialogueEngine
from airwaves.services.atc.game_state import GameStateProvider
from airwaves.services.atc.presentation import PresentationSink
from airwaves.services.atc.tuning import DEFAULT_REFRESH_INTERVAL, TuningState
from airwaves.services.weather.weather_feed import WeatherFeed

logger = get_logger(__name__)

DEFAULT_RANGE_LIMIT_NM = 50.0


class SessionState(Enum):
    """Radio session states."""

    IDLE = "idle"
    TUNED = "tuned"


class ATCSession:
    """Orchestrates one player's conversation with ATC.

    Attributes:
        range_limit_nm: Maximum distance to the tuned airport.
        tuning: Active frequency tracker.
        conversations: Per-airport message histories.
    """

    def __init__(
        self,
        game_state: GameStateProvider,
        weather_feed: WeatherFeed,
        conversations: ConversationStore,
        dialogue_engine: DialogueEngine,
        sink: PresentationSink | None = None,
        range_limit_nm: float = DEFAULT_RANGE_LIMIT_NM,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
    ):
        """Initialize an idle session.

        Args:
            game_state: Source of aircraft position and airports.
            weather_feed: METAR cache and refresher.
            conversations: Store of per-airport histories.
            dialogue_engine: Chat-completion adapter.
            sink: Optional receiver of controller replies.
            range_limit_nm: Talk range in nautical miles.
            refresh_interval: METAR refresh period in seconds while tuned.
        """
        self._game_state = game_state
        self._weather = weather_feed
        self._engine = dialogue_engine
        self._sink = sink
        self.conversations = conversations
        self.range_limit_nm = range_limit_nm
        self.tuning = TuningState(
            game_state.airport_directory(), weather_feed, refresh_interval
        )
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def state(self) -> SessionState:
        if self.tuning.active_code is None:
            return SessionState.IDLE
        return SessionState.TUNED

    async def tune(self, code: str) -> Airport:
        """Tune the radio to an airport.

        Raises:
            UnknownAirport: If the code is not in the directory.
        """
        return await self.tuning.tune(code)

    def nearest_airport(self) -> NearestAirport:
        """Closest airport to the aircraft, used as the tune default.

        Raises:
            NotFound: If the directory is empty.
        """
        return nearest_airport(
            self._game_state.current_position(), self._game_state.airport_directory()
        )

    def distance_to(self, code: str) -> float:
        """Distance in nautical miles from the aircraft to an airport.

        Raises:
            UnknownAirport: If the code is not in the directory.
        """
        airport = self._game_state.airport_directory().get(code)
        if airport is None:
            raise UnknownAirport(code.strip().upper())
        return distance_nm(self._game_state.current_position(), airport.position)

    def context(self, code: str) -> ConversationContext:
        """Conversation with an airport, created if needed."""
        return self.conversations.get(code, self._weather.latest(code))

    async def handle_message(self, text: str) -> str:
        """Transmit a message to the tuned controller.

        Args:
            text: Pilot transmission.

        Returns:
            The controller's reply text.

        Raises:
            NotTuned: If no airport is tuned.
            OutOfRange: If the aircraft is beyond range_limit_nm.
            EmptyMessage: If text is blank.
            DialogueUnavailable: If the chat service fails; the pilot turn
                has already been recorded.
        """
        airport = self.tuning.active_airport()
        if airport is None:
            raise NotTuned()

        code = airport.code
        distance = distance_nm(self._game_state.current_position(), airport.position)
        if distance > self.range_limit_nm:
            logger.info("Rejected transmission to %s: %.1f nm away", code, distance)
            raise OutOfRange(code, distance, self.range_limit_nm)

        if not text or not text.strip():
            raise EmptyMessage("Message to ATC is empty")

        async with self._lock_for(code):
            self.conversations.refresh_system_prompt(code, self._weather.latest(code))
            self.conversations.append_user(code, text)
            messages = self.conversations.get(code).snapshot()

            logger.info("Pilot to %s: %s", code, text)
            reply = await self._engine.send(messages)

            self.conversations.append_assistant(code, reply)
            logger.info("%s ATC: %s", code, reply.content)

        if self._sink is not None:
            self._sink.present(reply.content, code)

        return reply.content

    def _lock_for(self, code: str) -> asyncio.Lock:
        lock = self._locks.get(code)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[code] = lock
        return lock

    def attach(self, bus: EventBus) -> None:
        """Subscribe to the UI's tune and message events."""
        bus.subscribe(TUNE_REQUESTED, self.tune)
        bus.subscribe(MESSAGE_REQUESTED, self.handle_message)

    def detach(self, bus: EventBus) -> None:
        """Unsubscribe from the UI's events."""
        bus.unsubscribe(TUNE_REQUESTED, self.tune)
        bus.unsubscribe(MESSAGE_REQUESTED, self.handle_message)

    async def close(self) -> None:
        """Stop the weather refresh and release network clients."""
        await self._weather.close()
        await self._engine.close()
