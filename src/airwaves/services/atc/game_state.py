"""Host game capabilities consumed by the ATC session.

The session never reaches into the game directly; it asks a
GameStateProvider for the aircraft position and the airport directory.
"""

from abc import ABC, abstractmethod

from airwaves.airports.directory import AirportDirectory
from airwaves.navigation.geolocation import Position


class GameStateProvider(ABC):
    """Read-only view of the host game."""

    @abstractmethod
    def current_position(self) -> Position:
        """Get the player's aircraft position."""

    @abstractmethod
    def airport_directory(self) -> AirportDirectory:
        """Get the loaded airport directory."""


class StaticGameState(GameStateProvider):
    """In-memory game state for the command line and tests.

    The position only changes when move_to() is called.
    """

    def __init__(self, directory: AirportDirectory, position: Position) -> None:
        self._directory = directory
        self._position = position

    def current_position(self) -> Position:
        return self._position

    def airport_directory(self) -> AirportDirectory:
        return self._directory

    def move_to(self, position: Position) -> None:
        """Place the aircraft at a new position."""
        self._position = position
