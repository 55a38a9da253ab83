"""Output of controller replies to the player.

Speech and on-screen notifications belong to the host; the session only
hands each reply to a PresentationSink along with the airport code.
"""

from abc import ABC, abstractmethod

from airwaves.core.logging_system import get_logger

logger = get_logger(__name__)


class PresentationSink(ABC):
    """Receiver of controller replies."""

    @abstractmethod
    def present(self, text: str, airport_code: str) -> None:
        """Display or speak a reply.

        Args:
            text: Reply text.
            airport_code: ICAO code of the transmitting station.
        """


class ConsoleSink(PresentationSink):
    """Prints replies to the terminal as "<CODE> ATC: <text>"."""

    def present(self, text: str, airport_code: str) -> None:
        logger.debug("Presenting reply from %s ATC", airport_code)
        print(f"{airport_code} ATC: {text}")
