"""Active radio frequency.

Only one airport is tuned at a time. Tuning fetches the airport's METAR at
once and moves the weather auto-refresh to it; conversations and weather of
previously tuned airports are left in place.
"""

from airwaves.airports.directory import Airport, AirportDirectory
from airwaves.core.logging_system import get_logger
from airwaves.exceptions import UnknownAirport
from airwaves.services.weather.weather_feed import WeatherFeed

logger = get_logger(__name__)

DEFAULT_REFRESH_INTERVAL = 300.0  # 5 minutes


class TuningState:
    """Tracks the single tuned airport.

    Attributes:
        refresh_interval: METAR auto-refresh period in seconds.
    """

    def __init__(
        self,
        directory: AirportDirectory,
        weather_feed: WeatherFeed,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
    ):
        """Initialize with nothing tuned.

        Args:
            directory: Airports that can be tuned.
            weather_feed: Feed to fetch and refresh METARs with.
            refresh_interval: Auto-refresh period in seconds.
        """
        self._directory = directory
        self._weather = weather_feed
        self.refresh_interval = refresh_interval
        self._active_code: str | None = None

    @property
    def active_code(self) -> str | None:
        return self._active_code

    def active_airport(self) -> Airport | None:
        """Get the tuned airport, or None when nothing is tuned."""
        if self._active_code is None:
            return None
        return self._directory.get(self._active_code)

    async def tune(self, code: str) -> Airport:
        """Tune the radio to an airport.

        Args:
            code: ICAO code (case-insensitive).

        Returns:
            The tuned airport.

        Raises:
            UnknownAirport: If the code is not in the directory. Nothing
                changes in that case.
        """
        airport = self._directory.get(code)
        if airport is None:
            raise UnknownAirport(code.strip().upper())

        self._active_code = airport.code
        logger.info("Radio tuned to %s", airport.code)

        await self._weather.fetch(airport.code)

        # A newer tune may have happened while the fetch was in flight
        if self._active_code == airport.code:
            self._weather.start_auto_refresh(airport.code, self.refresh_interval)

        return airport
