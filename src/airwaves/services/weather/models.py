"""Weather data models."""

from dataclasses import dataclass
from datetime import datetime

# Reported when an airport has never been fetched
NOT_AVAILABLE = "Not available"

# Stored when a fetch fails and there is no earlier report to keep
WEATHER_UNAVAILABLE = "Weather unavailable"


@dataclass(frozen=True)
class WeatherRecord:
    """Latest weather known for an airport.

    Attributes:
        code: Airport ICAO code.
        raw: Raw METAR string, or WEATHER_UNAVAILABLE.
        fetched_at: Time the record was stored (UTC).
    """

    code: str
    raw: str
    fetched_at: datetime

    @property
    def is_available(self) -> bool:
        """True if the record holds a real report."""
        return self.raw != WEATHER_UNAVAILABLE
