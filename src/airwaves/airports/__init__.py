"""Airport directory used for tuning and range checks."""

from airwaves.airports.directory import DEFAULT_AIRPORTS_URL, Airport, AirportDirectory

__all__ = ["DEFAULT_AIRPORTS_URL", "Airport", "AirportDirectory"]
