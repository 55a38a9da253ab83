"""Weather services for Airwaves.

Provides the latest raw METAR per airport, refreshed while tuned.
"""

from airwaves.services.weather.models import (
    NOT_AVAILABLE,
    WEATHER_UNAVAILABLE,
    WeatherRecord,
)
from airwaves.services.weather.weather_feed import DEFAULT_METAR_URL, WeatherFeed

__all__ = [
    "DEFAULT_METAR_URL",
    "NOT_AVAILABLE",
    "WEATHER_UNAVAILABLE",
    "WeatherFeed",
    "WeatherRecord",
]
