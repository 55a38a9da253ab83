"""Great-circle geometry for range gating and nearest-airport lookup."""

from airwaves.navigation.geolocation import (
    NearestAirport,
    Position,
    distance_nm,
    nearest_airport,
)

__all__ = ["NearestAirport", "Position", "distance_nm", "nearest_airport"]
