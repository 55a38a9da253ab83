"""Geolocation helpers.

Distances use the haversine formula on a spherical Earth of radius 6371 km,
converted to nautical miles.

Typical usage:
    here = Position(40.64, -73.78)
    d = distance_nm(here, directory.get("KLGA").position)
    nearest = nearest_airport(here, directory)
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from airwaves.exceptions import NotFound

if TYPE_CHECKING:
    from airwaves.airports.directory import Airport

EARTH_RADIUS_KM = 6371.0
KM_PER_NM = 1.852


@dataclass(frozen=True)
class Position:
    """Geographic position in decimal degrees.

    Attributes:
        lat: Latitude in degrees (positive north).
        lon: Longitude in degrees (positive east).
    """

    lat: float
    lon: float


@dataclass(frozen=True)
class NearestAirport:
    """Result of a nearest-airport search."""

    code: str
    distance_nm: float


def distance_nm(a: Position, b: Position) -> float:
    """Great-circle distance between two positions.

    Args:
        a: First position.
        b: Second position.

    Returns:
        Distance in nautical miles.
    """
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h just outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_KM * c / KM_PER_NM


def nearest_airport(current: Position, directory: Iterable["Airport"]) -> NearestAirport:
    """Find the airport closest to a position.

    Ties go to the airport seen first in directory order.

    Args:
        current: Position to measure from.
        directory: Airports to scan.

    Returns:
        Code and distance of the closest airport.

    Raises:
        NotFound: If the directory is empty.
    """
    nearest: NearestAirport | None = None

    for airport in directory:
        d = distance_nm(current, airport.position)
        if nearest is None or d < nearest.distance_nm:
            nearest = NearestAirport(code=airport.code, distance_nm=d)

    if nearest is None:
        raise NotFound("Airport directory is empty")

    return nearest
