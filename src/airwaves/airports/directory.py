"""Airport directory keyed by ICAO code.

The directory is loaded once, from a local JSON file, an in-memory mapping
or a download, and is read-only afterwards. The JSON format is an object
mapping each ICAO code to ``[lat, lon, ...]`` (extra fields ignored) or to
``{"lat": ..., "lon": ...}``.

Typical usage:
    from airwaves.airports import AirportDirectory

    directory = AirportDirectory()
    directory.load("data/airports.json")

    airport = directory.get("kjfk")  # case-insensitive
    for airport in directory:  # load order
        ...
"""

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from airwaves.core.logging_system import get_logger
from airwaves.navigation.geolocation import Position

logger = get_logger(__name__)

DEFAULT_AIRPORTS_URL = "https://github.com/avramovic/geofs-ai-atc/raw/master/airports.json"


@dataclass(frozen=True)
class Airport:
    """Airport entry.

    Attributes:
        code: ICAO code (upper case).
        lat: Latitude in degrees.
        lon: Longitude in degrees.
    """

    code: str
    lat: float
    lon: float

    @property
    def position(self) -> Position:
        """Airport reference point as a Position."""
        return Position(self.lat, self.lon)


class AirportDirectory:
    """Read-only collection of airports.

    Iteration yields airports in the order they were loaded, which decides
    ties in nearest-airport searches.
    """

    def __init__(self, airports: Mapping[str, Any] | None = None) -> None:
        """Initialize the directory.

        Args:
            airports: Optional mapping of ICAO code to coordinates to load
                immediately (same shapes as the JSON file).
        """
        self._airports: dict[str, Airport] = {}
        self._loaded = False
        if airports is not None:
            self._load_mapping(airports)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self, json_path: Path | str) -> bool:
        """Load airports from a JSON file.

        Args:
            json_path: Path to the airports JSON file.

        Returns:
            True if loaded successfully.
        """
        json_path = Path(json_path)

        if not json_path.exists():
            logger.error("Airport file not found: %s", json_path)
            return False

        try:
            with open(json_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read airports from %s: %s", json_path, e)
            return False

        if not isinstance(data, dict):
            logger.error("Airport file %s is not a JSON object", json_path)
            return False

        self._load_mapping(data)
        logger.info("Loaded %d airports from %s", len(self._airports), json_path)
        return True

    def download(
        self,
        url: str = DEFAULT_AIRPORTS_URL,
        cache_path: Path | str | None = None,
        timeout: float = 30.0,
    ) -> bool:
        """Download the airport JSON and load it.

        When cache_path is given and already exists, the cached copy is used
        instead of downloading again.

        Args:
            url: URL of the airports JSON resource.
            cache_path: Optional file to store the download in.
            timeout: Request timeout in seconds.

        Returns:
            True if loaded successfully.
        """
        if cache_path is not None:
            cache_path = Path(cache_path)
            if cache_path.exists():
                logger.debug("Using cached airport file %s", cache_path)
                return self.load(cache_path)

        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error("Failed to download airports from %s: %s", url, e)
            return False
        except ValueError as e:
            logger.error("Airport download from %s is not valid JSON: %s", url, e)
            return False

        if not isinstance(data, dict):
            logger.error("Airport download from %s is not a JSON object", url)
            return False

        if cache_path is not None:
            try:
                cache_path.parent.mkdir(parents=True, exist_ok=True)
                with open(cache_path, "w", encoding="utf-8") as f:
                    json.dump(data, f)
            except OSError as e:
                logger.warning("Could not cache airports to %s: %s", cache_path, e)

        self._load_mapping(data)
        logger.info("Downloaded %d airports from %s", len(self._airports), url)
        return True

    def _load_mapping(self, data: Mapping[str, Any]) -> None:
        """Parse a code -> coordinates mapping, skipping malformed entries."""
        for raw_code, entry in data.items():
            code = str(raw_code).strip().upper()
            if not code:
                continue

            try:
                if isinstance(entry, Mapping):
                    lat, lon = float(entry["lat"]), float(entry["lon"])
                else:
                    lat, lon = float(entry[0]), float(entry[1])
            except (KeyError, IndexError, TypeError, ValueError):
                logger.debug("Skipping malformed airport entry %s: %r", raw_code, entry)
                continue

            self._airports[code] = Airport(code=code, lat=lat, lon=lon)

        self._loaded = True

    def get(self, code: str) -> Airport | None:
        """Get an airport by ICAO code.

        Args:
            code: ICAO code (case-insensitive).

        Returns:
            Airport if found, None otherwise.
        """
        return self._airports.get(code.strip().upper())

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().upper() in self._airports

    def __iter__(self) -> Iterator[Airport]:
        return iter(self._airports.values())

    def __len__(self) -> int:
        return len(self._airports)
