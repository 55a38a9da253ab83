"""METAR feed for tuned airports.

Fetches the raw METAR for an airport from the NOAA station text files and
keeps the latest one per airport. While an airport is tuned, a single
background task refreshes it on a fixed interval.

Fetch failures never reach the caller: the previous report is kept when one
exists, otherwise a WEATHER_UNAVAILABLE placeholder is stored. Keeping the
last good report differs from the browser userscript this radio replaces,
which overwrote it with the placeholder on every failed fetch.

Typical usage:
    feed = WeatherFeed()
    await feed.fetch("KJFK")
    feed.start_auto_refresh("KJFK", 300.0)

    prompt_weather = feed.latest("KJFK")

    await feed.close()
"""

import asyncio
from datetime import UTC, datetime
from typing import Any

import aiohttp

from airwaves.core.logging_system import get_logger
from airwaves.exceptions import WeatherUnavailable
from airwaves.services.weather.models import NOT_AVAILABLE, WEATHER_UNAVAILABLE, WeatherRecord

logger = get_logger(__name__)

# NOAA station file: line 0 is the observation time, line 1 the METAR
DEFAULT_METAR_URL = "https://tgftp.nws.noaa.gov/data/observations/metar/stations/{icao}.TXT"


class WeatherFeed:
    """Per-airport METAR cache with a single auto-refresh task.

    Attributes:
        url_template: URL with an ``{icao}`` placeholder.
        timeout: HTTP timeout in seconds.
    """

    def __init__(
        self,
        url_template: str = DEFAULT_METAR_URL,
        timeout: float = 10.0,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize the feed.

        Args:
            url_template: METAR source URL with an ``{icao}`` placeholder.
            timeout: HTTP timeout in seconds.
            session: Optional aiohttp session to reuse. A session created
                by the feed is closed by close(); an injected one is not.
        """
        self.url_template = url_template
        self.timeout = timeout

        self._session = session
        self._owns_session = session is None
        self._records: dict[str, WeatherRecord] = {}

        self._refresh_task: asyncio.Task[None] | None = None
        self._refresh_code: str | None = None

    async def fetch(self, code: str) -> WeatherRecord:
        """Fetch and cache the current METAR for an airport.

        Args:
            code: Airport ICAO code.

        Returns:
            The record now cached for the airport.
        """
        code = code.upper()

        try:
            raw = await self._fetch_metar(code)
        except WeatherUnavailable as e:
            logger.warning("METAR fetch failed for %s: %s", code, e)
            previous = self._records.get(code)
            if previous is not None and previous.is_available:
                return previous
            record = WeatherRecord(code=code, raw=WEATHER_UNAVAILABLE, fetched_at=self._now())
        else:
            record = WeatherRecord(code=code, raw=raw, fetched_at=self._now())
            logger.info("METAR updated for %s: %s", code, raw)

        # Last write wins between refresh and tune-triggered fetches
        self._records[code] = record
        return record

    def latest(self, code: str) -> str:
        """Get the latest cached METAR text.

        Args:
            code: Airport ICAO code.

        Returns:
            Raw METAR, WEATHER_UNAVAILABLE, or NOT_AVAILABLE if never fetched.
        """
        record = self._records.get(code.upper())
        if record is None:
            return NOT_AVAILABLE
        return record.raw

    def get_record(self, code: str) -> WeatherRecord | None:
        """Get the cached record for an airport, if any."""
        return self._records.get(code.upper())

    def start_auto_refresh(self, code: str, interval: float) -> None:
        """Refresh an airport's METAR every interval seconds.

        Any refresh already running, for this or another airport, is
        cancelled first so only one task is ever live.

        Args:
            code: Airport ICAO code.
            interval: Refresh period in seconds.

        Raises:
            ValueError: If interval is not positive.
        """
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got: {interval}")

        self.stop_auto_refresh()

        code = code.upper()
        self._refresh_code = code
        self._refresh_task = asyncio.create_task(
            self._refresh_loop(code, interval), name=f"metar-refresh-{code}"
        )
        logger.info("Started METAR auto-refresh for %s every %.0fs", code, interval)

    def stop_auto_refresh(self) -> None:
        """Cancel the running auto-refresh task, if any."""
        if self._refresh_task is not None:
            if not self._refresh_task.done():
                self._refresh_task.cancel()
            logger.debug("Stopped METAR auto-refresh for %s", self._refresh_code)

        self._refresh_task = None
        self._refresh_code = None

    @property
    def refresh_code(self) -> str | None:
        """Airport currently being auto-refreshed, or None."""
        if self._refresh_task is None or self._refresh_task.done():
            return None
        return self._refresh_code

    async def _refresh_loop(self, code: str, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            await self.fetch(code)

    async def _fetch_metar(self, code: str) -> str:
        """Download the station file and extract the METAR line.

        Raises:
            WeatherUnavailable: On transport errors, non-200 responses or
                a body with fewer than two lines.
        """
        try:
            url = self.url_template.format(icao=code)
        except (KeyError, IndexError, ValueError) as e:
            raise WeatherUnavailable(f"bad METAR URL template {self.url_template!r}") from e

        text = await self._fetch_url(url)

        lines = text.strip().splitlines()
        if len(lines) < 2 or not lines[1].strip():
            raise WeatherUnavailable(f"malformed METAR response for {code}")

        return lines[1].strip()

    async def _fetch_url(self, url: str) -> str:
        """Fetch a URL as text.

        Raises:
            WeatherUnavailable: On any transport failure or non-200 status.
        """
        try:
            session = self._get_session()
            async with session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    raise WeatherUnavailable(f"HTTP {response.status} from {url}")
                return await response.text()
        except TimeoutError as e:
            raise WeatherUnavailable(f"request timed out: {url}") from e
        except aiohttp.ClientError as e:
            raise WeatherUnavailable(f"request failed: {url} - {e}") from e
        except UnicodeDecodeError as e:
            raise WeatherUnavailable(f"undecodable response from {url}") from e

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def get_cache_info(self) -> dict[str, Any]:
        """Get information about cached weather.

        Returns:
            Dictionary with cache statistics.
        """
        now = self._now()
        return {
            "count": len(self._records),
            "refreshing": self.refresh_code,
            "entries": [
                {
                    "icao": code,
                    "available": record.is_available,
                    "age_seconds": (now - record.fetched_at).total_seconds(),
                }
                for code, record in self._records.items()
            ],
        }

    async def close(self) -> None:
        """Stop refreshing and close the HTTP session."""
        self.stop_auto_refresh()
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None
