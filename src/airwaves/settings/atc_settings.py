"""ATC radio settings management.

Settings are stored in ~/.airwaves/settings.json under the "atc" key.
The chat service API key is never stored here; the OpenAI client reads it
from the OPENAI_API_KEY environment variable.

Typical usage:
    from airwaves.settings import get_atc_settings

    settings = get_atc_settings()
    settings.set_range_limit_nm(40.0)
    settings.save()
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from airwaves.airports.directory import DEFAULT_AIRPORTS_URL
from airwaves.core.logging_system import get_logger
from airwaves.services.weather.weather_feed import DEFAULT_METAR_URL

logger = get_logger(__name__)

DEFAULT_RANGE_LIMIT_NM = 50.0
DEFAULT_REFRESH_SECONDS = 300.0
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_HISTORY = 40

_PERSISTED_FIELDS = (
    "range_limit_nm",
    "weather_refresh_seconds",
    "weather_timeout",
    "weather_url_template",
    "chat_model",
    "chat_api_base",
    "chat_timeout",
    "max_history_messages",
    "airports_url",
    "persona_file",
)

_POSITIVE_FIELDS = ("range_limit_nm", "weather_refresh_seconds", "weather_timeout", "chat_timeout")


def _check_value(name: str, value: Any) -> None:
    """Apply the same limits as the setters to a loaded value.

    Raises:
        ValueError: If the value is out of range for the field.
    """
    if name in _POSITIVE_FIELDS and value <= 0:
        raise ValueError(f"{name} must be > 0")
    if name == "max_history_messages" and (value < 0 or value == 1):
        raise ValueError("max_history_messages must be 0 or >= 2")
    if name == "chat_model" and not value.strip():
        raise ValueError("chat_model must not be empty")
    if name == "weather_url_template" and "{icao}" not in value:
        raise ValueError("weather_url_template must contain {icao}")


@dataclass
class ATCSettings:
    """ATC radio settings with persistence.

    Attributes:
        range_limit_nm: Maximum distance to the tuned airport for talking.
        weather_refresh_seconds: METAR auto-refresh period while tuned.
        weather_timeout: METAR request timeout in seconds.
        weather_url_template: METAR source with an ``{icao}`` placeholder.
        chat_model: Chat-completion model name.
        chat_api_base: Base URL of an OpenAI-compatible service ("" = default).
        chat_timeout: Chat request timeout in seconds.
        max_history_messages: Cap on stored turns per airport (0 = unbounded).
        airports_url: Airport directory JSON resource.
        persona_file: Optional YAML file overriding the controller persona.
    """

    range_limit_nm: float = DEFAULT_RANGE_LIMIT_NM
    weather_refresh_seconds: float = DEFAULT_REFRESH_SECONDS
    weather_timeout: float = 10.0
    weather_url_template: str = DEFAULT_METAR_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    chat_api_base: str = ""
    chat_timeout: float = 30.0
    max_history_messages: int = DEFAULT_MAX_HISTORY
    airports_url: str = DEFAULT_AIRPORTS_URL
    persona_file: str = ""
    _settings_path: Path = field(
        default_factory=lambda: Path.home() / ".airwaves" / "settings.json"
    )
    _dirty: bool = field(default=False, repr=False)

    def set_range_limit_nm(self, limit: float) -> None:
        """Set the talk range.

        Args:
            limit: Range in nautical miles, must be positive.
        """
        if limit <= 0:
            raise ValueError(f"range_limit_nm must be > 0, got: {limit}")
        self.range_limit_nm = float(limit)
        self._dirty = True

    def set_weather_refresh_seconds(self, seconds: float) -> None:
        """Set the METAR refresh period.

        Args:
            seconds: Period in seconds, must be positive.
        """
        if seconds <= 0:
            raise ValueError(f"weather_refresh_seconds must be > 0, got: {seconds}")
        self.weather_refresh_seconds = float(seconds)
        self._dirty = True

    def set_chat_model(self, model: str) -> None:
        """Set the chat-completion model name."""
        if not model.strip():
            raise ValueError("chat_model must not be empty")
        self.chat_model = model.strip()
        self._dirty = True

    def set_chat_api_base(self, url: str) -> None:
        """Set the base URL of the chat service ("" for the SDK default)."""
        self.chat_api_base = url.strip()
        self._dirty = True

    def set_max_history_messages(self, count: int) -> None:
        """Set the history cap.

        Args:
            count: Maximum stored turns per airport; 0 disables the cap,
                otherwise at least 2 so a full exchange fits.
        """
        if count < 0 or count == 1:
            raise ValueError(f"max_history_messages must be 0 or >= 2, got: {count}")
        self.max_history_messages = int(count)
        self._dirty = True

    def load(self, path: Path | str | None = None) -> bool:
        """Load settings from file.

        Args:
            path: Optional path to settings file.
                 Defaults to ~/.airwaves/settings.json.

        Returns:
            True if loaded successfully, False otherwise.
        """
        if path is not None:
            self._settings_path = Path(path)

        if not self._settings_path.exists():
            logger.info("No settings file found, using ATC defaults")
            return False

        try:
            with open(self._settings_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load ATC settings: %s", e)
            return False

        atc_data = data.get("atc", {}) if isinstance(data, dict) else {}
        defaults = ATCSettings()
        for name in _PERSISTED_FIELDS:
            default = getattr(defaults, name)
            value = atc_data.get(name, default)
            try:
                if value is None or isinstance(value, bool):
                    raise TypeError(f"{name} has no usable value")
                converted = type(default)(value)
                if isinstance(converted, str):
                    converted = converted.strip()
                _check_value(name, converted)
                setattr(self, name, converted)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid ATC setting %s=%r", name, value)
                setattr(self, name, default)

        self._dirty = False
        logger.info("Loaded ATC settings from %s", self._settings_path)
        return True

    def save(self, path: Path | str | None = None) -> bool:
        """Save settings to file, preserving other sections.

        Args:
            path: Optional path to settings file.

        Returns:
            True if saved successfully, False otherwise.
        """
        if path is not None:
            self._settings_path = Path(path)

        try:
            self._settings_path.parent.mkdir(parents=True, exist_ok=True)

            existing_data: dict[str, Any] = {}
            if self._settings_path.exists():
                with open(self._settings_path, encoding="utf-8") as f:
                    existing_data = json.load(f)

            existing_data["atc"] = self.to_dict()

            with open(self._settings_path, "w", encoding="utf-8") as f:
                json.dump(existing_data, f, indent=2)

        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to save ATC settings: %s", e)
            return False

        self._dirty = False
        logger.info("Saved ATC settings to %s", self._settings_path)
        return True

    @property
    def is_dirty(self) -> bool:
        """Check if settings have unsaved changes."""
        return self._dirty

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {name: getattr(self, name) for name in _PERSISTED_FIELDS}


# Global singleton instance
_global_settings: ATCSettings | None = None


def get_atc_settings() -> ATCSettings:
    """Get the global ATC settings singleton.

    Loads settings from disk on first access.
    """
    global _global_settings
    if _global_settings is None:
        _global_settings = ATCSettings()
        _global_settings.load()
    return _global_settings


def reset_atc_settings() -> None:
    """Reset the global ATC settings singleton, forcing reload on next access."""
    global _global_settings
    _global_settings = None
