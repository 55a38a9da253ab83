"""User settings management for Airwaves.

Settings are persisted across sessions in ~/.airwaves/settings.json.
"""

from airwaves.settings.atc_settings import (
    ATCSettings,
    get_atc_settings,
    reset_atc_settings,
)

__all__ = [
    "ATCSettings",
    "get_atc_settings",
    "reset_atc_settings",
]
