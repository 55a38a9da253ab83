"""Airwaves - AI air traffic controller radio for flight-simulation games.

Tune into an airport frequency and exchange short text transmissions with a
simulated controller whose replies are grounded in the airport's live METAR.
"""

from airwaves.version import __version__

__all__ = ["__version__"]
