"""Version information for Airwaves.

Reads the VERSION file in the project root, with fallback for packaged
distributions.
"""

from pathlib import Path

__version__ = "0.1.0"  # Fallback version
__license__ = "MIT"


def get_version() -> str:
    """Get the current version string.

    Returns:
        Version string (e.g., "0.1.0").
    """
    version_paths = [
        Path(__file__).parent.parent.parent / "VERSION",  # src/airwaves -> root
        Path("VERSION"),
    ]

    for version_path in version_paths:
        if version_path.exists():
            try:
                return version_path.read_text().strip()
            except OSError:
                continue

    return __version__
