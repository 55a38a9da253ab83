"""Logging setup for Airwaves.

Every module obtains its logger through get_logger(__name__); the entry
point calls initialize_logging() once to attach handlers to the root logger.

Typical usage:
    from airwaves.core.logging_system import get_logger

    logger = get_logger(__name__)
    logger.info("Radio tuned to %s", icao)
"""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_initialized = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Logger name, normally the module's __name__.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def initialize_logging(level: int = logging.INFO, log_file: Path | str | None = None) -> None:
    """Configure the root logger.

    Safe to call more than once; later calls only adjust the level.

    Args:
        level: Root logging level.
        log_file: Optional file to mirror log output to.
    """
    global _initialized

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if _initialized:
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # aiohttp and openai are chatty at DEBUG
    for noisy in ("aiohttp", "openai", "httpx", "urllib3"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    _initialized = True
