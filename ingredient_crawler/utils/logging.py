from __future__ import annotations

import logging
import os

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

# Chatty third-party loggers kept at WARNING unless we are debugging.
_NOISY = ("asyncio", "aiohttp.access")


def setup_logging(level: str | int | None = None) -> None:
    """
    Configure application logging with a consistent formatter.
    Level comes from the argument, then INGREDIENT_CRAWLER_LOG_LEVEL, then INFO.
    """
    if level is None:
        level = os.getenv("INGREDIENT_CRAWLER_LOG_LEVEL", "INFO")

    if isinstance(level, str):
        level = _LEVELS.get(level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    if level > logging.DEBUG:
        for name in _NOISY:
            logging.getLogger(name).setLevel(logging.WARNING)
