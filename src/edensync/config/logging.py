"""Logging setup for the edensync command line."""

from __future__ import annotations

import logging

# transport chatter that drowns the timeline when polling every few seconds
_NOISY_LOGGERS = ("httpx", "httpcore", "httpx_retries", "sqlalchemy.engine")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    Library loggers in ``_NOISY_LOGGERS`` stay at WARNING unless ``level`` is DEBUG,
    where request and SQL traces are what the user asked for.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
