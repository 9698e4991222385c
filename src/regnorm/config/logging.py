"""Logging setup for the regnorm command line."""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(threadName)s %(message)s"
DATE_FORMAT: Final[str] = "%H:%M:%S"

# Held at WARNING or above whatever level the CLI runs at.
QUIET_LOGGERS: Final[tuple[str, ...]] = ("sqlalchemy.engine", "sqlalchemy.pool")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for CLI runs.

    Lines carry the worker thread name so interleaved batch output can be told
    apart. Pass ``force=True`` to replace handlers that are already installed.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, force=force)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
