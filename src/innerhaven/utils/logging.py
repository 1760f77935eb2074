from __future__ import annotations

import logging
import os
from typing import Literal

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

DEFAULT_FORMAT = "%(asctime)s %(threadName)s %(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%m-%d %H:%M:%S"

# per-exchange connect/receive chatter, shown only with --log-level debug
EXCHANGE_LOGGER = "innerhaven.kasa.connection"


def setup_logging(level: LogLevel | str | None = None) -> str:
    """Install colored console logging and return the level in effect.

    An explicit ``level`` wins over the ``LOGLEVEL`` environment variable.
    """
    resolved = (level or os.environ.get("LOGLEVEL", "INFO")).upper()
    if resolved not in LOG_LEVELS:
        raise ValueError(f"unknown log level: {resolved}")

    coloredlogs.install(
        level=resolved,
        fmt=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger(EXCHANGE_LOGGER).setLevel(
        logging.DEBUG if resolved == "DEBUG" else logging.INFO
    )
    return resolved
