"""Logging setup for applications embedding workpulse.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves.
"""

import logging
import sys
from typing import IO

ROOT_LOGGER = "workpulse"


def configure_logging(
    level: int | str = logging.INFO,
    fmt: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a stream handler to the ``workpulse`` logger.

    Calling it again only adjusts the level; no second handler is added.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        fmt: Log format string
        stream: Destination stream (stderr if None)

    Returns:
        The configured ``workpulse`` logger
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level '{level}'")
        level = resolved

    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
