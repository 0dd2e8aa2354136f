"""
Logging setup for probstat entry points.

Library modules only emit records through `loguru.logger`; they never add or
remove sinks. Applications call configure_logging() once at startup to choose
where records go and at what level.
"""

import sys
from typing import TextIO

from loguru import logger

LOGURU_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "{name}:{function} - <level>{message}</level>"
)


def configure_logging(level: str = "WARNING", sink: TextIO | None = None) -> int:
    """
    Replace loguru's default handler with a single formatted sink.

    Args:
        level: Minimum level name (e.g. "DEBUG", "WARNING").
        sink: Stream to write to; defaults to sys.stderr so diagnostic dumps on
              stdout stay machine-readable.

    Returns:
        The loguru handler id of the installed sink.
    """
    logger.remove()
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        colorize=False,
        format=LOGURU_FORMAT,
    )
