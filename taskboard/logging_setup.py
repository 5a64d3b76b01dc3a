"""Logging configuration for the taskboard CLI."""

import logging
import sys
from typing import Optional, TextIO, Union

LOGGER_NAME = "taskboard"


def setup_logging(
    level: Union[int, str] = logging.WARNING, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Send taskboard logs to stderr.

    Replaces handlers from earlier calls, so calling this twice does not
    duplicate output.

    Args:
        level: Level name or number for the taskboard logger
        stream: Stream to write to (default: sys.stderr)

    Returns:
        The configured "taskboard" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger
