"""Logging configuration for the staged controller package."""

import logging
import os
import sys
from typing import Union

LOG_LEVEL_ENV_VAR = "STAGED_CONTROLLER_LOG_LEVEL"


def parse_level(level: str) -> Union[int, str]:
    """Normalize a log level taken from the environment.

    Numeric strings ("10", "20") become ints; anything else is upper-cased so
    that ``Logger.setLevel`` can look it up by name.
    """
    level = level.strip()
    return int(level) if level.isdigit() else level.upper()


def get_logger(name: str = "staged_controller") -> logging.Logger:
    """Get a configured logger for the package.

    The logger uses STAGED_CONTROLLER_LOG_LEVEL (or LOG_LEVEL) to determine the log level.
    If not set, defaults to ERROR level, which effectively disables most package logging.

    Returns:
        Configured logger instance for the package.
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        level = os.getenv(LOG_LEVEL_ENV_VAR, os.getenv("LOG_LEVEL", "ERROR"))

        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "[%(levelname)s] %(name)s - %(filename)s:%(lineno)d: %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        # Raises ValueError if the level name is not registered with logging
        logger.setLevel(parse_level(level))

        # Prevent propagation to avoid duplicate logs
        logger.propagate = False

    return logger


# Package logger instance
logger = get_logger()
