"""
Logging Configuration Module

Console logging for the bridge, controlled by the LOG_LEVEL environment variable.

Usage:
    from openclaw_bridge.logging_config import configure_logging
    configure_logging()  # Call once at startup

Environment Variables:
    LOG_LEVEL: Console verbosity (default: INFO)
        - DEBUG: Includes dropped frames and discarded stream tails
        - INFO: Goal submission and stream lifecycle
        - WARNING: Warnings and errors only
        - ERROR: Transport failures only
"""

import os
import sys

from loguru import logger


VALID_LOG_LEVELS: set[str] = {"DEBUG", "INFO", "WARNING", "ERROR"}

DEFAULT_LOG_LEVEL = "INFO"


def get_log_level() -> str:
    """
    Get the configured log level from the environment.

    Returns:
        str: DEBUG, INFO, WARNING or ERROR. Falls back to INFO if invalid or not set.
    """
    level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    if level not in VALID_LOG_LEVELS:
        return DEFAULT_LOG_LEVEL

    return level


def configure_logging() -> None:
    """
    Replace loguru's default stderr handler with one honoring LOG_LEVEL.

    File logging is configured separately by the server.
    """
    level = get_log_level()

    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - {message}",
        colorize=True,
    )

    logger.debug(f"Logging configured: console level={level}")
