"""Centralized logging configuration for the image toolkit."""

import os
import sys
import logging
from typing import Optional

DEFAULT_LOGGER_NAME = "image-toolkit"

STRUCTURED_FORMAT = (
    "%(asctime)s | %(name)s | %(levelname)-8s | "
    "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: Optional[str] = None) -> int:
    """Map a level name (or LOG_LEVEL) to a logging constant, INFO when unknown."""
    name = level or os.getenv("LOG_LEVEL", "INFO")
    return getattr(logging, name.upper(), logging.INFO)


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Args:
        name: Logger name (defaults to "image-toolkit")
        level: Log level override (defaults to env var or INFO). Without it the
            level is only set the first time a logger is configured, so levels
            applied later with set_global_level stick.
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)
    if level is not None or not logger.handlers:
        logger.setLevel(resolve_level(level))

    # Avoid duplicate handlers; stdout is reserved for command output
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)

        env_format = os.getenv("LOG_FORMAT", format_type).lower()
        if env_format == "structured":
            formatter = logging.Formatter(STRUCTURED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        else:
            formatter = logging.Formatter(SIMPLE_FORMAT)

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return setup_logger(name)


def set_global_level(level: str) -> None:
    """Apply a level to every image-toolkit logger created so far."""
    log_level = resolve_level(level)
    manager = logging.Logger.manager
    for logger_name, existing in list(manager.loggerDict.items()):
        if not isinstance(existing, logging.Logger):
            continue
        if logger_name == DEFAULT_LOGGER_NAME or logger_name.startswith(
            DEFAULT_LOGGER_NAME + "."
        ):
            existing.setLevel(log_level)


# Create default logger instance
logger = setup_logger()
