"""Structured logging configuration."""

import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger
from mcpbridge.infra.config import config

LOGGER_NAME = "mcpbridge"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(level: Optional[str]) -> int:
    """Map a configured level name to a logging level (INFO when unknown)."""
    if not level:
        return logging.DEBUG if config.DEBUG else logging.INFO
    return _LEVELS.get(level.lower(), logging.INFO)


def setup_logging(level: Optional[str] = None, json_format: bool = True) -> logging.Logger:
    """Setup logging for the mcpbridge logger tree.

    Args:
        level: Level name (debug, info, warn, error)
        json_format: Emit JSON lines; plain text otherwise

    Returns:
        The configured root application logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level or config.LOG_LEVEL))

    # Remove existing handlers
    logger.handlers = []

    if json_format:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Set levels for third-party loggers
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logger


app_logger = logging.getLogger(LOGGER_NAME)
