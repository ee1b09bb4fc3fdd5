"""Logging configuration helpers."""

from __future__ import annotations

import logging
import logging.config
from pprint import pformat
from typing import Any

from .config import LoggingSettings

VALUE_LOGGER_NAME = "chainwire.values"


def _structured_formatter() -> dict[str, Any]:
    """Return a dictConfig fragment for structured JSON logs."""
    return {
        "format": '{{"time": "{asctime}", "level": "{levelname}", "logger": "{name}", "message": "{message}"}}',
        "style": "{",
    }


def _plain_formatter() -> dict[str, Any]:
    """Return a dictConfig fragment for human readable logs."""
    return {
        "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
    }


def _logger_levels(settings: LoggingSettings) -> dict[str, dict[str, Any]]:
    loggers: dict[str, dict[str, Any]] = {
        VALUE_LOGGER_NAME: {"level": settings.value_level.upper()},
    }
    for name, level in settings.loggers.items():
        loggers[name] = {"level": level.upper()}
    return loggers


def configure_logging(settings: LoggingSettings) -> None:
    """Route every chainwire logger to one console handler.

    ``settings.loggers`` raises or lowers individual loggers (for example
    ``chainwire.core.chain`` at DEBUG to trace chain dispatch) without
    touching the root level.
    """
    formatter = _structured_formatter() if settings.structured else _plain_formatter()
    root_level = settings.level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": formatter},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": _logger_levels(settings),
            "root": {"handlers": ["console"], "level": root_level},
        }
    )


def log_value(tag: str, *values: Any, level: int = logging.INFO) -> None:
    """Record each value under ``[tag]``; nothing is returned."""
    logger = logging.getLogger(VALUE_LOGGER_NAME)
    if not logger.isEnabledFor(level):
        return
    for value in values:
        logger.log(level, "[%s] %s", tag, pformat(value))


__all__ = ["VALUE_LOGGER_NAME", "configure_logging", "log_value"]
