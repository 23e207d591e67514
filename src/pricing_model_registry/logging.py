"""Logging utilities for the pricing model registry.

This module provides standardized logging functionality for registry,
calculation and usage-event operations.
"""

import logging
import sys
from enum import Enum
from typing import Any, Dict, Optional

# Root logger name for the package
LOGGER_NAME = "pricing_model_registry"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


class LogLevel(int, Enum):
    """Log levels for the registry."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for registry logging."""

    PRICING_REGISTRY = "pricing_registry"
    PRICING_MODEL = "pricing_model"
    PRICING_CALCULATION = "pricing_calculation"
    USAGE_EVENT = "usage_event"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger inside the package namespace.

    Args:
        name: Module or component name. Names already inside the package
              namespace are used as-is.

    Returns:
        The configured logger
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_cli_logging(level: str) -> None:
    """Attach a stderr handler to the package logger at the given level.

    Args:
        level: Level name such as "DEBUG" or "WARNING"
    """
    logger = get_logger()
    logger.setLevel(level)
    for existing in logger.handlers:
        if getattr(existing, "_pmr_cli", False):
            # sys.stderr may have been replaced since the last invocation
            existing.setStream(sys.stderr)  # type: ignore[attr-defined]
            return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._pmr_cli = True  # type: ignore[attr-defined]
    logger.addHandler(handler)


def _emit(level: LogLevel, event: LogEvent, message: str, data: Dict[str, Any]) -> None:
    logger = get_logger()
    if not logger.isEnabledFor(level):
        return
    if data:
        details = ", ".join(f"{key}={value}" for key, value in data.items())
        text = f"[{event.value}] {message} ({details})"
    else:
        text = f"[{event.value}] {message}"
    logger.log(level, text, extra={"event": event.value, "data": data})


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    """Log a debug message for an event."""
    _emit(LogLevel.DEBUG, event, message, data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    """Log an info message for an event."""
    _emit(LogLevel.INFO, event, message, data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    """Log a warning message for an event."""
    _emit(LogLevel.WARNING, event, message, data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    """Log an error message for an event."""
    _emit(LogLevel.ERROR, event, message, data)
