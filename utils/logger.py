"""
============================================================================
ENDPOINT PINGER - LOGGING UTILITY
============================================================================
loguru-based logging for the pinger. One console sink is configured at
startup from the parsed `log-level`; components receive a logger handle
bound with their component name so tests can capture output by adding
their own sink. APScheduler logs through the standard logging module;
its warnings are forwarded to the same sink.

License: MIT
============================================================================
"""

import logging
import sys
from typing import Any, Optional

from loguru import logger


TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)


# ============================================================================
# STANDARD LIBRARY BRIDGE
# ============================================================================

# Libraries that log through the standard logging module
FORWARDED_LOGGERS = ("apscheduler",)


class InterceptHandler(logging.Handler):
    """Forward standard-library log records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.bind(component=record.name).opt(
            exception=record.exc_info
        ).log(level, record.getMessage())


def _forward_stdlib_loggers() -> None:
    """Route third-party loggers through the loguru sink, warnings and up."""
    for name in FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.setLevel(logging.WARNING)
        std_logger.propagate = False


# ============================================================================
# LOGGER CONFIGURATION
# ============================================================================

def setup_logging(
    level: Any = "INFO",
    *,
    json: bool = False,
    colorize: bool = True,
) -> int:
    """
    Configure the process-wide console sink.

    Args:
        level: Minimum level to emit
        json: Serialize each record as a JSON line instead of text
        colorize: Colour the text output (ignored for JSON)

    Returns:
        The loguru handler id of the console sink
    """
    # Remove default loguru handler
    logger.remove()
    logger.configure(extra={"component": "pinger"})

    # Accepts a LogLevel enum member or a plain level name
    level_name = str(getattr(level, "value", level)).upper()

    handler_id = logger.add(
        sys.stdout,
        format="{message}" if json else TEXT_FORMAT,
        level=level_name,
        colorize=colorize and not json,
        serialize=json,
        backtrace=False,
        diagnose=False,
        enqueue=False,
    )

    _forward_stdlib_loggers()

    logger.bind(component="Logging").debug(f"Logging initialized at level {level_name}")
    return handler_id


def get_logger(name: Optional[str] = None):
    """
    Get logger instance with optional component name.

    Args:
        name: Component name shown in each log line

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(component=name)
    return logger
