"""
Constants Module for Endpoint Pinger

Contains the constant values and enumerations used throughout
the application.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Final


class LogLevel(str, Enum):
    """Logging level enumeration (loguru level names)."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# Accepted spellings of the `log-level` config option
LOG_LEVEL_ALIASES: Final[Dict[str, LogLevel]] = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warn": LogLevel.WARNING,
    "warning": LogLevel.WARNING,
    "error": LogLevel.ERROR,
}


class HTTPMethods(str, Enum):
    """HTTP Methods for ping requests."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"


class Placeholders:
    """Substitution tokens understood by endpoint templates."""

    NAME: Final[str] = "{name}"
    ID: Final[str] = "{id}"


class Defaults:
    """Default values."""

    CONFIG_PATH: Final[str] = "config.yaml"
    HTTP_METHOD: Final[str] = HTTPMethods.GET.value
    MAX_REDIRECTS: Final[int] = 10
    MAX_OVERLAPPING_FIRINGS: Final[int] = 100
    NAME_COLUMN_WIDTH: Final[int] = 30
    METHOD_COLUMN_WIDTH: Final[int] = 6
    STATUS_COLUMN_WIDTH: Final[int] = 9


class Headers:
    """Header names set by the probe executor."""

    USER_AGENT: Final[str] = "User-Agent"


class ScheduleDescriptors:
    """Predefined schedule shortcuts and their crontab equivalents."""

    EVERY_PREFIX: Final[str] = "@every "

    CRONTAB: Final[Dict[str, str]] = {
        "@yearly": "0 0 1 1 *",
        "@annually": "0 0 1 1 *",
        "@monthly": "0 0 1 * *",
        "@weekly": "0 0 * * 0",
        "@daily": "0 0 * * *",
        "@midnight": "0 0 * * *",
        "@hourly": "0 * * * *",
    }


class ErrorCodes:
    """Process exit codes."""

    OK: Final[int] = 0
    FATAL: Final[int] = 1
