"""
Exceptions Package for Endpoint Pinger

Provides the exception hierarchy for error handling
throughout the application.
"""

from exceptions.base import (
    PingerException,
    ConfigurationError,
    SchedulingError
)

__all__ = [
    "PingerException",
    "ConfigurationError",
    "SchedulingError"
]
