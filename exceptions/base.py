"""
Base Exception Classes for Endpoint Pinger

Provides the exception hierarchy used across the pinger. Only two tiers
ever surface as exceptions: configuration problems (fatal, before the
scheduler starts) and schedule registration problems (logged and skipped
per endpoint). Probe failures are never raised.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from datetime import datetime, timezone


class PingerException(Exception):
    """
    Base Exception Class

    All custom exceptions in the pinger inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Numeric error code for categorization
        details: Additional error details as dictionary
        cause: The underlying exception, if any
        timestamp: When the exception occurred
    """

    default_error_code: int = 1000

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    @property
    def full_message(self) -> str:
        """Get full error message with code."""
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def log_format(self) -> str:
        """
        Format exception for logging.

        Returns:
            Formatted string for logging
        """
        parts = [
            f"Exception: {self.__class__.__name__}",
            f"Code: {self.error_code}",
            f"Message: {self.message}"
        ]

        if self.details:
            parts.append(f"Details: {self.details}")

        if self.cause:
            parts.append(f"Cause: {self.cause}")

        return " | ".join(parts)

    def with_details(self, **kwargs: Any) -> "PingerException":
        """Add additional details to the exception and return self."""
        self.details.update(kwargs)
        return self

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        message: Optional[str] = None,
        **kwargs: Any
    ) -> "PingerException":
        """
        Create from another exception.

        Args:
            exception: The original exception
            message: Override message (uses original if not provided)
            **kwargs: Additional arguments for the exception

        Returns:
            New exception instance
        """
        return cls(
            message=message or str(exception) or type(exception).__name__,
            cause=exception,
            **kwargs
        )

    def __str__(self) -> str:
        return self.full_message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"details={self.details})"
        )


class ConfigurationError(PingerException):
    """
    Configuration Error

    Raised when the configuration file is missing, unparsable, or
    fails validation. Always fatal: the process exits before any
    endpoint is scheduled.
    """

    default_error_code = 1100

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        path: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if config_key:
            self.details["config_key"] = config_key

        if path:
            self.details["path"] = path


class SchedulingError(PingerException):
    """
    Scheduling Error

    Raised when a schedule expression cannot be turned into a trigger.
    The runner catches it per endpoint, logs it and moves on.
    """

    default_error_code = 1200

    def __init__(
        self,
        message: str,
        expression: Optional[str] = None,
        endpoint: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if expression is not None:
            self.details["expression"] = expression

        if endpoint:
            self.details["endpoint"] = endpoint
