"""
Configuration Package for Endpoint Pinger

This package contains all configuration-related modules including:
- Process settings with environment variable support
- Typed models for the YAML endpoint configuration
- Constants and enums used throughout the application

The YAML loader lives in ``config.loader`` and is imported from there
directly; it depends on the endpoint expander in ``monitoring``.
"""

from config.constants import (
    LogLevel,
    HTTPMethods,
    Placeholders,
    Defaults,
)
from config.settings import (
    PingerSettings,
    get_settings,
)
from config.models import (
    ConfigFile,
    Endpoint,
    EndpointTemplate,
    IterationSpec,
    RunConfig,
)

__all__ = [
    # Constants
    "LogLevel",
    "HTTPMethods",
    "Placeholders",
    "Defaults",
    # Settings
    "PingerSettings",
    "get_settings",
    # Models
    "ConfigFile",
    "Endpoint",
    "EndpointTemplate",
    "IterationSpec",
    "RunConfig",
]
