"""
Settings Module for Endpoint Pinger

Process-level configuration using Pydantic Settings. These values come
from environment variables (prefix ``PINGER_``) or a ``.env`` file and
control how the process runs; what it pings lives in the YAML config
file (see ``config.loader``).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.constants import Defaults


class PingerSettings(BaseSettings):
    """
    Main Settings Class

    Controls where the endpoint config is read from and how logging
    and the scheduler behave.
    """

    model_config = SettingsConfigDict(
        env_prefix="PINGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )

    # Endpoint configuration file
    config_path: Path = Field(
        default=Path(Defaults.CONFIG_PATH),
        description="Path to the YAML endpoint configuration file"
    )

    # Logging output
    log_json: bool = Field(
        default=False,
        description="Serialize log records as JSON lines"
    )
    log_colorize: bool = Field(
        default=True,
        description="Enable colored console output"
    )

    # Scheduler
    timezone: Optional[str] = Field(
        default=None,
        description="Timezone for schedule evaluation (local time if unset)"
    )
    max_overlapping_firings: int = Field(
        default=Defaults.MAX_OVERLAPPING_FIRINGS,
        ge=1,
        le=10000,
        description="How many firings of one endpoint may run at the same time"
    )

    @field_validator("timezone", mode="before")
    @classmethod
    def empty_timezone_is_local(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty timezone string as 'use local time'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache()
def get_settings() -> PingerSettings:
    """
    Get cached settings instance.

    Returns:
        PingerSettings: Process settings instance
    """
    return PingerSettings()
