"""
Configuration Models for Endpoint Pinger

Typed, immutable models for the YAML endpoint configuration.

    ConfigFile         ← what the YAML document contains (templates)
    EndpointTemplate   ← one entry of `endpoints`, optionally with iterations
    IterationSpec      ← one (name, id) substitution pair
    Endpoint           ← a concrete probe target after expansion
    RunConfig          ← the validated, expanded configuration the runner owns

All models are frozen: once loaded, nothing mutates them for the life of
the process.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from config.constants import LogLevel


class ConfigModel(BaseModel):
    """Shared model behaviour: frozen, hyphenated aliases, unknown keys ignored."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def none_is_empty_string(cls, v: Any, info: ValidationInfo) -> Any:
        """A YAML key with no value parses as None; string fields treat it as unset."""
        if v is None and cls.model_fields[info.field_name].annotation is str:
            return ""
        return v


class IterationSpec(ConfigModel):
    """Substitution values for one generated endpoint."""

    name: str = ""
    id: str = ""


class Endpoint(ConfigModel):
    """A concrete probe target."""

    name: str = ""
    url: str = ""
    method: str = ""


class EndpointTemplate(ConfigModel):
    """
    Declarative description of one or more probe targets.

    When ``iterations`` is empty the template is itself a concrete
    endpoint and its strings pass through untouched.
    """

    name: str = ""
    url: str = ""
    method: str = ""
    iterations: Tuple[IterationSpec, ...] = ()

    @field_validator("iterations", mode="before")
    @classmethod
    def none_is_no_iterations(cls, v: Any) -> Any:
        return () if v is None else v

    def as_endpoint(self) -> Endpoint:
        """Return the template's own fields as a concrete Endpoint."""
        return Endpoint(name=self.name, url=self.url, method=self.method)


class ConfigFile(ConfigModel):
    """Raw contents of the YAML configuration document."""

    api_key_header_name: str = Field(default="", alias="api-key-header-name")
    api_key: str = Field(default="", alias="api-key-value")
    user_agent: str = Field(default="", alias="user-agent")
    timeout_seconds: int = Field(default=0, ge=0, alias="timeout-seconds")
    schedule: str = ""
    endpoints: Tuple[EndpointTemplate, ...] = ()
    log_level: str = Field(default="", alias="log-level")
    http_logging_enabled: bool = Field(default=False, alias="enable-http-logging")

    @field_validator("endpoints", mode="before")
    @classmethod
    def none_is_no_endpoints(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("timeout_seconds", "http_logging_enabled", mode="before")
    @classmethod
    def none_is_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].default
        return v


class RunConfig(ConfigModel):
    """
    Validated runtime configuration.

    Owned read-only by the scheduler for the process lifetime. The
    endpoint list is already expanded.
    """

    api_key_header_name: str = Field(default="", alias="api-key-header-name")
    api_key: str = Field(default="", alias="api-key-value")
    user_agent: str = Field(default="", alias="user-agent")
    timeout_seconds: int = Field(default=0, ge=0, alias="timeout-seconds")
    schedule: str = ""
    endpoints: Tuple[Endpoint, ...] = ()
    log_level: LogLevel = Field(default=LogLevel.INFO, alias="log-level")
    http_logging_enabled: bool = Field(default=False, alias="enable-http-logging")

    @model_validator(mode="after")
    def require_header_name_for_key(self) -> "RunConfig":
        """An API key without a header name to carry it is a config mistake."""
        if self.api_key and not self.api_key_header_name.strip():
            raise ValueError(
                "api-key-header-name must be set when api-key-value is provided"
            )
        return self

    @property
    def timeout(self) -> Optional[float]:
        """Client timeout in seconds, or None when timeouts are disabled (0)."""
        if self.timeout_seconds <= 0:
            return None
        return float(self.timeout_seconds)
