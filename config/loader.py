"""
Configuration Loader for Endpoint Pinger

Reads the YAML endpoint configuration, validates it with the models in
``config.models``, expands endpoint templates and resolves the log level.
Every failure here is fatal and surfaces as ``ConfigurationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml
from pydantic import ValidationError

from config.constants import LOG_LEVEL_ALIASES, LogLevel
from config.models import ConfigFile, RunConfig
from exceptions.base import ConfigurationError
from monitoring.expander import expand_endpoints
from utils.logger import get_logger


logger = get_logger("Config")


def parse_log_level(value: str) -> Tuple[LogLevel, bool]:
    """
    Map a `log-level` config value to a LogLevel.

    Args:
        value: Raw config value (case-insensitive, surrounding blanks ignored)

    Returns:
        (level, recognized). Empty and unknown values both map to INFO;
        only a recognized spelling reports True.
    """
    normalized = (value or "").strip().lower()
    level = LOG_LEVEL_ALIASES.get(normalized)
    if level is None:
        return LogLevel.INFO, False
    return level, True


def _read_document(path: Path) -> Dict[str, Any]:
    """Read and parse the YAML file into a mapping."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read config file {path}: {e}", path=str(path), cause=e
        ) from e

    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Config file {path} is not valid YAML: {e}", path=str(path), cause=e
        ) from e

    if document is None:
        return {}

    if not isinstance(document, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping at the top level, "
            f"got {type(document).__name__}",
            path=str(path),
        )

    return document


def _first_error_key(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return ""
    return ".".join(str(part) for part in errors[0].get("loc", ()))


def build_run_config(document: Dict[str, Any], source: str = "<memory>") -> RunConfig:
    """
    Validate a parsed config mapping and turn it into a RunConfig.

    Args:
        document: Parsed YAML mapping
        source: Where the mapping came from (used in error messages)

    Returns:
        Frozen RunConfig with endpoints expanded

    Raises:
        ConfigurationError: On any validation failure
    """
    try:
        config_file = ConfigFile.model_validate(document)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {source}: {e}",
            config_key=_first_error_key(e),
            path=source,
            cause=e,
        ) from e

    level, recognized = parse_log_level(config_file.log_level)
    if not recognized and config_file.log_level.strip():
        logger.warning(
            f"Invalid log level {config_file.log_level!r}, defaulting to info"
        )

    endpoints = expand_endpoints(config_file.endpoints)

    try:
        return RunConfig(
            api_key_header_name=config_file.api_key_header_name,
            api_key=config_file.api_key,
            user_agent=config_file.user_agent,
            timeout_seconds=config_file.timeout_seconds,
            schedule=config_file.schedule,
            endpoints=tuple(endpoints),
            log_level=level,
            http_logging_enabled=config_file.http_logging_enabled,
        )
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {source}: {e}",
            config_key="api-key-header-name",
            path=source,
            cause=e,
        ) from e


def load_config(path: Union[str, Path]) -> RunConfig:
    """
    Load the endpoint configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Frozen RunConfig, endpoints expanded

    Raises:
        ConfigurationError: File missing, unreadable, not YAML, or invalid
    """
    path = Path(path)
    document = _read_document(path)
    config = build_run_config(document, source=str(path))

    logger.debug(
        f"Loaded {path}: {len(config.endpoints)} endpoint(s), "
        f"schedule={config.schedule!r}"
    )
    return config
