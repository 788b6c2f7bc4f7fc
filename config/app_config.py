"""
Application configuration for the animals store
Provides schema validation and clear precedence (env > file > defaults)
"""

from __future__ import annotations

import copy
import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from utils.logger import Logger

# Environment variable naming the optional JSON configuration file
CONFIG_FILE_ENV_VAR = "ANIMALS_CONFIG_FILE"

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "schema_version": "1.0.0",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "database": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "path": {
                    "type": "string",
                    "minLength": 1,
                    "default": "animals.db",
                    "env_var": "ANIMALS_DB_PATH",
                },
            },
        },
        "logging": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                    "default": "INFO",
                    "env_var": "ANIMALS_LOG_LEVEL",
                },
                "format": {
                    "type": "string",
                    "enum": ["text", "json"],
                    "default": "text",
                    "env_var": "ANIMALS_LOG_FORMAT",
                },
                "log_dir": {
                    "type": ["string", "null"],
                    "default": None,
                    "env_var": "ANIMALS_LOG_DIR",
                },
            },
        },
    },
}


class ConfigurationError(Exception):
    """Configuration-specific exception"""


class SchemaValidationError(ConfigurationError):
    """Schema validation specific exception"""


@dataclass
class AppConfig:
    """Resolved configuration values"""

    db_path: Path = Path("animals.db")
    log_level: str = "INFO"
    log_format: str = "text"
    log_dir: Path | None = None
    # Name of the highest-priority source per dotted key
    sources: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: dict[str, Any], sources: dict[str, str] | None = None) -> AppConfig:
        database = data.get("database", {})
        logging_cfg = data.get("logging", {})
        log_dir = logging_cfg.get("log_dir")
        return cls(
            db_path=Path(database.get("path", "animals.db")).expanduser(),
            log_level=str(logging_cfg.get("level", "INFO")).upper(),
            log_format=str(logging_cfg.get("format", "text")),
            log_dir=Path(log_dir).expanduser() if log_dir else None,
            sources=dict(sources or {}),
        )


def _extract_defaults(properties: dict[str, Any]) -> dict[str, Any]:
    """Recursively extract default values from schema properties"""
    defaults: dict[str, Any] = {}
    for key, value in properties.items():
        if not isinstance(value, dict):
            continue
        if "default" in value:
            defaults[key] = value["default"]
        elif "properties" in value:
            nested = _extract_defaults(value["properties"])
            if nested:
                defaults[key] = nested
    return defaults


def _extract_env_mappings(properties: dict[str, Any], path: list[str] | None = None) -> dict[str, str]:
    """Map environment variable names to dotted config paths"""
    mappings: dict[str, str] = {}
    for key, value in properties.items():
        if not isinstance(value, dict):
            continue
        current = (path or []) + [key]
        if value.get("env_var"):
            mappings[value["env_var"]] = ".".join(current)
        if "properties" in value:
            mappings.update(_extract_env_mappings(value["properties"], current))
    return mappings


def _set_nested_value(data: dict[str, Any], dotted: str, value: Any) -> None:
    keys = dotted.split(".")
    current = data
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(_flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)


def _load_file(config_file: Path) -> dict[str, Any]:
    """Load configuration from a JSON file"""
    try:
        with open(config_file, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to load config file {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_file} must contain a JSON object")
    return data


def _load_environment(env: Mapping[str, str]) -> dict[str, Any]:
    """Load configuration overrides from environment variables"""
    data: dict[str, Any] = {}
    for env_var, dotted in _extract_env_mappings(CONFIG_SCHEMA["properties"]).items():
        raw_value = env.get(env_var)
        if raw_value is None or raw_value == "":
            continue
        if dotted == "logging.level":
            raw_value = raw_value.upper()
        _set_nested_value(data, dotted, raw_value)
    return data


def validate_config(data: dict[str, Any]) -> None:
    """Validate merged configuration against CONFIG_SCHEMA.

    Raises:
        SchemaValidationError: If any value violates the schema.
    """
    validator = Draft7Validator(CONFIG_SCHEMA)
    first = best_match(validator.iter_errors(data))
    if first is not None:
        message = f"Configuration validation failed: {first.message}"
        if first.absolute_path:
            message += f" at path: {'.'.join(str(p) for p in first.absolute_path)}"
        raise SchemaValidationError(message)


def load_config(
    config_file: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Resolve configuration from defaults, an optional JSON file and the environment.

    Args:
        config_file: JSON config file. Falls back to $ANIMALS_CONFIG_FILE; when
            neither is given only defaults and environment are used.
        env: Environment mapping, defaults to os.environ.

    Returns:
        AppConfig: The validated configuration.

    Raises:
        ConfigurationError: If the file cannot be read or validation fails.
    """
    environ = os.environ if env is None else env
    logger = Logger()

    layers: list[tuple[str, dict[str, Any]]] = [
        ("defaults", _extract_defaults(CONFIG_SCHEMA["properties"])),
    ]

    file_path = config_file or environ.get(CONFIG_FILE_ENV_VAR)
    if file_path:
        path = Path(file_path).expanduser()
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        layers.append(("file", _load_file(path)))
        logger.debug(f"Loaded configuration file: {path}")

    layers.append(("environment", _load_environment(environ)))

    merged: dict[str, Any] = {}
    sources: dict[str, str] = {}
    for name, data in layers:
        _deep_merge(merged, data)
        for dotted in _flatten(data):
            sources[dotted] = name

    validate_config(merged)
    return AppConfig.from_mapping(merged, sources)
