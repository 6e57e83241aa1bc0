"""Global notification settings.

This module implements the settings schema using Pydantic for validation,
YAML loading with environment variable resolution, and the settings sources
the dispatch core reads on every call.
"""

import os
import re
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Final

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Matches ${VARIABLE_NAME} references
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Z0-9_]+)\}")

# Provider name meaning "no provider selected"
DISABLED_METHOD: Final[str] = "none"


class NotificationSettings(BaseModel):
    """Global notification configuration.

    Owned by the configuration subsystem; the dispatch core only reads it.
    """

    model_config = ConfigDict(frozen=True)

    notification_method: Annotated[
        str,
        Field(description="Identifier of the active provider, or 'none'"),
    ] = DISABLED_METHOD
    notification_enabled: Annotated[
        bool,
        Field(description="Whether notifications are delivered at all"),
    ] = False
    notification_template: Annotated[
        str,
        Field(description="Template used to render events for text-only providers"),
    ] = ""

    @field_validator("notification_method", mode="before")
    @classmethod
    def normalize_method(cls, v: object) -> object:
        """Strip and lowercase the provider identifier; None means no provider."""
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("notification_template", mode="before")
    @classmethod
    def normalize_template(cls, v: object) -> object:
        """Treat a missing template as empty."""
        return "" if v is None else v

    @property
    def provider_selected(self) -> bool:
        """True when a concrete provider is selected."""
        return self.notification_method not in ("", DISABLED_METHOD)


class ConfigurationError(Exception):
    """Raised when settings cannot be loaded or are invalid."""


class EnvironmentVariableError(ConfigurationError):
    """Raised when a referenced environment variable is not set."""


def resolve_env_var(value: str) -> str:
    """Resolve ${VARIABLE_NAME} references in a string value.

    Raises:
        EnvironmentVariableError: If a referenced variable is not set

    Examples:
        >>> os.environ["SENDER_METHOD"] = "webhook"
        >>> resolve_env_var("${SENDER_METHOD}")
        'webhook'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            msg = (
                f"Required environment variable '{var_name}' is not set. "
                f"Please set this variable before starting the application."
            )
            raise EnvironmentVariableError(msg)
        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars_in_dict(data: Mapping[str, object]) -> dict[str, object]:
    """Recursively resolve environment variables in string values."""
    result: dict[str, object] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = resolve_env_var(value)
        elif isinstance(value, Mapping):
            result[key] = resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
        elif isinstance(value, list):
            result[key] = [
                resolve_env_var(item) if isinstance(item, str) else item  # pyright: ignore[reportUnknownArgumentType]
                for item in value  # pyright: ignore[reportUnknownVariableType]
            ]
        else:
            result[key] = value
    return result


def _format_validation_error(error: ValidationError, source: str) -> str:
    error_lines = ["Notification settings validation failed:", ""]
    for item in error.errors():
        field_path = " → ".join(str(loc) for loc in item["loc"])
        error_lines.append(f"  Field: {field_path}")
        error_lines.append(f"  Error: {item['msg']}")
        error_lines.append(f"  Type: {item['type']}")
        error_lines.append("")
    error_lines.append(f"Configuration file: {source}")
    return "\n".join(error_lines)


def load_settings(config_path: Path) -> NotificationSettings:
    """Load and validate notification settings from a YAML file.

    An empty file yields the defaults (no provider, notifications disabled).

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise ConfigurationError(msg)

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = f"Failed to parse YAML configuration file: {config_path}\nYAML parsing error: {e}"
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}"
        raise ConfigurationError(msg) from e

    if raw_data is None:
        raw_data = {}
    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML dictionary at root level, got: {type(raw_data).__name__}"
        )
        raise ConfigurationError(msg)

    resolved = resolve_env_vars_in_dict(raw_data)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary

    try:
        return NotificationSettings.model_validate(resolved)
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e, str(config_path))) from e


class YamlSettingsSource:
    """Settings source that re-reads a YAML file on every ``get()``.

    Toggling ``notification_enabled`` in the file takes effect on the next
    dispatch call without a restart.
    """

    def __init__(self, path: Path) -> None:
        self._path: Path = path

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> NotificationSettings:
        return load_settings(self._path)


class StaticSettingsSource:
    """In-process settings source whose value can be replaced at runtime."""

    def __init__(self, settings: NotificationSettings | None = None) -> None:
        self._settings: NotificationSettings = settings or NotificationSettings()
        self._lock: threading.Lock = threading.Lock()

    def get(self) -> NotificationSettings:
        with self._lock:
            return self._settings

    def set(self, settings: NotificationSettings) -> None:
        with self._lock:
            self._settings = settings
