"""Settings for gradeknobs: environment variables and settings files.

Environment variable format:
    GRADEKNOBS_<SETTING>

Examples:
    - GRADEKNOBS_LOGGING_ENABLED=false
    - GRADEKNOBS_LOG_LEVEL=info
    - GRADEKNOBS_HASH_SECRET=...

Settings files (YAML or JSON) hold the same keys in lowercase. Environment
variables override values loaded from a file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, Sequence, TypeVar, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigurationError, NotFoundError

T = TypeVar("T")

ENV_PREFIX = "GRADEKNOBS_"
TRUTH_VALUES = ("true", "1", "yes", "on")
LOG_LEVELS = ("INFO", "DEBUG", "ERROR")
DEFAULT_LOG_LEVEL = "DEBUG"
DEFAULT_HASH_SECRET = "294S@t>9w"

PACKAGE_LOGGER = "gradeknobs"


def get_config_boolean(
    name: str,
    default: bool,
    truth_values: Sequence[str] = TRUTH_VALUES,
) -> bool:
    """Read a boolean from the environment.

    Unset, empty and blank values yield ``default``. Anything else is true
    only if it matches one of ``truth_values`` (case-insensitive).
    """
    value = os.environ.get(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized == "":
        return default
    return normalized in truth_values


def get_config(
    name: str,
    default: T,
    convert: Callable[[str], T] | None = None,
) -> T:
    """Read a value from the environment, converting it when set.

    Args:
        name: Environment variable name
        default: Value returned when the variable is unset
        convert: Optional conversion applied to the raw string

    Returns:
        The converted value or ``default``
    """
    value = os.environ.get(name)
    if value is None:
        return default
    if convert is None:
        return value  # type: ignore[return-value]
    return convert(value)


def _normalize_log_level(value: Any) -> str:
    level = str(value).strip().upper()
    return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTH_VALUES


@dataclass
class GradingSettings:
    """Runtime settings for the grading core.

    Attributes:
        logging_enabled: Whether the ``gradeknobs`` logger emits records
        log_level: One of ``LOG_LEVELS``; unknown values fall back to DEBUG
        hash_secret: HMAC key used by ``gradeknobs.ids.hash_id``
        hash_length: Default length of content hash ids
    """

    logging_enabled: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    hash_secret: str = DEFAULT_HASH_SECRET
    hash_length: int = 8

    def __post_init__(self) -> None:
        self.log_level = _normalize_log_level(self.log_level)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GradingSettings:
        """Build settings from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if "logging_enabled" in values:
            values["logging_enabled"] = _parse_bool(values["logging_enabled"])
        if "hash_length" in values:
            try:
                values["hash_length"] = int(values["hash_length"])
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid hash_length: {values['hash_length']!r}",
                    context={"hash_length": values["hash_length"]},
                ) from e
        return cls(**values)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> GradingSettings:
        """Build settings from environment variables only."""
        return cls.from_dict(_environment_overrides(prefix))

    @classmethod
    def from_file(
        cls, path: Union[str, Path], prefix: str = ENV_PREFIX
    ) -> GradingSettings:
        """Load settings from a YAML or JSON file, then apply env overrides.

        Raises:
            NotFoundError: If the file does not exist
            ConfigurationError: If the format is unsupported or unreadable
        """
        path = Path(path).resolve()
        if not path.exists():
            raise NotFoundError(
                f"Settings file not found: {path}", context={"path": str(path)}
            )

        suffix = path.suffix.lower()
        with open(path, encoding="utf-8") as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported settings file format: {suffix}",
                    context={"path": str(path)},
                )

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file must contain a mapping: {path}",
                context={"path": str(path), "type": type(data).__name__},
            )

        merged = {**data, **_environment_overrides(prefix)}
        return cls.from_dict(merged)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a dictionary."""
        return {
            "logging_enabled": self.logging_enabled,
            "log_level": self.log_level,
            "hash_secret": self.hash_secret,
            "hash_length": self.hash_length,
        }


def _environment_overrides(prefix: str) -> Dict[str, Any]:
    """Collect the settings that are explicitly set in the environment."""
    overrides: Dict[str, Any] = {}

    enabled = os.environ.get(f"{prefix}LOGGING_ENABLED")
    if enabled is not None and enabled.strip():
        overrides["logging_enabled"] = get_config_boolean(
            f"{prefix}LOGGING_ENABLED", True
        )

    for name in ("log_level", "hash_secret", "hash_length"):
        value = get_config(f"{prefix}{name.upper()}", None)
        if value is not None:
            overrides[name] = value

    return overrides


def configure_logging(settings: GradingSettings | None = None) -> logging.Logger:
    """Apply logging settings to the package logger.

    Args:
        settings: Settings to apply. Defaults to ``GradingSettings.from_env()``.

    Returns:
        The configured ``gradeknobs`` logger
    """
    if settings is None:
        settings = GradingSettings.from_env()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, settings.log_level))
    package_logger.disabled = not settings.logging_enabled
    return package_logger
