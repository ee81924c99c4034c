"""
Configuration for dcfail.

The classification core takes its one policy input, the restart-on-regular-
deactivation flag, as a call parameter. This module is where callers such as
the CLI obtain that value from a YAML file and the environment.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults

Example dcfail.yaml
-------------------
    data_call:
      restart_radio_on_regular_deactivation: ${RESTART_RADIO:false}
    logging:
      level: INFO
      file: logs/dcfail.log

Environment Overrides
---------------------
    DCFAIL_RESTART_RADIO_ON_REGULAR_DEACTIVATION   true/false (yes/no, on/off, 1/0)
    DCFAIL_LOG_LEVEL                               DEBUG..CRITICAL
"""

import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from dcfail.core.env import LOG_LEVELS, get_env_bool, get_env_whitelist, parse_bool
from dcfail.core.exceptions import ConfigValidationError
from dcfail.core.logging import get_logger

logger = get_logger(__name__)

CONFIG_FILENAMES = ("dcfail.yaml", "config.yaml")

ENV_RESTART_RADIO = "DCFAIL_RESTART_RADIO_ON_REGULAR_DEACTIVATION"
ENV_LOG_LEVEL = "DCFAIL_LOG_LEVEL"


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles strings with ${VAR_NAME} or ${VAR_NAME:default} syntax inside
    nested dictionaries and lists.

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    # Return primitives (int, float, bool, None) unchanged
    return value


@dataclass
class DataCallConfig:
    """Platform policy for data-call failures."""

    restart_radio_on_regular_deactivation: bool = False

    def __post_init__(self) -> None:
        """Accept YAML/env spellings of booleans and integer 0/1."""
        value = self.restart_radio_on_regular_deactivation
        if isinstance(value, bool):
            return
        if isinstance(value, int):
            parsed = {0: False, 1: True}.get(value)
        elif isinstance(value, str):
            parsed = parse_bool(value)
        else:
            parsed = None
        if parsed is None:
            raise ConfigValidationError(
                "restart_radio_on_regular_deactivation must be a boolean, "
                f"got {value!r}",
                field="data_call.restart_radio_on_regular_deactivation",
                value=value,
            )
        self.restart_radio_on_regular_deactivation = parsed


@dataclass
class LoggingSettings:
    """Logging settings applied by the CLI."""

    level: str = "WARNING"
    file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate log level."""
        if not isinstance(self.level, str) or self.level.upper() not in LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid logging level: {self.level!r}. "
                f"Valid options: {', '.join(sorted(LOG_LEVELS))}",
                field="logging.level",
                value=self.level,
            )
        self.level = self.level.upper()

    @property
    def file_path(self) -> Optional[Path]:
        return Path(self.file) if self.file else None


@dataclass
class Config:
    """Top-level dcfail configuration."""

    data_call: DataCallConfig = field(default_factory=DataCallConfig)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source_path: Optional[Path] = None

    @staticmethod
    def _filter_fields(cls_type: Any, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Filter dict to only keys that match dataclass fields, handling None."""
        if not data:
            return {}
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Section for {cls_type.__name__} must be a mapping, got {data!r}",
                value=data,
            )
        valid_keys = {f.name for f in fields(cls_type)}
        return {k: v for k, v in data.items() if k in valid_keys}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], source_path: Optional[Path] = None
    ) -> "Config":
        """Create Config from dictionary."""
        data = expand_env_vars(data)
        return cls(
            data_call=DataCallConfig(
                **cls._filter_fields(DataCallConfig, data.get("data_call"))
            ),
            logging=LoggingSettings(
                **cls._filter_fields(LoggingSettings, data.get("logging"))
            ),
            source_path=source_path,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data_call": {
                "restart_radio_on_regular_deactivation": (
                    self.data_call.restart_radio_on_regular_deactivation
                ),
            },
            "logging": {"level": self.logging.level, "file": self.logging.file},
        }


def _apply_env_overrides(config: Config) -> Config:
    """
    Apply environment variable overrides to configuration.

    Environment variables take precedence over config file values.
    """
    config.data_call.restart_radio_on_regular_deactivation = get_env_bool(
        ENV_RESTART_RADIO,
        default=config.data_call.restart_radio_on_regular_deactivation,
    )
    config.logging.level = get_env_whitelist(
        ENV_LOG_LEVEL, default=config.logging.level, allowed=LOG_LEVELS
    )
    return config


def find_config_file(base_path: Path) -> Optional[Path]:
    """Return the first known config file in ``base_path``, if any."""
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to dcfail.yaml or
            config.yaml in base_path.
        base_path: Directory searched when config_path is not given.
            Defaults to current directory.

    Returns:
        Config object with all settings.

    Raises:
        ConfigValidationError: If the file is not valid YAML or holds
            invalid values, or if config_path is given but is not a file.
    """
    base_path = base_path or Path.cwd()

    if config_path is None:
        config_path = find_config_file(base_path)
    elif not config_path.is_file():
        logger.error("Config file not found", path=config_path)
        raise ConfigValidationError(
            f"Config file not found: {config_path}",
            field="config_path",
            value=config_path,
        )
    if config_path is None:
        logger.debug("No config file found, using defaults", base_path=base_path)
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error("Could not parse config file", path=config_path, error=str(e))
        raise ConfigValidationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"Config file {config_path} must contain a mapping", value=data
        )

    config = Config.from_dict(data, source_path=config_path)
    logger.debug("Loaded config", path=config_path)
    return _apply_env_overrides(config)
