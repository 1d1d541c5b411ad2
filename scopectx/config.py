"""
Configuration management for scopectx.

Loads configuration from multiple sources in order of priority:
1. Environment variables (SCOPECTX_*)
2. User config (~/.config/scopectx/config.toml)
3. System config (/etc/scopectx/config.toml)
4. Default config (bundled with package)
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="warning", description="Level for the scopectx logger")
    log_transitions: bool = Field(
        default=False,
        description="Log setup/cleanup transitions at debug level"
    )

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return value


class ScopeConfig(BaseModel):
    """Behaviour of the invocation wrappers."""
    read_only_views: bool = Field(
        default=True,
        description="Pass with_ref operations a read-only view of the context"
    )


class ResourceConfig(BaseModel):
    """Settings for the bundled file resources."""
    create_parents: bool = Field(
        default=False,
        description="Create missing parent directories in CreateFile"
    )


class ScopectxConfig(BaseModel):
    """Main scopectx configuration."""
    model_config = ConfigDict(extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scope: ScopeConfig = Field(default_factory=ScopeConfig)
    resources: ResourceConfig = Field(default_factory=ResourceConfig)


def get_config_paths() -> list[Path]:
    """Get configuration file paths in order of priority."""
    return [
        Path.home() / ".config" / "scopectx" / "config.toml",
        Path("/etc/scopectx/config.toml"),
        Path(__file__).parent / "data" / "default.toml",
    ]


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file."""
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {path}: {e}",
            suggested_action="Fix the syntax error or remove the file."
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e


def merge_configs(base: dict, override: dict) -> dict:
    """Deep merge two configuration dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def _env_flag(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean, got {raw!r}",
        suggested_action="Use one of: 1, 0, true, false, yes, no, on, off."
    )


def load_env_overrides() -> dict[str, Any]:
    """Load configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    level = os.environ.get("SCOPECTX_LOG_LEVEL")
    if level:
        overrides.setdefault("logging", {})["level"] = level

    transitions = _env_flag("SCOPECTX_LOG_TRANSITIONS")
    if transitions is not None:
        overrides.setdefault("logging", {})["log_transitions"] = transitions

    read_only = _env_flag("SCOPECTX_READ_ONLY_VIEWS")
    if read_only is not None:
        overrides.setdefault("scope", {})["read_only_views"] = read_only

    # Debug mode
    if _env_flag("SCOPECTX_DEBUG"):
        overrides.setdefault("logging", {})["level"] = "debug"
        overrides["logging"]["log_transitions"] = True

    return overrides


def load_config() -> ScopectxConfig:
    """Load configuration from all sources."""
    config_data: dict[str, Any] = {}

    # Load from files (lowest to highest priority)
    for path in reversed(get_config_paths()):
        config_data = merge_configs(config_data, load_toml_config(path))

    # Apply environment overrides (highest priority)
    config_data = merge_configs(config_data, load_env_overrides())

    try:
        return ScopectxConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid scopectx configuration: {e}") from e


# Global config instance
_config: Optional[ScopectxConfig] = None


def get_config() -> ScopectxConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: ScopectxConfig) -> None:
    """Install an explicit configuration, bypassing file and env loading."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None


def configure_logging(config: Optional[ScopectxConfig] = None) -> logging.Logger:
    """
    Attach a stream handler to the "scopectx" logger.

    Safe to call more than once: the level is updated and only one
    handler is ever installed.
    """
    config = config or get_config()
    logger = logging.getLogger("scopectx")
    logger.setLevel(config.logging.level.upper())

    if not any(getattr(h, "_scopectx", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        handler._scopectx = True
        logger.addHandler(handler)

    return logger
