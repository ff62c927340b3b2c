"""
Configuration Management for CityHub

🔧 Unified Configuration System:
This module provides configuration management for the platform core,
supporting different environments and deployment scenarios.
"""

from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, fields
from enum import Enum
import json
import os
from pathlib import Path

import yaml


class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class EventBusConfig:
    """Event bus configuration"""
    max_subscribers_per_channel: int = 50  # 0 disables the leak warning
    trace_emissions: bool = False
    enable_metrics: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def _coerce(name: str, expected: Any, value: Any) -> Any:
    """Convert a loaded config value to its declared field type.

    Numeric and boolean strings are converted. Values that do not fit the
    field raise ValueError naming the setting.
    """
    if expected is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS:
            return value.strip().lower() in _TRUE_STRINGS
        raise ValueError(f"Invalid value for {name}: expected a boolean, got {value!r}")

    if expected is int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid value for {name}: expected an integer, got {value!r}")
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().lstrip("-").isdecimal():
            return int(value.strip())
        raise ValueError(f"Invalid value for {name}: expected an integer, got {value!r}")

    if expected is str:
        if isinstance(value, str):
            return value
        raise ValueError(f"Invalid value for {name}: expected a string, got {value!r}")

    if expected == Optional[str]:
        if value is None or isinstance(value, str):
            return value
        raise ValueError(f"Invalid value for {name}: expected a string or null, got {value!r}")

    raise ValueError(f"Unsupported setting type for {name}: {expected!r}")


@dataclass
class ApplicationConfig:
    """Complete application configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    event_bus: EventBusConfig = field(default_factory=EventBusConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    custom: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'ApplicationConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.debug = True
            config.event_bus.trace_emissions = True
            config.logging.level = "DEBUG"

        elif environment == Environment.TESTING:
            config.event_bus.trace_emissions = False
            config.logging.level = "WARNING"

        elif environment == Environment.PRODUCTION:
            config.debug = False
            config.event_bus.trace_emissions = False
            config.logging.level = "INFO"

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary"""
        if "environment" in config_dict:
            config = cls.for_environment(Environment(config_dict["environment"]))
        else:
            config = cls()

        if "debug" in config_dict:
            config.debug = _coerce("debug", bool, config_dict["debug"])

        for section in ("event_bus", "logging"):
            target = getattr(config, section)
            declared = {f.name: f.type for f in fields(target)}
            for key, value in config_dict.get(section, {}).items():
                if key in declared:
                    setattr(target, key, _coerce(f"{section}.{key}", declared[key], value))

        if "custom" in config_dict:
            config.custom.update(config_dict["custom"])

        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'ApplicationConfig':
        """Load configuration from a JSON or YAML file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix == '.json':
            with open(config_path) as f:
                config_dict = json.load(f)
        elif config_path.suffix in ('.yml', '.yaml'):
            with open(config_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        return cls.from_dict(config_dict)

    @classmethod
    def from_environment(cls) -> 'ApplicationConfig':
        """Create configuration from environment variables"""
        env_name = os.getenv('CITYHUB_ENV', 'development')
        environment = Environment(env_name)

        config = cls.for_environment(environment)

        # Override with environment variables
        if os.getenv('CITYHUB_DEBUG'):
            config.debug = os.getenv('CITYHUB_DEBUG').lower() == 'true'

        if os.getenv('CITYHUB_LOG_LEVEL'):
            config.logging.level = os.getenv('CITYHUB_LOG_LEVEL').upper()

        if os.getenv('CITYHUB_LOG_FILE'):
            config.logging.file_path = os.getenv('CITYHUB_LOG_FILE')

        if os.getenv('CITYHUB_MAX_SUBSCRIBERS'):
            config.event_bus.max_subscribers_per_channel = int(os.getenv('CITYHUB_MAX_SUBSCRIBERS'))

        if os.getenv('CITYHUB_TRACE_EVENTS'):
            config.event_bus.trace_emissions = os.getenv('CITYHUB_TRACE_EVENTS').lower() == 'true'

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "event_bus": {
                "max_subscribers_per_channel": self.event_bus.max_subscribers_per_channel,
                "trace_emissions": self.event_bus.trace_emissions,
                "enable_metrics": self.event_bus.enable_metrics
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file_path": self.logging.file_path,
                "max_file_size": self.logging.max_file_size,
                "backup_count": self.logging.backup_count
            },
            "custom": self.custom
        }


# Global configuration management
_current_config: Optional[ApplicationConfig] = None


def set_config(config: Optional[ApplicationConfig]):
    """Set the global configuration (None forces a reload from the environment)"""
    global _current_config
    _current_config = config


def get_config() -> ApplicationConfig:
    """Get the current global configuration"""
    global _current_config

    if _current_config is None:
        # Auto-create from environment if not set
        _current_config = ApplicationConfig.from_environment()

    return _current_config


def configure_from_file(config_path: Union[str, Path]):
    """Configure application from file"""
    config = ApplicationConfig.from_file(config_path)
    set_config(config)
    return config


def configure_from_dict(config_dict: Dict[str, Any]):
    """Configure application from dictionary"""
    config = ApplicationConfig.from_dict(config_dict)
    set_config(config)
    return config


__all__ = [
    "ApplicationConfig", "Environment", "EventBusConfig", "LoggingConfig",
    "set_config", "get_config", "configure_from_file", "configure_from_dict"
]
