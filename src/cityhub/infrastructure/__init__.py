"""
Infrastructure - Configuration and Bootstrap

The package root imports the configurator eagerly, which in turn imports
every feature's listeners module.
"""

from .configuration import (
    ApplicationConfig, Environment, EventBusConfig, LoggingConfig,
    get_config, set_config, configure_from_file, configure_from_dict
)

__all__ = [
    "ApplicationConfig", "Environment", "EventBusConfig", "LoggingConfig",
    "get_config", "set_config", "configure_from_file", "configure_from_dict"
]
