"""
CityHub Application Configurator

🚀 Process Bootstrap:
Wires the event bus, logging and every feature's listeners together.
Call configure_cityhub() once at startup and hand the returned bus to
the feature modules that emit events.
"""

import logging
import logging.handlers
import weakref
from typing import Callable, Dict, List, Optional

from .configuration import ApplicationConfig, LoggingConfig, get_config
from ..events.event_bus import EventBus, get_event_bus
from ..features.blog.listeners import register_blog_listeners
from ..features.events.listeners import register_events_listeners
from ..features.newsletter.listeners import register_newsletter_listeners
from ..features.projects.listeners import register_projects_listeners

logger = logging.getLogger(__name__)

# Each entry point registers one feature's listeners on the given bus
LISTENER_REGISTRARS: List[Callable[[EventBus], None]] = [
    register_newsletter_listeners,
    register_events_listeners,
    register_blog_listeners,
    register_projects_listeners,
]

_initialized_buses: "weakref.WeakSet[EventBus]" = weakref.WeakSet()

# Handlers attached by configure_logging, by logger name
_attached_handlers: Dict[str, List[logging.Handler]] = {}


def configure_logging(config: LoggingConfig, logger_name: str = "cityhub") -> logging.Logger:
    """
    Configure the package logger from LoggingConfig.

    Handlers are only attached once; calling this again just updates the
    level so repeated bootstraps do not duplicate log lines. Once the
    attached handlers have been removed, the next call attaches new ones.
    """
    package_logger = logging.getLogger(logger_name)
    package_logger.setLevel(config.level.upper())

    attached = _attached_handlers.get(logger_name, [])
    if not any(handler in package_logger.handlers for handler in attached):
        handlers: List[logging.Handler] = []
        formatter = logging.Formatter(config.format)

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        handlers.append(stream_handler)

        if config.file_path:
            file_handler = logging.handlers.RotatingFileHandler(
                config.file_path,
                maxBytes=config.max_file_size,
                backupCount=config.backup_count
            )
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        for handler in handlers:
            package_logger.addHandler(handler)
        _attached_handlers[logger_name] = handlers

    return package_logger


def initialize(bus: Optional[EventBus] = None) -> EventBus:
    """
    Register every feature's listeners on a bus.

    Safe to call multiple times - listeners are only registered once per bus.
    """
    bus = bus or get_event_bus()

    if bus in _initialized_buses:
        logger.info("[Core] Already initialized, skipping")
        return bus

    logger.info("[Core] Initializing application systems...")

    for register in LISTENER_REGISTRARS:
        register(bus)

    _initialized_buses.add(bus)
    logger.info("[Core] Initialization complete")
    return bus


def is_initialized(bus: Optional[EventBus] = None) -> bool:
    """Check whether listeners have been registered on a bus"""
    return (bus or get_event_bus()) in _initialized_buses


def configure_cityhub(
    config: Optional[ApplicationConfig] = None,
    bus: Optional[EventBus] = None,
    setup_logging: bool = True
) -> EventBus:
    """
    Configure the platform core.

    Args:
        config: Application configuration (defaults to the global one)
        bus: Existing bus to initialize; a new one is built from config if omitted
        setup_logging: Whether to attach handlers to the package logger

    Returns:
        EventBus: The bus with all feature listeners registered
    """
    config = config or get_config()

    if setup_logging:
        configure_logging(config.logging)

    if bus is None:
        bus = EventBus.from_config(config.event_bus)

    logger.debug("Configuring CityHub for %s", config.environment.value)
    return initialize(bus)


__all__ = [
    "LISTENER_REGISTRARS", "configure_logging", "initialize",
    "is_initialized", "configure_cityhub"
]
