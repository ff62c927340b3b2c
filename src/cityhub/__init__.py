"""
CityHub - Community Platform Core

The in-process event bus that lets the events, projects, blog and
newsletter features react to each other without direct imports.

Quick Start:
    from cityhub import configure_cityhub, Channel

    bus = configure_cityhub()
    bus.emit(Channel.EVENT_CREATED, {
        "event_id": "e1", "city_id": "adelaide", "created_by": "u1"
    })
"""

from .events import (
    Channel, EventPayload, EventBus,
    EventBusError, UnknownChannelError, PayloadValidationError, SubscriptionError,
    get_event_bus, set_event_bus, reset_event_bus,
    emit_event, on_event, once_event, off_event
)
from .infrastructure.configuration import (
    ApplicationConfig, Environment, get_config, set_config
)
from .infrastructure.configurator import configure_cityhub, initialize, is_initialized

__version__ = "0.1.0"

__all__ = [
    "Channel", "EventPayload", "EventBus",
    "EventBusError", "UnknownChannelError", "PayloadValidationError", "SubscriptionError",
    "get_event_bus", "set_event_bus", "reset_event_bus",
    "emit_event", "on_event", "once_event", "off_event",
    "ApplicationConfig", "Environment", "get_config", "set_config",
    "configure_cityhub", "initialize", "is_initialized"
]
