"""
Events - Cross-Feature Pub/Sub

Structure:
- channels.py:  the channel registry and payload models
- event_bus.py: the in-process dispatcher
- errors.py:    exceptions raised at the call site

Example:
    from cityhub.events import Channel, EventBus

    bus = EventBus()
    bus.subscribe(Channel.POST_PUBLISHED, notify_subscribers)
    bus.emit(Channel.POST_PUBLISHED, {
        "post_id": "p1", "city_id": "adelaide", "author_id": "u1", "title": "Hello"
    })
"""

from .channels import (
    Channel, EventPayload, CHANNEL_PAYLOADS,
    resolve_channel, payload_model_for, validate_payload
)
from .errors import (
    EventBusError, UnknownChannelError, PayloadValidationError, SubscriptionError
)
from .event_bus import (
    EventBus, EventBusMetrics, Subscription, EventHandler,
    get_event_bus, set_event_bus, reset_event_bus,
    emit_event, on_event, once_event, off_event
)

__all__ = [
    "Channel", "EventPayload", "CHANNEL_PAYLOADS",
    "resolve_channel", "payload_model_for", "validate_payload",
    "EventBusError", "UnknownChannelError", "PayloadValidationError", "SubscriptionError",
    "EventBus", "EventBusMetrics", "Subscription", "EventHandler",
    "get_event_bus", "set_event_bus", "reset_event_bus",
    "emit_event", "on_event", "once_event", "off_event"
]
