"""
Event Bus Errors

Failures raised at the call site of the bus. Handler failures are never
raised here; they are logged by the bus and contained to the handler.
"""

from typing import Any


class EventBusError(Exception):
    """Base exception for event bus errors"""
    pass


class UnknownChannelError(EventBusError, ValueError):
    """Raised when a channel name is not part of the registry"""

    def __init__(self, channel: Any):
        self.channel = channel
        super().__init__(f"Unknown event channel: {channel!r}")


class PayloadValidationError(EventBusError, ValueError):
    """Raised when a payload does not match its channel's declared shape"""

    def __init__(self, channel: Any, message: str, errors: list = None):
        self.channel = channel
        self.errors = errors or []
        super().__init__(f"Invalid payload for '{channel}': {message}")


class SubscriptionError(EventBusError, TypeError):
    """Raised when subscription operations fail"""
    pass


__all__ = [
    "EventBusError", "UnknownChannelError", "PayloadValidationError",
    "SubscriptionError"
]
