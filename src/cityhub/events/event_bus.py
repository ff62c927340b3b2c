"""
Event Bus - In-Process Pub/Sub

🚀 Cross-Feature Event Publishing:
Features emit events when something happens (a post is published, an RSVP
is added) and other features react without importing each other.

Key Features:
- Closed channel registry with validated payloads
- Synchronous delivery in subscription order
- Persistent and one-shot subscriptions
- Error isolation between handlers
- Async handlers are scheduled, never awaited by emit
- Leak warning past a per-channel subscriber limit
"""

import asyncio
import inspect
import logging
import threading
from collections import defaultdict
from concurrent.futures import Future as ConcurrentFuture
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set, Union

from .channels import Channel, EventPayload, resolve_channel, validate_payload
from .errors import SubscriptionError
from ..infrastructure.configuration import EventBusConfig, get_config

logger = logging.getLogger(__name__)

# Type definitions
EventHandler = Callable[[EventPayload], Union[None, Awaitable[None]]]
PayloadLike = Union[EventPayload, Mapping[str, Any]]


class EventBusMetrics:
    """Metrics tracking for event bus operations"""

    def __init__(self):
        self._lock = threading.Lock()
        self.events_emitted = 0
        self.handler_invocations = 0
        self.handler_errors = 0
        self.subscriptions_created = 0
        self.start_time = datetime.now()

    def record_emit(self, delivery_count: int):
        """Record an emit operation"""
        with self._lock:
            self.events_emitted += 1
            self.handler_invocations += delivery_count

    def record_subscription(self):
        """Record a new subscription"""
        with self._lock:
            self.subscriptions_created += 1

    def record_handler_error(self):
        """Record a handler error"""
        with self._lock:
            self.handler_errors += 1

    def get_summary(self) -> Dict[str, Any]:
        """Get metrics summary"""
        uptime_seconds = (datetime.now() - self.start_time).total_seconds()

        with self._lock:
            return {
                "uptime_seconds": uptime_seconds,
                "events_emitted": self.events_emitted,
                "handler_invocations": self.handler_invocations,
                "handler_errors": self.handler_errors,
                "subscriptions_created": self.subscriptions_created,
                "error_rate": (
                    self.handler_errors / self.handler_invocations
                    if self.handler_invocations > 0 else 0
                )
            }


@dataclass(eq=False)
class Subscription:
    """A single registration of a handler on a channel"""
    channel: Channel
    handler: EventHandler
    once: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def handler_name(self) -> str:
        return describe_handler(self.handler)


def describe_handler(handler: Callable) -> str:
    """Readable identity of a handler for log lines"""
    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None)
    if name is None:
        return repr(handler)
    module = getattr(handler, "__module__", None)
    return f"{module}.{name}" if module else name


class EventBus:
    """
    In-process event bus.

    One instance is meant to live for the whole process and be handed to
    every feature module that emits or listens. Handlers run synchronously
    on the caller's stack, in the order they subscribed.

    The subscription table is guarded by a re-entrant lock. emit() takes a
    snapshot of the channel's subscriptions and dispatches outside the lock,
    so handlers may subscribe or unsubscribe while an emission is running.

    Coroutines returned by async handlers become tasks on the caller's
    running loop. Emitting from plain synchronous code hands them to a
    daemon loop thread owned by the bus; call shutdown() to stop it.
    """

    def __init__(
        self,
        max_subscribers_per_channel: int = 50,
        trace_emissions: bool = False,
        enable_metrics: bool = True
    ):
        self.max_subscribers_per_channel = max_subscribers_per_channel
        self.trace_emissions = trace_emissions
        self.enable_metrics = enable_metrics
        self.metrics = EventBusMetrics()

        self._subscriptions: Dict[Channel, List[Subscription]] = defaultdict(list)
        self._lock = threading.RLock()
        self._warned_channels: Set[Channel] = set()

        # Strong references to scheduled handler tasks until they finish
        self._pending_tasks: Set[Union[asyncio.Future, ConcurrentFuture]] = set()

        # Started on first async handler emitted from a thread with no running loop
        self._background_loop: Optional[asyncio.AbstractEventLoop] = None
        self._background_thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(cls, config: Optional[EventBusConfig] = None) -> 'EventBus':
        """Create an event bus from configuration"""
        config = config or get_config().event_bus
        return cls(
            max_subscribers_per_channel=config.max_subscribers_per_channel,
            trace_emissions=config.trace_emissions,
            enable_metrics=config.enable_metrics
        )

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, channel: Union[Channel, str], handler: EventHandler) -> None:
        """
        Register a handler for every future emission on a channel.

        Registering the same handler twice registers it twice; it will then
        be called twice per emission.

        Args:
            channel: Channel to listen on
            handler: Callable receiving the channel's payload model

        Raises:
            UnknownChannelError: If the channel is not registered
            SubscriptionError: If the handler is not callable
        """
        self._add(channel, handler, once=False)

    def subscribe_once(self, channel: Union[Channel, str], handler: EventHandler) -> None:
        """Register a handler that is removed right before its first call"""
        self._add(channel, handler, once=True)

    def unsubscribe(self, channel: Union[Channel, str], handler: EventHandler) -> bool:
        """
        Remove the earliest registration of a handler on a channel.

        Returns:
            bool: True if a registration was removed, False if none matched
        """
        channel = resolve_channel(channel)

        with self._lock:
            subscriptions = self._subscriptions.get(channel)
            if not subscriptions:
                return False

            for index, subscription in enumerate(subscriptions):
                if subscription.handler == handler:
                    del subscriptions[index]
                    if not subscriptions:
                        self._drop_channel(channel)
                    return True

        return False

    def remove_all_subscriptions_for_channel(self, channel: Union[Channel, str]) -> None:
        """Remove every registration on a channel, persistent or one-shot"""
        channel = resolve_channel(channel)

        with self._lock:
            self._drop_channel(channel)

    def remove_all_subscriptions(self) -> None:
        """Remove every registration on every channel"""
        with self._lock:
            self._subscriptions.clear()
            self._warned_channels.clear()

    def get_subscriber_count(self, channel: Union[Channel, str]) -> int:
        """Get the number of live registrations on a channel"""
        channel = resolve_channel(channel)

        with self._lock:
            return len(self._subscriptions.get(channel, ()))

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def emit(self, channel: Union[Channel, str], payload: PayloadLike) -> None:
        """
        Deliver a payload to every handler registered on a channel.

        The channel and payload are validated before any handler runs.
        Handlers are called in subscription order with the same payload
        object. Errors raised by a handler are logged and do not reach
        the caller or the remaining handlers.

        Args:
            channel: Channel to emit on
            payload: Instance of the channel's payload model, or a mapping
                that validates into it

        Raises:
            UnknownChannelError: If the channel is not registered
            PayloadValidationError: If the payload does not match the channel
        """
        channel = resolve_channel(channel)
        event = validate_payload(channel, payload)

        if self.trace_emissions:
            logger.debug("[EventBus] %s %s", channel.value, event.model_dump())

        with self._lock:
            subscriptions = self._subscriptions.get(channel)
            if subscriptions:
                snapshot = list(subscriptions)
                if any(subscription.once for subscription in snapshot):
                    subscriptions[:] = [s for s in subscriptions if not s.once]
                    if not subscriptions:
                        self._drop_channel(channel)
            else:
                snapshot = []

        for subscription in snapshot:
            self._invoke(subscription, event)

        if self.enable_metrics:
            self.metrics.record_emit(len(snapshot))

    def get_metrics(self) -> Dict[str, Any]:
        """Get metrics together with current subscription counts"""
        metrics = self.metrics.get_summary()

        with self._lock:
            metrics.update({
                "active_subscriptions": sum(len(subs) for subs in self._subscriptions.values()),
                "active_channels": len(self._subscriptions),
                "pending_tasks": len(self._pending_tasks)
            })

        return metrics

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _add(self, channel: Union[Channel, str], handler: EventHandler, once: bool) -> None:
        channel = resolve_channel(channel)
        if not callable(handler):
            raise SubscriptionError(f"Handler for '{channel.value}' must be callable, got {type(handler).__name__}")

        with self._lock:
            subscriptions = self._subscriptions[channel]
            subscriptions.append(Subscription(channel=channel, handler=handler, once=once))
            count = len(subscriptions)

            if (
                self.max_subscribers_per_channel > 0
                and count > self.max_subscribers_per_channel
                and channel not in self._warned_channels
            ):
                self._warned_channels.add(channel)
                logger.warning(
                    "Possible subscription leak: %d subscribers on '%s' (limit %d)",
                    count, channel.value, self.max_subscribers_per_channel
                )

        if self.enable_metrics:
            self.metrics.record_subscription()

    def _drop_channel(self, channel: Channel) -> None:
        # Caller holds the lock
        self._subscriptions.pop(channel, None)
        self._warned_channels.discard(channel)

    def _invoke(self, subscription: Subscription, event: EventPayload) -> None:
        """Call one handler with error isolation"""
        try:
            result = subscription.handler(event)
        except Exception:
            self._record_handler_error()
            logger.exception(
                "Event handler %s failed on '%s'",
                subscription.handler_name, subscription.channel.value
            )
            return

        if inspect.isawaitable(result):
            self._schedule(subscription, result)

    def _schedule(self, subscription: Subscription, awaitable: Awaitable) -> None:
        """Run an async handler's result without awaiting it from emit()"""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = asyncio.ensure_future(awaitable)
            with self._lock:
                self._pending_tasks.add(task)
            task.add_done_callback(partial(self._on_task_done, subscription))
            return

        # No loop in this thread; hand the work to the bus's own loop thread
        future = asyncio.run_coroutine_threadsafe(_drain(awaitable), self._get_background_loop())
        with self._lock:
            self._pending_tasks.add(future)
        future.add_done_callback(partial(self._on_task_done, subscription))

    def _get_background_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._background_loop is None or self._background_loop.is_closed():
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever, name="cityhub-event-bus", daemon=True
                )
                thread.start()
                self._background_loop = loop
                self._background_thread = thread
                logger.debug("[EventBus] Started background loop for async handlers")
            return self._background_loop

    def _on_task_done(self, subscription: Subscription, task: Union[asyncio.Future, ConcurrentFuture]) -> None:
        try:
            if task.cancelled():
                logger.debug(
                    "Async event handler %s on '%s' was cancelled",
                    subscription.handler_name, subscription.channel.value
                )
                return

            error = task.exception()
            if error is not None:
                self._record_handler_error()
                logger.error(
                    "Async event handler %s failed on '%s'",
                    subscription.handler_name, subscription.channel.value,
                    exc_info=(type(error), error, error.__traceback__)
                )
        finally:
            # Released last so pending_tasks == 0 means the outcome is recorded
            with self._lock:
                self._pending_tasks.discard(task)

    def _record_handler_error(self) -> None:
        if self.enable_metrics:
            self.metrics.record_handler_error()

    def shutdown(self, timeout: float = 5.0) -> None:
        """
        Stop the background loop used for async handlers emitted outside a loop.

        Handlers still running on it are abandoned. A later emit starts a
        fresh loop.
        """
        with self._lock:
            loop, thread = self._background_loop, self._background_thread
            self._background_loop = None
            self._background_thread = None

        if loop is None:
            return

        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout)
        if not loop.is_running():
            loop.close()
        logger.debug("[EventBus] Background loop stopped")


async def _drain(awaitable: Awaitable) -> Any:
    return await awaitable


# =============================================================================
# DEFAULT INSTANCE
# =============================================================================

_default_bus: Optional[EventBus] = None
_default_bus_lock = threading.Lock()


def get_event_bus() -> EventBus:
    """Get the process-wide bus, creating it from configuration on first use"""
    global _default_bus

    if _default_bus is None:
        with _default_bus_lock:
            if _default_bus is None:
                _default_bus = EventBus.from_config()

    return _default_bus


def set_event_bus(bus: EventBus) -> None:
    """Replace the process-wide bus"""
    global _default_bus
    _default_bus = bus


def reset_event_bus() -> None:
    """Forget the process-wide bus; the next get_event_bus() builds a new one"""
    global _default_bus
    with _default_bus_lock:
        previous, _default_bus = _default_bus, None
    if previous is not None:
        previous.shutdown()


# Convenience functions bound to the process-wide bus
def emit_event(channel: Union[Channel, str], payload: PayloadLike) -> None:
    """Emit on the process-wide bus"""
    get_event_bus().emit(channel, payload)


def on_event(channel: Union[Channel, str], handler: EventHandler) -> None:
    """Subscribe on the process-wide bus"""
    get_event_bus().subscribe(channel, handler)


def once_event(channel: Union[Channel, str], handler: EventHandler) -> None:
    """Subscribe once on the process-wide bus"""
    get_event_bus().subscribe_once(channel, handler)


def off_event(channel: Union[Channel, str], handler: EventHandler) -> bool:
    """Unsubscribe from the process-wide bus"""
    return get_event_bus().unsubscribe(channel, handler)


__all__ = [
    "EventBus", "EventBusMetrics", "Subscription", "EventHandler",
    "describe_handler", "get_event_bus", "set_event_bus", "reset_event_bus",
    "emit_event", "on_event", "once_event", "off_event"
]
