"""
Newsletter Feature Event Listeners

Listens to events from other features so subscribers can later be told
about new posts and events. Delivery to the mailing provider happens
outside this process; the listeners record what would be sent.
"""

import logging

from ...events.channels import (
    Channel, EventCreated, PostPublished, SubscriberAdded, SubscriberRemoved
)
from ...events.event_bus import EventBus

logger = logging.getLogger(__name__)


async def on_post_published(payload: PostPublished) -> None:
    logger.info('[Newsletter] Post published: "%s" in city %s', payload.title, payload.city_id)


async def on_event_created(payload: EventCreated) -> None:
    logger.info("[Newsletter] Event created: %s in city %s", payload.event_id, payload.city_id)


async def on_subscriber_added(payload: SubscriberAdded) -> None:
    logger.info("[Newsletter] New subscriber: %s for city %s", payload.email, payload.city_id)


async def on_subscriber_removed(payload: SubscriberRemoved) -> None:
    logger.info("[Newsletter] Unsubscribed: %s from city %s", payload.email, payload.city_id)


def register_newsletter_listeners(bus: EventBus) -> None:
    """Register all newsletter listeners. Call once per bus."""
    bus.subscribe(Channel.POST_PUBLISHED, on_post_published)
    bus.subscribe(Channel.EVENT_CREATED, on_event_created)
    bus.subscribe(Channel.SUBSCRIBER_ADDED, on_subscriber_added)
    bus.subscribe(Channel.SUBSCRIBER_REMOVED, on_subscriber_removed)
