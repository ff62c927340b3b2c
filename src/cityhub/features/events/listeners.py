"""
Events Feature Event Bus Listeners
Registers listeners for events emitted by other features
"""

import logging

from ...events.channels import Channel, CityCreated, UserJoinedCity
from ...events.event_bus import EventBus

logger = logging.getLogger(__name__)


async def on_user_joined_city(payload: UserJoinedCity) -> None:
    # Welcome mail with upcoming events goes through the newsletter feature
    logger.info("Events feature: user %s joined city %s", payload.user_id, payload.city_id)


async def on_city_created(payload: CityCreated) -> None:
    logger.info("Events feature: city %s (%s) created", payload.city_id, payload.name)


def register_events_listeners(bus: EventBus) -> None:
    """Register all events-feature listeners. Call once per bus."""
    bus.subscribe(Channel.USER_JOINED_CITY, on_user_joined_city)
    bus.subscribe(Channel.CITY_CREATED, on_city_created)
