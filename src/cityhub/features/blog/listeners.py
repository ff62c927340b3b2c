"""
Blog Feature Event Bus Listeners

Posts themselves are announced on post:published; the newsletter feature
listens for that. These listeners react to tenant and membership changes.
"""

import logging

from ...events.channels import Channel, CityCreated, UserJoinedCity
from ...events.event_bus import EventBus

logger = logging.getLogger(__name__)


async def on_city_created(payload: CityCreated) -> None:
    logger.info("Blog feature: city %s (%s) created", payload.city_id, payload.name)


async def on_user_joined_city(payload: UserJoinedCity) -> None:
    logger.info("Blog feature: user %s joined city %s", payload.user_id, payload.city_id)


def register_blog_listeners(bus: EventBus) -> None:
    """Register all blog listeners. Call once per bus."""
    bus.subscribe(Channel.CITY_CREATED, on_city_created)
    bus.subscribe(Channel.USER_JOINED_CITY, on_user_joined_city)
