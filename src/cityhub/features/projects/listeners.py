"""Projects Feature Event Bus Listeners"""

import logging

from ...events.channels import Channel, CityCreated, UserJoinedCity
from ...events.event_bus import EventBus

logger = logging.getLogger(__name__)


async def on_user_joined_city(payload: UserJoinedCity) -> None:
    logger.info("Projects feature: user %s joined city %s", payload.user_id, payload.city_id)


async def on_city_created(payload: CityCreated) -> None:
    logger.info("Projects feature: city %s (%s) created", payload.city_id, payload.name)


def register_projects_listeners(bus: EventBus) -> None:
    bus.subscribe(Channel.USER_JOINED_CITY, on_user_joined_city)
    bus.subscribe(Channel.CITY_CREATED, on_city_created)
