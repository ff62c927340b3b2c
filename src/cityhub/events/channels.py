"""
Channel Registry - Typed Event Channels

📡 Closed Channel Catalogue:
Every event that crosses a feature boundary travels on one of the channels
declared here. Each channel carries exactly one payload model, so producers
and consumers agree on field names and types without importing each other.

Channels are grouped by the feature that emits them:
- user:*        - account lifecycle and city membership
- event:*       - event lifecycle and RSVPs
- project:*     - project submissions and curation
- post:*        - blog publishing
- subscriber:*  - newsletter list changes
- city:*        - tenant lifecycle
"""

from enum import Enum
from typing import Any, Dict, Literal, Mapping, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import UnknownChannelError, PayloadValidationError


class Channel(str, Enum):
    """All event channels known to the platform"""
    # User events
    USER_CREATED = "user:created"
    USER_UPDATED = "user:updated"
    USER_JOINED_CITY = "user:joined_city"
    USER_LEFT_CITY = "user:left_city"

    # Event events
    EVENT_CREATED = "event:created"
    EVENT_UPDATED = "event:updated"
    EVENT_DELETED = "event:deleted"
    EVENT_RSVP_ADDED = "event:rsvp_added"
    EVENT_RSVP_UPDATED = "event:rsvp_updated"
    EVENT_RSVP_REMOVED = "event:rsvp_removed"

    # Project events
    PROJECT_SUBMITTED = "project:submitted"
    PROJECT_APPROVED = "project:approved"
    PROJECT_UPDATED = "project:updated"
    PROJECT_DELETED = "project:deleted"
    PROJECT_FEATURED = "project:featured"
    PROJECT_UNFEATURED = "project:unfeatured"

    # Blog events
    POST_PUBLISHED = "post:published"
    POST_UNPUBLISHED = "post:unpublished"
    POST_UPDATED = "post:updated"
    POST_DELETED = "post:deleted"

    # Newsletter events
    SUBSCRIBER_ADDED = "subscriber:added"
    SUBSCRIBER_REMOVED = "subscriber:removed"

    # City events
    CITY_CREATED = "city:created"
    CITY_UPDATED = "city:updated"
    CITY_DEACTIVATED = "city:deactivated"

    def __str__(self) -> str:
        return self.value


RSVPStatus = Literal["yes", "no", "maybe"]


class EventPayload(BaseModel):
    """
    Base class for channel payloads.

    Payloads are immutable and strict: unknown fields are rejected and
    values are not coerced between types.
    """
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


# =============================================================================
# USER PAYLOADS
# =============================================================================

class UserCreated(EventPayload):
    user_id: str
    email: str


class UserUpdated(EventPayload):
    user_id: str


class UserJoinedCity(EventPayload):
    user_id: str
    city_id: str
    role: str


class UserLeftCity(EventPayload):
    user_id: str
    city_id: str


# =============================================================================
# EVENT PAYLOADS
# =============================================================================

class EventCreated(EventPayload):
    event_id: str
    city_id: str
    created_by: str


class EventUpdated(EventPayload):
    event_id: str
    city_id: str
    updated_by: str


class EventDeleted(EventPayload):
    event_id: str
    city_id: str
    deleted_by: str


class RSVPAdded(EventPayload):
    event_id: str
    user_id: str
    status: RSVPStatus


class RSVPUpdated(EventPayload):
    event_id: str
    user_id: str
    status: RSVPStatus


class RSVPRemoved(EventPayload):
    event_id: str
    user_id: str


# =============================================================================
# PROJECT PAYLOADS
# =============================================================================

class ProjectSubmitted(EventPayload):
    project_id: str
    city_id: str
    created_by: str


class ProjectApproved(EventPayload):
    project_id: str
    city_id: str
    approved_by: str


class ProjectUpdated(EventPayload):
    project_id: str
    city_id: str
    updated_by: str


class ProjectDeleted(EventPayload):
    project_id: str
    city_id: str
    deleted_by: str


class ProjectFeatured(EventPayload):
    project_id: str
    city_id: str
    featured_by: str


class ProjectUnfeatured(EventPayload):
    project_id: str
    city_id: str


# =============================================================================
# BLOG PAYLOADS
# =============================================================================

class PostPublished(EventPayload):
    post_id: str
    city_id: str
    author_id: str
    title: str


class PostUnpublished(EventPayload):
    post_id: str
    city_id: str


class PostUpdated(EventPayload):
    post_id: str
    city_id: str
    updated_by: str


class PostDeleted(EventPayload):
    post_id: str
    city_id: str
    deleted_by: str


# =============================================================================
# NEWSLETTER PAYLOADS
# =============================================================================

class SubscriberAdded(EventPayload):
    email: str
    city_id: str


class SubscriberRemoved(EventPayload):
    email: str
    city_id: str


# =============================================================================
# CITY PAYLOADS
# =============================================================================

class CityCreated(EventPayload):
    city_id: str
    name: str
    created_by: str


class CityUpdated(EventPayload):
    city_id: str
    updated_by: str


class CityDeactivated(EventPayload):
    city_id: str
    deactivated_by: str


CHANNEL_PAYLOADS: Dict[Channel, Type[EventPayload]] = {
    Channel.USER_CREATED: UserCreated,
    Channel.USER_UPDATED: UserUpdated,
    Channel.USER_JOINED_CITY: UserJoinedCity,
    Channel.USER_LEFT_CITY: UserLeftCity,
    Channel.EVENT_CREATED: EventCreated,
    Channel.EVENT_UPDATED: EventUpdated,
    Channel.EVENT_DELETED: EventDeleted,
    Channel.EVENT_RSVP_ADDED: RSVPAdded,
    Channel.EVENT_RSVP_UPDATED: RSVPUpdated,
    Channel.EVENT_RSVP_REMOVED: RSVPRemoved,
    Channel.PROJECT_SUBMITTED: ProjectSubmitted,
    Channel.PROJECT_APPROVED: ProjectApproved,
    Channel.PROJECT_UPDATED: ProjectUpdated,
    Channel.PROJECT_DELETED: ProjectDeleted,
    Channel.PROJECT_FEATURED: ProjectFeatured,
    Channel.PROJECT_UNFEATURED: ProjectUnfeatured,
    Channel.POST_PUBLISHED: PostPublished,
    Channel.POST_UNPUBLISHED: PostUnpublished,
    Channel.POST_UPDATED: PostUpdated,
    Channel.POST_DELETED: PostDeleted,
    Channel.SUBSCRIBER_ADDED: SubscriberAdded,
    Channel.SUBSCRIBER_REMOVED: SubscriberRemoved,
    Channel.CITY_CREATED: CityCreated,
    Channel.CITY_UPDATED: CityUpdated,
    Channel.CITY_DEACTIVATED: CityDeactivated,
}


def resolve_channel(channel: Union[Channel, str]) -> Channel:
    """Normalize a channel name or member, rejecting anything outside the registry"""
    if isinstance(channel, Channel):
        return channel
    if isinstance(channel, str):
        try:
            return Channel(channel)
        except ValueError:
            pass
    raise UnknownChannelError(channel)


def payload_model_for(channel: Union[Channel, str]) -> Type[EventPayload]:
    """Get the payload model declared for a channel"""
    return CHANNEL_PAYLOADS[resolve_channel(channel)]


def validate_payload(
    channel: Union[Channel, str],
    payload: Union[EventPayload, Mapping[str, Any]]
) -> EventPayload:
    """
    Check a payload against its channel's declared shape.

    Args:
        channel: Channel the payload is destined for
        payload: Either an instance of the channel's payload model, which is
            re-checked and returned unchanged, or a mapping of field values
            to validate

    Returns:
        EventPayload: The payload as an instance of the channel's model

    Raises:
        UnknownChannelError: If the channel is not registered
        PayloadValidationError: If the payload does not match the shape
    """
    channel = resolve_channel(channel)
    model = CHANNEL_PAYLOADS[channel]

    if isinstance(payload, EventPayload):
        # Exact type only; subclasses may loosen the model's config
        if type(payload) is not model:
            raise PayloadValidationError(
                channel,
                f"expected {model.__name__}, got {type(payload).__name__}"
            )
        # Instances built with model_construct() skip validation
        _validate_fields(channel, model, dict(payload.__dict__))
        return payload

    if not isinstance(payload, Mapping):
        raise PayloadValidationError(
            channel,
            f"expected {model.__name__} or a mapping, got {type(payload).__name__}"
        )

    return _validate_fields(channel, model, dict(payload))


def _validate_fields(channel: Channel, model: Type[EventPayload], fields: Dict[str, Any]) -> EventPayload:
    try:
        return model.model_validate(fields)
    except ValidationError as e:
        raise PayloadValidationError(
            channel,
            f"{e.error_count()} validation error(s)",
            errors=e.errors()
        ) from e


__all__ = [
    "Channel", "EventPayload", "RSVPStatus", "CHANNEL_PAYLOADS",
    "resolve_channel", "payload_model_for", "validate_payload",
    "UserCreated", "UserUpdated", "UserJoinedCity", "UserLeftCity",
    "EventCreated", "EventUpdated", "EventDeleted",
    "RSVPAdded", "RSVPUpdated", "RSVPRemoved",
    "ProjectSubmitted", "ProjectApproved", "ProjectUpdated", "ProjectDeleted",
    "ProjectFeatured", "ProjectUnfeatured",
    "PostPublished", "PostUnpublished", "PostUpdated", "PostDeleted",
    "SubscriberAdded", "SubscriberRemoved",
    "CityCreated", "CityUpdated", "CityDeactivated",
]
