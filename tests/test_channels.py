"""Channel registry and payload model tests"""

import pytest
from pydantic import ConfigDict, ValidationError

from cityhub.events.channels import (
    CHANNEL_PAYLOADS, Channel, EventPayload, PostPublished, RSVPAdded,
    SubscriberAdded, payload_model_for, resolve_channel, validate_payload
)
from cityhub.events.errors import PayloadValidationError, UnknownChannelError


def test_every_channel_has_a_payload_model():
    assert set(CHANNEL_PAYLOADS) == set(Channel)
    assert len(Channel) == 25
    for model in CHANNEL_PAYLOADS.values():
        assert issubclass(model, EventPayload)


def test_channel_names_are_grouped_by_feature():
    prefixes = {channel.value.split(":")[0] for channel in Channel}
    assert prefixes == {"user", "event", "project", "post", "subscriber", "city"}


@pytest.mark.parametrize("channel, fields", [
    (Channel.USER_CREATED, {"user_id", "email"}),
    (Channel.EVENT_CREATED, {"event_id", "city_id", "created_by"}),
    (Channel.EVENT_RSVP_ADDED, {"event_id", "user_id", "status"}),
    (Channel.POST_PUBLISHED, {"post_id", "city_id", "author_id", "title"}),
    (Channel.SUBSCRIBER_ADDED, {"email", "city_id"}),
    (Channel.CITY_CREATED, {"city_id", "name", "created_by"}),
    (Channel.PROJECT_UNFEATURED, {"project_id", "city_id"}),
])
def test_payload_shapes(channel, fields):
    assert set(payload_model_for(channel).model_fields) == fields


def test_resolve_channel():
    assert resolve_channel("post:published") is Channel.POST_PUBLISHED
    assert resolve_channel(Channel.CITY_DEACTIVATED) is Channel.CITY_DEACTIVATED
    assert str(Channel.SUBSCRIBER_REMOVED) == "subscriber:removed"


@pytest.mark.parametrize("name", ["post:archived", "POST:PUBLISHED", "", None, 3])
def test_resolve_unknown_channel(name):
    with pytest.raises(UnknownChannelError) as exc_info:
        resolve_channel(name)
    assert exc_info.value.channel == name


def test_validate_mapping_builds_model():
    payload = validate_payload("subscriber:added", {"email": "a@example.com", "city_id": "adelaide"})

    assert isinstance(payload, SubscriberAdded)
    assert payload.email == "a@example.com"


def test_validate_returns_model_instance_unchanged():
    payload = PostPublished(post_id="p1", city_id="c1", author_id="u1", title="Hi")
    assert validate_payload(Channel.POST_PUBLISHED, payload) is payload


@pytest.mark.parametrize("status", ["yes", "no", "maybe"])
def test_rsvp_status_values(status):
    payload = validate_payload(Channel.EVENT_RSVP_ADDED, {
        "event_id": "e1", "user_id": "u1", "status": status
    })
    assert isinstance(payload, RSVPAdded)
    assert payload.status == status


def test_validation_error_carries_details():
    with pytest.raises(PayloadValidationError) as exc_info:
        validate_payload(Channel.CITY_CREATED, {"city_id": "c1", "name": "Adelaide"})

    error = exc_info.value
    assert error.channel is Channel.CITY_CREATED
    assert "city:created" in str(error)
    assert [e["loc"] for e in error.errors] == [("created_by",)]
    assert error.__cause__ is not None


def test_payloads_are_immutable():
    payload = SubscriberAdded(email="a@example.com", city_id="c1")
    with pytest.raises(ValidationError):
        payload.email = "b@example.com"


def test_payload_models_reject_extra_fields_directly():
    with pytest.raises(ValidationError):
        SubscriberAdded(email="a@example.com", city_id="c1", source="footer")


def test_unvalidated_model_instance_rejected():
    payload = SubscriberAdded.model_construct(email=123)

    with pytest.raises(PayloadValidationError) as exc_info:
        validate_payload(Channel.SUBSCRIBER_ADDED, payload)

    locs = {e["loc"] for e in exc_info.value.errors}
    assert locs == {("email",), ("city_id",)}


def test_payload_model_subclass_rejected():
    class LooseSubscriberAdded(SubscriberAdded):
        model_config = ConfigDict(extra="allow")

    payload = LooseSubscriberAdded(email="a@example.com", city_id="c1", source="footer")

    with pytest.raises(PayloadValidationError) as exc_info:
        validate_payload(Channel.SUBSCRIBER_ADDED, payload)

    assert "LooseSubscriberAdded" in str(exc_info.value)
