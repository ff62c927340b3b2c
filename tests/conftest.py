"""Shared fixtures for the CityHub test suite"""

import time

import pytest

from cityhub.events.event_bus import EventBus, reset_event_bus
from cityhub.infrastructure.configuration import ApplicationConfig, Environment, set_config


@pytest.fixture(autouse=True)
def testing_config():
    """Run every test against testing configuration and a fresh default bus"""
    config = ApplicationConfig.for_environment(Environment.TESTING)
    set_config(config)
    reset_event_bus()

    yield config

    reset_event_bus()
    set_config(None)


@pytest.fixture
def bus():
    """A fresh event bus per test"""
    event_bus = EventBus()
    yield event_bus
    event_bus.remove_all_subscriptions()
    event_bus.shutdown()


@pytest.fixture
def wait_until():
    """Poll a condition set from another thread, up to a timeout"""
    def wait(condition, timeout=2.0, interval=0.005):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if condition():
                return True
            time.sleep(interval)
        return condition()
    return wait


@pytest.fixture
def user_created_payload():
    return {"user_id": "user-123", "email": "test@example.com"}


@pytest.fixture
def event_created_payload():
    return {"event_id": "e1", "city_id": "c1", "created_by": "u1"}
