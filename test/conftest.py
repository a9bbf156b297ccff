"""
Pytest configuration for all tests.
Sets up environment variables and fixtures used across test modules.
"""

import copy
import json
import os
import pytest
from unittest.mock import Mock


# Set environment variable BEFORE any other imports
# This must happen at module import time to affect app.py initialization
os.environ['TESTING'] = 'true'


RING_ROAD_PAYLOAD = {
    "busNumber": "Ba 1 Ja 1234",
    "routeName": "Ring Road",
    "description": "Clockwise loop around the valley",
    "frequencyMinutes": 10,
    "firstBusTime": "05:00",
    "lastBusTime": "20:00",
    "trafficCondition": "Moderate",
    "trafficAnalysis": "Steady flow with slowdowns near Koteshwor",
    "stops": [
        {"id": 1, "name": "Ratnapark", "distanceFromPreviousKm": 0, "typicalTravelTimeMinutes": 0},
        {"id": 2, "name": "Baneshwor", "distanceFromPreviousKm": 3, "typicalTravelTimeMinutes": 12,
         "landmark": "Everest Hotel"},
        {"id": 3, "name": "Koteshwor", "distanceFromPreviousKm": 2.5, "typicalTravelTimeMinutes": 9,
         "landmark": ""},
    ],
}


@pytest.fixture(autouse=True)
def reset_container():
    """Reset the dependency injection container before each test."""
    from dependencies import reset_container
    reset_container()
    yield
    reset_container()


@pytest.fixture
def route_payload():
    """A valid route payload as the generator would return it."""
    return copy.deepcopy(RING_ROAD_PAYLOAD)


@pytest.fixture
def route_text(route_payload):
    """The valid payload serialized as generator text."""
    return json.dumps(route_payload)


@pytest.fixture
def mock_service_in_container():
    """
    Fixture that injects a mock route service into the DI container.
    Use this when you need the container to return a mock service.
    """
    from dependencies import get_container

    mock_service = Mock()
    container = get_container()
    container.set_test_service(mock_service)

    yield mock_service

    container.clear_test_service()
