"""
Shared fixtures: a scripted AI client and an app wired to in-memory storage
"""

import asyncio
import json
import pytest
from fastapi.testclient import TestClient

from hangout_planner.core.settings import Settings
from hangout_planner.db.storage import MemoryStorage
from hangout_planner.main import create_app


class FakeAIClient:
    """Stands in for GeminiClient; returns ``response`` or raises ``error``"""

    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response
        self.error = error
        self.delay = delay
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def make_ai_itinerary(location="Jaipur"):
    return {
        "title": f"Pink City Day in {location}",
        "description": "A relaxed day of forts and food.",
        "location": location,
        "activities": [
            {"id": "a1", "time": "9:00 AM", "title": "Chai", "description": "Tea.", "location": "MI Road",
             "price": "₹", "rating": "4.5 ★", "type": "cafe", "timeOfDay": "morning"},
            {"id": "a2", "time": "11:00 AM", "title": "Amber Fort", "description": "Fort.", "location": "Amer",
             "price": "₹₹", "rating": "4.9 ★", "type": "historical", "timeOfDay": "morning",
             "image": "https://example.com/fort.jpg"},
            {"id": "a3", "time": "1:00 PM", "title": "Lunch", "description": "Thali.", "location": "Tonk Road",
             "price": "₹₹", "rating": "4.6 ★", "type": "eating", "timeOfDay": "afternoon"},
            {"id": "a4", "time": "3:00 PM", "title": "Bazaar", "description": "Shopping.", "location": "Johari Bazaar",
             "price": "₹", "rating": "4.4 ★", "type": "exploring", "timeOfDay": "afternoon"},
            {"id": "a5", "time": "6:00 PM", "title": "Sunset", "description": "Views.", "location": "Nahargarh",
             "price": "Free", "rating": "4.8 ★", "timeOfDay": "evening"},
            {"id": "a6", "time": "8:00 PM", "title": "Dinner", "description": "Royal.", "location": "Amer",
             "price": "₹₹₹", "rating": "4.8 ★", "type": "rooftop", "timeOfDay": "evening", "vibe": "romantic"},
        ],
        "recommendations": [
            {"id": "r1", "title": "Balloon Ride", "description": "Up high.", "rating": "4.9 ★", "duration": "3 hours"},
            {"id": "r2", "title": "Block Printing", "description": "Craft.", "rating": "4.7 ★", "duration": "Half day"},
            {"id": "r3", "title": "Elephant Safari", "description": "Ride.", "rating": "4.6 ★", "duration": "Half day",
             "image": "https://example.com/elephant.jpg"},
        ],
    }


def make_request_body(location="Jaipur"):
    return {
        "preferences": {
            "hangoutTypes": ["Eating", "Historical"],
            "duration": "Full day",
            "budget": "Mid-range",
        },
        "locationData": {
            "location": location,
            "distance": "10 km",
            "transportation": ["Metro", "Auto"],
        },
    }


def build_settings(**overrides):
    values = dict(
        ENABLE_RATE_LIMITING=False,
        ENABLE_METRICS=False,
        STORAGE_BACKEND="memory",
        GEMINI_API_KEY="",
        LOG_FILE="",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def ai_itinerary():
    return make_ai_itinerary()


@pytest.fixture
def request_body():
    return make_request_body()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def make_client(memory_storage):
    """Build a TestClient around create_app with the given AI client"""
    clients = []

    def _make(ai_client=None, storage=None, **settings_overrides):
        if ai_client is None:
            ai_client = FakeAIClient(response=json.dumps(make_ai_itinerary()))
        app = create_app(
            build_settings(**settings_overrides),
            storage=storage or memory_storage,
            ai_client=ai_client,
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
