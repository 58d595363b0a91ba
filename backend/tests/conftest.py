"""
Commute Match Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── journey_repo / user_repo / ...:  AsyncMock repositories for service tests
    ├── make_user / make_journey:        attribute objects shaped like ORM rows
    ├── session_factory:                 file-backed SQLite schema for repository tests
    └── test_client:                     HTTPX AsyncClient against create_app()
"""

import os
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any commute_api import reads settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from commute_api.database import build_engine, build_session_factory, create_all  # noqa: E402
from commute_api.models.base import new_object_id  # noqa: E402
from commute_api.repositories import (  # noqa: E402
    ChatRepository,
    JourneyRepository,
    MatchingPreferencesRepository,
    MessageRepository,
    UserRepository,
)


# ══════════════════════════════════════════════════════════════════════════
# Row Builders
# ══════════════════════════════════════════════════════════════════════════

def _now():
    return datetime.now(timezone.utc)


@pytest.fixture
def make_user():
    """Build an object with the attributes of a User row."""

    def _make(**overrides):
        data = {
            "id": new_object_id(),
            "full_name": "Ada Lovelace",
            "email": "ada@example.com",
            "password": "$argon2id$not-a-real-hash",
            "role": "user",
            "phone_number": None,
            "date_of_birth": None,
            "gender": None,
            "profile_image_url": None,
            "bio": None,
            "created_at": _now(),
            "updated_at": _now(),
        }
        data.update(overrides)
        return SimpleNamespace(**data)

    return _make


@pytest.fixture
def make_journey(make_user):
    """Build an object with the attributes of a Journey row (owner embedded)."""

    def _make(**overrides):
        owner = overrides.pop("user", None) or make_user()
        data = {
            "id": new_object_id(),
            "user_id": owner.id,
            "user": owner,
            "travel_mode": "bus",
            "route_id": "73",
            "start_point": "Stoke Newington",
            "end_point": "Oxford Circus",
            "departure_time": "08:15",
            "arrival_time": None,
            "created_at": _now(),
            "updated_at": _now(),
        }
        data.update(overrides)
        return SimpleNamespace(**data)

    return _make


# ══════════════════════════════════════════════════════════════════════════
# Mock Repositories (service tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def journey_repo():
    return AsyncMock(spec=JourneyRepository)


@pytest.fixture
def user_repo():
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def preferences_repo():
    return AsyncMock(spec=MatchingPreferencesRepository)


@pytest.fixture
def chat_repo():
    return AsyncMock(spec=ChatRepository)


@pytest.fixture
def message_repo():
    return AsyncMock(spec=MessageRepository)


# ══════════════════════════════════════════════════════════════════════════
# Real Database (repository tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """
    Fresh SQLite database per test with every table created.

    File-backed rather than :memory: so each repository session opens its
    own connection to the same data.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_all(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def stored_user(session_factory):
    """Persist users on demand: `await stored_user(email=...)`."""
    repo = UserRepository(session_factory)
    counter = {"n": 0}

    async def _create(**overrides):
        counter["n"] += 1
        data = {
            "full_name": f"Commuter {counter['n']}",
            "email": f"commuter{counter['n']}@example.com",
            "password": "hashed",
            "role": "user",
        }
        data.update(overrides)
        return await repo.create(data)

    return _create


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client (route tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app():
    from commute_api.main import create_app

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to a fresh app instance.

    raise_app_exceptions=False lets the 500 handler's response reach the
    test instead of re-raising.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
