"""
Commute Match Backend — HTTP Layer Tests
=========================================

What:  Routing, the response envelope, authentication and error mapping.
How:   HTTPX AsyncClient against create_app(); services or the session
       factory are swapped through app.dependency_overrides.

What we test:
    ✅ Every response (success or failure) uses {success, result, message}
    ✅ 401 for missing/invalid bearer tokens, 403 for non-admins
    ✅ AppError status codes, 400 for request validation, 500 for the rest
    ✅ Register → login → profile against a real SQLite schema
    ✅ /health reports database connectivity
"""

import logging

import pytest

from commute_api.database import build_engine, build_session_factory
from commute_api.dependencies import (
    get_current_user,
    get_journey_service,
    get_session_factory,
)
from commute_api.middleware.logging import _level_for
from commute_api.services.journey_service import JourneyService


@pytest.fixture
def journey_service(app, journey_repo):
    service = JourneyService(journey_repo)
    app.dependency_overrides[get_journey_service] = lambda: service
    return service


@pytest.fixture
def login_as(app, make_user):
    def _login(**overrides):
        user = make_user(**overrides)
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login


class TestEnvelope:

    @pytest.mark.asyncio
    async def test_list_journeys(self, test_client, journey_service, journey_repo, make_journey):
        journey = make_journey()
        journey_repo.find_all.return_value = [journey]

        response = await test_client.get("/api/journeys", params={"travel_mode": "bus"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Journeys retrieved successfully"
        assert body["result"][0]["id"] == journey.id
        assert body["result"][0]["user"]["email"] == journey.user.email
        assert "password" not in body["result"][0]["user"]
        journey_repo.find_all.assert_awaited_once_with({"travel_mode": "bus"})

    @pytest.mark.asyncio
    async def test_create_journey_is_201(
        self, test_client, journey_service, journey_repo, make_journey, login_as
    ):
        user = login_as()
        journey_repo.create.return_value = make_journey(user=user)

        response = await test_client.post(
            "/api/journeys",
            json={
                "travel_mode": "bus",
                "route_id": "73",
                "start_point": "Stoke Newington",
                "end_point": "Oxford Circus",
            },
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Journey created successfully"

    @pytest.mark.asyncio
    async def test_stats_use_camel_case_keys(self, test_client, journey_service, journey_repo):
        journey_repo.count.side_effect = [3, 1, 1, 1]

        response = await test_client.get("/api/journeys/stats")

        assert response.json()["result"] == {
            "totalJourneys": 3,
            "journeysByMode": {"bus": 1, "tube": 1, "overground": 1},
        }

    @pytest.mark.asyncio
    async def test_malformed_journey_id_is_400(self, test_client, journey_service):
        response = await test_client.get("/api/journeys/not-an-id")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "result": None,
            "message": "Invalid journey ID format",
        }

    @pytest.mark.asyncio
    async def test_missing_journey_is_404(self, test_client, journey_service, journey_repo):
        journey_repo.find_by_id.return_value = None

        response = await test_client.get(f"/api/journeys/{'a' * 24}")

        assert response.status_code == 404
        assert response.json()["message"] == "Journey not found"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, test_client, journey_service, journey_repo):
        journey_repo.find_all.side_effect = RuntimeError("connection reset by peer")

        response = await test_client.get("/api/journeys")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "result": None,
            "message": "Internal server error",
        }

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client, journey_service, journey_repo):
        journey_repo.find_all.return_value = []

        response = await test_client.get("/api/journeys", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_missing_token(self, test_client, journey_service):
        response = await test_client.get("/api/journeys/user/all")

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication required"

    @pytest.mark.asyncio
    async def test_invalid_token(self, test_client, journey_service):
        response = await test_client.get(
            "/api/journeys/user/all", headers={"Authorization": "Bearer not.a.jwt"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_admin_route_forbidden_for_users(self, test_client, login_as):
        login_as(role="user")

        response = await test_client.get("/api/admin/users")

        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions"

    @pytest.mark.asyncio
    async def test_query_validation_is_400(self, test_client, login_as):
        login_as(role="admin")

        response = await test_client.get("/api/admin/users", params={"page": 0})

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestAccountFlow:

    @pytest.fixture(autouse=True)
    def _database(self, app, session_factory):
        app.dependency_overrides[get_session_factory] = lambda: session_factory

    @pytest.mark.asyncio
    async def test_register_login_profile(self, test_client):
        registered = await test_client.post(
            "/api/users/register",
            json={"full_name": "Ada Lovelace", "email": "Ada@Example.com", "password": "s3cret!"},
        )
        assert registered.status_code == 201
        assert registered.json()["result"]["user"]["email"] == "ada@example.com"
        assert "password" not in registered.json()["result"]["user"]

        duplicate = await test_client.post(
            "/api/users/register",
            json={"full_name": "Ada", "email": "ada@example.com", "password": "s3cret!"},
        )
        assert duplicate.status_code == 400
        assert duplicate.json()["message"] == "User already exists"

        bad_login = await test_client.post(
            "/api/users/login", json={"email": "ada@example.com", "password": "wrong!!"}
        )
        assert bad_login.status_code == 401
        assert bad_login.json()["message"] == "Invalid credentials"

        login = await test_client.post(
            "/api/users/login", json={"email": "ada@example.com", "password": "s3cret!"}
        )
        token = login.json()["result"]["token"]

        profile = await test_client.get(
            "/api/users/profile", headers={"Authorization": f"Bearer {token}"}
        )
        assert profile.status_code == 200
        assert profile.json()["result"]["full_name"] == "Ada Lovelace"
        assert profile.json()["result"]["matching_preferences"] is None

    @pytest.mark.asyncio
    async def test_health_connected(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["result"]["status"] == "healthy"
        assert body["result"]["database"] == "connected"


@pytest.mark.asyncio
async def test_health_disconnected(app, test_client, tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}")
    app.dependency_overrides[get_session_factory] = lambda: build_session_factory(engine)

    response = await test_client.get("/health")
    await engine.dispose()

    assert response.status_code == 503
    assert response.json()["result"]["status"] == "unhealthy"
    assert response.json()["result"]["database"] == "disconnected"


@pytest.mark.asyncio
async def test_unknown_route_is_404(test_client):
    response = await test_client.get("/api/nothing-here")
    assert response.status_code == 404



@pytest.mark.parametrize(
    "status, elapsed_ms, level",
    [
        (200, 5.0, logging.INFO),
        (200, 5000.0, logging.WARNING),
        (404, 5.0, logging.WARNING),
        (503, 5.0, logging.ERROR),
    ],
)
def test_access_log_level(status, elapsed_ms, level):
    assert _level_for(status, elapsed_ms) == level
