# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the HTTP layer.

Route tests patch the actions and only check wiring and status codes.
The session tests drive the full stack against the test database.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api import create_app
from intervention_tracker.api.dependencies import get_action_context, get_db
from intervention_tracker.core.errors import ErrorCode
from intervention_tracker.domains.auth.session import SessionTokenDecoder
from intervention_tracker.models.common import ActionState, SessionClaims

pytestmark = pytest.mark.integration


@pytest.fixture
def app():
    """Create the application without running its lifespan."""
    return create_app()


@pytest.fixture
def client(app):
    """Test client whose actions receive a mock context."""
    app.dependency_overrides[get_action_context] = lambda: MagicMock(spec=ActionContext)
    yield TestClient(app)
    app.dependency_overrides.clear()


def failed(code: ErrorCode, message: str = "Failed") -> ActionState:
    return ActionState(is_success=False, message=message, code=code)


class TestRouting:
    """Tests for route registration."""

    def test_routes_registered(self, app) -> None:
        routes = set(app.openapi()["paths"])

        for path in (
            "/health",
            "/health/ready",
            "/api/v1/users/me",
            "/api/v1/users/{user_id}/roles",
            "/api/v1/roles/{role_id}/tools",
            "/api/v1/tools",
            "/api/v1/schools",
            "/api/v1/students",
            "/api/v1/students/{student_id}/guardians",
            "/api/v1/programs/{program_id}",
            "/api/v1/interventions/{intervention_id}/goals",
            "/api/v1/interventions/{intervention_id}/sessions",
            "/api/v1/interventions/{intervention_id}/team/{user_id}",
            "/api/v1/interventions/{intervention_id}/attachments",
            "/api/v1/navigation/me",
            "/api/v1/settings/{key}/value",
            "/api/v1/jobs/{job_id}",
        ):
            assert path in routes, path


class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, app) -> None:
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["environment"] == "test"

    def test_ready_without_database(self, app) -> None:
        response = TestClient(app).get("/health/ready")

        assert response.status_code == 503
        assert response.json()["ready"] is False


class TestEnvelopeStatus:
    """Tests for mapping action results to HTTP status codes."""

    def test_create_returns_201(self, client) -> None:
        state = ActionState(is_success=True, message="Student created successfully")
        with patch(
            "intervention_tracker.actions.students.create_student",
            AsyncMock(return_value=state),
        ) as create:
            response = client.post("/api/v1/students", json={"student_id": "S-1"})

        assert response.status_code == 201
        assert response.json() == {
            "is_success": True,
            "message": "Student created successfully",
            "data": None,
            "code": None,
        }
        assert create.await_args.args[1] == {"student_id": "S-1"}

    @pytest.mark.parametrize(
        "code,status_code",
        [
            (ErrorCode.UNAUTHORIZED, 401),
            (ErrorCode.FORBIDDEN, 403),
            (ErrorCode.NOT_FOUND, 404),
            (ErrorCode.CONFLICT, 409),
            (ErrorCode.VALIDATION, 422),
            (ErrorCode.DATABASE, 500),
            (ErrorCode.INTERNAL, 500),
        ],
    )
    def test_failure_codes(self, client, code, status_code) -> None:
        with patch(
            "intervention_tracker.actions.programs.get_program",
            AsyncMock(return_value=failed(code)),
        ):
            response = client.get("/api/v1/programs/3")

        assert response.status_code == status_code
        assert response.json()["code"] == code.value
        assert response.json()["is_success"] is False

    def test_query_filters_passed_without_blanks(self, client) -> None:
        state = ActionState(is_success=True, message="ok", data=[])
        with patch(
            "intervention_tracker.actions.students.get_students",
            AsyncMock(return_value=state),
        ) as get_students:
            response = client.get("/api/v1/students", params={"status": "active", "grade": "3"})

        assert response.status_code == 200
        assert get_students.await_args.args[1] == {
            "grade": "3",
            "status": "active",
            "include_inactive": False,
        }

    def test_user_id_taken_from_path(self, client) -> None:
        with patch(
            "intervention_tracker.actions.users.update_user_roles",
            AsyncMock(return_value=failed(ErrorCode.FORBIDDEN)),
        ) as update:
            response = client.put("/api/v1/users/7/roles", json={"role_ids": [1]})

        assert response.status_code == 403
        assert update.await_args.args[1] == {"role_ids": [1], "user_id": 7}

    def test_invalid_path_parameter(self, client) -> None:
        response = client.get("/api/v1/interventions/not-a-number")

        assert response.status_code == 422


class TestSessionFlow:
    """Tests that run requests through AuthMiddleware and real actions."""

    @pytest.fixture
    def session_app(self, app, db_session):
        async def override_get_db():
            yield db_session

        app.dependency_overrides[get_db] = override_get_db
        yield app
        app.dependency_overrides.clear()

    @pytest.fixture
    def token_for(self, settings):
        decoder = SessionTokenDecoder(settings.auth)

        def factory(claims: SessionClaims, expires_in: timedelta = timedelta(hours=1)) -> str:
            return decoder.encode_token(claims, expires_in=expires_in)

        return factory

    async def request(self, app, method: str, url: str, token: str | None = None, **kwargs):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as http:
            return await http.request(method, url, headers=headers, **kwargs)

    @pytest.mark.asyncio
    async def test_current_user(self, session_app, token_for, admin_id, admin_claims) -> None:
        response = await self.request(
            session_app, "GET", "/api/v1/users/me", token_for(admin_claims)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_success"] is True
        assert body["data"]["id"] == admin_id
        assert body["data"]["email"] == "admin@school.test"

    @pytest.mark.asyncio
    async def test_missing_token(self, session_app) -> None:
        response = await self.request(session_app, "GET", "/api/v1/users/me")

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_expired_token(self, session_app, token_for, admin_id, admin_claims) -> None:
        token = token_for(admin_claims, expires_in=timedelta(seconds=-60))

        response = await self.request(session_app, "GET", "/api/v1/users/me", token)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_tool_check(self, session_app, token_for, teacher_id, teacher_claims) -> None:
        token = token_for(teacher_claims)

        students = await self.request(session_app, "GET", "/api/v1/students", token)
        settings = await self.request(session_app, "GET", "/api/v1/settings", token)

        assert students.status_code == 200
        assert settings.status_code == 403

    @pytest.mark.asyncio
    async def test_self_demotion_rejected(
        self, session_app, token_for, admin_id, admin_claims
    ) -> None:
        response = await self.request(
            session_app,
            "PUT",
            f"/api/v1/users/{admin_id}/roles",
            token_for(admin_claims),
            json={"role_ids": []},
        )

        assert response.status_code == 403
        assert response.json()["is_success"] is False
