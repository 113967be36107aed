# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the session token middleware."""

from datetime import timedelta

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from pydantic import SecretStr

from intervention_tracker.api.middleware.auth import AuthMiddleware, get_session_claims
from intervention_tracker.core.config import AuthSettings
from intervention_tracker.domains.auth.session import SessionTokenDecoder
from intervention_tracker.models.common import SessionClaims


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(secret_key=SecretStr("middleware-test-secret"), cookie_name="idToken")


@pytest.fixture
def token(auth_settings):
    decoder = SessionTokenDecoder(auth_settings)

    def factory(sub: str = "user-1", expires_in: timedelta = timedelta(minutes=5)) -> str:
        return decoder.encode_token(
            SessionClaims(sub=sub, email=f"{sub}@school.test"), expires_in=expires_in
        )

    return factory


@pytest.fixture
def client(auth_settings) -> TestClient:
    app = FastAPI()
    app.add_middleware(AuthMiddleware, settings=auth_settings)

    @app.get("/api/v1/whoami")
    async def whoami(request: Request) -> dict:
        claims = get_session_claims(request)
        return {"sub": claims.sub if claims else None}

    @app.get("/health")
    async def health(request: Request) -> dict:
        return {"claims": get_session_claims(request)}

    return TestClient(app)


class TestAuthMiddleware:
    """Tests for AuthMiddleware."""

    def test_bearer_header(self, client, token) -> None:
        response = client.get("/api/v1/whoami", headers={"Authorization": f"Bearer {token()}"})

        assert response.json() == {"sub": "user-1"}

    def test_cookie_when_no_header(self, client, token) -> None:
        client.cookies.set("idToken", token("cookie-user"))

        response = client.get("/api/v1/whoami")

        assert response.json() == {"sub": "cookie-user"}

    def test_header_takes_precedence_over_cookie(self, client, token) -> None:
        client.cookies.set("idToken", token("cookie-user"))

        response = client.get(
            "/api/v1/whoami", headers={"Authorization": f"Bearer {token('header-user')}"}
        )

        assert response.json() == {"sub": "header-user"}

    def test_non_bearer_scheme_ignored(self, client, token) -> None:
        response = client.get("/api/v1/whoami", headers={"Authorization": f"Basic {token()}"})

        assert response.json() == {"sub": None}

    def test_expired_token_ignored(self, client, token) -> None:
        expired = token(expires_in=timedelta(seconds=-30))

        response = client.get("/api/v1/whoami", headers={"Authorization": f"Bearer {expired}"})

        assert response.status_code == 200
        assert response.json() == {"sub": None}

    def test_garbage_token_ignored(self, client) -> None:
        response = client.get("/api/v1/whoami", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.json() == {"sub": None}

    def test_public_path_not_decoded(self, client, token) -> None:
        response = client.get("/health", headers={"Authorization": f"Bearer {token()}"})

        assert response.json() == {"claims": None}
