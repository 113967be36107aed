# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for rate limit keys and the 429 response."""

import json
from unittest.mock import MagicMock

import pytest
from starlette.requests import Request

from intervention_tracker.api.middleware.rate_limit import (
    get_client_identifier,
    rate_limit_exceeded_handler,
)
from intervention_tracker.models.common import SessionClaims


def make_request(claims: SessionClaims | None = None) -> Request:
    request = Request({"type": "http", "headers": [], "client": ("10.0.0.5", 5123)})
    request.state.claims = claims
    return request


class TestClientIdentifier:
    """Tests for get_client_identifier."""

    def test_session_subject(self) -> None:
        request = make_request(SessionClaims(sub="abc-123"))

        assert get_client_identifier(request) == "user:abc-123"

    def test_falls_back_to_ip(self) -> None:
        assert get_client_identifier(make_request()) == "ip:10.0.0.5"


class TestRateLimitExceededHandler:
    """Tests for the 429 handler."""

    @pytest.mark.asyncio
    async def test_returns_envelope(self) -> None:
        response = await rate_limit_exceeded_handler(
            make_request(), MagicMock(detail="100 per 1 minute")
        )

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert json.loads(response.body) == {
            "is_success": False,
            "message": "Too many requests. Please try again later.",
            "data": None,
            "code": None,
        }
