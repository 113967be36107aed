# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Limits apply per caller: the session subject when a session is present,
otherwise the client IP address. Counters are kept in process memory.
SlowAPIMiddleware applies the default limit to every route.
"""

import logging

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from intervention_tracker.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Identify the caller by session subject, falling back to IP address.

    Args:
        request: HTTP request.

    Returns:
        Client identifier string.
    """
    claims = getattr(request.state, "claims", None)
    if claims is not None:
        return f"user:{claims.sub}"
    return f"ip:{get_remote_address(request)}"


settings = get_settings()
limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[f"{settings.rate_limit.requests_per_minute}/minute"],
    enabled=settings.rate_limit.enabled,
    storage_uri="memory://",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Return 429 with the envelope shape used by every endpoint.

    Args:
        request: HTTP request.
        exc: Rate limit exceeded exception.

    Returns:
        JSON response.
    """
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )

    return Response(
        content='{"is_success": false, "message": "Too many requests. Please try again later.",'
        ' "data": null, "code": null}',
        status_code=429,
        media_type="application/json",
        headers={"Retry-After": "60"},
    )
