# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Dependencies are used to:
- Get database sessions
- Get the caller's session claims
- Build the ActionContext every endpoint passes to its action

Example:
    @router.get("")
    async def list_students(ctx: ActionContext = Depends(get_action_context)):
        return envelope_response(await get_students(ctx))
"""

import logging
from typing import Any, AsyncGenerator

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.middleware.auth import get_session_claims
from intervention_tracker.core.config import Settings, get_settings
from intervention_tracker.core.errors import HTTP_STATUS_BY_CODE
from intervention_tracker.infrastructure.database.connection import get_session
from intervention_tracker.models.common import ActionState, SessionClaims

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    Yields:
        AsyncSession bound to the application engine.
    """
    async with get_session() as session:
        yield session


def get_claims(request: Request) -> SessionClaims | None:
    """Get the caller's claims set by AuthMiddleware."""
    return get_session_claims(request)


def get_action_context(
    db: AsyncSession = Depends(get_db),
    claims: SessionClaims | None = Depends(get_claims),
    settings: Settings = Depends(get_settings),
) -> ActionContext:
    """Build the per-request action context."""
    return ActionContext(db=db, claims=claims, settings=settings)


def envelope_response(state: ActionState[Any], success_status: int = 200) -> JSONResponse:
    """Serialize an action result with a status code derived from its code.

    Args:
        state: Action result.
        success_status: Status used when the action succeeded.

    Returns:
        JSON response carrying the envelope.
    """
    if state.is_success:
        status_code = success_status
    else:
        status_code = HTTP_STATUS_BY_CODE.get(state.code, 500) if state.code else 500
    return JSONResponse(status_code=status_code, content=state.model_dump(mode="json"))
