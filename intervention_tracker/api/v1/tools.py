# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tool API endpoints.

- GET / - List active tools
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from intervention_tracker.actions import roles as role_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List active tools")
async def list_tools(ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await role_actions.get_tools(ctx))
