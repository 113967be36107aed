# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School API endpoints.

- GET / - List schools (active unless include_inactive)
- POST / - Create school
- GET /{school_id} - Get school
- PATCH /{school_id} - Update school
- DELETE /{school_id} - Deactivate school
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from intervention_tracker.actions import schools as school_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List schools")
async def list_schools(
    include_inactive: bool = Query(False),
    search: str | None = Query(None),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await school_actions.get_schools(ctx, include_inactive=include_inactive, search=search)
    return envelope_response(state)


@router.post("", summary="Create school")
async def create_school(
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await school_actions.create_school(ctx, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.get("/{school_id}", summary="Get school")
async def get_school(
    school_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await school_actions.get_school(ctx, school_id))


@router.patch("/{school_id}", summary="Update school")
async def update_school(
    school_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await school_actions.update_school(ctx, school_id, payload))


@router.delete("/{school_id}", summary="Delete school")
async def delete_school(
    school_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await school_actions.delete_school(ctx, school_id))
