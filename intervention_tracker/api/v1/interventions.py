# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention API endpoints.

- GET / - List interventions (student_id, status, type, assigned_to, date range)
- POST / - Create intervention
- GET /{intervention_id} - Get intervention with team, recent sessions, goals
- PATCH /{intervention_id} - Update intervention
- DELETE /{intervention_id} - Delete intervention and dependent rows
- POST /{intervention_id}/goals, PATCH|DELETE /goals/{goal_id} - Goals
- GET|POST /{intervention_id}/sessions - Sessions
- POST /{intervention_id}/team, DELETE /{intervention_id}/team/{user_id} - Team
- GET|POST /{intervention_id}/attachments - Attachments
"""

from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from intervention_tracker.actions import interventions as intervention_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List interventions")
async def list_interventions(
    student_id: int | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    type_filter: str | None = Query(None, alias="type"),
    assigned_to: int | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    filters = {
        "student_id": student_id,
        "status": status_filter,
        "type": type_filter,
        "assigned_to": assigned_to,
        "start_date": start_date,
        "end_date": end_date,
    }
    filters = {key: value for key, value in filters.items() if value is not None}
    return envelope_response(await intervention_actions.get_interventions(ctx, filters))


@router.post("", summary="Create intervention")
async def create_intervention(
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await intervention_actions.create_intervention(ctx, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.get("/{intervention_id}", summary="Get intervention")
async def get_intervention(
    intervention_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await intervention_actions.get_intervention(ctx, intervention_id))


@router.patch("/{intervention_id}", summary="Update intervention")
async def update_intervention(
    intervention_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await intervention_actions.update_intervention(ctx, intervention_id, payload)
    return envelope_response(state)


@router.delete("/{intervention_id}", summary="Delete intervention")
async def delete_intervention(
    intervention_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await intervention_actions.delete_intervention(ctx, intervention_id))


# =========================================================================
# Goals
# =========================================================================


@router.post("/{intervention_id}/goals", summary="Add goal")
async def add_goal(
    intervention_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await intervention_actions.add_goal(ctx, intervention_id, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.patch("/goals/{goal_id}", summary="Update goal")
async def update_goal(
    goal_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await intervention_actions.update_goal(ctx, goal_id, payload))


@router.delete("/goals/{goal_id}", summary="Remove goal")
async def remove_goal(goal_id: int, ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await intervention_actions.remove_goal(ctx, goal_id))


# =========================================================================
# Sessions
# =========================================================================


@router.get("/{intervention_id}/sessions", summary="List sessions")
async def list_sessions(
    intervention_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await intervention_actions.get_sessions(ctx, intervention_id))


@router.post("/{intervention_id}/sessions", summary="Record session")
async def record_session(
    intervention_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await intervention_actions.record_session(ctx, intervention_id, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


# =========================================================================
# Team
# =========================================================================


@router.post("/{intervention_id}/team", summary="Add team member")
async def add_team_member(
    intervention_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await intervention_actions.add_team_member(ctx, intervention_id, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.delete("/{intervention_id}/team/{user_id}", summary="Remove team member")
async def remove_team_member(
    intervention_id: int,
    user_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await intervention_actions.remove_team_member(ctx, intervention_id, user_id)
    return envelope_response(state)


# =========================================================================
# Attachments
# =========================================================================


@router.get("/{intervention_id}/attachments", summary="List attachments")
async def list_attachments(
    intervention_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await intervention_actions.get_attachments(ctx, intervention_id))


@router.post("/{intervention_id}/attachments", summary="Attach document")
async def attach_document(
    intervention_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await intervention_actions.attach_document(ctx, intervention_id, payload)
    return envelope_response(state, status.HTTP_201_CREATED)
