# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User API endpoints.

- GET /me - Current user with roles
- GET /me/tools - Tool identifiers available to the current user
- GET / - Active users for selection lists
- GET /with-roles - Users with their roles (admin)
- PUT /{user_id}/roles - Replace a user's roles (admin)
- DELETE /{user_id} - Soft delete a user (admin)
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from intervention_tracker.actions import users as user_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("/me", summary="Get current user")
async def get_current_user(ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await user_actions.get_current_user(ctx))


@router.get("/me/tools", summary="Get current user's tools")
async def get_my_tools(ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await user_actions.get_my_tools(ctx))


@router.get("", summary="List users for selection")
async def list_users(ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await user_actions.get_users_for_select(ctx))


@router.get("/with-roles", summary="List users with roles")
async def list_users_with_roles(
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await user_actions.get_users_with_roles(ctx))


@router.put("/{user_id}/roles", summary="Replace user roles")
async def update_user_roles(
    user_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    data = {**payload, "user_id": user_id}
    return envelope_response(await user_actions.update_user_roles(ctx, data))


@router.delete("/{user_id}", summary="Delete user")
async def delete_user(
    user_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await user_actions.delete_user(ctx, {"user_id": user_id}))
