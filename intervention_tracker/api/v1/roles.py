# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role API endpoints (administrators only).

- GET / - List roles
- POST / - Create role
- GET /{role_id} - Get role
- PATCH /{role_id} - Update role
- DELETE /{role_id} - Delete role
- GET /{role_id}/tools - List tools granted to a role
- PUT /{role_id}/tools - Replace the role's tool grants
- POST /{role_id}/tools/{tool_id} - Grant a tool
- DELETE /{role_id}/tools/{tool_id} - Revoke a tool
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from intervention_tracker.actions import roles as role_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List roles")
async def list_roles(ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await role_actions.get_roles(ctx))


@router.post("", summary="Create role")
async def create_role(
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await role_actions.create_role(ctx, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.get("/{role_id}", summary="Get role")
async def get_role(role_id: int, ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await role_actions.get_role(ctx, role_id))


@router.patch("/{role_id}", summary="Update role")
async def update_role(
    role_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await role_actions.update_role(ctx, role_id, payload))


@router.delete("/{role_id}", summary="Delete role")
async def delete_role(
    role_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await role_actions.delete_role(ctx, role_id))


@router.get("/{role_id}/tools", summary="List role tools")
async def get_role_tools(
    role_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await role_actions.get_role_tools(ctx, role_id))


@router.put("/{role_id}/tools", summary="Replace role tools")
async def set_role_tools(
    role_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await role_actions.set_role_tools(ctx, role_id, payload))


@router.post("/{role_id}/tools/{tool_id}", summary="Grant tool")
async def assign_tool(
    role_id: int,
    tool_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await role_actions.assign_tool_to_role(ctx, role_id, tool_id))


@router.delete("/{role_id}/tools/{tool_id}", summary="Revoke tool")
async def remove_tool(
    role_id: int,
    tool_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await role_actions.remove_tool_from_role(ctx, role_id, tool_id))
