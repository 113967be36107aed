# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role and tool actions. Everything except listing active tools is admin only."""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import ActionContext, action, success, validate_input
from intervention_tracker.domains.role.service import RoleService
from intervention_tracker.models.common import ActionState
from intervention_tracker.models.role import (
    RoleCreateRequest,
    RoleResponse,
    RoleToolsUpdateRequest,
    RoleUpdateRequest,
    ToolResponse,
)

_VIEW_ROLES = "You do not have permission to view roles"
_MANAGE_ROLES = "You do not have permission to manage roles"


@action("Failed to fetch roles")
async def get_roles(ctx: ActionContext) -> ActionState[list[RoleResponse]]:
    """List roles ordered by name."""
    await ctx.require_admin(_VIEW_ROLES)
    roles = await RoleService(ctx.db).list_roles()
    return success("Roles fetched successfully", roles)


@action("Failed to fetch role")
async def get_role(ctx: ActionContext, role_id: int) -> ActionState[RoleResponse]:
    """Get one role."""
    await ctx.require_admin(_VIEW_ROLES)
    role = await RoleService(ctx.db).get_role(role_id)
    return success("Role fetched successfully", role)


@action("Failed to create role")
async def create_role(
    ctx: ActionContext,
    data: RoleCreateRequest | Mapping[str, Any],
) -> ActionState[RoleResponse]:
    """Create a custom role."""
    await ctx.require_admin(_MANAGE_ROLES)
    request = validate_input(RoleCreateRequest, data)
    role = await RoleService(ctx.db).create_role(request)
    return success("Role created successfully", role)


@action("Failed to update role")
async def update_role(
    ctx: ActionContext,
    role_id: int,
    data: RoleUpdateRequest | Mapping[str, Any],
) -> ActionState[RoleResponse]:
    """Rename or describe a custom role."""
    await ctx.require_admin(_MANAGE_ROLES)
    request = validate_input(RoleUpdateRequest, data)
    role = await RoleService(ctx.db).update_role(role_id, request)
    return success("Role updated successfully", role)


@action("Failed to delete role")
async def delete_role(ctx: ActionContext, role_id: int) -> ActionState[None]:
    """Delete a custom role that no user holds."""
    await ctx.require_admin(_MANAGE_ROLES)
    await RoleService(ctx.db).delete_role(role_id)
    return success("Role deleted successfully")


@action("Failed to fetch tools")
async def get_tools(ctx: ActionContext) -> ActionState[list[ToolResponse]]:
    """List active tools."""
    await ctx.current_user()
    tools = await RoleService(ctx.db).list_tools()
    return success("Tools fetched successfully", tools)


@action("Failed to fetch role tools")
async def get_role_tools(ctx: ActionContext, role_id: int) -> ActionState[list[ToolResponse]]:
    """List the tools granted to a role."""
    await ctx.require_admin(_VIEW_ROLES)
    tools = await RoleService(ctx.db).get_role_tools(role_id)
    return success("Role tools fetched successfully", tools)


@action("Failed to assign tool")
async def assign_tool_to_role(
    ctx: ActionContext,
    role_id: int,
    tool_id: int,
) -> ActionState[bool]:
    """Grant a tool to a role; data reports whether a new grant was made."""
    await ctx.require_admin(_MANAGE_ROLES)
    created = await RoleService(ctx.db).assign_tool(role_id, tool_id)
    message = "Tool assigned successfully" if created else "Tool already assigned to role"
    return success(message, created)


@action("Failed to remove tool")
async def remove_tool_from_role(
    ctx: ActionContext,
    role_id: int,
    tool_id: int,
) -> ActionState[bool]:
    """Revoke a tool from a role; data reports whether a grant was removed."""
    await ctx.require_admin(_MANAGE_ROLES)
    removed = await RoleService(ctx.db).remove_tool(role_id, tool_id)
    message = "Tool removed successfully" if removed else "Tool was not assigned to role"
    return success(message, removed)


@action("Failed to update role tools")
async def set_role_tools(
    ctx: ActionContext,
    role_id: int,
    data: RoleToolsUpdateRequest | Mapping[str, Any],
) -> ActionState[list[ToolResponse]]:
    """Replace a role's tool grants."""
    await ctx.require_admin(_MANAGE_ROLES)
    request = validate_input(RoleToolsUpdateRequest, data)
    tools = await RoleService(ctx.db).set_role_tools(role_id, request.tool_ids)
    return success("Role tools updated successfully", tools)
