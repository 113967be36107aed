# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User actions: current user, user lists, role assignment and deletion."""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import (
    ActionContext,
    action,
    success,
    validate_input,
)
from intervention_tracker.domains.auth.access import AccessService
from intervention_tracker.domains.role.service import RoleService
from intervention_tracker.domains.user.service import UserService
from intervention_tracker.models.common import ActionState
from intervention_tracker.models.user import (
    RoleSummary,
    UserDeleteRequest,
    UserResponse,
    UserRolesUpdateRequest,
    UserSummary,
)


@action("Failed to get current user")
async def get_current_user(ctx: ActionContext) -> ActionState[UserResponse]:
    """Return the caller's account with roles, provisioning it on first sign-in."""
    caller = await ctx.current_user()
    user = await UserService(ctx.db).get_user(caller.id)
    return success("User retrieved successfully", UserResponse.model_validate(user))


@action("Failed to fetch tools")
async def get_my_tools(ctx: ActionContext) -> ActionState[list[str]]:
    """Return the tool identifiers available to the caller."""
    user = await ctx.current_user()
    tools = await AccessService(ctx.db).get_user_tools(user.id)
    return success("Tools fetched successfully", tools)


@action("Failed to fetch users")
async def get_users_for_select(ctx: ActionContext) -> ActionState[list[UserSummary]]:
    """List active users for assignee and team pickers."""
    await ctx.current_user()
    users = await UserService(ctx.db).list_users_for_select()
    return success("Users fetched successfully", users)


@action("Failed to fetch users")
async def get_users_with_roles(ctx: ActionContext) -> ActionState[list[UserResponse]]:
    """List active users with their roles (administrators only)."""
    await ctx.require_admin("You do not have permission to view users")
    users = await UserService(ctx.db).list_users_with_roles()
    return success("Users fetched successfully", users)


@action("Failed to update user roles")
async def update_user_roles(
    ctx: ActionContext,
    data: UserRolesUpdateRequest | Mapping[str, Any],
) -> ActionState[list[RoleSummary]]:
    """Replace a user's role set (administrators only).

    Rejected when an administrator removes their own Administrator role or
    when the change would leave no administrator.
    """
    actor = await ctx.require_admin("You do not have permission to update user roles")
    request = validate_input(UserRolesUpdateRequest, data)

    roles = await RoleService(ctx.db).update_user_roles(
        acting_user_id=actor.id,
        user_id=request.user_id,
        role_ids=request.role_ids,
    )
    return success(
        "User roles updated successfully",
        [RoleSummary.model_validate(role) for role in roles],
    )


@action("Failed to delete user")
async def delete_user(
    ctx: ActionContext,
    data: UserDeleteRequest | Mapping[str, Any],
) -> ActionState[None]:
    """Soft delete a user account (administrators only)."""
    actor = await ctx.require_admin("You do not have permission to delete users")
    request = validate_input(UserDeleteRequest, data)

    await UserService(ctx.db).delete_user(acting_user_id=actor.id, user_id=request.user_id)
    return success("User deleted successfully")
