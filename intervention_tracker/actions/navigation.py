# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Navigation actions. Changes and the full item list are admin only."""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import ActionContext, action, success, validate_input
from intervention_tracker.domains.navigation.service import NavigationService
from intervention_tracker.models.common import ActionState
from intervention_tracker.models.navigation import (
    NavigationItemCreateRequest,
    NavigationItemResponse,
    NavigationItemUpdateRequest,
)

_MANAGE_NAVIGATION = "You do not have permission to manage navigation"


@action("Failed to fetch navigation items")
async def get_navigation_items(ctx: ActionContext) -> ActionState[list[NavigationItemResponse]]:
    """List every navigation item ordered by position."""
    await ctx.require_admin(_MANAGE_NAVIGATION)
    items = await NavigationService(ctx.db).list_items()
    return success("Navigation items fetched successfully", items)


@action("Failed to fetch navigation")
async def get_my_navigation(ctx: ActionContext) -> ActionState[list[NavigationItemResponse]]:
    """List the navigation items the caller may see."""
    user = await ctx.current_user()
    items = await NavigationService(ctx.db).list_for_user(user)
    return success("Navigation fetched successfully", items)


@action("Failed to create navigation item")
async def create_navigation_item(
    ctx: ActionContext,
    data: NavigationItemCreateRequest | Mapping[str, Any],
) -> ActionState[NavigationItemResponse]:
    await ctx.require_admin(_MANAGE_NAVIGATION)
    request = validate_input(NavigationItemCreateRequest, data)
    item = await NavigationService(ctx.db).create_item(request)
    return success("Navigation item created successfully", item)


@action("Failed to update navigation item")
async def update_navigation_item(
    ctx: ActionContext,
    item_id: int,
    data: NavigationItemUpdateRequest | Mapping[str, Any],
) -> ActionState[NavigationItemResponse]:
    await ctx.require_admin(_MANAGE_NAVIGATION)
    request = validate_input(NavigationItemUpdateRequest, data)
    item = await NavigationService(ctx.db).update_item(item_id, request)
    return success("Navigation item updated successfully", item)


@action("Failed to delete navigation item")
async def delete_navigation_item(ctx: ActionContext, item_id: int) -> ActionState[None]:
    await ctx.require_admin(_MANAGE_NAVIGATION)
    await NavigationService(ctx.db).delete_item(item_id)
    return success("Navigation item deleted successfully")
