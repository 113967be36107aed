# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School actions. Reads need a session; changes need the schools tool."""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import (
    SCHOOLS_TOOL,
    ActionContext,
    action,
    success,
    validate_input,
)
from intervention_tracker.domains.school.service import SchoolService
from intervention_tracker.models.common import ActionState
from intervention_tracker.models.school import (
    SchoolCreateRequest,
    SchoolResponse,
    SchoolUpdateRequest,
)


@action("Failed to fetch schools")
async def get_schools(
    ctx: ActionContext,
    include_inactive: bool = False,
    search: str | None = None,
) -> ActionState[list[SchoolResponse]]:
    """List schools, active only unless include_inactive is set."""
    await ctx.current_user()
    schools = await SchoolService(ctx.db).list_schools(
        include_inactive=include_inactive,
        search=search,
    )
    return success("Schools fetched successfully", schools)


@action("Failed to fetch school")
async def get_school(ctx: ActionContext, school_id: int) -> ActionState[SchoolResponse]:
    """Get one school, including inactive schools."""
    await ctx.current_user()
    school = await SchoolService(ctx.db).get_school(school_id)
    return success("School fetched successfully", school)


@action("Failed to create school")
async def create_school(
    ctx: ActionContext,
    data: SchoolCreateRequest | Mapping[str, Any],
) -> ActionState[SchoolResponse]:
    """Create a school."""
    await ctx.require_tool(SCHOOLS_TOOL)
    request = validate_input(SchoolCreateRequest, data)
    school = await SchoolService(ctx.db).create_school(request)
    return success("School created successfully", school)


@action("Failed to update school")
async def update_school(
    ctx: ActionContext,
    school_id: int,
    data: SchoolUpdateRequest | Mapping[str, Any],
) -> ActionState[SchoolResponse]:
    """Update a school."""
    await ctx.require_tool(SCHOOLS_TOOL)
    request = validate_input(SchoolUpdateRequest, data)
    school = await SchoolService(ctx.db).update_school(school_id, request)
    return success("School updated successfully", school)


@action("Failed to delete school")
async def delete_school(ctx: ActionContext, school_id: int) -> ActionState[None]:
    """Deactivate a school."""
    await ctx.require_tool(SCHOOLS_TOOL)
    await SchoolService(ctx.db).delete_school(school_id)
    return success("School deleted successfully")
