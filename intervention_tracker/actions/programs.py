# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention program actions.

Anyone with the interventions or programs tool can read programs; changes
need the programs tool.
"""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import (
    INTERVENTIONS_TOOL,
    PROGRAMS_TOOL,
    ActionContext,
    action,
    success,
    validate_input,
)
from intervention_tracker.domains.auth.access import AccessService, is_administrator
from intervention_tracker.domains.program.service import ProgramService
from intervention_tracker.models.common import ActionState
from intervention_tracker.models.program import (
    ProgramCreateRequest,
    ProgramResponse,
    ProgramUpdateRequest,
)


async def _require_program_reader(ctx: ActionContext) -> None:
    user = await ctx.current_user()
    if is_administrator(user):
        return
    access = AccessService(ctx.db)
    if await access.has_tool_access(user.id, PROGRAMS_TOOL):
        return
    await access.require_tool(user, INTERVENTIONS_TOOL)


@action("Failed to fetch programs")
async def get_programs(
    ctx: ActionContext,
    include_inactive: bool = False,
) -> ActionState[list[ProgramResponse]]:
    """List programs, active only unless include_inactive is set."""
    await _require_program_reader(ctx)
    programs = await ProgramService(ctx.db).list_programs(include_inactive=include_inactive)
    return success("Programs fetched successfully", programs)


@action("Failed to fetch program")
async def get_program(ctx: ActionContext, program_id: int) -> ActionState[ProgramResponse]:
    """Get one program, including inactive programs."""
    await _require_program_reader(ctx)
    program = await ProgramService(ctx.db).get_program(program_id)
    return success("Program fetched successfully", program)


@action("Failed to create program")
async def create_program(
    ctx: ActionContext,
    data: ProgramCreateRequest | Mapping[str, Any],
) -> ActionState[ProgramResponse]:
    """Create a program."""
    await ctx.require_tool(PROGRAMS_TOOL)
    request = validate_input(ProgramCreateRequest, data)
    program = await ProgramService(ctx.db).create_program(request)
    return success("Program created successfully", program)


@action("Failed to update program")
async def update_program(
    ctx: ActionContext,
    program_id: int,
    data: ProgramUpdateRequest | Mapping[str, Any],
) -> ActionState[ProgramResponse]:
    """Update the fields that were sent."""
    await ctx.require_tool(PROGRAMS_TOOL)
    request = validate_input(ProgramUpdateRequest, data)
    program = await ProgramService(ctx.db).update_program(program_id, request)
    return success("Program updated successfully", program)


@action("Failed to delete program")
async def delete_program(ctx: ActionContext, program_id: int) -> ActionState[None]:
    """Deactivate a program not used by active interventions."""
    await ctx.require_tool(PROGRAMS_TOOL)
    await ProgramService(ctx.db).delete_program(program_id)
    return success("Program deleted successfully")
