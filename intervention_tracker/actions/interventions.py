# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention actions, including goals, sessions, team and attachments.

All require the interventions tool.
"""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import (
    INTERVENTIONS_TOOL,
    ActionContext,
    action,
    success,
    validate_input,
)
from intervention_tracker.domains.intervention.service import InterventionService
from intervention_tracker.models.common import ActionState
from intervention_tracker.models.intervention import (
    AttachmentCreateRequest,
    AttachmentResponse,
    GoalCreateRequest,
    GoalResponse,
    GoalUpdateRequest,
    InterventionCreateRequest,
    InterventionDetail,
    InterventionFilters,
    InterventionListItem,
    InterventionResponse,
    InterventionUpdateRequest,
    SessionCreateRequest,
    SessionResponse,
    TeamMemberCreateRequest,
    TeamMemberResponse,
)


@action("Failed to fetch interventions")
async def get_interventions(
    ctx: ActionContext,
    filters: InterventionFilters | Mapping[str, Any] | None = None,
) -> ActionState[list[InterventionListItem]]:
    """List interventions matching the filters."""
    await ctx.require_tool(INTERVENTIONS_TOOL)
    parsed = validate_input(InterventionFilters, filters)
    interventions = await InterventionService(ctx.db).list_interventions(parsed)
    return success("Interventions fetched successfully", interventions)


@action("Failed to fetch intervention")
async def get_intervention(
    ctx: ActionContext,
    intervention_id: int,
) -> ActionState[InterventionDetail]:
    """Get one intervention with team, recent sessions and goals."""
    await ctx.require_tool(INTERVENTIONS_TOOL)
    intervention = await InterventionService(ctx.db).get_intervention(intervention_id)
    return success("Intervention fetched successfully", intervention)


@action("Failed to create intervention")
async def create_intervention(
    ctx: ActionContext,
    data: InterventionCreateRequest | Mapping[str, Any],
) -> ActionState[InterventionDetail]:
    """Create an intervention for a student."""
    user = await ctx.require_tool(INTERVENTIONS_TOOL)
    request = validate_input(InterventionCreateRequest, data)
    intervention = await InterventionService(ctx.db).create_intervention(
        request, created_by=user.id
    )
    return success("Intervention created successfully", intervention)


@action("Failed to update intervention")
async def update_intervention(
    ctx: ActionContext,
    intervention_id: int,
    data: InterventionUpdateRequest | Mapping[str, Any],
) -> ActionState[InterventionResponse]:
    """Update the fields that were sent."""
    await ctx.require_tool(INTERVENTIONS_TOOL)
    request = validate_input(InterventionUpdateRequest, data)
    intervention = await InterventionService(ctx.db).update_intervention(
        intervention_id, request
    )
    return success("Intervention updated successfully", intervention)


@action("Failed to delete intervention")
async def delete_intervention(ctx: ActionContext, intervention_id: int) -> ActionState[None]:
    """Delete an intervention with its sessions, goals, team and attachments."""
    await ctx.require_tool(INTERVENTIONS_TOOL)
    await InterventionService(ctx.db).delete_intervention(intervention_id)
    return success("Intervention deleted successfully")


# =========================================================================
# Goals
# =========================================================================


@action("Failed to add goal")
async def add_goal(
    ctx: ActionContext,
    intervention_id: int,
    data: GoalCreateRequest | Mapping[str, Any],
) -> ActionState[GoalResponse]:
    await ctx.require_tool(INTERVENTIONS_TOOL)
    request = validate_input(GoalCreateRequest, data)
    goal = await InterventionService(ctx.db).add_goal(intervention_id, request)
    return success("Goal added successfully", goal)


@action("Failed to update goal")
async def update_goal(
    ctx: ActionContext,
    goal_id: int,
    data: GoalUpdateRequest | Mapping[str, Any],
) -> ActionState[GoalResponse]:
    await ctx.require_tool(INTERVENTIONS_TOOL)
    request = validate_input(GoalUpdateRequest, data)
    goal = await InterventionService(ctx.db).update_goal(goal_id, request)
    return success("Goal updated successfully", goal)


@action("Failed to remove goal")
async def remove_goal(ctx: ActionContext, goal_id: int) -> ActionState[None]:
    await ctx.require_tool(INTERVENTIONS_TOOL)
    await InterventionService(ctx.db).remove_goal(goal_id)
    return success("Goal removed successfully")


# =========================================================================
# Sessions
# =========================================================================


@action("Failed to record session")
async def record_session(
    ctx: ActionContext,
    intervention_id: int,
    data: SessionCreateRequest | Mapping[str, Any],
) -> ActionState[SessionResponse]:
    user = await ctx.require_tool(INTERVENTIONS_TOOL)
    request = validate_input(SessionCreateRequest, data)
    session = await InterventionService(ctx.db).record_session(
        intervention_id, request, recorded_by=user.id
    )
    return success("Session recorded successfully", session)


@action("Failed to fetch sessions")
async def get_sessions(
    ctx: ActionContext,
    intervention_id: int,
) -> ActionState[list[SessionResponse]]:
    await ctx.require_tool(INTERVENTIONS_TOOL)
    sessions = await InterventionService(ctx.db).list_sessions(intervention_id)
    return success("Sessions fetched successfully", sessions)


# =========================================================================
# Team
# =========================================================================


@action("Failed to add team member")
async def add_team_member(
    ctx: ActionContext,
    intervention_id: int,
    data: TeamMemberCreateRequest | Mapping[str, Any],
) -> ActionState[list[TeamMemberResponse]]:
    await ctx.require_tool(INTERVENTIONS_TOOL)
    request = validate_input(TeamMemberCreateRequest, data)
    team = await InterventionService(ctx.db).add_team_member(intervention_id, request)
    return success("Team member added successfully", team)


@action("Failed to remove team member")
async def remove_team_member(
    ctx: ActionContext,
    intervention_id: int,
    user_id: int,
) -> ActionState[None]:
    await ctx.require_tool(INTERVENTIONS_TOOL)
    await InterventionService(ctx.db).remove_team_member(intervention_id, user_id)
    return success("Team member removed successfully")


# =========================================================================
# Attachments
# =========================================================================


@action("Failed to attach document")
async def attach_document(
    ctx: ActionContext,
    intervention_id: int,
    data: AttachmentCreateRequest | Mapping[str, Any],
) -> ActionState[AttachmentResponse]:
    user = await ctx.require_tool(INTERVENTIONS_TOOL)
    request = validate_input(AttachmentCreateRequest, data)
    attachment = await InterventionService(ctx.db).link_document(
        intervention_id, request, created_by=user.id
    )
    return success("Document attached successfully", attachment)


@action("Failed to fetch attachments")
async def get_attachments(
    ctx: ActionContext,
    intervention_id: int,
) -> ActionState[list[AttachmentResponse]]:
    await ctx.require_tool(INTERVENTIONS_TOOL)
    attachments = await InterventionService(ctx.db).list_attachments(intervention_id)
    return success("Attachments fetched successfully", attachments)
