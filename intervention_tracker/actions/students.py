# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student and guardian actions. All require the students tool."""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import (
    STUDENTS_TOOL,
    ActionContext,
    action,
    success,
    validate_input,
)
from intervention_tracker.domains.student.service import StudentService
from intervention_tracker.models.common import ActionState
from intervention_tracker.models.student import (
    GuardianCreateRequest,
    GuardianResponse,
    GuardianUpdateRequest,
    StudentCreateRequest,
    StudentDetail,
    StudentFilters,
    StudentListItem,
    StudentUpdateRequest,
)


@action("Failed to fetch students")
async def get_students(
    ctx: ActionContext,
    filters: StudentFilters | Mapping[str, Any] | None = None,
) -> ActionState[list[StudentListItem]]:
    """List students; inactive students only when asked for."""
    await ctx.require_tool(STUDENTS_TOOL)
    parsed = validate_input(StudentFilters, filters)
    students = await StudentService(ctx.db).list_students(parsed)
    return success("Students fetched successfully", students)


@action("Failed to fetch student")
async def get_student(ctx: ActionContext, student_id: int) -> ActionState[StudentDetail]:
    """Get one student with school and guardians."""
    await ctx.require_tool(STUDENTS_TOOL)
    student = await StudentService(ctx.db).get_student(student_id)
    return success("Student fetched successfully", student)


@action("Failed to create student")
async def create_student(
    ctx: ActionContext,
    data: StudentCreateRequest | Mapping[str, Any],
) -> ActionState[StudentDetail]:
    """Create a student."""
    user = await ctx.require_tool(STUDENTS_TOOL)
    request = validate_input(StudentCreateRequest, data)
    student = await StudentService(ctx.db).create_student(request, created_by=user.id)
    return success("Student created successfully", student)


@action("Failed to update student")
async def update_student(
    ctx: ActionContext,
    student_id: int,
    data: StudentUpdateRequest | Mapping[str, Any],
) -> ActionState[StudentDetail]:
    """Update the fields that were sent."""
    user = await ctx.require_tool(STUDENTS_TOOL)
    request = validate_input(StudentUpdateRequest, data)
    student = await StudentService(ctx.db).update_student(student_id, request, updated_by=user.id)
    return success("Student updated successfully", student)


@action("Failed to delete student")
async def delete_student(ctx: ActionContext, student_id: int) -> ActionState[None]:
    """Mark a student inactive; refused while interventions are active."""
    user = await ctx.require_tool(STUDENTS_TOOL)
    await StudentService(ctx.db).delete_student(student_id, deleted_by=user.id)
    return success("Student deleted successfully")


@action("Failed to add guardian")
async def add_guardian(
    ctx: ActionContext,
    student_id: int,
    data: GuardianCreateRequest | Mapping[str, Any],
) -> ActionState[GuardianResponse]:
    await ctx.require_tool(STUDENTS_TOOL)
    request = validate_input(GuardianCreateRequest, data)
    guardian = await StudentService(ctx.db).add_guardian(student_id, request)
    return success("Guardian added successfully", guardian)


@action("Failed to update guardian")
async def update_guardian(
    ctx: ActionContext,
    guardian_id: int,
    data: GuardianUpdateRequest | Mapping[str, Any],
) -> ActionState[GuardianResponse]:
    await ctx.require_tool(STUDENTS_TOOL)
    request = validate_input(GuardianUpdateRequest, data)
    guardian = await StudentService(ctx.db).update_guardian(guardian_id, request)
    return success("Guardian updated successfully", guardian)


@action("Failed to remove guardian")
async def remove_guardian(ctx: ActionContext, guardian_id: int) -> ActionState[None]:
    await ctx.require_tool(STUDENTS_TOOL)
    await StudentService(ctx.db).remove_guardian(guardian_id)
    return success("Guardian removed successfully")
