# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student API endpoints.

- GET / - List students (grade, status, school_id, search, include_inactive)
- POST / - Create student
- GET /{student_id} - Get student with school and guardians
- PATCH /{student_id} - Update student
- DELETE /{student_id} - Mark student inactive
- POST /{student_id}/guardians - Add guardian
- PATCH /guardians/{guardian_id} - Update guardian
- DELETE /guardians/{guardian_id} - Remove guardian
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from intervention_tracker.actions import students as student_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List students")
async def list_students(
    grade: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    school_id: str | None = Query(None),
    search: str | None = Query(None),
    include_inactive: bool = Query(False),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    filters = {
        "grade": grade,
        "status": status_filter,
        "school_id": school_id,
        "search": search,
        "include_inactive": include_inactive,
    }
    filters = {key: value for key, value in filters.items() if value is not None}
    return envelope_response(await student_actions.get_students(ctx, filters))


@router.post("", summary="Create student")
async def create_student(
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await student_actions.create_student(ctx, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.get("/{student_id}", summary="Get student")
async def get_student(
    student_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await student_actions.get_student(ctx, student_id))


@router.patch("/{student_id}", summary="Update student")
async def update_student(
    student_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await student_actions.update_student(ctx, student_id, payload))


@router.delete("/{student_id}", summary="Delete student")
async def delete_student(
    student_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await student_actions.delete_student(ctx, student_id))


@router.post("/{student_id}/guardians", summary="Add guardian")
async def add_guardian(
    student_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await student_actions.add_guardian(ctx, student_id, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.patch("/guardians/{guardian_id}", summary="Update guardian")
async def update_guardian(
    guardian_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await student_actions.update_guardian(ctx, guardian_id, payload))


@router.delete("/guardians/{guardian_id}", summary="Remove guardian")
async def remove_guardian(
    guardian_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await student_actions.remove_guardian(ctx, guardian_id))
