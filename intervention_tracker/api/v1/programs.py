# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention program API endpoints.

- GET / - List programs (active unless include_inactive)
- POST / - Create program
- GET /{program_id} - Get program
- PATCH /{program_id} - Update program
- DELETE /{program_id} - Deactivate program
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from intervention_tracker.actions import programs as program_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List programs")
async def list_programs(
    include_inactive: bool = Query(False),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await program_actions.get_programs(ctx, include_inactive=include_inactive)
    return envelope_response(state)


@router.post("", summary="Create program")
async def create_program(
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await program_actions.create_program(ctx, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.get("/{program_id}", summary="Get program")
async def get_program(
    program_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await program_actions.get_program(ctx, program_id))


@router.patch("/{program_id}", summary="Update program")
async def update_program(
    program_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await program_actions.update_program(ctx, program_id, payload))


@router.delete("/{program_id}", summary="Delete program")
async def delete_program(
    program_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await program_actions.delete_program(ctx, program_id))
