# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Job record API endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from intervention_tracker.actions import jobs as job_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List jobs")
async def list_jobs(
    user_id: int | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await job_actions.get_jobs(
        ctx,
        user_id=user_id,
        status=status_filter,
        limit=limit,
        offset=offset,
    )
    return envelope_response(state)


@router.post("", summary="Create job")
async def create_job(
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await job_actions.create_job(ctx, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.get("/{job_id}", summary="Get job")
async def get_job(job_id: int, ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await job_actions.get_job(ctx, job_id))


@router.patch("/{job_id}", summary="Update job")
async def update_job(
    job_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await job_actions.update_job(ctx, job_id, payload))


@router.delete("/{job_id}", summary="Delete job")
async def delete_job(job_id: int, ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await job_actions.delete_job(ctx, job_id))
