# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Navigation API endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from intervention_tracker.actions import navigation as navigation_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List all navigation items")
async def list_navigation_items(ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await navigation_actions.get_navigation_items(ctx))


@router.get("/me", summary="Navigation visible to the caller")
async def my_navigation(ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await navigation_actions.get_my_navigation(ctx))


@router.post("", summary="Create navigation item")
async def create_navigation_item(
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await navigation_actions.create_navigation_item(ctx, payload)
    return envelope_response(state, status.HTTP_201_CREATED)


@router.patch("/{item_id}", summary="Update navigation item")
async def update_navigation_item(
    item_id: int,
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    state = await navigation_actions.update_navigation_item(ctx, item_id, payload)
    return envelope_response(state)


@router.delete("/{item_id}", summary="Delete navigation item")
async def delete_navigation_item(
    item_id: int,
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await navigation_actions.delete_navigation_item(ctx, item_id))
