# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application setting API endpoints.

Secret values are masked in listings; /{key}/value returns the stored value.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from intervention_tracker.actions import settings as setting_actions
from intervention_tracker.actions.base import ActionContext
from intervention_tracker.api.dependencies import envelope_response, get_action_context

router = APIRouter()


@router.get("", summary="List settings")
async def list_settings(ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await setting_actions.get_settings_list(ctx))


@router.put("", summary="Create or update setting")
async def upsert_setting(
    payload: dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context),
) -> JSONResponse:
    return envelope_response(await setting_actions.upsert_setting(ctx, payload))


@router.get("/{key}/value", summary="Get stored setting value")
async def get_setting_value(key: str, ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await setting_actions.get_setting_value(ctx, key))


@router.delete("/{key}", summary="Delete setting")
async def delete_setting(key: str, ctx: ActionContext = Depends(get_action_context)) -> JSONResponse:
    return envelope_response(await setting_actions.delete_setting(ctx, key))
