# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Setting actions (administrators only)."""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import ActionContext, action, success, validate_input
from intervention_tracker.domains.setting.service import SettingService
from intervention_tracker.models.common import ActionState
from intervention_tracker.models.setting import SettingResponse, SettingUpsertRequest

_MANAGE_SETTINGS = "You do not have permission to manage settings"


@action("Failed to fetch settings")
async def get_settings_list(ctx: ActionContext) -> ActionState[list[SettingResponse]]:
    """List settings with secret values masked."""
    await ctx.require_admin(_MANAGE_SETTINGS)
    settings = await SettingService(ctx.db).list_settings()
    return success("Settings fetched successfully", settings)


@action("Failed to save setting")
async def upsert_setting(
    ctx: ActionContext,
    data: SettingUpsertRequest | Mapping[str, Any],
) -> ActionState[SettingResponse]:
    """Create or update a setting by key."""
    await ctx.require_admin(_MANAGE_SETTINGS)
    request = validate_input(SettingUpsertRequest, data)
    setting = await SettingService(ctx.db).upsert_setting(request)
    return success("Setting saved successfully", setting)


@action("Failed to delete setting")
async def delete_setting(ctx: ActionContext, key: str) -> ActionState[None]:
    await ctx.require_admin(_MANAGE_SETTINGS)
    await SettingService(ctx.db).delete_setting(key)
    return success("Setting deleted successfully")


@action("Failed to fetch setting value")
async def get_setting_value(ctx: ActionContext, key: str) -> ActionState[str]:
    """Return the unmasked value of a setting."""
    await ctx.require_admin(_MANAGE_SETTINGS)
    value = await SettingService(ctx.db).get_actual_value(key)
    return success("Setting value fetched successfully", value)
