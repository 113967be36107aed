# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application setting schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

SECRET_MASK = "••••••••"


class SettingUpsertRequest(BaseModel):
    """Create or update a setting by key."""

    key: str = Field(min_length=1, max_length=255, pattern=r"^[A-Za-z0-9_.\-]+$")
    value: str = ""
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    is_secret: bool = False


class SettingResponse(BaseModel):
    """Setting as shown to administrators; secret values are masked."""

    id: int
    key: str
    value: str
    description: str | None = None
    category: str | None = None
    is_secret: bool = False
    has_value: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
