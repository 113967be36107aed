# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from intervention_tracker.models.common import ORMModel


class RoleSummary(ORMModel):
    """Role reference embedded in user payloads."""

    id: int
    name: str


class UserSummary(ORMModel):
    """Minimal user reference for selection lists."""

    id: int
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UserResponse(ORMModel):
    """User with assigned roles."""

    id: int
    cognito_sub: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    last_sign_in_at: datetime | None = None
    created_at: datetime | None = None
    roles: list[RoleSummary] = Field(default_factory=list)


class UserRolesUpdateRequest(BaseModel):
    """Desired complete role set for a user."""

    user_id: int = Field(gt=0)
    role_ids: list[int] = Field(default_factory=list)


class UserDeleteRequest(BaseModel):
    """Soft delete of a user account."""

    user_id: int = Field(gt=0)
