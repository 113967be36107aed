# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role and tool schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from intervention_tracker.models.common import ORMModel

RoleName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class RoleCreateRequest(BaseModel):
    """Create a custom role."""

    name: RoleName
    description: str | None = None


class RoleUpdateRequest(BaseModel):
    """Partial role update."""

    name: RoleName | None = None
    description: str | None = None


class RoleResponse(ORMModel):
    """Role details."""

    id: int
    name: str
    description: str | None = None
    is_system: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ToolResponse(ORMModel):
    """Tool details."""

    id: int
    identifier: str
    name: str
    description: str | None = None
    url: str | None = None
    icon: str | None = None
    is_active: bool = True
    display_order: int = 0


class RoleToolsUpdateRequest(BaseModel):
    """Desired complete tool grant set for a role."""

    tool_ids: list[int] = Field(default_factory=list)
