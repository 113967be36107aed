# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Navigation item schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, StringConstraints

from intervention_tracker.models.common import NavigationType, OptionalInt, ORMModel

NavigationText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class NavigationItemCreateRequest(BaseModel):
    """Create a navigation item."""

    label: NavigationText
    icon: NavigationText
    link: str | None = None
    parent_id: OptionalInt = None
    tool_id: OptionalInt = None
    tool_identifier: str | None = None
    requires_role: str | None = None
    position: int = 0
    is_active: bool = True
    description: str | None = None
    type: NavigationType = NavigationType.PAGE


class NavigationItemUpdateRequest(BaseModel):
    """Partial navigation update; null values leave the field unchanged."""

    label: NavigationText | None = None
    icon: NavigationText | None = None
    link: str | None = None
    parent_id: OptionalInt = None
    tool_id: OptionalInt = None
    tool_identifier: str | None = None
    requires_role: str | None = None
    position: int | None = None
    is_active: bool | None = None
    description: str | None = None
    type: NavigationType | None = None


class NavigationItemResponse(ORMModel):
    """Navigation item."""

    id: int
    label: str
    icon: str
    link: str | None = None
    parent_id: int | None = None
    tool_id: int | None = None
    tool_identifier: str | None = None
    requires_role: str | None = None
    position: int = 0
    is_active: bool = True
    description: str | None = None
    type: NavigationType = NavigationType.PAGE
    created_at: datetime | None = None
