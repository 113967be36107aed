# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention program schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from intervention_tracker.models.common import InterventionType, OptionalInt, ORMModel

ProgramName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class ProgramCreateRequest(BaseModel):
    """Create an intervention program."""

    name: ProgramName
    description: str | None = None
    type: InterventionType
    duration_days: OptionalInt = Field(default=None, ge=0)
    materials: str | None = None
    goals: str | None = None
    is_active: bool = True


class ProgramUpdateRequest(BaseModel):
    """Partial program update."""

    name: ProgramName | None = None
    description: str | None = None
    type: InterventionType | None = None
    duration_days: OptionalInt = Field(default=None, ge=0)
    materials: str | None = None
    goals: str | None = None
    is_active: bool | None = None


class ProgramResponse(ORMModel):
    """Intervention program."""

    id: int
    name: str
    description: str | None = None
    type: InterventionType
    duration_days: int | None = None
    materials: str | None = None
    goals: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
