# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from intervention_tracker.models.common import ORMModel

SchoolName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class SchoolCreateRequest(BaseModel):
    """Create a school."""

    name: SchoolName
    district: str | None = None
    address: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = None
    principal_name: str | None = None


class SchoolUpdateRequest(BaseModel):
    """Partial school update."""

    name: SchoolName | None = None
    district: str | None = None
    address: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = None
    principal_name: str | None = None
    is_active: bool | None = None


class SchoolSummary(ORMModel):
    """School reference embedded in student payloads."""

    id: int
    name: str
    district: str | None = None


class SchoolResponse(ORMModel):
    """School details."""

    id: int
    name: str
    district: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    principal_name: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
