# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student and guardian schemas."""

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from intervention_tracker.models.common import (
    Grade,
    OptionalDate,
    OptionalInt,
    ORMModel,
    StudentStatus,
)
from intervention_tracker.models.school import SchoolSummary

StudentNumber = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class StudentCreateRequest(BaseModel):
    """Create a student."""

    student_id: StudentNumber
    first_name: PersonName
    last_name: PersonName
    middle_name: str | None = Field(default=None, max_length=100)
    date_of_birth: OptionalDate = None
    grade: Grade
    school_id: OptionalInt = None
    status: StudentStatus = StudentStatus.ACTIVE
    email: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = Field(default=None, max_length=20)
    notes: str | None = None


class StudentUpdateRequest(BaseModel):
    """Partial student update; only fields that were sent are applied."""

    student_id: StudentNumber | None = None
    first_name: PersonName | None = None
    last_name: PersonName | None = None
    middle_name: str | None = Field(default=None, max_length=100)
    date_of_birth: OptionalDate = None
    grade: Grade | None = None
    school_id: OptionalInt = None
    status: StudentStatus | None = None
    email: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = Field(default=None, max_length=20)
    notes: str | None = None


class StudentFilters(BaseModel):
    """Student list filters."""

    grade: Grade | None = None
    status: StudentStatus | None = None
    school_id: OptionalInt = None
    search: str | None = None
    include_inactive: bool = False


class StudentResponse(ORMModel):
    """Student record."""

    id: int
    student_id: str
    first_name: str
    last_name: str
    middle_name: str | None = None
    date_of_birth: date | None = None
    grade: Grade
    school_id: int | None = None
    status: StudentStatus
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    notes: str | None = None
    created_by: int | None = None
    updated_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StudentListItem(StudentResponse):
    """Student row with display names resolved."""

    school_name: str | None = None
    created_by_name: str | None = None
    updated_by_name: str | None = None


class GuardianCreateRequest(BaseModel):
    """Add a guardian to a student."""

    first_name: PersonName
    last_name: PersonName
    relationship: str | None = Field(default=None, max_length=50)
    email: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    is_primary_contact: bool = False


class GuardianUpdateRequest(BaseModel):
    """Partial guardian update."""

    first_name: PersonName | None = None
    last_name: PersonName | None = None
    relationship: str | None = Field(default=None, max_length=50)
    email: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    is_primary_contact: bool | None = None


class GuardianResponse(BaseModel):
    """Guardian contact."""

    id: int
    student_id: int
    first_name: str
    last_name: str
    relationship: str | None = None
    email: str | None = None
    phone: str | None = None
    is_primary_contact: bool = False


class StudentDetail(StudentListItem):
    """Student with school and guardians."""

    school: SchoolSummary | None = None
    guardians: list[GuardianResponse] = Field(default_factory=list)
