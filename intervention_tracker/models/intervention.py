# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention, goal, session, team and attachment schemas."""

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints, model_validator

from intervention_tracker.models.common import (
    InterventionStatus,
    InterventionType,
    OptionalDate,
    OptionalInt,
    ORMModel,
)

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
GoalText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class InterventionCreateRequest(BaseModel):
    """Create an intervention for a student."""

    student_id: int = Field(gt=0)
    program_id: OptionalInt = None
    type: InterventionType
    status: InterventionStatus = InterventionStatus.PLANNED
    title: Title
    description: str | None = None
    goals: str | None = None
    start_date: date
    end_date: OptionalDate = None
    frequency: str | None = Field(default=None, max_length=100)
    duration_minutes: OptionalInt = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=255)
    assigned_to: OptionalInt = None

    @model_validator(mode="after")
    def check_dates(self) -> "InterventionCreateRequest":
        """Reject an end date before the start date."""
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class InterventionUpdateRequest(BaseModel):
    """Partial intervention update."""

    program_id: OptionalInt = None
    type: InterventionType | None = None
    status: InterventionStatus | None = None
    title: Title | None = None
    description: str | None = None
    goals: str | None = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None
    frequency: str | None = Field(default=None, max_length=100)
    duration_minutes: OptionalInt = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=255)
    assigned_to: OptionalInt = None
    completion_notes: str | None = None


class InterventionFilters(BaseModel):
    """Intervention list filters."""

    student_id: OptionalInt = None
    status: InterventionStatus | None = None
    type: InterventionType | None = None
    assigned_to: OptionalInt = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None


class InterventionResponse(ORMModel):
    """Intervention record."""

    id: int
    student_id: int
    program_id: int | None = None
    type: InterventionType
    status: InterventionStatus
    title: str
    description: str | None = None
    goals: str | None = None
    start_date: date
    end_date: date | None = None
    frequency: str | None = None
    duration_minutes: int | None = None
    location: str | None = None
    assigned_to: int | None = None
    created_by: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    completion_notes: str | None = None


class InterventionListItem(InterventionResponse):
    """Intervention row with student, program and assignee summaries."""

    student_first_name: str | None = None
    student_last_name: str | None = None
    student_number: str | None = None
    student_grade: str | None = None
    program_name: str | None = None
    assigned_to_name: str | None = None


class GoalCreateRequest(BaseModel):
    """Add a goal to an intervention."""

    goal_text: GoalText
    target_date: OptionalDate = None
    evidence: str | None = None


class GoalUpdateRequest(BaseModel):
    """Partial goal update."""

    goal_text: GoalText | None = None
    target_date: OptionalDate = None
    is_achieved: bool | None = None
    achieved_date: OptionalDate = None
    evidence: str | None = None


class GoalResponse(ORMModel):
    """Intervention goal."""

    id: int
    intervention_id: int
    goal_text: str
    target_date: date | None = None
    is_achieved: bool = False
    achieved_date: date | None = None
    evidence: str | None = None


class SessionCreateRequest(BaseModel):
    """Record a delivered session."""

    session_date: date
    duration_minutes: OptionalInt = Field(default=None, ge=0)
    attended: bool = True
    progress_notes: str | None = None
    challenges: str | None = None
    next_steps: str | None = None


class SessionResponse(ORMModel):
    """Recorded intervention session."""

    id: int
    intervention_id: int
    session_date: date
    duration_minutes: int | None = None
    attended: bool = True
    progress_notes: str | None = None
    challenges: str | None = None
    next_steps: str | None = None
    recorded_by: int
    recorded_by_name: str | None = None
    created_at: datetime | None = None


class TeamMemberCreateRequest(BaseModel):
    """Add a staff member to an intervention team."""

    user_id: int = Field(gt=0)
    role: str | None = Field(default=None, max_length=100)


class TeamMemberResponse(BaseModel):
    """Intervention team member."""

    id: int
    intervention_id: int
    user_id: int
    role: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class AttachmentCreateRequest(BaseModel):
    """Link an uploaded document to an intervention."""

    document_id: int = Field(gt=0)
    description: str | None = None


class AttachmentResponse(BaseModel):
    """Document linked to an intervention."""

    id: int
    intervention_id: int
    document_id: int
    description: str | None = None
    file_name: str | None = None
    file_type: str | None = None
    file_size_bytes: int | None = None
    created_by: int
    created_at: datetime | None = None


class InterventionDetail(InterventionListItem):
    """Intervention with team, recent sessions and goals."""

    team: list[TeamMemberResponse] = Field(default_factory=list)
    sessions: list[SessionResponse] = Field(default_factory=list)
    goal_items: list[GoalResponse] = Field(default_factory=list)
