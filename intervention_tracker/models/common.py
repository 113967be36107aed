# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enums, field types and the action result envelope."""

from datetime import date
from enum import StrEnum
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from intervention_tracker.core.errors import ErrorCode

T = TypeVar("T")


class Grade(StrEnum):
    """Grade level, kindergarten through twelfth."""

    K = "K"
    G1 = "1"
    G2 = "2"
    G3 = "3"
    G4 = "4"
    G5 = "5"
    G6 = "6"
    G7 = "7"
    G8 = "8"
    G9 = "9"
    G10 = "10"
    G11 = "11"
    G12 = "12"


class StudentStatus(StrEnum):
    """Enrollment status of a student."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    TRANSFERRED = "transferred"
    GRADUATED = "graduated"


class InterventionType(StrEnum):
    """Area an intervention or program addresses."""

    ACADEMIC = "academic"
    BEHAVIORAL = "behavioral"
    SOCIAL_EMOTIONAL = "social_emotional"
    ATTENDANCE = "attendance"
    HEALTH = "health"
    OTHER = "other"


class InterventionStatus(StrEnum):
    """Lifecycle status of an intervention."""

    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DISCONTINUED = "discontinued"
    ON_HOLD = "on_hold"


# Interventions in these states block deleting their student or program.
ACTIVE_INTERVENTION_STATUSES = (InterventionStatus.PLANNED, InterventionStatus.IN_PROGRESS)


class NavigationType(StrEnum):
    """Kind of navigation entry."""

    LINK = "link"
    SECTION = "section"
    PAGE = "page"


class JobStatus(StrEnum):
    """Processing status of a job record."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def blank_to_none(value: Any) -> Any:
    """Treat empty or whitespace-only strings as missing."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Form inputs send "" for cleared fields; these types accept that as None.
OptionalDate = Annotated[date | None, BeforeValidator(blank_to_none)]
OptionalInt = Annotated[int | None, BeforeValidator(blank_to_none)]


class ORMModel(BaseModel):
    """Base for response schemas built from ORM objects."""

    model_config = ConfigDict(from_attributes=True)


class ActionState(BaseModel, Generic[T]):
    """Uniform result envelope returned by every action.

    Attributes:
        is_success: Whether the action succeeded.
        message: Human-readable outcome.
        data: Payload on success.
        code: Failure category on error.
    """

    is_success: bool
    message: str
    data: T | None = None
    code: ErrorCode | None = None


class SessionClaims(BaseModel):
    """Identity claims of the caller, taken from the session token."""

    sub: str = Field(min_length=1)
    email: str | None = None
    given_name: str | None = None
    family_name: str | None = None


def blank_fields_to_none(fields: dict[str, Any]) -> dict[str, Any]:
    """Replace empty or whitespace-only string values with None."""
    return {key: blank_to_none(value) for key, value in fields.items()}
