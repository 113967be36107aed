# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Job record schemas.

Job input and output travel as JSON strings and are stored as parsed JSON.
"""

import json
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints, field_validator

from intervention_tracker.models.common import JobStatus, ORMModel

JobType = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


def _parse_json(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e.msg}") from e
    return value


class JobCreateRequest(BaseModel):
    """Create a job record."""

    job_type: JobType
    user_id: int | None = Field(default=None, gt=0)
    status: JobStatus = JobStatus.PENDING
    input_data: Any = None
    output_data: Any = None
    error_message: str | None = None

    @field_validator("input_data", "output_data", mode="before")
    @classmethod
    def parse_payloads(cls, value: Any) -> Any:
        """Accept JSON strings as well as already-parsed values."""
        return _parse_json(value)


class JobUpdateRequest(BaseModel):
    """Partial job update."""

    job_type: JobType | None = None
    status: JobStatus | None = None
    input_data: Any = None
    output_data: Any = None
    error_message: str | None = None

    @field_validator("input_data", "output_data", mode="before")
    @classmethod
    def parse_payloads(cls, value: Any) -> Any:
        """Accept JSON strings as well as already-parsed values."""
        return _parse_json(value)


class JobResponse(ORMModel):
    """Job record."""

    id: int
    job_type: str
    status: JobStatus
    user_id: int
    input_data: Any = None
    output_data: Any = None
    error_message: str | None = None
    attempts: int = 0
    max_attempts: int = 3
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
