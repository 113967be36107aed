# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Job record service.

Stores records of deferred work. Nothing in this process executes jobs;
status changes stamp started_at, attempts and completed_at so an external
worker can report progress through update_job().
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.core.errors import NotFoundError, ValidationFailedError
from intervention_tracker.infrastructure.database.models import Job, User
from intervention_tracker.infrastructure.database.sql import build_update_query, execute_sql
from intervention_tracker.models.common import JobStatus
from intervention_tracker.models.job import JobCreateRequest, JobResponse, JobUpdateRequest

logger = logging.getLogger(__name__)

_JOBS = Job.__table__

_FINISHED_STATUSES = (JobStatus.COMPLETED, JobStatus.FAILED)


class JobServiceError(Exception):
    """Base exception for job service errors."""

    pass


class JobNotFoundError(JobServiceError, NotFoundError):
    """Raised when a job is not found."""

    pass


class JobOwnerError(JobServiceError, ValidationFailedError):
    """Raised when the job's user does not exist."""

    pass


class JobService:
    """Service for job records.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the job service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def create_job(self, request: JobCreateRequest, user_id: int) -> JobResponse:
        """Create a job record owned by a user.

        Args:
            request: Job fields; JSON payloads are already parsed.
            user_id: Owner of the job.

        Returns:
            Created job.

        Raises:
            JobOwnerError: If the user does not exist.
        """
        if await self._db.get(User, user_id) is None:
            raise JobOwnerError(f"User {user_id} not found")

        job = Job(
            job_type=request.job_type,
            status=request.status.value,
            user_id=user_id,
            input_data=request.input_data,
            output_data=request.output_data,
            error_message=request.error_message or None,
        )
        self._db.add(job)
        await self._db.commit()
        await self._db.refresh(job)

        logger.info("Job created: %s (%s) for user %s", job.id, job.job_type, user_id)

        return JobResponse.model_validate(job)

    async def get_job(self, job_id: int) -> JobResponse:
        """Get a job by ID.

        Raises:
            JobNotFoundError: If job not found.
        """
        job = await self._db.scalar(
            select(Job).where(Job.id == job_id).execution_options(populate_existing=True)
        )
        if job is None:
            raise JobNotFoundError(f"Job {job_id} not found")
        return JobResponse.model_validate(job)

    async def list_jobs(
        self,
        user_id: int,
        status: JobStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[JobResponse], int]:
        """List a user's jobs, newest first.

        Args:
            user_id: Owner of the jobs.
            status: Optional status filter.
            limit: Maximum results.
            offset: Pagination offset.

        Returns:
            Tuple of (jobs, total count).
        """
        stmt = select(Job).where(Job.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Job.status == status.value)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self._db.execute(count_stmt)).scalar() or 0

        stmt = stmt.order_by(Job.created_at.desc(), Job.id.desc()).limit(limit).offset(offset)
        result = await self._db.execute(stmt.execution_options(populate_existing=True))

        return [JobResponse.model_validate(job) for job in result.scalars()], total

    async def update_job(self, job_id: int, request: JobUpdateRequest) -> JobResponse:
        """Update a job with the fields that were sent.

        Moving to running stamps started_at and counts an attempt; moving to
        completed or failed stamps completed_at.

        Raises:
            JobNotFoundError: If job not found.
            ValidationFailedError: If no updatable field was sent.
        """
        fields = request.model_dump(exclude_unset=True)
        for field in ("job_type", "status"):
            if field in fields and fields[field] is None:
                del fields[field]

        raw_assignments = {}
        status = fields.get("status")
        if status == JobStatus.RUNNING:
            raw_assignments["started_at"] = func.current_timestamp()
            raw_assignments["attempts"] = _JOBS.c.attempts + 1
        elif status in _FINISHED_STATUSES:
            raw_assignments["completed_at"] = func.current_timestamp()
        if status is not None:
            fields["status"] = status.value

        if not fields:
            raise ValidationFailedError("No fields provided for update")

        rows = await execute_sql(
            self._db, build_update_query(_JOBS, job_id, fields, raw_assignments)
        )
        if not rows:
            await self._db.rollback()
            raise JobNotFoundError(f"Job {job_id} not found")
        await self._db.commit()

        logger.info("Job updated: %s (fields=%s)", job_id, sorted(fields))

        return JobResponse.model_validate(rows[0])

    async def delete_job(self, job_id: int) -> None:
        """Delete a job record.

        Raises:
            JobNotFoundError: If job not found.
        """
        result = await self._db.execute(delete(Job).where(Job.id == job_id))
        if not result.rowcount:
            await self._db.rollback()
            raise JobNotFoundError(f"Job {job_id} not found")
        await self._db.commit()

        logger.info("Job deleted: %s", job_id)
