# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Job record actions.

Callers work with their own jobs; administrators may act on any user's.
"""

from collections.abc import Mapping
from typing import Any

from intervention_tracker.actions.base import ActionContext, action, success, validate_input
from intervention_tracker.core.errors import ValidationFailedError
from intervention_tracker.domains.auth.access import AccessDeniedError, Caller, is_administrator
from intervention_tracker.domains.job.service import JobService
from intervention_tracker.models.common import ActionState, JobStatus
from intervention_tracker.models.job import JobCreateRequest, JobResponse, JobUpdateRequest


def _ensure_owner_or_admin(user: Caller, owner_id: int) -> None:
    if owner_id != user.id and not is_administrator(user):
        raise AccessDeniedError("You do not have permission to access other users' jobs")


@action("Failed to create job")
async def create_job(
    ctx: ActionContext,
    data: JobCreateRequest | Mapping[str, Any],
) -> ActionState[JobResponse]:
    """Create a job; user_id defaults to the caller."""
    user = await ctx.current_user()
    request = validate_input(JobCreateRequest, data)

    owner_id = request.user_id or user.id
    _ensure_owner_or_admin(user, owner_id)

    job = await JobService(ctx.db).create_job(request, user_id=owner_id)
    return success("Job created successfully", job)


@action("Failed to fetch job")
async def get_job(ctx: ActionContext, job_id: int) -> ActionState[JobResponse]:
    user = await ctx.current_user()
    job = await JobService(ctx.db).get_job(job_id)
    _ensure_owner_or_admin(user, job.user_id)
    return success("Job fetched successfully", job)


@action("Failed to fetch jobs")
async def get_jobs(
    ctx: ActionContext,
    user_id: int | None = None,
    status: JobStatus | str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> ActionState[dict[str, Any]]:
    """List a user's jobs, newest first; data holds items and total."""
    user = await ctx.current_user()
    owner_id = user_id or user.id
    _ensure_owner_or_admin(user, owner_id)

    try:
        status_filter = JobStatus(status) if status else None
    except ValueError as e:
        raise ValidationFailedError(f"Invalid job status: {status}") from e

    jobs, total = await JobService(ctx.db).list_jobs(
        owner_id,
        status=status_filter,
        limit=limit,
        offset=offset,
    )
    return success("Jobs fetched successfully", {"items": jobs, "total": total})


@action("Failed to update job")
async def update_job(
    ctx: ActionContext,
    job_id: int,
    data: JobUpdateRequest | Mapping[str, Any],
) -> ActionState[JobResponse]:
    user = await ctx.current_user()
    request = validate_input(JobUpdateRequest, data)

    service = JobService(ctx.db)
    _ensure_owner_or_admin(user, (await service.get_job(job_id)).user_id)

    job = await service.update_job(job_id, request)
    return success("Job updated successfully", job)


@action("Failed to delete job")
async def delete_job(ctx: ActionContext, job_id: int) -> ActionState[None]:
    user = await ctx.current_user()

    service = JobService(ctx.db)
    _ensure_owner_or_admin(user, (await service.get_job(job_id)).user_id)

    await service.delete_job(job_id)
    return success("Job deleted successfully")
