# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for job record actions."""

import pytest

from intervention_tracker.actions import jobs as job_actions
from intervention_tracker.core.errors import ErrorCode

pytestmark = pytest.mark.integration


class TestCreateJob:
    """Tests for job creation."""

    @pytest.mark.asyncio
    async def test_defaults_to_caller(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await job_actions.create_job(
            make_ctx(teacher_claims),
            {"job_type": "report_export", "input_data": '{"school_id": 4}'},
        )

        assert state.is_success, state.message
        assert state.message == "Job created successfully"
        assert state.data.user_id == teacher_id
        assert state.data.status == "pending"
        assert state.data.input_data == {"school_id": 4}
        assert state.data.attempts == 0

    @pytest.mark.asyncio
    async def test_invalid_json_payload(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await job_actions.create_job(
            make_ctx(teacher_claims), {"job_type": "report_export", "input_data": "{oops"}
        )

        assert state.code == ErrorCode.VALIDATION
        assert state.message.startswith("Invalid JSON")

    @pytest.mark.asyncio
    async def test_other_users_job_forbidden(
        self, make_ctx, teacher_id, teacher_claims, nurse_id
    ) -> None:
        state = await job_actions.create_job(
            make_ctx(teacher_claims), {"job_type": "report_export", "user_id": nurse_id}
        )

        assert state.code == ErrorCode.FORBIDDEN
        assert state.message == "You do not have permission to access other users' jobs"

    @pytest.mark.asyncio
    async def test_admin_creates_for_other_user(
        self, make_ctx, admin_id, admin_claims, nurse_id
    ) -> None:
        state = await job_actions.create_job(
            make_ctx(admin_claims), {"job_type": "report_export", "user_id": nurse_id}
        )

        assert state.is_success, state.message
        assert state.data.user_id == nurse_id

    @pytest.mark.asyncio
    async def test_admin_unknown_owner(self, make_ctx, admin_id, admin_claims) -> None:
        state = await job_actions.create_job(
            make_ctx(admin_claims), {"job_type": "report_export", "user_id": 9999}
        )

        assert state.code == ErrorCode.VALIDATION


class TestJobLifecycle:
    """Tests for reading, updating and deleting jobs."""

    @pytest.fixture
    async def job_id(self, make_ctx, teacher_id, teacher_claims) -> int:
        state = await job_actions.create_job(make_ctx(teacher_claims), {"job_type": "import"})
        assert state.is_success, state.message
        return state.data.id

    @pytest.mark.asyncio
    async def test_running_then_completed(self, make_ctx, teacher_claims, job_id) -> None:
        ctx = make_ctx(teacher_claims)

        running = await job_actions.update_job(ctx, job_id, {"status": "running"})
        assert running.is_success, running.message
        assert running.data.status == "running"
        assert running.data.started_at is not None
        assert running.data.attempts == 1
        assert running.data.completed_at is None

        done = await job_actions.update_job(ctx, job_id, {"status": "completed"})
        assert done.data.status == "completed"
        assert done.data.completed_at is not None

    @pytest.mark.asyncio
    async def test_failed_records_error(self, make_ctx, teacher_claims, job_id) -> None:
        state = await job_actions.update_job(
            make_ctx(teacher_claims), job_id, {"status": "failed", "error_message": "Timeout"}
        )

        assert state.data.status == "failed"
        assert state.data.error_message == "Timeout"
        assert state.data.completed_at is not None

    @pytest.mark.asyncio
    async def test_invalid_status(self, make_ctx, teacher_claims, job_id) -> None:
        state = await job_actions.update_job(
            make_ctx(teacher_claims), job_id, {"status": "paused"}
        )

        assert state.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_empty_update(self, make_ctx, teacher_claims, job_id) -> None:
        state = await job_actions.update_job(make_ctx(teacher_claims), job_id, {})

        assert state.code == ErrorCode.VALIDATION
        assert state.message == "No fields provided for update"

    @pytest.mark.asyncio
    async def test_other_user_cannot_read(
        self, make_ctx, nurse_id, nurse_claims, job_id
    ) -> None:
        state = await job_actions.get_job(make_ctx(nurse_claims), job_id)

        assert state.code == ErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_admin_can_read(self, make_ctx, admin_id, admin_claims, job_id) -> None:
        state = await job_actions.get_job(make_ctx(admin_claims), job_id)

        assert state.is_success, state.message
        assert state.data.job_type == "import"

    @pytest.mark.asyncio
    async def test_delete(self, make_ctx, teacher_claims, job_id) -> None:
        ctx = make_ctx(teacher_claims)

        deleted = await job_actions.delete_job(ctx, job_id)
        missing = await job_actions.get_job(ctx, job_id)

        assert deleted.is_success, deleted.message
        assert missing.code == ErrorCode.NOT_FOUND


class TestListJobs:
    """Tests for job listing."""

    @pytest.fixture
    async def jobs(self, make_ctx, teacher_id, teacher_claims) -> None:
        ctx = make_ctx(teacher_claims)
        for job_type, status in (("a", "pending"), ("b", "completed"), ("c", "pending")):
            state = await job_actions.create_job(ctx, {"job_type": job_type, "status": status})
            assert state.is_success, state.message

    @pytest.mark.asyncio
    async def test_newest_first_with_total(self, make_ctx, teacher_claims, jobs) -> None:
        state = await job_actions.get_jobs(make_ctx(teacher_claims), limit=2)

        assert state.is_success, state.message
        assert state.data["total"] == 3
        assert [job.job_type for job in state.data["items"]] == ["c", "b"]

    @pytest.mark.asyncio
    async def test_status_filter_and_offset(self, make_ctx, teacher_claims, jobs) -> None:
        ctx = make_ctx(teacher_claims)

        pending = await job_actions.get_jobs(ctx, status="pending")
        page = await job_actions.get_jobs(ctx, limit=2, offset=2)

        assert pending.data["total"] == 2
        assert [job.job_type for job in page.data["items"]] == ["a"]

    @pytest.mark.asyncio
    async def test_invalid_status_filter(self, make_ctx, teacher_claims, jobs) -> None:
        state = await job_actions.get_jobs(make_ctx(teacher_claims), status="paused")

        assert state.code == ErrorCode.VALIDATION
        assert state.message == "Invalid job status: paused"

    @pytest.mark.asyncio
    async def test_other_users_jobs_forbidden(
        self, make_ctx, teacher_id, nurse_id, nurse_claims, jobs
    ) -> None:
        state = await job_actions.get_jobs(make_ctx(nurse_claims), user_id=teacher_id)

        assert state.code == ErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_admin_lists_other_users_jobs(
        self, make_ctx, admin_id, admin_claims, teacher_id, jobs
    ) -> None:
        state = await job_actions.get_jobs(make_ctx(admin_claims), user_id=teacher_id)

        assert state.data["total"] == 3
