# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for current-user resolution and user actions."""

import pytest
from sqlalchemy import select

from intervention_tracker.actions import users as user_actions
from intervention_tracker.core.errors import ErrorCode
from intervention_tracker.infrastructure.database.models import User
from intervention_tracker.models.common import SessionClaims
from intervention_tracker.utils.datetime import utc_now

pytestmark = pytest.mark.integration


class TestCurrentUserResolution:
    """Tests for finding or provisioning the caller's account."""

    @pytest.mark.asyncio
    async def test_existing_user_by_subject(self, db_session, make_ctx, teacher_id) -> None:
        state = await user_actions.get_current_user(make_ctx(SessionClaims(sub="teacher-sub")))

        assert state.is_success
        assert state.message == "User retrieved successfully"
        assert state.data.id == teacher_id
        assert [role.name for role in state.data.roles] == ["Teacher"]
        assert state.data.last_sign_in_at is not None

    @pytest.mark.asyncio
    async def test_email_match_relinks_subject(self, db_session, make_ctx, teacher_id) -> None:
        """Test that a new subject with a known email takes over the account."""
        claims = SessionClaims(sub="new-provider-sub", email="teacher@school.test")

        state = await user_actions.get_current_user(make_ctx(claims))

        assert state.is_success
        assert state.data.id == teacher_id
        assert state.data.cognito_sub == "new-provider-sub"
        count = len((await db_session.execute(select(User.id))).all())
        assert count == 1

    @pytest.mark.asyncio
    async def test_first_sign_in_creates_user_with_default_role(
        self, db_session, make_ctx
    ) -> None:
        claims = SessionClaims(
            sub="fresh-sub",
            email="fresh@school.test",
            given_name="Fran",
            family_name="Fresh",
        )

        state = await user_actions.get_current_user(make_ctx(claims))

        assert state.is_success
        assert state.data.cognito_sub == "fresh-sub"
        assert state.data.first_name == "Fran"
        assert state.data.last_name == "Fresh"
        assert [role.name for role in state.data.roles] == ["Teacher"]

    @pytest.mark.asyncio
    async def test_first_sign_in_without_email(self, make_ctx) -> None:
        """Test that a placeholder email is derived from the subject."""
        state = await user_actions.get_current_user(make_ctx(SessionClaims(sub="no-mail")))

        assert state.is_success
        assert state.data.email == "no-mail@cognito.local"
        assert state.data.first_name == "User"

    @pytest.mark.asyncio
    async def test_deleted_user_is_unauthorized(self, db_session, make_ctx, teacher_id) -> None:
        user = await db_session.get(User, teacher_id)
        user.deleted_at = utc_now()
        await db_session.commit()

        state = await user_actions.get_current_user(make_ctx(SessionClaims(sub="teacher-sub")))

        assert not state.is_success
        assert state.code == ErrorCode.UNAUTHORIZED
        assert state.message == "Unauthorized"

    @pytest.mark.asyncio
    async def test_no_session(self, make_ctx) -> None:
        state = await user_actions.get_current_user(make_ctx(None))

        assert state.code == ErrorCode.UNAUTHORIZED


class TestUserLists:
    """Tests for user listings and tool lookups."""

    @pytest.mark.asyncio
    async def test_my_tools_for_teacher(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await user_actions.get_my_tools(make_ctx(teacher_claims))

        assert state.data == ["calendar", "interventions", "reports", "students"]

    @pytest.mark.asyncio
    async def test_users_for_select_ordered_by_name(
        self, make_ctx, admin_id, teacher_id, teacher_claims
    ) -> None:
        state = await user_actions.get_users_for_select(make_ctx(teacher_claims))

        assert [user.last_name for user in state.data] == ["Admin", "Teacher"]

    @pytest.mark.asyncio
    async def test_users_with_roles_requires_admin(
        self, make_ctx, admin_id, teacher_id, teacher_claims, admin_claims
    ) -> None:
        denied = await user_actions.get_users_with_roles(make_ctx(teacher_claims))
        allowed = await user_actions.get_users_with_roles(make_ctx(admin_claims))

        assert denied.code == ErrorCode.FORBIDDEN
        assert denied.message == "You do not have permission to view users"
        assert allowed.is_success
        by_email = {user.email: [r.name for r in user.roles] for user in allowed.data}
        assert by_email["admin@school.test"] == ["Administrator"]
        assert by_email["teacher@school.test"] == ["Teacher"]


class TestDeleteUser:
    """Tests for soft deleting users."""

    @pytest.mark.asyncio
    async def test_admin_deletes_teacher(
        self, db_session, make_ctx, admin_id, teacher_id, admin_claims
    ) -> None:
        state = await user_actions.delete_user(make_ctx(admin_claims), {"user_id": teacher_id})

        assert state.is_success
        deleted_at = await db_session.scalar(select(User.deleted_at).where(User.id == teacher_id))
        assert deleted_at is not None

        listed = await user_actions.get_users_for_select(make_ctx(admin_claims))
        assert [user.id for user in listed.data] == [admin_id]

    @pytest.mark.asyncio
    async def test_cannot_delete_self(self, make_ctx, admin_id, admin_claims) -> None:
        state = await user_actions.delete_user(make_ctx(admin_claims), {"user_id": admin_id})

        assert state.code == ErrorCode.FORBIDDEN
        assert state.message == "Cannot delete your own account"

    @pytest.mark.asyncio
    async def test_missing_user(self, make_ctx, admin_id, admin_claims) -> None:
        state = await user_actions.delete_user(make_ctx(admin_claims), {"user_id": 999})

        assert state.code == ErrorCode.NOT_FOUND
