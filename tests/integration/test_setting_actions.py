# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for setting actions and internal setting reads."""

import pytest

from intervention_tracker.actions import settings as setting_actions
from intervention_tracker.core.errors import ErrorCode
from intervention_tracker.domains.setting.service import SettingNotFoundError, SettingService
from intervention_tracker.models.setting import SECRET_MASK

pytestmark = pytest.mark.integration


class TestSettingsList:
    """Tests for listing settings."""

    @pytest.mark.asyncio
    async def test_admin_lists_seeded_settings(self, make_ctx, admin_id, admin_claims) -> None:
        state = await setting_actions.get_settings_list(make_ctx(admin_claims))

        assert state.is_success, state.message
        keys = [setting.key for setting in state.data]
        assert "app_name" in keys
        assert "GITHUB_ISSUE_TOKEN" in keys
        token = next(s for s in state.data if s.key == "GITHUB_ISSUE_TOKEN")
        assert token.is_secret is True
        assert token.has_value is False
        assert token.value == ""

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await setting_actions.get_settings_list(make_ctx(teacher_claims))

        assert state.code == ErrorCode.FORBIDDEN
        assert state.message == "You do not have permission to manage settings"


class TestUpsertSetting:
    """Tests for saving settings."""

    @pytest.mark.asyncio
    async def test_create_and_update(self, make_ctx, admin_id, admin_claims) -> None:
        ctx = make_ctx(admin_claims)

        created = await setting_actions.upsert_setting(
            ctx, {"key": "district_name", "value": "North", "category": "general"}
        )
        updated = await setting_actions.upsert_setting(
            ctx, {"key": "district_name", "value": "South", "category": "general"}
        )

        assert created.is_success, created.message
        assert created.message == "Setting saved successfully"
        assert updated.data.id == created.data.id
        assert updated.data.value == "South"

    @pytest.mark.asyncio
    async def test_secret_value_masked(self, make_ctx, admin_id, admin_claims) -> None:
        ctx = make_ctx(admin_claims)

        state = await setting_actions.upsert_setting(
            ctx, {"key": "GITHUB_ISSUE_TOKEN", "value": "ghp_secret", "is_secret": True}
        )
        actual = await setting_actions.get_setting_value(ctx, "GITHUB_ISSUE_TOKEN")

        assert state.data.value == SECRET_MASK
        assert state.data.has_value is True
        assert actual.data == "ghp_secret"

    @pytest.mark.asyncio
    async def test_empty_secret_keeps_stored_value(
        self, make_ctx, admin_id, admin_claims
    ) -> None:
        ctx = make_ctx(admin_claims)
        await setting_actions.upsert_setting(
            ctx, {"key": "GITHUB_ISSUE_TOKEN", "value": "ghp_secret", "is_secret": True}
        )

        state = await setting_actions.upsert_setting(
            ctx,
            {
                "key": "GITHUB_ISSUE_TOKEN",
                "value": "",
                "is_secret": True,
                "description": "Token for issue reports",
            },
        )
        actual = await setting_actions.get_setting_value(ctx, "GITHUB_ISSUE_TOKEN")

        assert state.is_success, state.message
        assert state.data.description == "Token for issue reports"
        assert actual.data == "ghp_secret"

    @pytest.mark.asyncio
    async def test_empty_plain_value_is_stored(self, make_ctx, admin_id, admin_claims) -> None:
        state = await setting_actions.upsert_setting(
            make_ctx(admin_claims), {"key": "app_name", "value": ""}
        )

        assert state.is_success, state.message
        assert state.data.value == ""
        assert state.data.has_value is False

    @pytest.mark.asyncio
    async def test_invalid_key(self, make_ctx, admin_id, admin_claims) -> None:
        state = await setting_actions.upsert_setting(
            make_ctx(admin_claims), {"key": "bad key!", "value": "x"}
        )

        assert state.code == ErrorCode.VALIDATION


class TestSettingValueAndDelete:
    """Tests for reading raw values and deleting settings."""

    @pytest.mark.asyncio
    async def test_value_of_missing_setting(self, make_ctx, admin_id, admin_claims) -> None:
        state = await setting_actions.get_setting_value(make_ctx(admin_claims), "nope")

        assert state.code == ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete(self, make_ctx, admin_id, admin_claims) -> None:
        ctx = make_ctx(admin_claims)

        deleted = await setting_actions.delete_setting(ctx, "S3_BUCKET")
        again = await setting_actions.delete_setting(ctx, "S3_BUCKET")

        assert deleted.is_success, deleted.message
        assert again.code == ErrorCode.NOT_FOUND


class TestInternalSettingReads:
    """Tests for SettingService.get_setting and get_required_setting."""

    @pytest.mark.asyncio
    async def test_stored_value_wins(self, db_session, monkeypatch) -> None:
        monkeypatch.setenv("AWS_REGION", "eu-west-1")

        assert await SettingService(db_session).get_setting("AWS_REGION") == "us-east-1"

    @pytest.mark.asyncio
    async def test_empty_value_falls_back_to_environment(self, db_session, monkeypatch) -> None:
        monkeypatch.setenv("S3_BUCKET", "district-docs")

        assert await SettingService(db_session).get_setting("S3_BUCKET") == "district-docs"

    @pytest.mark.asyncio
    async def test_default_when_unset(self, db_session, monkeypatch) -> None:
        monkeypatch.delenv("S3_BUCKET", raising=False)
        service = SettingService(db_session)

        assert await service.get_setting("S3_BUCKET", default="fallback") == "fallback"
        assert await service.get_setting("unknown_key") is None

    @pytest.mark.asyncio
    async def test_required_setting_missing(self, db_session, monkeypatch) -> None:
        monkeypatch.delenv("GITHUB_ISSUE_TOKEN", raising=False)

        with pytest.raises(SettingNotFoundError, match="GITHUB_ISSUE_TOKEN"):
            await SettingService(db_session).get_required_setting("GITHUB_ISSUE_TOKEN")
