# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for navigation actions."""

import pytest

from intervention_tracker.actions import navigation as navigation_actions
from intervention_tracker.core.errors import ErrorCode

pytestmark = pytest.mark.integration


class TestMyNavigation:
    """Tests for the caller's visible navigation."""

    @pytest.mark.asyncio
    async def test_teacher_sees_granted_tools(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await navigation_actions.get_my_navigation(make_ctx(teacher_claims))

        assert state.is_success, state.message
        assert [item.label for item in state.data] == [
            "Students",
            "Interventions",
            "Reports",
            "Calendar",
        ]

    @pytest.mark.asyncio
    async def test_admin_sees_everything(self, make_ctx, admin_id, admin_claims) -> None:
        state = await navigation_actions.get_my_navigation(make_ctx(admin_claims))

        assert len(state.data) == 8

    @pytest.mark.asyncio
    async def test_role_without_tools_sees_nothing(
        self, make_ctx, principal_id, principal_claims
    ) -> None:
        state = await navigation_actions.get_my_navigation(make_ctx(principal_claims))

        assert state.is_success
        assert state.data == []

    @pytest.mark.asyncio
    async def test_hidden_parent_hides_children(
        self, make_ctx, admin_id, admin_claims, teacher_id, teacher_claims
    ) -> None:
        admin_ctx = make_ctx(admin_claims)
        section = await navigation_actions.create_navigation_item(
            admin_ctx,
            {
                "label": "Admin",
                "icon": "IconLock",
                "type": "section",
                "requires_role": "Administrator",
            },
        )
        child = await navigation_actions.create_navigation_item(
            admin_ctx,
            {"label": "Audit", "icon": "IconList", "link": "/audit", "parent_id": section.data.id},
        )
        assert child.is_success, child.message

        teacher_view = await navigation_actions.get_my_navigation(make_ctx(teacher_claims))
        admin_view = await navigation_actions.get_my_navigation(admin_ctx)

        assert "Audit" not in [item.label for item in teacher_view.data]
        assert "Audit" in [item.label for item in admin_view.data]

    @pytest.mark.asyncio
    async def test_inactive_items_hidden(
        self, make_ctx, admin_id, admin_claims, teacher_id, teacher_claims
    ) -> None:
        admin_ctx = make_ctx(admin_claims)
        items = await navigation_actions.get_navigation_items(admin_ctx)
        students = next(item for item in items.data if item.label == "Students")
        await navigation_actions.update_navigation_item(
            admin_ctx, students.id, {"is_active": False}
        )

        state = await navigation_actions.get_my_navigation(make_ctx(teacher_claims))

        assert "Students" not in [item.label for item in state.data]

    @pytest.mark.asyncio
    async def test_requires_session(self, make_ctx) -> None:
        state = await navigation_actions.get_my_navigation(make_ctx(None))

        assert state.code == ErrorCode.UNAUTHORIZED


class TestManageNavigation:
    """Tests for administrator navigation management."""

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await navigation_actions.get_navigation_items(make_ctx(teacher_claims))

        assert state.code == ErrorCode.FORBIDDEN
        assert state.message == "You do not have permission to manage navigation"

    @pytest.mark.asyncio
    async def test_create_fills_tool_identifier(
        self, make_ctx, admin_id, admin_claims
    ) -> None:
        ctx = make_ctx(admin_claims)
        items = await navigation_actions.get_navigation_items(ctx)
        reports = next(item for item in items.data if item.label == "Reports")

        state = await navigation_actions.create_navigation_item(
            ctx,
            {
                "label": "Caseload",
                "icon": "IconChartBar",
                "link": "/reports/caseload",
                "tool_id": reports.tool_id,
                "position": 20,
            },
        )

        assert state.is_success, state.message
        assert state.data.tool_identifier == "reports"
        assert state.data.type == "page"

    @pytest.mark.asyncio
    async def test_create_with_unknown_parent(self, make_ctx, admin_id, admin_claims) -> None:
        state = await navigation_actions.create_navigation_item(
            make_ctx(admin_claims), {"label": "Orphan", "icon": "IconX", "parent_id": 9999}
        )

        assert state.code == ErrorCode.VALIDATION
        assert state.message == "Parent item 9999 not found"

    @pytest.mark.asyncio
    async def test_create_requires_label(self, make_ctx, admin_id, admin_claims) -> None:
        state = await navigation_actions.create_navigation_item(
            make_ctx(admin_claims), {"label": "", "icon": "IconX"}
        )

        assert state.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_update_item(self, make_ctx, admin_id, admin_claims) -> None:
        ctx = make_ctx(admin_claims)
        created = await navigation_actions.create_navigation_item(
            ctx, {"label": "Help", "icon": "IconHelp", "description": "Docs"}
        )

        state = await navigation_actions.update_navigation_item(
            ctx, created.data.id, {"label": "Support", "description": "", "icon": None}
        )

        assert state.is_success, state.message
        assert state.data.label == "Support"
        assert state.data.icon == "IconHelp"
        assert state.data.description is None

    @pytest.mark.asyncio
    async def test_cannot_be_own_parent(self, make_ctx, admin_id, admin_claims) -> None:
        ctx = make_ctx(admin_claims)
        created = await navigation_actions.create_navigation_item(
            ctx, {"label": "Loop", "icon": "IconRepeat"}
        )

        state = await navigation_actions.update_navigation_item(
            ctx, created.data.id, {"parent_id": created.data.id}
        )

        assert state.code == ErrorCode.VALIDATION
        assert state.message == "An item cannot be its own parent"

    @pytest.mark.asyncio
    async def test_update_missing_item(self, make_ctx, admin_id, admin_claims) -> None:
        state = await navigation_actions.update_navigation_item(
            make_ctx(admin_claims), 9999, {"label": "Ghost"}
        )

        assert state.code == ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_moves_children_to_top_level(
        self, make_ctx, admin_id, admin_claims
    ) -> None:
        ctx = make_ctx(admin_claims)
        parent = await navigation_actions.create_navigation_item(
            ctx, {"label": "Tools", "icon": "IconTool", "type": "section"}
        )
        child = await navigation_actions.create_navigation_item(
            ctx, {"label": "Import", "icon": "IconUpload", "parent_id": parent.data.id}
        )
        parent_id, child_id = parent.data.id, child.data.id

        state = await navigation_actions.delete_navigation_item(ctx, parent_id)

        assert state.is_success, state.message
        listed = await navigation_actions.get_navigation_items(ctx)
        items = {item.id: item for item in listed.data}
        assert parent_id not in items
        assert items[child_id].parent_id is None

    @pytest.mark.asyncio
    async def test_delete_missing_item(self, make_ctx, admin_id, admin_claims) -> None:
        state = await navigation_actions.delete_navigation_item(make_ctx(admin_claims), 9999)

        assert state.code == ErrorCode.NOT_FOUND
