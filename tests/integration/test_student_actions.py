# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for student and guardian actions."""

from datetime import date

import pytest

from intervention_tracker.actions import students as student_actions
from intervention_tracker.core.errors import ErrorCode
from intervention_tracker.infrastructure.database.models import Intervention, School

pytestmark = pytest.mark.integration


@pytest.fixture
async def school_id(db_session) -> int:
    school = School(name="Lincoln Elementary", district="North")
    db_session.add(school)
    await db_session.commit()
    return school.id


def student_payload(**overrides) -> dict:
    payload = {
        "student_id": "S-2001",
        "first_name": "Liam",
        "last_name": "Nguyen",
        "grade": "5",
        "status": "active",
        "date_of_birth": "2014-03-09",
    }
    payload.update(overrides)
    return payload


class TestCreateStudent:
    """Tests for student creation."""

    @pytest.mark.asyncio
    async def test_teacher_creates_student(
        self, make_ctx, teacher_id, teacher_claims, school_id
    ) -> None:
        state = await student_actions.create_student(
            make_ctx(teacher_claims),
            student_payload(school_id=school_id, email="", notes="  "),
        )

        assert state.is_success, state.message
        assert state.message == "Student created successfully"
        student = state.data
        assert student.student_id == "S-2001"
        assert student.date_of_birth == date(2014, 3, 9)
        assert student.school_name == "Lincoln Elementary"
        assert student.school.district == "North"
        assert student.email is None
        assert student.notes is None
        assert student.created_by == teacher_id
        assert student.created_by_name == "Tom Teacher"

    @pytest.mark.asyncio
    async def test_duplicate_student_id(
        self, make_ctx, teacher_id, teacher_claims, student_id
    ) -> None:
        state = await student_actions.create_student(
            make_ctx(teacher_claims), student_payload(student_id="S-1001")
        )

        assert state.code == ErrorCode.CONFLICT
        assert state.message == "A student with this ID already exists"

    @pytest.mark.asyncio
    async def test_invalid_grade(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await student_actions.create_student(
            make_ctx(teacher_claims), student_payload(grade="13")
        )

        assert state.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_missing_required_field(self, make_ctx, teacher_id, teacher_claims) -> None:
        payload = student_payload()
        del payload["last_name"]

        state = await student_actions.create_student(make_ctx(teacher_claims), payload)

        assert state.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_unknown_school(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await student_actions.create_student(
            make_ctx(teacher_claims), student_payload(school_id=77)
        )

        assert state.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_role_without_tool_is_forbidden(
        self, make_ctx, principal_id, principal_claims
    ) -> None:
        state = await student_actions.create_student(
            make_ctx(principal_claims), student_payload()
        )

        assert state.code == ErrorCode.FORBIDDEN
        assert state.message == "You do not have access to students"


class TestListStudents:
    """Tests for student listing and filters."""

    @pytest.fixture
    async def roster(self, make_ctx, teacher_id, teacher_claims, school_id) -> None:
        rows = [
            student_payload(student_id="A1", first_name="Zoe", last_name="Adams", grade="K"),
            student_payload(student_id="A2", first_name="Ava", last_name="Adams", grade="2"),
            student_payload(
                student_id="B1",
                first_name="Ben",
                last_name="Brown",
                grade="2",
                school_id=school_id,
            ),
            student_payload(
                student_id="C1", first_name="Cal", last_name="Cruz", status="inactive"
            ),
        ]
        for row in rows:
            state = await student_actions.create_student(make_ctx(teacher_claims), row)
            assert state.is_success, state.message

    @pytest.mark.asyncio
    async def test_default_excludes_inactive_and_sorts(
        self, make_ctx, teacher_claims, roster
    ) -> None:
        state = await student_actions.get_students(make_ctx(teacher_claims))

        assert [s.student_id for s in state.data] == ["A2", "A1", "B1"]

    @pytest.mark.asyncio
    async def test_include_inactive(self, make_ctx, teacher_claims, roster) -> None:
        state = await student_actions.get_students(
            make_ctx(teacher_claims), {"include_inactive": True}
        )

        assert len(state.data) == 4

    @pytest.mark.asyncio
    async def test_status_filter_returns_inactive(
        self, make_ctx, teacher_claims, roster
    ) -> None:
        state = await student_actions.get_students(make_ctx(teacher_claims), {"status": "inactive"})

        assert [s.student_id for s in state.data] == ["C1"]

    @pytest.mark.asyncio
    async def test_grade_and_school_filters(
        self, make_ctx, teacher_claims, roster, school_id
    ) -> None:
        by_grade = await student_actions.get_students(make_ctx(teacher_claims), {"grade": "2"})
        by_school = await student_actions.get_students(
            make_ctx(teacher_claims), {"school_id": str(school_id)}
        )

        assert [s.student_id for s in by_grade.data] == ["A2", "B1"]
        assert [s.student_id for s in by_school.data] == ["B1"]
        assert by_school.data[0].school_name == "Lincoln Elementary"

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, make_ctx, teacher_claims, roster) -> None:
        by_name = await student_actions.get_students(make_ctx(teacher_claims), {"search": "ADA"})
        by_number = await student_actions.get_students(make_ctx(teacher_claims), {"search": "b1"})

        assert {s.student_id for s in by_name.data} == {"A1", "A2"}
        assert [s.student_id for s in by_number.data] == ["B1"]

    @pytest.mark.asyncio
    async def test_blank_school_filter_is_ignored(self, make_ctx, teacher_claims, roster) -> None:
        state = await student_actions.get_students(make_ctx(teacher_claims), {"school_id": ""})

        assert len(state.data) == 3


class TestUpdateAndDeleteStudent:
    """Tests for updating and soft deleting students."""

    @pytest.mark.asyncio
    async def test_partial_update(
        self, make_ctx, admin_id, teacher_id, teacher_claims, student_id
    ) -> None:
        state = await student_actions.update_student(
            make_ctx(teacher_claims), student_id, {"grade": "4", "notes": "Reading support"}
        )

        assert state.is_success, state.message
        assert state.data.grade == "4"
        assert state.data.notes == "Reading support"
        assert state.data.first_name == "Maya"
        assert state.data.updated_by == teacher_id

    @pytest.mark.asyncio
    async def test_blank_optional_field_clears_value(
        self, make_ctx, teacher_id, teacher_claims, student_id
    ) -> None:
        state = await student_actions.update_student(
            make_ctx(teacher_claims), student_id, {"middle_name": "", "phone": "555-1234"}
        )

        assert state.is_success
        assert state.data.middle_name is None
        assert state.data.phone == "555-1234"

    @pytest.mark.asyncio
    async def test_change_to_taken_student_id(
        self, make_ctx, teacher_id, teacher_claims, student_id
    ) -> None:
        other = await student_actions.create_student(make_ctx(teacher_claims), student_payload())

        state = await student_actions.update_student(
            make_ctx(teacher_claims), other.data.id, {"student_id": "S-1001"}
        )

        assert state.code == ErrorCode.CONFLICT

    @pytest.mark.asyncio
    async def test_update_missing_student(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await student_actions.update_student(make_ctx(teacher_claims), 404, {"grade": "1"})

        assert state.code == ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_marks_inactive(
        self, make_ctx, teacher_id, teacher_claims, student_id
    ) -> None:
        deleted = await student_actions.delete_student(make_ctx(teacher_claims), student_id)
        fetched = await student_actions.get_student(make_ctx(teacher_claims), student_id)

        assert deleted.is_success
        assert fetched.is_success
        assert fetched.data.status == "inactive"

    @pytest.mark.asyncio
    async def test_delete_blocked_by_active_intervention(
        self, db_session, make_ctx, admin_id, teacher_id, teacher_claims, student_id
    ) -> None:
        db_session.add(
            Intervention(
                student_id=student_id,
                type="academic",
                status="in_progress",
                title="Reading",
                start_date=date(2025, 1, 6),
                created_by=admin_id,
            )
        )
        await db_session.commit()

        state = await student_actions.delete_student(make_ctx(teacher_claims), student_id)

        assert state.code == ErrorCode.CONFLICT
        assert state.message.startswith("Cannot delete student with active interventions")


class TestGuardians:
    """Tests for guardian contacts."""

    @pytest.mark.asyncio
    async def test_guardian_lifecycle(
        self, make_ctx, teacher_id, teacher_claims, student_id
    ) -> None:
        ctx = make_ctx(teacher_claims)
        second = await student_actions.add_guardian(
            ctx,
            student_id,
            {"first_name": "Omar", "last_name": "Lopez", "relationship": "Father"},
        )
        first = await student_actions.add_guardian(
            make_ctx(teacher_claims),
            student_id,
            {
                "first_name": "Rosa",
                "last_name": "Zamora",
                "relationship": "Mother",
                "is_primary_contact": True,
            },
        )
        assert second.is_success and first.is_success
        assert first.data.relationship == "Mother"

        detail = await student_actions.get_student(make_ctx(teacher_claims), student_id)
        assert [g.first_name for g in detail.data.guardians] == ["Rosa", "Omar"]

        updated = await student_actions.update_guardian(
            make_ctx(teacher_claims), second.data.id, {"relationship": "Uncle", "phone": ""}
        )
        assert updated.data.relationship == "Uncle"
        assert updated.data.phone is None

        removed = await student_actions.remove_guardian(make_ctx(teacher_claims), second.data.id)
        assert removed.is_success

        detail = await student_actions.get_student(make_ctx(teacher_claims), student_id)
        assert [g.first_name for g in detail.data.guardians] == ["Rosa"]

    @pytest.mark.asyncio
    async def test_missing_guardian(self, make_ctx, teacher_id, teacher_claims) -> None:
        state = await student_actions.remove_guardian(make_ctx(teacher_claims), 999)

        assert state.code == ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_guardian_for_missing_student(
        self, make_ctx, teacher_id, teacher_claims
    ) -> None:
        state = await student_actions.add_guardian(
            make_ctx(teacher_claims), 999, {"first_name": "A", "last_name": "B"}
        )

        assert state.code == ErrorCode.NOT_FOUND
