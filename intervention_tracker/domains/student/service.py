# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service for student and guardian management.

This module provides the StudentService that handles:
- Student CRUD operations with soft deletion to "inactive"
- Guardian contacts for a student

Inactive students are hidden from the default list but stay retrievable by
id. A student with planned or in-progress interventions cannot be deleted.

Example:
    >>> service = StudentService(db)
    >>> student = await service.create_student(request, created_by=user.id)
    >>> students = await service.list_students(StudentFilters(grade="3"))
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from intervention_tracker.core.errors import ConflictError, NotFoundError, ValidationFailedError
from intervention_tracker.infrastructure.database.models import (
    Intervention,
    School,
    Student,
    StudentGuardian,
)
from intervention_tracker.models.common import (
    ACTIVE_INTERVENTION_STATUSES,
    StudentStatus,
    blank_fields_to_none,
)
from intervention_tracker.models.school import SchoolSummary
from intervention_tracker.models.student import (
    GuardianCreateRequest,
    GuardianResponse,
    GuardianUpdateRequest,
    StudentCreateRequest,
    StudentDetail,
    StudentFilters,
    StudentListItem,
    StudentUpdateRequest,
)

logger = logging.getLogger(__name__)

# Columns that may not be cleared by an update.
_REQUIRED_FIELDS = ("student_id", "first_name", "last_name", "grade", "status")


class StudentServiceError(Exception):
    """Base exception for student service errors."""

    pass


class StudentNotFoundError(StudentServiceError, NotFoundError):
    """Raised when a student is not found."""

    pass


class GuardianNotFoundError(StudentServiceError, NotFoundError):
    """Raised when a guardian is not found."""

    pass


class StudentIdExistsError(StudentServiceError, ConflictError):
    """Raised when the district student id is already taken."""

    pass


class StudentSchoolError(StudentServiceError, ValidationFailedError):
    """Raised when a referenced school does not exist."""

    pass


class StudentHasActiveInterventionsError(StudentServiceError, ConflictError):
    """Raised when deleting a student with planned or in-progress interventions."""

    pass


class StudentService:
    """Service for managing students and their guardians.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the student service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def list_students(self, filters: StudentFilters | None = None) -> list[StudentListItem]:
        """List students ordered by last name, first name.

        Inactive students are excluded unless a status filter is given or
        include_inactive is set.

        Args:
            filters: Grade, status, school and search filters.

        Returns:
            Student rows with school and staff display names.
        """
        filters = filters or StudentFilters()

        stmt = select(Student).options(
            selectinload(Student.school),
            selectinload(Student.creator),
            selectinload(Student.updater),
        )

        if filters.status is not None:
            stmt = stmt.where(Student.status == filters.status.value)
        elif not filters.include_inactive:
            stmt = stmt.where(Student.status != StudentStatus.INACTIVE.value)

        if filters.grade is not None:
            stmt = stmt.where(Student.grade == filters.grade.value)

        if filters.school_id is not None:
            stmt = stmt.where(Student.school_id == filters.school_id)

        if filters.search and filters.search.strip():
            search_pattern = f"%{filters.search.strip()}%"
            stmt = stmt.where(
                or_(
                    Student.first_name.ilike(search_pattern),
                    Student.last_name.ilike(search_pattern),
                    Student.student_id.ilike(search_pattern),
                )
            )

        stmt = stmt.order_by(Student.last_name.asc(), Student.first_name.asc())
        stmt = stmt.execution_options(populate_existing=True)

        result = await self._db.execute(stmt)
        return [self._to_list_item(student) for student in result.scalars()]

    async def get_student(self, student_id: int) -> StudentDetail:
        """Get a student with school and guardians, including inactive students.

        Guardians are ordered primary contact first, then by last name.

        Raises:
            StudentNotFoundError: If student not found.
        """
        stmt = (
            select(Student)
            .options(
                selectinload(Student.school),
                selectinload(Student.creator),
                selectinload(Student.updater),
            )
            .where(Student.id == student_id)
            .execution_options(populate_existing=True)
        )
        student = await self._db.scalar(stmt)
        if student is None:
            raise StudentNotFoundError(f"Student {student_id} not found")

        guardians = await self._db.execute(
            select(StudentGuardian)
            .where(StudentGuardian.student_id == student_id)
            .order_by(StudentGuardian.is_primary_contact.desc(), StudentGuardian.last_name)
        )

        item = self._to_list_item(student)
        return StudentDetail(
            **item.model_dump(),
            school=SchoolSummary.model_validate(student.school) if student.school else None,
            guardians=[self._to_guardian_response(g) for g in guardians.scalars()],
        )

    async def create_student(
        self,
        request: StudentCreateRequest,
        created_by: int,
    ) -> StudentDetail:
        """Create a new student.

        Args:
            request: Student creation request.
            created_by: ID of the user creating the student.

        Returns:
            Created student.

        Raises:
            StudentIdExistsError: If the student id is already used.
            StudentSchoolError: If the school does not exist.
        """
        await self._ensure_student_id_available(request.student_id)
        if request.school_id is not None:
            await self._ensure_school_exists(request.school_id)

        data = blank_fields_to_none(request.model_dump(mode="json"))
        data["date_of_birth"] = request.date_of_birth

        student = Student(**data, created_by=created_by, updated_by=created_by)
        self._db.add(student)
        await self._db.commit()

        logger.info("Student created: %s (%s)", student.id, student.student_id)

        return await self.get_student(student.id)

    async def update_student(
        self,
        student_id: int,
        request: StudentUpdateRequest,
        updated_by: int,
    ) -> StudentDetail:
        """Update a student; only fields that were sent are applied.

        Args:
            student_id: Student primary key.
            request: Partial update.
            updated_by: ID of the user making the change.

        Returns:
            Updated student.

        Raises:
            StudentNotFoundError: If student not found.
            StudentIdExistsError: If the new student id is already used.
            StudentSchoolError: If the new school does not exist.
        """
        student = await self._get_student(student_id)

        update_data = blank_fields_to_none(request.model_dump(mode="json", exclude_unset=True))
        if "date_of_birth" in update_data:
            update_data["date_of_birth"] = request.date_of_birth
        for field in _REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                del update_data[field]

        new_student_id = update_data.get("student_id")
        if new_student_id and new_student_id != student.student_id:
            await self._ensure_student_id_available(new_student_id)
        if update_data.get("school_id") is not None:
            await self._ensure_school_exists(update_data["school_id"])

        for field, value in update_data.items():
            setattr(student, field, value)
        student.updated_by = updated_by

        await self._db.commit()

        logger.info("Student updated: %s (fields=%s)", student_id, sorted(update_data))

        return await self.get_student(student_id)

    async def delete_student(self, student_id: int, deleted_by: int) -> None:
        """Soft delete a student by marking it inactive.

        Args:
            student_id: Student primary key.
            deleted_by: ID of the user deleting the student.

        Raises:
            StudentNotFoundError: If student not found.
            StudentHasActiveInterventionsError: If active interventions exist.
        """
        student = await self._get_student(student_id)

        active = await self._db.scalar(
            select(func.count())
            .select_from(Intervention)
            .where(
                Intervention.student_id == student_id,
                Intervention.status.in_([s.value for s in ACTIVE_INTERVENTION_STATUSES]),
            )
        )
        if active:
            raise StudentHasActiveInterventionsError(
                "Cannot delete student with active interventions. "
                "Please complete or cancel all interventions first.",
                details={"active_interventions": active},
            )

        student.status = StudentStatus.INACTIVE.value
        student.updated_by = deleted_by
        await self._db.commit()

        logger.info("Student soft deleted: %s by %s", student_id, deleted_by)

    # =========================================================================
    # Guardians
    # =========================================================================

    async def add_guardian(
        self,
        student_id: int,
        request: GuardianCreateRequest,
    ) -> GuardianResponse:
        """Add a guardian contact to a student.

        Raises:
            StudentNotFoundError: If student not found.
        """
        await self._get_student(student_id)

        data = blank_fields_to_none(request.model_dump())
        guardian = StudentGuardian(
            student_id=student_id,
            first_name=data["first_name"],
            last_name=data["last_name"],
            relationship_type=data["relationship"],
            email=data["email"],
            phone=data["phone"],
            is_primary_contact=request.is_primary_contact,
        )
        self._db.add(guardian)
        await self._db.commit()
        await self._db.refresh(guardian)

        logger.info("Guardian added: %s for student %s", guardian.id, student_id)

        return self._to_guardian_response(guardian)

    async def update_guardian(
        self,
        guardian_id: int,
        request: GuardianUpdateRequest,
    ) -> GuardianResponse:
        """Update a guardian contact.

        Raises:
            GuardianNotFoundError: If guardian not found.
        """
        guardian = await self._get_guardian(guardian_id)

        update_data = blank_fields_to_none(request.model_dump(exclude_unset=True))
        if "relationship" in update_data:
            update_data["relationship_type"] = update_data.pop("relationship")
        for field in ("first_name", "last_name", "is_primary_contact"):
            if field in update_data and update_data[field] is None:
                del update_data[field]

        for field, value in update_data.items():
            setattr(guardian, field, value)

        await self._db.commit()
        await self._db.refresh(guardian)

        logger.info("Guardian updated: %s", guardian_id)

        return self._to_guardian_response(guardian)

    async def remove_guardian(self, guardian_id: int) -> None:
        """Remove a guardian contact.

        Raises:
            GuardianNotFoundError: If guardian not found.
        """
        guardian = await self._get_guardian(guardian_id)

        await self._db.delete(guardian)
        await self._db.commit()

        logger.info("Guardian removed: %s", guardian_id)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_student(self, student_id: int) -> Student:
        student = await self._db.get(Student, student_id)
        if student is None:
            raise StudentNotFoundError(f"Student {student_id} not found")
        return student

    async def _get_guardian(self, guardian_id: int) -> StudentGuardian:
        guardian = await self._db.get(StudentGuardian, guardian_id)
        if guardian is None:
            raise GuardianNotFoundError(f"Guardian {guardian_id} not found")
        return guardian

    async def _ensure_student_id_available(self, value: str) -> None:
        existing = await self._db.scalar(select(Student.id).where(Student.student_id == value))
        if existing is not None:
            raise StudentIdExistsError("A student with this ID already exists")

    async def _ensure_school_exists(self, school_id: int) -> None:
        if await self._db.get(School, school_id) is None:
            raise StudentSchoolError(f"School {school_id} not found")

    def _to_list_item(self, student: Student) -> StudentListItem:
        item = StudentListItem.model_validate(student)
        item.school_name = student.school.name if student.school else None
        item.created_by_name = student.creator.full_name if student.creator else None
        item.updated_by_name = student.updater.full_name if student.updater else None
        return item

    def _to_guardian_response(self, guardian: StudentGuardian) -> GuardianResponse:
        return GuardianResponse(
            id=guardian.id,
            student_id=guardian.student_id,
            first_name=guardian.first_name,
            last_name=guardian.last_name,
            relationship=guardian.relationship_type,
            email=guardian.email,
            phone=guardian.phone,
            is_primary_contact=guardian.is_primary_contact,
        )
