# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School service for school management.

This module provides the SchoolService that handles:
- School CRUD operations
- Soft deletion guarded by active student references

Example:
    >>> school_service = SchoolService(db_session)
    >>> school = await school_service.create_school(request)
    >>> schools = await school_service.list_schools()
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.core.errors import ConflictError, NotFoundError
from intervention_tracker.infrastructure.database.models import School, Student
from intervention_tracker.models.common import StudentStatus, blank_fields_to_none
from intervention_tracker.models.school import (
    SchoolCreateRequest,
    SchoolResponse,
    SchoolUpdateRequest,
)

logger = logging.getLogger(__name__)


class SchoolServiceError(Exception):
    """Base exception for school service errors."""

    pass


class SchoolNotFoundError(SchoolServiceError, NotFoundError):
    """Raised when a school is not found."""

    pass


class SchoolInUseError(SchoolServiceError, ConflictError):
    """Raised when deleting a school that active students still reference."""

    pass


class SchoolService:
    """Service for managing schools.

    Attributes:
        _db: Async database session.

    Example:
        >>> service = SchoolService(db)
        >>> await service.delete_school(school_id)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the school service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def list_schools(
        self,
        include_inactive: bool = False,
        search: str | None = None,
    ) -> list[SchoolResponse]:
        """List schools ordered by name.

        Args:
            include_inactive: Include soft-deleted schools.
            search: Case-insensitive match on name or district.

        Returns:
            School responses.
        """
        stmt = select(School)

        if not include_inactive:
            stmt = stmt.where(School.is_active.is_(True))

        if search:
            search_pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    School.name.ilike(search_pattern),
                    School.district.ilike(search_pattern),
                )
            )

        stmt = stmt.order_by(School.name.asc())

        result = await self._db.execute(stmt)
        return [SchoolResponse.model_validate(school) for school in result.scalars()]

    async def get_school(self, school_id: int) -> SchoolResponse:
        """Get school by ID, including inactive schools.

        Raises:
            SchoolNotFoundError: If school not found.
        """
        school = await self._get_school(school_id)
        return SchoolResponse.model_validate(school)

    async def create_school(self, request: SchoolCreateRequest) -> SchoolResponse:
        """Create a new school.

        Args:
            request: School creation request.

        Returns:
            Created school response.
        """
        data = blank_fields_to_none(request.model_dump())
        school = School(**data, is_active=True)

        self._db.add(school)
        await self._db.commit()
        await self._db.refresh(school)

        logger.info("School created: %s (%s)", school.id, school.name)

        return SchoolResponse.model_validate(school)

    async def update_school(
        self,
        school_id: int,
        request: SchoolUpdateRequest,
    ) -> SchoolResponse:
        """Update school details.

        Args:
            school_id: School identifier.
            request: Update request; only fields that were sent are applied.

        Returns:
            Updated school response.

        Raises:
            SchoolNotFoundError: If school not found.
        """
        school = await self._get_school(school_id)

        update_data = blank_fields_to_none(request.model_dump(exclude_unset=True))
        if update_data.get("name") is None:
            update_data.pop("name", None)
        if update_data.get("is_active") is None:
            update_data.pop("is_active", None)

        for field, value in update_data.items():
            setattr(school, field, value)

        await self._db.commit()
        await self._db.refresh(school)

        logger.info("School updated: %s", school_id)

        return SchoolResponse.model_validate(school)

    async def delete_school(self, school_id: int) -> None:
        """Soft delete a school.

        Args:
            school_id: School identifier.

        Raises:
            SchoolNotFoundError: If school not found.
            SchoolInUseError: If active students are enrolled at the school.
        """
        school = await self._get_school(school_id)

        active_students = await self._db.scalar(
            select(func.count())
            .select_from(Student)
            .where(
                Student.school_id == school_id,
                Student.status == StudentStatus.ACTIVE.value,
            )
        )
        if active_students:
            raise SchoolInUseError(
                "Cannot delete school with active students",
                details={"active_students": active_students},
            )

        school.is_active = False
        await self._db.commit()

        logger.info("School soft deleted: %s", school_id)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_school(self, school_id: int) -> School:
        school = await self._db.get(School, school_id)
        if school is None:
            raise SchoolNotFoundError(f"School {school_id} not found")
        return school
