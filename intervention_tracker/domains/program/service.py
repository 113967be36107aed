# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention program service.

Programs are reusable templates interventions can follow. Reads and writes
go through parameterized SQL; updates use the dynamic update builder.
Deleting a program only deactivates it.

Example:
    >>> service = ProgramService(db)
    >>> programs = await service.list_programs()
"""

import logging

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.core.errors import ConflictError, NotFoundError
from intervention_tracker.infrastructure.database.models import InterventionProgram
from intervention_tracker.infrastructure.database.sql import build_update_query, execute_sql
from intervention_tracker.models.common import ACTIVE_INTERVENTION_STATUSES, blank_fields_to_none
from intervention_tracker.models.program import (
    ProgramCreateRequest,
    ProgramResponse,
    ProgramUpdateRequest,
)

logger = logging.getLogger(__name__)

_PROGRAMS = InterventionProgram.__table__

_LIST_SQL = """
    SELECT * FROM intervention_programs
    WHERE (:include_inactive OR is_active = :active)
    ORDER BY type, name
"""

_GET_SQL = "SELECT * FROM intervention_programs WHERE id = :id"

_ACTIVE_USAGE_SQL = """
    SELECT COUNT(*) AS count FROM interventions
    WHERE program_id = :program_id AND status IN (:planned, :in_progress)
"""

_DEACTIVATE_SQL = """
    UPDATE intervention_programs
    SET is_active = :active, updated_at = CURRENT_TIMESTAMP
    WHERE id = :id
"""


class ProgramServiceError(Exception):
    """Base exception for program service errors."""

    pass


class ProgramNotFoundError(ProgramServiceError, NotFoundError):
    """Raised when a program is not found."""

    pass


class ProgramInUseError(ProgramServiceError, ConflictError):
    """Raised when deleting a program used by active interventions."""

    pass


class ProgramService:
    """Service for managing intervention programs.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the program service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def list_programs(self, include_inactive: bool = False) -> list[ProgramResponse]:
        """List programs ordered by type, then name.

        Args:
            include_inactive: Include deactivated programs.

        Returns:
            Program responses.
        """
        rows = await execute_sql(
            self._db,
            _LIST_SQL,
            {"include_inactive": include_inactive, "active": True},
            columns=list(_PROGRAMS.c),
        )
        return [ProgramResponse.model_validate(row) for row in rows]

    async def get_program(self, program_id: int) -> ProgramResponse:
        """Get a program by ID, including inactive programs.

        Raises:
            ProgramNotFoundError: If program not found.
        """
        rows = await execute_sql(
            self._db, _GET_SQL, {"id": program_id}, columns=list(_PROGRAMS.c)
        )
        if not rows:
            raise ProgramNotFoundError(f"Program {program_id} not found")
        return ProgramResponse.model_validate(rows[0])

    async def create_program(self, request: ProgramCreateRequest) -> ProgramResponse:
        """Create a program.

        Args:
            request: Program creation request.

        Returns:
            Created program.
        """
        values = blank_fields_to_none(request.model_dump(mode="json"))
        values["is_active"] = request.is_active

        rows = await execute_sql(
            self._db, insert(_PROGRAMS).values(values).returning(*_PROGRAMS.c)
        )
        await self._db.commit()

        program = ProgramResponse.model_validate(rows[0])
        logger.info("Program created: %s (%s)", program.id, program.name)

        return program

    async def update_program(
        self,
        program_id: int,
        request: ProgramUpdateRequest,
    ) -> ProgramResponse:
        """Update a program with the fields that were sent.

        Raises:
            ProgramNotFoundError: If program not found.
            ValidationFailedError: If no updatable field was sent.
        """
        fields = request.model_dump(mode="json", exclude_unset=True)
        for field in ("name", "type", "is_active"):
            if field in fields and fields[field] is None:
                del fields[field]

        rows = await execute_sql(self._db, build_update_query(_PROGRAMS, program_id, fields))
        if not rows:
            await self._db.rollback()
            raise ProgramNotFoundError(f"Program {program_id} not found")
        await self._db.commit()

        logger.info("Program updated: %s (fields=%s)", program_id, sorted(fields))

        return ProgramResponse.model_validate(rows[0])

    async def delete_program(self, program_id: int) -> None:
        """Deactivate a program.

        Raises:
            ProgramNotFoundError: If program not found.
            ProgramInUseError: If planned or in-progress interventions use it.
        """
        await self.get_program(program_id)

        planned, in_progress = (s.value for s in ACTIVE_INTERVENTION_STATUSES)
        rows = await execute_sql(
            self._db,
            _ACTIVE_USAGE_SQL,
            {"program_id": program_id, "planned": planned, "in_progress": in_progress},
        )
        if rows and rows[0]["count"]:
            raise ProgramInUseError(
                "Cannot delete program that is being used by active interventions",
                details={"active_interventions": rows[0]["count"]},
            )

        await execute_sql(self._db, _DEACTIVATE_SQL, {"id": program_id, "active": False})
        await self._db.commit()

        logger.info("Program deactivated: %s", program_id)
