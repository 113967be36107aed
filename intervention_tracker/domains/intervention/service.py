# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention service for intervention tracking.

This module provides the InterventionService that handles:
- Intervention CRUD (hard delete cascades to dependent rows)
- Goals, recorded sessions, team members and document attachments

Updates go through the dynamic update builder; moving an intervention to
"completed" stamps completed_at.

Example:
    >>> service = InterventionService(db)
    >>> intervention = await service.create_intervention(request, created_by=user.id)
    >>> await service.record_session(intervention.id, session_request, recorded_by=user.id)
"""

import logging
from datetime import date

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from intervention_tracker.core.errors import ConflictError, NotFoundError, ValidationFailedError
from intervention_tracker.infrastructure.database.models import (
    Document,
    Intervention,
    InterventionAttachment,
    InterventionGoal,
    InterventionProgram,
    InterventionSession,
    InterventionTeamMember,
    Student,
    User,
)
from intervention_tracker.infrastructure.database.sql import build_update_query, execute_sql
from intervention_tracker.models.common import InterventionStatus, blank_fields_to_none
from intervention_tracker.models.intervention import (
    AttachmentCreateRequest,
    AttachmentResponse,
    GoalCreateRequest,
    GoalResponse,
    GoalUpdateRequest,
    InterventionCreateRequest,
    InterventionDetail,
    InterventionFilters,
    InterventionListItem,
    InterventionResponse,
    InterventionUpdateRequest,
    SessionCreateRequest,
    SessionResponse,
    TeamMemberCreateRequest,
    TeamMemberResponse,
)
from intervention_tracker.utils.datetime import utc_now, utc_today

logger = logging.getLogger(__name__)

RECENT_SESSION_LIMIT = 10

_INTERVENTIONS = Intervention.__table__
_GOALS = InterventionGoal.__table__

# Columns that may not be cleared by an update.
_REQUIRED_FIELDS = ("type", "status", "title", "start_date")


class InterventionServiceError(Exception):
    """Base exception for intervention service errors."""

    pass


class InterventionNotFoundError(InterventionServiceError, NotFoundError):
    """Raised when an intervention is not found."""

    pass


class GoalNotFoundError(InterventionServiceError, NotFoundError):
    """Raised when a goal is not found."""

    pass


class TeamMemberNotFoundError(InterventionServiceError, NotFoundError):
    """Raised when a user is not on the intervention team."""

    pass


class InterventionReferenceError(InterventionServiceError, ValidationFailedError):
    """Raised when a referenced student, program, user or document does not exist."""

    pass


class InterventionDateError(InterventionServiceError, ValidationFailedError):
    """Raised when the end date falls before the start date."""

    pass


class TeamMemberExistsError(InterventionServiceError, ConflictError):
    """Raised when a user is already on the intervention team."""

    pass


class AttachmentExistsError(InterventionServiceError, ConflictError):
    """Raised when a document is already linked to the intervention."""

    pass


class InterventionService:
    """Service for managing interventions and their dependent records.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the intervention service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def list_interventions(
        self,
        filters: InterventionFilters | None = None,
    ) -> list[InterventionListItem]:
        """List interventions, newest start date first.

        Args:
            filters: Student, status, type, assignee and date range filters.
                start_date keeps interventions starting on or after it;
                end_date keeps those ending on or before it.

        Returns:
            Intervention rows with student, program and assignee summaries.
        """
        filters = filters or InterventionFilters()

        stmt = self._detail_query()

        if filters.student_id is not None:
            stmt = stmt.where(Intervention.student_id == filters.student_id)
        if filters.status is not None:
            stmt = stmt.where(Intervention.status == filters.status.value)
        if filters.type is not None:
            stmt = stmt.where(Intervention.type == filters.type.value)
        if filters.assigned_to is not None:
            stmt = stmt.where(Intervention.assigned_to == filters.assigned_to)
        if filters.start_date is not None:
            stmt = stmt.where(Intervention.start_date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(Intervention.end_date <= filters.end_date)

        stmt = stmt.order_by(Intervention.start_date.desc(), Intervention.created_at.desc())

        result = await self._db.execute(stmt)
        return [self._to_list_item(intervention) for intervention in result.scalars()]

    async def get_intervention(self, intervention_id: int) -> InterventionDetail:
        """Get an intervention with team, recent sessions and goals.

        Only the most recent RECENT_SESSION_LIMIT sessions are included.

        Raises:
            InterventionNotFoundError: If intervention not found.
        """
        intervention = await self._db.scalar(
            self._detail_query().where(Intervention.id == intervention_id)
        )
        if intervention is None:
            raise InterventionNotFoundError(f"Intervention {intervention_id} not found")

        item = self._to_list_item(intervention)
        return InterventionDetail(
            **item.model_dump(),
            team=await self.list_team(intervention_id),
            sessions=await self._list_sessions(intervention_id, limit=RECENT_SESSION_LIMIT),
            goal_items=await self.list_goals(intervention_id),
        )

    async def create_intervention(
        self,
        request: InterventionCreateRequest,
        created_by: int,
    ) -> InterventionDetail:
        """Create an intervention for a student.

        Args:
            request: Intervention creation request.
            created_by: ID of the user creating the intervention.

        Returns:
            Created intervention.

        Raises:
            InterventionReferenceError: If the student, program or assignee
                does not exist.
        """
        if await self._db.get(Student, request.student_id) is None:
            raise InterventionReferenceError("Student not found")
        await self._check_references(request.program_id, request.assigned_to)

        data = blank_fields_to_none(request.model_dump())
        intervention = Intervention(**data, created_by=created_by)
        if request.status == InterventionStatus.COMPLETED:
            intervention.completed_at = utc_now()

        self._db.add(intervention)
        await self._db.commit()

        logger.info(
            "Intervention created: %s for student %s", intervention.id, request.student_id
        )

        return await self.get_intervention(intervention.id)

    async def update_intervention(
        self,
        intervention_id: int,
        request: InterventionUpdateRequest,
    ) -> InterventionResponse:
        """Update an intervention with the fields that were sent.

        Raises:
            InterventionNotFoundError: If intervention not found.
            InterventionReferenceError: If a new program or assignee does not exist.
            InterventionDateError: If the resulting end date precedes the start date.
            ValidationFailedError: If no updatable field was sent.
        """
        current = await self._get_intervention(intervention_id)

        fields = request.model_dump(exclude_unset=True)
        for field in _REQUIRED_FIELDS:
            if field in fields and fields[field] in (None, ""):
                del fields[field]

        await self._check_references(fields.get("program_id"), fields.get("assigned_to"))

        start = fields.get("start_date", current.start_date)
        end = fields["end_date"] if "end_date" in fields else current.end_date
        if isinstance(start, date) and isinstance(end, date) and end < start:
            raise InterventionDateError("End date cannot be before start date")

        raw_assignments = {}
        if (
            fields.get("status") == InterventionStatus.COMPLETED
            and current.status != InterventionStatus.COMPLETED.value
        ):
            raw_assignments["completed_at"] = func.current_timestamp()

        stmt = build_update_query(_INTERVENTIONS, intervention_id, fields, raw_assignments)
        rows = await execute_sql(self._db, stmt)
        await self._db.commit()

        logger.info("Intervention updated: %s (fields=%s)", intervention_id, sorted(fields))

        return InterventionResponse.model_validate(rows[0])

    async def delete_intervention(self, intervention_id: int) -> None:
        """Delete an intervention and all of its dependent rows.

        Sessions, goals, team members and attachments are removed in the
        same transaction.

        Raises:
            InterventionNotFoundError: If intervention not found.
        """
        await self._get_intervention(intervention_id)

        try:
            for model in (
                InterventionSession,
                InterventionGoal,
                InterventionTeamMember,
                InterventionAttachment,
            ):
                await self._db.execute(
                    delete(model).where(model.intervention_id == intervention_id)
                )
            await self._db.execute(delete(Intervention).where(Intervention.id == intervention_id))
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Intervention deleted: %s", intervention_id)

    # =========================================================================
    # Goals
    # =========================================================================

    async def list_goals(self, intervention_id: int) -> list[GoalResponse]:
        """List an intervention's goals in creation order."""
        result = await self._db.execute(
            select(InterventionGoal)
            .where(InterventionGoal.intervention_id == intervention_id)
            .order_by(InterventionGoal.id)
            .execution_options(populate_existing=True)
        )
        return [GoalResponse.model_validate(goal) for goal in result.scalars()]

    async def add_goal(self, intervention_id: int, request: GoalCreateRequest) -> GoalResponse:
        """Add a goal to an intervention.

        Raises:
            InterventionNotFoundError: If intervention not found.
        """
        await self._get_intervention(intervention_id)

        data = blank_fields_to_none(request.model_dump())
        goal = InterventionGoal(intervention_id=intervention_id, is_achieved=False, **data)
        self._db.add(goal)
        await self._db.commit()
        await self._db.refresh(goal)

        logger.info("Goal added: %s to intervention %s", goal.id, intervention_id)

        return GoalResponse.model_validate(goal)

    async def update_goal(self, goal_id: int, request: GoalUpdateRequest) -> GoalResponse:
        """Update a goal.

        Marking a goal achieved without an achieved date stamps today;
        marking it not achieved clears the date.

        Raises:
            GoalNotFoundError: If goal not found.
            ValidationFailedError: If no updatable field was sent.
        """
        fields = request.model_dump(exclude_unset=True)
        for field in ("goal_text", "is_achieved"):
            if field in fields and fields[field] in (None, ""):
                del fields[field]

        if fields.get("is_achieved") is True and not fields.get("achieved_date"):
            fields["achieved_date"] = utc_today()
        elif fields.get("is_achieved") is False:
            fields["achieved_date"] = None

        rows = await execute_sql(self._db, build_update_query(_GOALS, goal_id, fields))
        if not rows:
            await self._db.rollback()
            raise GoalNotFoundError(f"Goal {goal_id} not found")
        await self._db.commit()

        logger.info("Goal updated: %s", goal_id)

        return GoalResponse.model_validate(rows[0])

    async def remove_goal(self, goal_id: int) -> None:
        """Remove a goal.

        Raises:
            GoalNotFoundError: If goal not found.
        """
        result = await self._db.execute(
            delete(InterventionGoal).where(InterventionGoal.id == goal_id)
        )
        if not result.rowcount:
            await self._db.rollback()
            raise GoalNotFoundError(f"Goal {goal_id} not found")
        await self._db.commit()

        logger.info("Goal removed: %s", goal_id)

    # =========================================================================
    # Sessions
    # =========================================================================

    async def record_session(
        self,
        intervention_id: int,
        request: SessionCreateRequest,
        recorded_by: int,
    ) -> SessionResponse:
        """Record a delivered session.

        Raises:
            InterventionNotFoundError: If intervention not found.
        """
        await self._get_intervention(intervention_id)

        data = blank_fields_to_none(request.model_dump())
        session = InterventionSession(
            intervention_id=intervention_id,
            recorded_by=recorded_by,
            **data,
        )
        self._db.add(session)
        await self._db.commit()

        logger.info("Session recorded: %s for intervention %s", session.id, intervention_id)

        sessions = await self._list_sessions(intervention_id, session_id=session.id)
        return sessions[0]

    async def list_sessions(self, intervention_id: int) -> list[SessionResponse]:
        """List all sessions of an intervention, most recent first.

        Raises:
            InterventionNotFoundError: If intervention not found.
        """
        await self._get_intervention(intervention_id)
        return await self._list_sessions(intervention_id)

    # =========================================================================
    # Team
    # =========================================================================

    async def list_team(self, intervention_id: int) -> list[TeamMemberResponse]:
        """List team members ordered by last name, first name."""
        result = await self._db.execute(
            select(InterventionTeamMember, User)
            .join(User, User.id == InterventionTeamMember.user_id)
            .where(InterventionTeamMember.intervention_id == intervention_id)
            .order_by(User.last_name, User.first_name)
        )
        return [
            TeamMemberResponse(
                id=member.id,
                intervention_id=member.intervention_id,
                user_id=member.user_id,
                role=member.role,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
            )
            for member, user in result.all()
        ]

    async def add_team_member(
        self,
        intervention_id: int,
        request: TeamMemberCreateRequest,
    ) -> list[TeamMemberResponse]:
        """Add a staff member to the intervention team.

        Returns:
            The updated team.

        Raises:
            InterventionNotFoundError: If intervention not found.
            InterventionReferenceError: If the user does not exist.
            TeamMemberExistsError: If the user is already on the team.
        """
        await self._get_intervention(intervention_id)
        await self._check_references(None, request.user_id)

        existing = await self._db.scalar(
            select(InterventionTeamMember.id).where(
                InterventionTeamMember.intervention_id == intervention_id,
                InterventionTeamMember.user_id == request.user_id,
            )
        )
        if existing is not None:
            raise TeamMemberExistsError("User is already a member of this intervention team")

        self._db.add(
            InterventionTeamMember(
                intervention_id=intervention_id,
                user_id=request.user_id,
                role=request.role or None,
            )
        )
        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise TeamMemberExistsError(
                "User is already a member of this intervention team"
            ) from e

        logger.info("Team member %s added to intervention %s", request.user_id, intervention_id)

        return await self.list_team(intervention_id)

    async def remove_team_member(self, intervention_id: int, user_id: int) -> None:
        """Remove a staff member from the intervention team.

        Raises:
            TeamMemberNotFoundError: If the user is not on the team.
        """
        result = await self._db.execute(
            delete(InterventionTeamMember).where(
                InterventionTeamMember.intervention_id == intervention_id,
                InterventionTeamMember.user_id == user_id,
            )
        )
        if not result.rowcount:
            await self._db.rollback()
            raise TeamMemberNotFoundError("User is not a member of this intervention team")
        await self._db.commit()

        logger.info("Team member %s removed from intervention %s", user_id, intervention_id)

    # =========================================================================
    # Attachments
    # =========================================================================

    async def link_document(
        self,
        intervention_id: int,
        request: AttachmentCreateRequest,
        created_by: int,
    ) -> AttachmentResponse:
        """Attach an uploaded document to an intervention.

        Raises:
            InterventionNotFoundError: If intervention not found.
            InterventionReferenceError: If the document does not exist.
            AttachmentExistsError: If the document is already attached.
        """
        await self._get_intervention(intervention_id)
        if await self._db.get(Document, request.document_id) is None:
            raise InterventionReferenceError("Document not found")

        existing = await self._db.scalar(
            select(InterventionAttachment.id).where(
                InterventionAttachment.intervention_id == intervention_id,
                InterventionAttachment.document_id == request.document_id,
            )
        )
        if existing is not None:
            raise AttachmentExistsError("Document is already attached to this intervention")

        attachment = InterventionAttachment(
            intervention_id=intervention_id,
            document_id=request.document_id,
            description=request.description or None,
            created_by=created_by,
        )
        self._db.add(attachment)
        await self._db.commit()

        logger.info(
            "Document %s attached to intervention %s", request.document_id, intervention_id
        )

        attachments = await self.list_attachments(intervention_id)
        return next(a for a in attachments if a.id == attachment.id)

    async def list_attachments(self, intervention_id: int) -> list[AttachmentResponse]:
        """List documents attached to an intervention, newest first."""
        result = await self._db.execute(
            select(InterventionAttachment, Document)
            .join(Document, Document.id == InterventionAttachment.document_id)
            .where(InterventionAttachment.intervention_id == intervention_id)
            .order_by(InterventionAttachment.created_at.desc(), InterventionAttachment.id.desc())
        )
        return [
            AttachmentResponse(
                id=attachment.id,
                intervention_id=attachment.intervention_id,
                document_id=attachment.document_id,
                description=attachment.description,
                file_name=document.file_name,
                file_type=document.file_type,
                file_size_bytes=document.file_size_bytes,
                created_by=attachment.created_by,
                created_at=attachment.created_at,
            )
            for attachment, document in result.all()
        ]

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _detail_query(self) -> Select:
        return (
            select(Intervention)
            .options(
                selectinload(Intervention.student),
                selectinload(Intervention.program),
                selectinload(Intervention.assignee),
            )
            .execution_options(populate_existing=True)
        )

    async def _get_intervention(self, intervention_id: int) -> Intervention:
        intervention = await self._db.scalar(
            select(Intervention)
            .where(Intervention.id == intervention_id)
            .execution_options(populate_existing=True)
        )
        if intervention is None:
            raise InterventionNotFoundError(f"Intervention {intervention_id} not found")
        return intervention

    async def _check_references(self, program_id: int | None, user_id: int | None) -> None:
        if program_id is not None and await self._db.get(InterventionProgram, program_id) is None:
            raise InterventionReferenceError("Program not found")
        if user_id is not None:
            user = await self._db.get(User, user_id)
            if user is None or user.deleted_at is not None:
                raise InterventionReferenceError("User not found")

    async def _list_sessions(
        self,
        intervention_id: int,
        limit: int | None = None,
        session_id: int | None = None,
    ) -> list[SessionResponse]:
        stmt = (
            select(InterventionSession)
            .options(selectinload(InterventionSession.recorder))
            .where(InterventionSession.intervention_id == intervention_id)
            .order_by(InterventionSession.session_date.desc(), InterventionSession.id.desc())
        )
        if session_id is not None:
            stmt = stmt.where(InterventionSession.id == session_id)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._db.execute(stmt)
        sessions = []
        for session in result.scalars():
            response = SessionResponse.model_validate(session)
            response.recorded_by_name = session.recorder.full_name if session.recorder else None
            sessions.append(response)
        return sessions

    def _to_list_item(self, intervention: Intervention) -> InterventionListItem:
        item = InterventionListItem.model_validate(intervention)
        student = intervention.student
        if student is not None:
            item.student_first_name = student.first_name
            item.student_last_name = student.last_name
            item.student_number = student.student_id
            item.student_grade = student.grade
        item.program_name = intervention.program.name if intervention.program else None
        item.assigned_to_name = intervention.assignee.full_name if intervention.assignee else None
        return item
