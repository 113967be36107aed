# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention program and intervention tracking models.

An intervention belongs to one student and optionally follows a program.
Goals, sessions, team members and attachments hang off the intervention
and are removed together with it.
"""

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from intervention_tracker.infrastructure.database.models.base import (
    Base,
    CreatedAtMixin,
    IntegerIdMixin,
    TimestampMixin,
)
from intervention_tracker.infrastructure.database.models.student import Student
from intervention_tracker.infrastructure.database.models.user import User


class InterventionProgram(Base, IntegerIdMixin, TimestampMixin):
    """Reusable intervention program template."""

    __tablename__ = "intervention_programs"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    duration_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    materials: Mapped[str | None] = mapped_column(Text, nullable=True)
    goals: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Intervention(Base, IntegerIdMixin, TimestampMixin):
    """Tracked remediation plan for a student."""

    __tablename__ = "interventions"

    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("students.id"), nullable=False, index=True
    )
    program_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("intervention_programs.id"), nullable=True, index=True
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="planned", index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    goals: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    frequency: Mapped[str | None] = mapped_column(String(100), nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    assigned_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True
    )
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    student: Mapped[Student] = relationship()
    program: Mapped[InterventionProgram | None] = relationship()
    assignee: Mapped[User | None] = relationship(foreign_keys=[assigned_to])
    creator: Mapped[User] = relationship(foreign_keys=[created_by])


class InterventionGoal(Base, IntegerIdMixin, TimestampMixin):
    """Measurable goal within an intervention."""

    __tablename__ = "intervention_goals"

    intervention_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("interventions.id"), nullable=False, index=True
    )
    goal_text: Mapped[str] = mapped_column(Text, nullable=False)
    target_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_achieved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    achieved_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    evidence: Mapped[str | None] = mapped_column(Text, nullable=True)


class InterventionSession(Base, IntegerIdMixin, TimestampMixin):
    """Record of one delivered intervention session."""

    __tablename__ = "intervention_sessions"

    intervention_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("interventions.id"), nullable=False, index=True
    )
    session_date: Mapped[date] = mapped_column(Date, nullable=False)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    attended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    progress_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    challenges: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_steps: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    recorder: Mapped[User] = relationship()


class InterventionTeamMember(Base, IntegerIdMixin, CreatedAtMixin):
    """Staff member participating in an intervention."""

    __tablename__ = "intervention_team"
    __table_args__ = (UniqueConstraint("intervention_id", "user_id"),)

    intervention_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("interventions.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    role: Mapped[str | None] = mapped_column(String(100), nullable=True)

    user: Mapped[User] = relationship()


class InterventionAttachment(Base, IntegerIdMixin, CreatedAtMixin):
    """Document linked to an intervention."""

    __tablename__ = "intervention_attachments"
    __table_args__ = (UniqueConstraint("intervention_id", "document_id"),)

    intervention_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("interventions.id"), nullable=False, index=True
    )
    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id"), nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
