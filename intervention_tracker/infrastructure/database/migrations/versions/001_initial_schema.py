# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-01-15
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        )
    ]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                nullable=False,
                server_default=sa.func.now(),
            )
        )
    return columns


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer, primary_key=True, autoincrement=True)


def upgrade() -> None:
    """Create all tables."""
    # =========================================================================
    # USERS, ROLES AND TOOLS
    # =========================================================================

    op.create_table(
        "users",
        _id(),
        sa.Column("cognito_sub", sa.String(255), unique=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "roles",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_system", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "user_roles",
        _id(),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "role_id"),
    )

    op.create_table(
        "tools",
        _id(),
        sa.Column("identifier", sa.String(100), unique=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("url", sa.String(255), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )

    op.create_table(
        "role_tools",
        _id(),
        sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tool_id", sa.Integer, sa.ForeignKey("tools.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint("role_id", "tool_id"),
    )

    # =========================================================================
    # SCHOOLS AND STUDENTS
    # =========================================================================

    op.create_table(
        "schools",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("district", sa.String(255), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("principal_name", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "students",
        _id(),
        sa.Column("student_id", sa.String(50), unique=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("middle_name", sa.String(100), nullable=True),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column("grade", sa.String(2), nullable=False),
        sa.Column("school_id", sa.Integer, sa.ForeignKey("schools.id"), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("emergency_contact_name", sa.String(255), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(20), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("updated_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_students_school_id", "students", ["school_id"])
    op.create_index("ix_students_status", "students", ["status"])
    op.create_index("ix_students_name", "students", ["last_name", "first_name"])

    op.create_table(
        "student_guardians",
        _id(),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("relationship", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("is_primary_contact", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_student_guardians_student_id", "student_guardians", ["student_id"])

    # =========================================================================
    # INTERVENTIONS
    # =========================================================================

    op.create_table(
        "intervention_programs",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("duration_days", sa.Integer, nullable=True),
        sa.Column("materials", sa.Text, nullable=True),
        sa.Column("goals", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "interventions",
        _id(),
        sa.Column("student_id", sa.Integer, sa.ForeignKey("students.id"), nullable=False),
        sa.Column(
            "program_id",
            sa.Integer,
            sa.ForeignKey("intervention_programs.id"),
            nullable=True,
        ),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="planned"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("goals", sa.Text, nullable=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("frequency", sa.String(100), nullable=True),
        sa.Column("duration_minutes", sa.Integer, nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("assigned_to", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completion_notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_interventions_student_id", "interventions", ["student_id"])
    op.create_index("ix_interventions_program_id", "interventions", ["program_id"])
    op.create_index("ix_interventions_status", "interventions", ["status"])
    op.create_index("ix_interventions_assigned_to", "interventions", ["assigned_to"])

    op.create_table(
        "intervention_goals",
        _id(),
        sa.Column(
            "intervention_id", sa.Integer, sa.ForeignKey("interventions.id"), nullable=False
        ),
        sa.Column("goal_text", sa.Text, nullable=False),
        sa.Column("target_date", sa.Date, nullable=True),
        sa.Column("is_achieved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("achieved_date", sa.Date, nullable=True),
        sa.Column("evidence", sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "intervention_sessions",
        _id(),
        sa.Column(
            "intervention_id", sa.Integer, sa.ForeignKey("interventions.id"), nullable=False
        ),
        sa.Column("session_date", sa.Date, nullable=False),
        sa.Column("duration_minutes", sa.Integer, nullable=True),
        sa.Column("attended", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("progress_notes", sa.Text, nullable=True),
        sa.Column("challenges", sa.Text, nullable=True),
        sa.Column("next_steps", sa.Text, nullable=True),
        sa.Column("recorded_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "intervention_team",
        _id(),
        sa.Column(
            "intervention_id", sa.Integer, sa.ForeignKey("interventions.id"), nullable=False
        ),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role", sa.String(100), nullable=True),
        *_timestamps(updated=False),
        sa.UniqueConstraint("intervention_id", "user_id"),
    )

    op.create_table(
        "documents",
        _id(),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_type", sa.String(50), nullable=True),
        sa.Column("file_size_bytes", sa.BigInteger, nullable=True),
        sa.Column("storage_key", sa.String(500), nullable=False),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column("processing_status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
    )

    op.create_table(
        "intervention_attachments",
        _id(),
        sa.Column(
            "intervention_id", sa.Integer, sa.ForeignKey("interventions.id"), nullable=False
        ),
        sa.Column("document_id", sa.Integer, sa.ForeignKey("documents.id"), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint("intervention_id", "document_id"),
    )

    # =========================================================================
    # NAVIGATION, SETTINGS AND JOBS
    # =========================================================================

    op.create_table(
        "navigation_items",
        _id(),
        sa.Column("label", sa.Text, nullable=False),
        sa.Column("icon", sa.Text, nullable=False),
        sa.Column("link", sa.Text, nullable=True),
        sa.Column(
            "parent_id",
            sa.Integer,
            sa.ForeignKey("navigation_items.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "tool_id",
            sa.Integer,
            sa.ForeignKey("tools.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("tool_identifier", sa.String(100), nullable=True),
        sa.Column("requires_role", sa.Text, nullable=True),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(20), nullable=False, server_default="page"),
        *_timestamps(updated=False),
    )

    op.create_table(
        "settings",
        _id(),
        sa.Column("key", sa.String(255), unique=True, nullable=False),
        sa.Column("value", sa.Text, nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("is_secret", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "jobs",
        _id(),
        sa.Column("job_type", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("input_data", sa.JSON, nullable=True),
        sa.Column("output_data", sa.JSON, nullable=True),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column("attempts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("max_attempts", sa.Integer, nullable=False, server_default="3"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_jobs_user_id", "jobs", ["user_id"])


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "jobs",
        "settings",
        "navigation_items",
        "intervention_attachments",
        "documents",
        "intervention_team",
        "intervention_sessions",
        "intervention_goals",
        "interventions",
        "intervention_programs",
        "student_guardians",
        "students",
        "schools",
        "role_tools",
        "tools",
        "user_roles",
        "roles",
        "users",
    ):
        op.drop_table(table)
