# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Parameterized SQL helpers.

This module is the raw-SQL data access path used next to the ORM:

- execute_sql() runs a textual or Core statement and returns plain dicts
- build_update_query() turns a partial field mapping into a typed
  UPDATE ... RETURNING statement restricted to an allow-list of columns

Values are always sent as bound parameters, never interpolated.

Example:
    >>> stmt = build_update_query(
    ...     InterventionProgram.__table__, 3, {"name": "Reading", "materials": ""}
    ... )
    >>> rows = await execute_sql(session, stmt)
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import ColumnElement, Executable, Table, TextClause, func, text, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Update

from intervention_tracker.core.errors import ValidationFailedError

logger = logging.getLogger(__name__)

# Columns a dynamic update may touch, per table.
ALLOWED_UPDATE_COLUMNS: dict[str, frozenset[str]] = {
    "users": frozenset({"email", "first_name", "last_name", "last_sign_in_at"}),
    "roles": frozenset({"name", "description"}),
    "tools": frozenset({"name", "description", "url", "icon", "is_active", "display_order"}),
    "schools": frozenset(
        {"name", "district", "address", "phone", "email", "principal_name", "is_active"}
    ),
    "students": frozenset(
        {
            "student_id",
            "first_name",
            "last_name",
            "middle_name",
            "date_of_birth",
            "grade",
            "school_id",
            "status",
            "email",
            "phone",
            "address",
            "emergency_contact_name",
            "emergency_contact_phone",
            "notes",
            "updated_by",
        }
    ),
    "student_guardians": frozenset(
        {"first_name", "last_name", "relationship", "email", "phone", "is_primary_contact"}
    ),
    "intervention_programs": frozenset(
        {"name", "description", "type", "duration_days", "materials", "goals", "is_active"}
    ),
    "interventions": frozenset(
        {
            "program_id",
            "type",
            "status",
            "title",
            "description",
            "goals",
            "start_date",
            "end_date",
            "frequency",
            "duration_minutes",
            "location",
            "assigned_to",
            "completion_notes",
        }
    ),
    "intervention_goals": frozenset(
        {"goal_text", "target_date", "is_achieved", "achieved_date", "evidence"}
    ),
    "navigation_items": frozenset(
        {
            "label",
            "icon",
            "link",
            "description",
            "type",
            "parent_id",
            "tool_id",
            "tool_identifier",
            "requires_role",
            "position",
            "is_active",
        }
    ),
    "settings": frozenset({"value", "description", "category", "is_secret"}),
    "jobs": frozenset(
        {
            "job_type",
            "status",
            "input_data",
            "output_data",
            "error_message",
            "attempts",
            "started_at",
            "completed_at",
        }
    ),
}

# Columns where an empty string is a meaningful value rather than "cleared".
KEEP_EMPTY_STRING_COLUMNS: dict[str, frozenset[str]] = {
    "settings": frozenset({"value"}),
}


def filter_update_columns(table_name: str, fields: Mapping[str, Any]) -> dict[str, Any]:
    """Drop fields that are not in the table's allow-list.

    Args:
        table_name: Name of the table being updated.
        fields: Requested column -> value mapping.

    Returns:
        Mapping restricted to allowed columns.

    Raises:
        ValueError: If no allow-list is configured for the table.
    """
    allowed = ALLOWED_UPDATE_COLUMNS.get(table_name)
    if allowed is None:
        raise ValueError(f"No column validation configured for table: {table_name}")

    rejected = [column for column in fields if column not in allowed]
    if rejected:
        logger.warning("Rejected update columns for %s: %s", table_name, ", ".join(rejected))

    return {column: value for column, value in fields.items() if column in allowed}


def build_update_query(
    table: Table,
    row_id: int,
    fields: Mapping[str, Any],
    raw_assignments: Mapping[str, ColumnElement[Any]] | None = None,
) -> Update:
    """Build a parameterized UPDATE for the supplied fields only.

    Empty strings are written as NULL unless the column is listed in
    KEEP_EMPTY_STRING_COLUMNS. updated_at is set to the current timestamp
    when the table has that column.

    Args:
        table: Target table.
        row_id: Primary key of the row to update.
        fields: Column -> value mapping of explicitly supplied fields.
        raw_assignments: Extra column -> SQL expression assignments,
            e.g. {"completed_at": func.current_timestamp()}.

    Returns:
        UPDATE statement with RETURNING of every column.

    Raises:
        ValidationFailedError: If no updatable column remains.
    """
    allowed_fields = filter_update_columns(table.name, fields)
    if not allowed_fields:
        raise ValidationFailedError("No fields provided for update")

    keep_empty = KEEP_EMPTY_STRING_COLUMNS.get(table.name, frozenset())
    values: dict[str, Any] = {}
    for column, value in allowed_fields.items():
        if value == "" and column not in keep_empty:
            value = None
        values[column] = value

    for column, expression in (raw_assignments or {}).items():
        values[column] = expression

    if "updated_at" in table.c and "updated_at" not in values:
        values["updated_at"] = func.current_timestamp()

    return (
        update(table)
        .where(table.c.id == row_id)
        .values(values)
        .returning(*table.c)
    )


async def execute_sql(
    session: AsyncSession,
    statement: str | Executable,
    params: Mapping[str, Any] | None = None,
    columns: Sequence[ColumnElement[Any]] | None = None,
) -> list[dict[str, Any]]:
    """Execute a statement and return its rows as dicts.

    Args:
        session: Database session.
        statement: SQL string with :named placeholders or a Core statement.
        params: Bound parameter values.
        columns: Result column types for textual SELECTs, so values are
            converted the same way on every backend.

    Returns:
        One dict per returned row; empty for statements without rows.
    """
    if isinstance(statement, str):
        statement = text(statement)
    if columns is not None and isinstance(statement, TextClause):
        statement = statement.columns(*columns)

    result = await session.execute(statement, dict(params or {}))
    if not result.returns_rows:
        return []
    return [dict(row._mapping) for row in result]
