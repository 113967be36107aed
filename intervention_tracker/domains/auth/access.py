# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role and tool based access checks.

A user can use a tool when any of their roles has been granted it:
users -> user_roles -> role_tools -> tools (active tools only).
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.core.errors import ForbiddenError
from intervention_tracker.infrastructure.database.models import User
from intervention_tracker.infrastructure.database.sql import execute_sql

logger = logging.getLogger(__name__)

ADMINISTRATOR_ROLE = "Administrator"

_TOOL_ACCESS_SQL = """
    SELECT 1
    FROM user_roles ur
    JOIN role_tools rt ON rt.role_id = ur.role_id
    JOIN tools t ON t.id = rt.tool_id
    WHERE ur.user_id = :user_id
      AND t.identifier = :identifier
      AND t.is_active = :active
    LIMIT 1
"""

_USER_TOOLS_SQL = """
    SELECT DISTINCT t.identifier
    FROM user_roles ur
    JOIN role_tools rt ON rt.role_id = ur.role_id
    JOIN tools t ON t.id = rt.tool_id
    WHERE ur.user_id = :user_id
      AND t.is_active = :active
    ORDER BY t.identifier
"""


class AccessDeniedError(ForbiddenError):
    """Raised when the caller lacks a required role or tool."""

    pass


@dataclass(frozen=True)
class Caller:
    """Identity and role names of a signed-in user, detached from the session.

    Attributes:
        id: User identifier.
        role_names: Names of the roles held when the caller was resolved.
    """

    id: int
    role_names: frozenset[str]

    @classmethod
    def from_user(cls, user: User) -> "Caller":
        """Snapshot a user whose roles are loaded."""
        return cls(id=user.id, role_names=frozenset(user.role_names))


def has_role(user: User | Caller, role_name: str) -> bool:
    """Check whether a user holds a role, ignoring case.

    Args:
        user: Caller snapshot, or a user with roles loaded.
        role_name: Role name to look for.

    Returns:
        True if any assigned role matches.
    """
    wanted = role_name.lower()
    return any(name.lower() == wanted for name in user.role_names)


def is_administrator(user: User | Caller) -> bool:
    """Check whether a user holds the Administrator role."""
    return has_role(user, ADMINISTRATOR_ROLE)


class AccessService:
    """Answers and enforces tool access questions for a user.

    Example:
        >>> access = AccessService(db)
        >>> await access.require_tool(user, "students")
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the access service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def has_tool_access(self, user_id: int, tool_identifier: str) -> bool:
        """Check whether any of the user's roles grants a tool.

        Args:
            user_id: User identifier.
            tool_identifier: Tool identifier, e.g. "students".

        Returns:
            True if access is granted.
        """
        rows = await execute_sql(
            self._db,
            _TOOL_ACCESS_SQL,
            {"user_id": user_id, "identifier": tool_identifier, "active": True},
        )
        return bool(rows)

    async def get_user_tools(self, user_id: int) -> list[str]:
        """List the distinct tool identifiers available to a user.

        Args:
            user_id: User identifier.

        Returns:
            Sorted tool identifiers.
        """
        rows = await execute_sql(self._db, _USER_TOOLS_SQL, {"user_id": user_id, "active": True})
        return [row["identifier"] for row in rows]

    def require_admin(self, user: User | Caller) -> None:
        """Ensure the user is an administrator.

        Raises:
            AccessDeniedError: If the user lacks the Administrator role.
        """
        if not is_administrator(user):
            logger.warning("Administrator access denied for user %s", user.id)
            raise AccessDeniedError("Only administrators can perform this action")

    async def require_tool(self, user: User | Caller, tool_identifier: str) -> None:
        """Ensure the user is an administrator or has a tool.

        Args:
            user: Caller snapshot, or a user with roles loaded.
            tool_identifier: Required tool.

        Raises:
            AccessDeniedError: If access is not granted.
        """
        if is_administrator(user):
            return
        if await self.has_tool_access(user.id, tool_identifier):
            return
        logger.warning("Tool access denied: user=%s tool=%s", user.id, tool_identifier)
        raise AccessDeniedError(f"You do not have access to {tool_identifier}")
