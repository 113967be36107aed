# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role service for role, tool grant and role assignment management.

This module provides the RoleService that handles:
- Role CRUD (system roles are immutable)
- Tool listing and role -> tool grants
- Replacing a user's role set under the administrator guards

Two invariants protect administrator access:
- a user cannot remove the Administrator role from their own account
- the last remaining Administrator cannot be demoted

Example:
    >>> service = RoleService(db)
    >>> await service.update_user_roles(acting_user_id=1, user_id=7, role_ids=[2, 3])
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from intervention_tracker.domains.auth.access import ADMINISTRATOR_ROLE
from intervention_tracker.infrastructure.database.models import (
    Role,
    RoleTool,
    Tool,
    User,
    UserRole,
)
from intervention_tracker.infrastructure.database.sql import build_update_query, execute_sql
from intervention_tracker.models.role import (
    RoleCreateRequest,
    RoleResponse,
    RoleUpdateRequest,
    ToolResponse,
)

logger = logging.getLogger(__name__)


class RoleServiceError(Exception):
    """Base exception for role service errors."""

    pass


class RoleNotFoundError(RoleServiceError, NotFoundError):
    """Raised when a role is not found."""

    pass


class ToolNotFoundError(RoleServiceError, NotFoundError):
    """Raised when a tool is not found."""

    pass


class AssignmentUserNotFoundError(RoleServiceError, NotFoundError):
    """Raised when the user whose roles are being changed does not exist."""

    pass


class UnknownRoleError(RoleServiceError, ValidationFailedError):
    """Raised when a requested role id does not exist."""

    pass


class UnknownToolError(RoleServiceError, ValidationFailedError):
    """Raised when a requested tool id does not exist."""

    pass


class RoleNameExistsError(RoleServiceError, ConflictError):
    """Raised when a role name is already taken."""

    pass


class SystemRoleError(RoleServiceError, ConflictError):
    """Raised when trying to modify or delete a system role."""

    pass


class RoleInUseError(RoleServiceError, ConflictError):
    """Raised when deleting a role that is still assigned to users."""

    pass


class SelfDemotionError(RoleServiceError, ForbiddenError):
    """Raised when a user tries to remove their own Administrator role."""

    pass


class LastAdministratorError(RoleServiceError, ConflictError):
    """Raised when a change would leave no Administrator."""

    pass


class RoleService:
    """Service for managing roles, tool grants and role assignments.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the role service.

        Args:
            db: Async database session.
        """
        self._db = db

    # =========================================================================
    # Roles
    # =========================================================================

    async def list_roles(self) -> list[RoleResponse]:
        """List all roles ordered by name."""
        rows = await execute_sql(
            self._db,
            "SELECT * FROM roles ORDER BY name",
            columns=list(Role.__table__.c),
        )
        return [RoleResponse.model_validate(row) for row in rows]

    async def get_role(self, role_id: int) -> RoleResponse:
        """Get a role by ID.

        Raises:
            RoleNotFoundError: If role not found.
        """
        role = await self._get_role(role_id)
        return RoleResponse.model_validate(role)

    async def create_role(self, request: RoleCreateRequest) -> RoleResponse:
        """Create a custom role.

        Args:
            request: Role creation request.

        Returns:
            Created role.

        Raises:
            RoleNameExistsError: If the name is already used (any case).
        """
        name = request.name.strip()
        await self._ensure_name_available(name)

        role = Role(name=name, description=request.description or None, is_system=False)
        self._db.add(role)
        await self._db.commit()
        await self._db.refresh(role)

        logger.info("Role created: %s (%s)", role.id, role.name)

        return RoleResponse.model_validate(role)

    async def update_role(self, role_id: int, request: RoleUpdateRequest) -> RoleResponse:
        """Update a custom role's name or description.

        Raises:
            RoleNotFoundError: If role not found.
            SystemRoleError: If the role is a system role.
            RoleNameExistsError: If the new name is already used.
        """
        role = await self._get_role(role_id)
        if role.is_system:
            raise SystemRoleError("System roles cannot be modified")

        fields = request.model_dump(exclude_unset=True)
        if fields.get("name"):
            fields["name"] = fields["name"].strip()
            await self._ensure_name_available(fields["name"], exclude_id=role_id)

        stmt = build_update_query(Role.__table__, role_id, fields)
        try:
            rows = await execute_sql(self._db, stmt)
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Role updated: %s", role_id)

        return RoleResponse.model_validate(rows[0])

    async def delete_role(self, role_id: int) -> None:
        """Delete a custom role and its tool grants.

        Raises:
            RoleNotFoundError: If role not found.
            SystemRoleError: If the role is a system role.
            RoleInUseError: If users still hold the role.
        """
        role = await self._get_role(role_id)
        if role.is_system:
            raise SystemRoleError("System roles cannot be deleted")

        assigned = await self._db.scalar(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role_id)
        )
        if assigned:
            raise RoleInUseError(
                f"Cannot delete role assigned to {assigned} user(s)",
                details={"assigned_users": assigned},
            )

        try:
            await self._db.execute(delete(RoleTool).where(RoleTool.role_id == role_id))
            await self._db.execute(delete(Role).where(Role.id == role_id))
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Role deleted: %s (%s)", role_id, role.name)

    # =========================================================================
    # Tools and grants
    # =========================================================================

    async def list_tools(self, active_only: bool = True) -> list[ToolResponse]:
        """List tools ordered by display order and name."""
        stmt = select(Tool)
        if active_only:
            stmt = stmt.where(Tool.is_active.is_(True))
        stmt = stmt.order_by(Tool.display_order, Tool.name)

        result = await self._db.execute(stmt)
        return [ToolResponse.model_validate(tool) for tool in result.scalars()]

    async def get_role_tools(self, role_id: int) -> list[ToolResponse]:
        """List the tools granted to a role.

        Raises:
            RoleNotFoundError: If role not found.
        """
        await self._get_role(role_id)

        stmt = (
            select(Tool)
            .join(RoleTool, RoleTool.tool_id == Tool.id)
            .where(RoleTool.role_id == role_id)
            .order_by(Tool.display_order, Tool.name)
        )
        result = await self._db.execute(stmt)
        return [ToolResponse.model_validate(tool) for tool in result.scalars()]

    async def assign_tool(self, role_id: int, tool_id: int) -> bool:
        """Grant a tool to a role.

        Assigning an existing grant succeeds without inserting a duplicate.

        Returns:
            True if a new grant was created, False if it already existed.

        Raises:
            RoleNotFoundError: If role not found.
            ToolNotFoundError: If tool not found.
        """
        await self._get_role(role_id)
        if await self._db.get(Tool, tool_id) is None:
            raise ToolNotFoundError(f"Tool {tool_id} not found")

        existing = await self._db.scalar(
            select(RoleTool.id).where(RoleTool.role_id == role_id, RoleTool.tool_id == tool_id)
        )
        if existing is not None:
            return False

        self._db.add(RoleTool(role_id=role_id, tool_id=tool_id))
        await self._db.commit()

        logger.info("Tool %s granted to role %s", tool_id, role_id)
        return True

    async def remove_tool(self, role_id: int, tool_id: int) -> bool:
        """Revoke a tool from a role.

        Returns:
            True if a grant was removed.
        """
        result = await self._db.execute(
            delete(RoleTool).where(RoleTool.role_id == role_id, RoleTool.tool_id == tool_id)
        )
        await self._db.commit()

        removed = (result.rowcount or 0) > 0
        if removed:
            logger.info("Tool %s revoked from role %s", tool_id, role_id)
        return removed

    async def set_role_tools(self, role_id: int, tool_ids: list[int]) -> list[ToolResponse]:
        """Replace a role's tool grants.

        The old grants are deleted and the new ones inserted in one
        transaction.

        Raises:
            RoleNotFoundError: If role not found.
            UnknownToolError: If any tool id does not exist.
        """
        await self._get_role(role_id)
        wanted = list(dict.fromkeys(tool_ids))

        if wanted:
            found = set(
                (await self._db.execute(select(Tool.id).where(Tool.id.in_(wanted)))).scalars()
            )
            missing = [tool_id for tool_id in wanted if tool_id not in found]
            if missing:
                raise UnknownToolError(
                    "Unknown tool id(s): " + ", ".join(str(m) for m in missing),
                    details={"missing": missing},
                )

        try:
            await self._db.execute(delete(RoleTool).where(RoleTool.role_id == role_id))
            self._db.add_all([RoleTool(role_id=role_id, tool_id=tool_id) for tool_id in wanted])
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Role %s tools replaced: %s", role_id, wanted)

        return await self.get_role_tools(role_id)

    # =========================================================================
    # Role assignment
    # =========================================================================

    async def get_administrator_role(self) -> Role | None:
        """Find the Administrator role by name, ignoring case."""
        return await self._db.scalar(
            select(Role).where(func.lower(Role.name) == ADMINISTRATOR_ROLE.lower()).limit(1)
        )

    async def count_administrators(self, lock: bool = False) -> int:
        """Count active users holding the Administrator role.

        Args:
            lock: Lock the counted assignment rows until the transaction ends.

        Returns:
            Number of non-deleted administrator accounts.
        """
        admin_role = await self.get_administrator_role()
        if admin_role is None:
            return 0

        stmt = (
            select(UserRole.user_id)
            .join(User, User.id == UserRole.user_id)
            .where(UserRole.role_id == admin_role.id, User.deleted_at.is_(None))
        )
        if lock:
            stmt = stmt.with_for_update(of=UserRole)

        result = await self._db.execute(stmt)
        return len(set(result.scalars()))

    async def ensure_can_lose_admin(self, acting_user_id: int, user_id: int) -> None:
        """Check the administrator guards for removing a user's admin access.

        Args:
            acting_user_id: User performing the change.
            user_id: User who would lose the Administrator role.

        Raises:
            SelfDemotionError: If the user is acting on their own account.
            LastAdministratorError: If no other administrator would remain.
        """
        if acting_user_id == user_id:
            raise SelfDemotionError("Cannot remove your own administrator role")

        if await self.count_administrators(lock=True) <= 1:
            raise LastAdministratorError("Cannot remove the last administrator")

    async def update_user_roles(
        self,
        acting_user_id: int,
        user_id: int,
        role_ids: list[int],
    ) -> list[Role]:
        """Replace a user's role set.

        The new set is written atomically (delete all, insert new) and is
        exactly the requested set, or nothing changes.

        Args:
            acting_user_id: Administrator performing the change.
            user_id: Target user.
            role_ids: Complete desired role set; duplicates are ignored.

        Returns:
            The roles now assigned to the user.

        Raises:
            AssignmentUserNotFoundError: If the target user does not exist.
            UnknownRoleError: If any role id does not exist.
            SelfDemotionError: If an administrator demotes themselves.
            LastAdministratorError: If the last administrator would be demoted.
        """
        wanted = list(dict.fromkeys(role_ids))

        user = await self._db.get(User, user_id)
        if user is None or user.deleted_at is not None:
            raise AssignmentUserNotFoundError(f"User {user_id} not found")

        roles: list[Role] = []
        if wanted:
            result = await self._db.execute(select(Role).where(Role.id.in_(wanted)))
            roles = list(result.scalars())
            found = {role.id for role in roles}
            missing = [role_id for role_id in wanted if role_id not in found]
            if missing:
                raise UnknownRoleError(
                    "Unknown role id(s): " + ", ".join(str(m) for m in missing),
                    details={"missing": missing},
                )

        try:
            admin_role = await self.get_administrator_role()
            if admin_role is not None and admin_role.id not in wanted:
                current = set(
                    (
                        await self._db.execute(
                            select(UserRole.role_id).where(UserRole.user_id == user_id)
                        )
                    ).scalars()
                )
                if admin_role.id in current:
                    await self.ensure_can_lose_admin(acting_user_id, user_id)

            await self._db.execute(delete(UserRole).where(UserRole.user_id == user_id))
            self._db.add_all([UserRole(user_id=user_id, role_id=role_id) for role_id in wanted])
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info(
            "User roles updated: user=%s roles=%s by=%s", user_id, wanted, acting_user_id
        )

        return sorted(roles, key=lambda role: role.name)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_role(self, role_id: int) -> Role:
        role = await self._db.get(Role, role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found")
        return role

    async def _ensure_name_available(self, name: str, exclude_id: int | None = None) -> None:
        stmt = select(Role.id).where(func.lower(Role.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Role.id != exclude_id)
        if await self._db.scalar(stmt.limit(1)) is not None:
            raise RoleNameExistsError(f"A role named '{name}' already exists")
