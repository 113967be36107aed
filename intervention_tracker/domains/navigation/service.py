# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Navigation service for the sidebar menu.

Items are read and written through parameterized SQL. The per-user menu
keeps active items whose tool and role requirements the user meets; an
item under a hidden parent is hidden too.

Example:
    >>> service = NavigationService(db)
    >>> menu = await service.list_for_user(user)
"""

import logging

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.core.errors import NotFoundError, ValidationFailedError
from intervention_tracker.domains.auth.access import (
    AccessService,
    Caller,
    has_role,
    is_administrator,
)
from intervention_tracker.infrastructure.database.models import NavigationItem, Tool
from intervention_tracker.infrastructure.database.sql import build_update_query, execute_sql
from intervention_tracker.models.common import blank_fields_to_none
from intervention_tracker.models.navigation import (
    NavigationItemCreateRequest,
    NavigationItemResponse,
    NavigationItemUpdateRequest,
)

logger = logging.getLogger(__name__)

_ITEMS = NavigationItem.__table__

_LIST_SQL = "SELECT * FROM navigation_items ORDER BY position, id"

_GET_SQL = "SELECT * FROM navigation_items WHERE id = :id"

_DETACH_CHILDREN_SQL = "UPDATE navigation_items SET parent_id = NULL WHERE parent_id = :id"

_DELETE_SQL = "DELETE FROM navigation_items WHERE id = :id"


class NavigationServiceError(Exception):
    """Base exception for navigation service errors."""

    pass


class NavigationItemNotFoundError(NavigationServiceError, NotFoundError):
    """Raised when a navigation item is not found."""

    pass


class NavigationItemValidationError(NavigationServiceError, ValidationFailedError):
    """Raised when a parent or tool reference is invalid."""

    pass


class NavigationService:
    """Service for managing navigation items.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the navigation service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def list_items(self) -> list[NavigationItemResponse]:
        """List every navigation item ordered by position."""
        rows = await execute_sql(self._db, _LIST_SQL, columns=list(_ITEMS.c))
        return [NavigationItemResponse.model_validate(row) for row in rows]

    async def list_for_user(self, user: Caller) -> list[NavigationItemResponse]:
        """List the navigation items visible to a user.

        An item is visible when it is active, the user has its tool (if
        any), holds its required role (if any), and its parent is visible.
        Administrators pass the tool check.

        Args:
            user: The signed-in caller.

        Returns:
            Visible items ordered by position.
        """
        items = await self.list_items()
        tools = set(await AccessService(self._db).get_user_tools(user.id))
        admin = is_administrator(user)

        by_id = {item.id: item for item in items}
        visible: dict[int, bool] = {}

        def is_visible(item: NavigationItemResponse, seen: frozenset[int]) -> bool:
            if item.id in visible:
                return visible[item.id]
            result = item.is_active
            if result and item.tool_identifier and not admin:
                result = item.tool_identifier in tools
            if result and item.requires_role:
                result = has_role(user, item.requires_role)
            if result and item.parent_id is not None:
                parent = by_id.get(item.parent_id)
                # A cycle or a missing parent hides the item.
                result = (
                    parent is not None
                    and parent.id not in seen
                    and is_visible(parent, seen | {item.id})
                )
            visible[item.id] = result
            return result

        return [item for item in items if is_visible(item, frozenset())]

    async def get_item(self, item_id: int) -> NavigationItemResponse:
        """Get a navigation item by ID.

        Raises:
            NavigationItemNotFoundError: If item not found.
        """
        rows = await execute_sql(self._db, _GET_SQL, {"id": item_id}, columns=list(_ITEMS.c))
        if not rows:
            raise NavigationItemNotFoundError(f"Navigation item {item_id} not found")
        return NavigationItemResponse.model_validate(rows[0])

    async def create_item(self, request: NavigationItemCreateRequest) -> NavigationItemResponse:
        """Create a navigation item.

        When only tool_id is given, tool_identifier is filled from the tool.

        Raises:
            NavigationItemValidationError: If the parent or tool does not exist.
        """
        values = blank_fields_to_none(request.model_dump(mode="json"))
        values["label"] = request.label
        values["icon"] = request.icon

        if values["parent_id"] is not None:
            await self._ensure_parent(values["parent_id"])
        if values["tool_id"] is not None:
            tool = await self._get_tool(values["tool_id"])
            values["tool_identifier"] = values["tool_identifier"] or tool.identifier

        rows = await execute_sql(self._db, insert(_ITEMS).values(values).returning(*_ITEMS.c))
        await self._db.commit()

        item = NavigationItemResponse.model_validate(rows[0])
        logger.info("Navigation item created: %s (%s)", item.id, item.label)

        return item

    async def update_item(
        self,
        item_id: int,
        request: NavigationItemUpdateRequest,
    ) -> NavigationItemResponse:
        """Update a navigation item.

        Fields sent as null are left unchanged; empty strings clear the
        column.

        Raises:
            NavigationItemNotFoundError: If item not found.
            NavigationItemValidationError: If the parent or tool reference is invalid.
            ValidationFailedError: If no field would change.
        """
        fields = {
            key: value
            for key, value in request.model_dump(mode="json", exclude_unset=True).items()
            if value is not None
        }

        parent_id = fields.get("parent_id")
        if parent_id is not None:
            if parent_id == item_id:
                raise NavigationItemValidationError("An item cannot be its own parent")
            await self._ensure_parent(parent_id)
        if fields.get("tool_id") is not None:
            await self._get_tool(fields["tool_id"])

        rows = await execute_sql(self._db, build_update_query(_ITEMS, item_id, fields))
        if not rows:
            await self._db.rollback()
            raise NavigationItemNotFoundError(f"Navigation item {item_id} not found")
        await self._db.commit()

        logger.info("Navigation item updated: %s (fields=%s)", item_id, sorted(fields))

        return NavigationItemResponse.model_validate(rows[0])

    async def delete_item(self, item_id: int) -> None:
        """Delete a navigation item; its children move to the top level.

        Raises:
            NavigationItemNotFoundError: If item not found.
        """
        await self.get_item(item_id)

        try:
            await execute_sql(self._db, _DETACH_CHILDREN_SQL, {"id": item_id})
            await execute_sql(self._db, _DELETE_SQL, {"id": item_id})
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Navigation item deleted: %s", item_id)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _ensure_parent(self, parent_id: int) -> None:
        rows = await execute_sql(self._db, _GET_SQL, {"id": parent_id})
        if not rows:
            raise NavigationItemValidationError(f"Parent item {parent_id} not found")

    async def _get_tool(self, tool_id: int) -> Tool:
        tool = await self._db.get(Tool, tool_id)
        if tool is None:
            raise NavigationItemValidationError(f"Tool {tool_id} not found")
        return tool
