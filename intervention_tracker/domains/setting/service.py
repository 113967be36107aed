# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Setting service for administrator-managed configuration.

Settings are key/value rows. Secret values are masked in every listing and
are only returned in clear through get_actual_value(). Internal callers
read values with get_setting(), which falls back to the process
environment when the key is not stored.

Example:
    >>> token = await SettingService(db).get_setting("GITHUB_ISSUE_TOKEN")
"""

import logging
import os

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.core.errors import NotFoundError
from intervention_tracker.infrastructure.database.models import Setting
from intervention_tracker.infrastructure.database.sql import build_update_query, execute_sql
from intervention_tracker.models.setting import (
    SECRET_MASK,
    SettingResponse,
    SettingUpsertRequest,
)

logger = logging.getLogger(__name__)


class SettingServiceError(Exception):
    """Base exception for setting service errors."""

    pass


class SettingNotFoundError(SettingServiceError, NotFoundError):
    """Raised when a setting is not found."""

    pass


def to_masked_response(row: Setting | dict) -> SettingResponse:
    """Build a response with the value masked for secret settings.

    Args:
        row: ORM setting or a returned row mapping.

    Returns:
        Response whose value is SECRET_MASK when the setting is secret and set.
    """
    if isinstance(row, dict):
        data = row
    else:
        data = {column.key: getattr(row, column.key) for column in Setting.__table__.c}
    value = data["value"] or ""
    is_secret = bool(data["is_secret"])
    return SettingResponse(
        id=data["id"],
        key=data["key"],
        value=SECRET_MASK if is_secret and value else value,
        description=data["description"],
        category=data["category"],
        is_secret=is_secret,
        has_value=bool(value),
        created_at=data["created_at"],
        updated_at=data["updated_at"],
    )


class SettingService:
    """Service for reading and managing settings.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the setting service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def list_settings(self) -> list[SettingResponse]:
        """List settings ordered by category and key, secrets masked."""
        result = await self._db.execute(
            select(Setting)
            .order_by(Setting.category, Setting.key)
            .execution_options(populate_existing=True)
        )
        return [to_masked_response(setting) for setting in result.scalars()]

    async def upsert_setting(self, request: SettingUpsertRequest) -> SettingResponse:
        """Create a setting or update the existing one with the same key.

        Saving a secret with an empty value keeps the stored value, so an
        edit form that never received the secret does not erase it.

        Args:
            request: Setting to store.

        Returns:
            Stored setting, secret value masked.
        """
        try:
            existing = await self._db.scalar(select(Setting).where(Setting.key == request.key))

            if existing is None:
                setting = Setting(
                    key=request.key,
                    value=request.value,
                    description=request.description or None,
                    category=request.category or None,
                    is_secret=request.is_secret,
                )
                self._db.add(setting)
                await self._db.commit()
                await self._db.refresh(setting)
                logger.info("Setting created: %s", request.key)
                return to_masked_response(setting)

            fields = {
                "description": request.description,
                "category": request.category,
                "is_secret": request.is_secret,
            }
            if request.value or not (request.is_secret or existing.is_secret):
                fields["value"] = request.value

            rows = await execute_sql(
                self._db, build_update_query(Setting.__table__, existing.id, fields)
            )
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Setting updated: %s (value changed=%s)", request.key, "value" in fields)

        return to_masked_response(rows[0])

    async def delete_setting(self, key: str) -> None:
        """Delete a setting by key.

        Raises:
            SettingNotFoundError: If setting not found.
        """
        setting = await self._get_by_key(key)

        await self._db.delete(setting)
        await self._db.commit()

        logger.info("Setting deleted: %s", key)

    async def get_actual_value(self, key: str) -> str:
        """Get the unmasked stored value of a setting.

        Raises:
            SettingNotFoundError: If setting not found.
        """
        setting = await self._get_by_key(key)
        return setting.value

    async def get_setting(self, key: str, default: str | None = None) -> str | None:
        """Read a setting for internal use.

        Args:
            key: Setting key.
            default: Returned when neither the database nor the environment
                has a value.

        Returns:
            Stored value, else the environment variable of the same name,
            else default.
        """
        value = await self._db.scalar(select(Setting.value).where(Setting.key == key))
        if value:
            return value
        return os.environ.get(key) or default

    async def get_required_setting(self, key: str) -> str:
        """Read a setting that must be configured.

        Raises:
            SettingNotFoundError: If no value is stored or set in the environment.
        """
        value = await self.get_setting(key)
        if not value:
            raise SettingNotFoundError(f"Required setting {key} is not configured")
        return value

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_by_key(self, key: str) -> Setting:
        setting = await self._db.scalar(
            select(Setting).where(Setting.key == key).execution_options(populate_existing=True)
        )
        if setting is None:
            raise SettingNotFoundError(f"Setting {key} not found")
        return setting
