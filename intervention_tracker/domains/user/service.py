# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service for account resolution and management.

This module provides the UserService that handles:
- Resolving the caller's account from session claims
- Listing users for selection and with their roles
- Soft deleting accounts under the administrator guards

Example:
    >>> service = UserService(db, default_role="Teacher")
    >>> user = await service.resolve_current_user(claims)
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from intervention_tracker.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from intervention_tracker.domains.auth.access import is_administrator
from intervention_tracker.domains.role.service import RoleService
from intervention_tracker.infrastructure.database.models import Role, User, UserRole
from intervention_tracker.models.common import SessionClaims
from intervention_tracker.models.user import UserResponse, UserSummary
from intervention_tracker.utils.datetime import utc_now

logger = logging.getLogger(__name__)

PLACEHOLDER_EMAIL_DOMAIN = "cognito.local"


class UserServiceError(Exception):
    """Base exception for user service errors."""

    pass


class UserNotFoundError(UserServiceError, NotFoundError):
    """Raised when a user is not found."""

    pass


class UserDeactivatedError(UserServiceError, UnauthorizedError):
    """Raised when a soft-deleted account signs in."""

    pass


class SelfDeletionError(UserServiceError, ForbiddenError):
    """Raised when a user tries to delete their own account."""

    pass


class UserService:
    """Service for managing user accounts.

    Attributes:
        _db: Async database session.
        _default_role: Role granted to accounts created on first sign-in.
    """

    def __init__(self, db: AsyncSession, default_role: str = "Teacher") -> None:
        """Initialize the user service.

        Args:
            db: Async database session.
            default_role: Role name granted to new accounts.
        """
        self._db = db
        self._default_role = default_role

    async def resolve_current_user(self, claims: SessionClaims) -> User:
        """Find or provision the account behind a session.

        Lookup order is identity subject, then email (relinking the
        subject), then a new account that gets the default role.

        Args:
            claims: Verified session claims.

        Returns:
            User with roles loaded.

        Raises:
            UserDeactivatedError: If the account was soft deleted.
        """
        user = await self._get_by_sub(claims.sub)

        if user is not None and user.deleted_at is not None:
            logger.warning("Sign-in attempt for deleted user %s", user.id)
            raise UserDeactivatedError("Unauthorized")

        if user is None and claims.email:
            user = await self._get_by_email(claims.email)
            if user is not None:
                logger.info("Relinking user %s to new identity subject", user.id)
                user.cognito_sub = claims.sub
                user.updated_at = utc_now()

        if user is None:
            user = await self._create_from_claims(claims)

        user.last_sign_in_at = utc_now()
        await self._db.commit()

        return await self.get_user(user.id)

    async def get_user(self, user_id: int) -> User:
        """Get a non-deleted user with roles loaded.

        Raises:
            UserNotFoundError: If user not found or deleted.
        """
        stmt = (
            select(User)
            .options(selectinload(User.roles))
            .where(User.id == user_id, User.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )
        user = await self._db.scalar(stmt)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    async def list_users_for_select(self) -> list[UserSummary]:
        """List active users ordered by last name, first name."""
        stmt = (
            select(User)
            .where(User.deleted_at.is_(None))
            .order_by(User.last_name, User.first_name)
        )
        result = await self._db.execute(stmt)
        return [UserSummary.model_validate(user) for user in result.scalars()]

    async def list_users_with_roles(self) -> list[UserResponse]:
        """List active users with their roles, ordered by last, first name."""
        stmt = (
            select(User)
            .options(selectinload(User.roles))
            .where(User.deleted_at.is_(None))
            .order_by(User.last_name, User.first_name)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        return [UserResponse.model_validate(user) for user in result.scalars()]

    async def delete_user(self, acting_user_id: int, user_id: int) -> None:
        """Soft delete a user account.

        Args:
            acting_user_id: Administrator performing the deletion.
            user_id: Account to delete.

        Raises:
            UserNotFoundError: If user not found.
            SelfDeletionError: If the caller targets their own account.
            LastAdministratorError: If the account is the last administrator.
        """
        if acting_user_id == user_id:
            raise SelfDeletionError("Cannot delete your own account")

        user = await self.get_user(user_id)

        try:
            if is_administrator(user):
                await RoleService(self._db).ensure_can_lose_admin(acting_user_id, user_id)

            user.deleted_at = utc_now()
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("User soft deleted: %s by %s", user_id, acting_user_id)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_by_sub(self, sub: str) -> User | None:
        return await self._db.scalar(select(User).where(User.cognito_sub == sub))

    async def _get_by_email(self, email: str) -> User | None:
        stmt = (
            select(User)
            .where(func.lower(User.email) == email.lower(), User.deleted_at.is_(None))
            .order_by(User.id)
            .limit(1)
        )
        return await self._db.scalar(stmt)

    async def _create_from_claims(self, claims: SessionClaims) -> User:
        email = claims.email or f"{claims.sub}@{PLACEHOLDER_EMAIL_DOMAIN}"
        first_name = claims.given_name or (claims.email.split("@")[0] if claims.email else "User")

        user = User(
            cognito_sub=claims.sub,
            email=email,
            first_name=first_name,
            last_name=claims.family_name,
        )
        self._db.add(user)
        await self._db.flush()

        role = await self._db.scalar(
            select(Role).where(func.lower(Role.name) == self._default_role.lower()).limit(1)
        )
        if role is not None:
            self._db.add(UserRole(user_id=user.id, role_id=role.id))
            await self._db.flush()
        else:
            logger.warning("Default role %s not found; new user has no roles", self._default_role)

        logger.info("User created from session: %s (%s)", user.id, email)

        return user
