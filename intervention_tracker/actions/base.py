# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Action boundary shared by every entity action.

An action is the validated, permission-checked entry point for one
operation. It always returns an ActionState envelope: domain errors are
mapped to their category code, pydantic errors report the first issue,
database failures and unexpected errors report the action's generic
failure message. Nothing escapes as a raw exception.

Example:
    >>> @action("Failed to fetch students")
    ... async def get_students(ctx: ActionContext) -> ActionState[list[StudentListItem]]:
    ...     await ctx.require_tool(STUDENTS_TOOL)
    ...     return success("Students fetched successfully", await ...)
"""

import functools
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.core.config import Settings, get_settings
from intervention_tracker.core.errors import AppError, ErrorCode, UnauthorizedError
from intervention_tracker.domains.auth.access import AccessDeniedError, AccessService, Caller
from intervention_tracker.domains.user.service import UserService
from intervention_tracker.infrastructure.database.connection import DatabaseError
from intervention_tracker.models.common import ActionState, SessionClaims
from intervention_tracker.utils.logging import bind_context, clear_context, sanitize_for_logging

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

STUDENTS_TOOL = "students"
INTERVENTIONS_TOOL = "interventions"
PROGRAMS_TOOL = "programs"
SCHOOLS_TOOL = "schools"

_PYDANTIC_VALUE_ERROR_PREFIX = "Value error, "


@dataclass
class ActionContext:
    """Per-call state: the database session and the caller's claims.

    The caller is resolved on first use and kept as a Caller snapshot, so
    permission checks never go back to the session for the caller's roles.

    Attributes:
        db: Async database session.
        claims: Verified session claims, or None for anonymous calls.
        settings: Application settings.
    """

    db: AsyncSession
    claims: SessionClaims | None
    settings: Settings = field(default_factory=get_settings)
    _caller: Caller | None = field(default=None, init=False, repr=False)

    async def current_user(self) -> Caller:
        """Resolve the caller.

        Raises:
            UnauthorizedError: If there is no session or the account is deleted.
        """
        if self._caller is None:
            if self.claims is None:
                raise UnauthorizedError("Unauthorized")
            service = UserService(self.db, default_role=self.settings.auth.default_role)
            user = await service.resolve_current_user(self.claims)
            self._caller = Caller.from_user(user)
        return self._caller

    async def require_admin(
        self,
        message: str = "Only administrators can perform this action",
    ) -> Caller:
        """Resolve the caller and require the Administrator role.

        Raises:
            UnauthorizedError: If there is no session.
            AccessDeniedError: If the caller is not an administrator.
        """
        caller = await self.current_user()
        try:
            AccessService(self.db).require_admin(caller)
        except AccessDeniedError as e:
            raise AccessDeniedError(message) from e
        return caller

    async def require_tool(self, tool_identifier: str) -> Caller:
        """Resolve the caller and require a tool (administrators always pass).

        Raises:
            UnauthorizedError: If there is no session.
            AccessDeniedError: If the caller lacks the tool.
        """
        caller = await self.current_user()
        await AccessService(self.db).require_tool(caller, tool_identifier)
        return caller


def validate_input(model: type[M], data: M | Mapping[str, Any] | None) -> M:
    """Validate raw input against a schema; schema instances pass through."""
    if isinstance(data, model):
        return data
    return model.model_validate(data or {})


def success(message: str, data: T | None = None) -> ActionState[T]:
    """Build a success envelope."""
    return ActionState(is_success=True, message=message, data=data)


def failure(message: str, code: ErrorCode) -> ActionState[Any]:
    """Build a failure envelope."""
    return ActionState(is_success=False, message=message, code=code)


def validation_message(error: ValidationError) -> str:
    """Return the first validation issue's message."""
    errors = error.errors()
    if not errors:
        return "Invalid input"
    message = str(errors[0]["msg"])
    if message.startswith(_PYDANTIC_VALUE_ERROR_PREFIX):
        message = message[len(_PYDANTIC_VALUE_ERROR_PREFIX):]
    return message


def handle_error(error: Exception, failure_message: str) -> ActionState[Any]:
    """Map an exception raised inside an action to a failure envelope.

    Args:
        error: The raised exception.
        failure_message: Generic message for database and unexpected errors.

    Returns:
        Failure envelope with the matching error code.
    """
    if isinstance(error, ValidationError):
        return failure(validation_message(error), ErrorCode.VALIDATION)

    if isinstance(error, AppError):
        if error.code in (ErrorCode.DATABASE, ErrorCode.INTERNAL):
            logger.error("%s: %s", failure_message, error)
            return failure(failure_message, error.code)
        logger.info("Action rejected (%s): %s", error.code, error.message)
        return failure(error.message, error.code)

    if isinstance(error, (SQLAlchemyError, DatabaseError)):
        logger.error("%s: database error: %s", failure_message, error)
        return failure(failure_message, ErrorCode.DATABASE)

    logger.exception("%s: unexpected error", failure_message)
    return failure(failure_message, ErrorCode.INTERNAL)


def _loggable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {key: _loggable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_loggable(item) for item in value]
    return value


def action(
    failure_message: str,
) -> Callable[
    [Callable[..., Awaitable[ActionState[Any]]]],
    Callable[..., Awaitable[ActionState[Any]]],
]:
    """Wrap an action coroutine with logging and error mapping.

    The wrapped coroutine takes an ActionContext first. Each call gets a
    request id bound into the logging context, logs its sanitized
    arguments and elapsed time, and turns any exception into a failure
    envelope with the given message as fallback.

    Args:
        failure_message: Message reported for database and unexpected errors.

    Returns:
        Decorator for action coroutines.
    """

    def decorator(
        func: Callable[..., Awaitable[ActionState[Any]]],
    ) -> Callable[..., Awaitable[ActionState[Any]]]:
        @functools.wraps(func)
        async def wrapper(ctx: ActionContext, *args: Any, **kwargs: Any) -> ActionState[Any]:
            bind_context(request_id=uuid4().hex[:12], action=func.__name__)
            started = time.perf_counter()
            try:
                logger.debug(
                    "Action %s called with %s",
                    func.__name__,
                    sanitize_for_logging(_loggable({"args": args, "kwargs": kwargs})),
                )

                try:
                    state = await func(ctx, *args, **kwargs)
                except Exception as e:
                    await _rollback(ctx.db)
                    state = handle_error(e, failure_message)

                logger.info(
                    "Action %s finished: success=%s elapsed_ms=%.1f",
                    func.__name__,
                    state.is_success,
                    (time.perf_counter() - started) * 1000,
                )
                return state
            finally:
                clear_context()

        return wrapper

    return decorator


async def _rollback(db: AsyncSession) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError as e:
        logger.warning("Rollback after failed action raised: %s", str(e))
