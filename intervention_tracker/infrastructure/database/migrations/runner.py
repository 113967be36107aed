# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Programmatic schema migrations.

Revisions are plain modules exposing upgrade() written with alembic.op.
They are applied in MIGRATIONS order inside one transaction per revision,
without the alembic CLI, a script directory or an env.py. The applied
revision is kept in the standard alembic_version table, so the alembic
CLI can take over later.

Example:
    from intervention_tracker.infrastructure.database.migrations.runner import run_migrations

    applied = await run_migrations(settings.db.url)
"""

import importlib
import logging
from types import ModuleType

from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Column, Connection, MetaData, String, Table, delete, insert
from sqlalchemy.ext.asyncio import create_async_engine

logger = logging.getLogger(__name__)

MIGRATIONS = [
    "001_initial_schema",
]

MIGRATIONS_PACKAGE = "intervention_tracker.infrastructure.database.migrations.versions"

_version_table = Table(
    "alembic_version",
    MetaData(),
    Column("version_num", String(128), primary_key=True),
)


class MigrationError(Exception):
    """Raised when a revision cannot be loaded or the stored version is unknown."""

    pass


def pending_migrations(current: str | None, target: str | None = None) -> list[str]:
    """Revisions to apply to move from current up to target.

    Args:
        current: Revision stored in the database, None for an empty database.
        target: Last revision to apply; None means the newest.

    Returns:
        Revisions in application order.

    Raises:
        MigrationError: If current or target is not a known revision.
    """
    for revision in (current, target):
        if revision is not None and revision not in MIGRATIONS:
            raise MigrationError(f"Unknown migration revision: {revision}")

    start = MIGRATIONS.index(current) + 1 if current else 0
    end = MIGRATIONS.index(target) + 1 if target else len(MIGRATIONS)
    return MIGRATIONS[start:end]


async def run_migrations(db_url: str, target: str | None = None) -> list[str]:
    """Apply pending revisions to the database at db_url.

    Args:
        db_url: Async database URL.
        target: Last revision to apply; None applies everything pending.

    Returns:
        Revisions that were applied, in order.
    """
    engine = create_async_engine(db_url)
    try:
        async with engine.connect() as conn:
            applied = await conn.run_sync(_upgrade, target)
    finally:
        await engine.dispose()

    if applied:
        logger.info("Applied migrations: %s", ", ".join(applied))
    else:
        logger.info("Database schema is up to date")
    return applied


def _load(revision: str) -> ModuleType:
    try:
        module = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{revision}")
    except ImportError as e:
        raise MigrationError(f"Cannot import migration {revision}: {e}") from e
    if not callable(getattr(module, "upgrade", None)):
        raise MigrationError(f"Migration {revision} has no upgrade() function")
    return module


def _upgrade(connection: Connection, target: str | None) -> list[str]:
    _version_table.create(connection, checkfirst=True)
    connection.commit()

    current = MigrationContext.configure(connection).get_current_revision()
    connection.commit()
    logger.info("Current migration version: %s", current or "None")

    applied = []
    for revision in pending_migrations(current, target):
        module = _load(revision)
        with connection.begin():
            context = MigrationContext.configure(connection)
            with Operations.context(context):
                module.upgrade()
            connection.execute(delete(_version_table))
            connection.execute(insert(_version_table).values(version_num=revision))
        applied.append(revision)
    return applied
