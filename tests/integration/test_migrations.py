# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the migration runner and seeds on a migrated schema."""

import pytest
from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from intervention_tracker.infrastructure.database.migrations.runner import (
    MIGRATIONS,
    MigrationError,
    pending_migrations,
    run_migrations,
)
from intervention_tracker.infrastructure.database.models import Role, Tool
from intervention_tracker.infrastructure.database.seeds import seed_database

pytestmark = pytest.mark.integration


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'migrations.db'}"


class TestPendingMigrations:
    """Tests for revision selection."""

    def test_empty_database_gets_everything(self) -> None:
        assert pending_migrations(None) == MIGRATIONS

    def test_latest_has_nothing_pending(self) -> None:
        assert pending_migrations(MIGRATIONS[-1]) == []

    def test_unknown_revision(self) -> None:
        with pytest.raises(MigrationError, match="Unknown migration revision"):
            pending_migrations("999_missing")


class TestRunMigrations:
    """Tests for applying migrations to a fresh database."""

    @pytest.mark.asyncio
    async def test_applies_once(self, db_url) -> None:
        first = await run_migrations(db_url)
        second = await run_migrations(db_url)

        assert first == MIGRATIONS
        assert second == []

    @pytest.mark.asyncio
    async def test_creates_schema_that_seeds(self, db_url) -> None:
        await run_migrations(db_url)

        engine = create_async_engine(db_url)
        try:
            async with engine.connect() as conn:
                tables = await conn.run_sync(lambda sync: inspect(sync).get_table_names())

            sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
            async with sessionmaker() as session:
                await seed_database(session)
                roles = await session.scalar(select(func.count()).select_from(Role))
                tools = await session.scalar(select(func.count()).select_from(Tool))
        finally:
            await engine.dispose()

        assert {"users", "interventions", "settings", "alembic_version"} <= set(tables)
        assert roles == 6
        assert tools == 8
