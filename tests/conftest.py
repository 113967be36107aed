# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

Service and action tests run against an in-memory SQLite database created
from the ORM metadata and seeded with the reference data before every test.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key-for-testing-only")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from intervention_tracker.actions.base import ActionContext  # noqa: E402
from intervention_tracker.core.config import Settings, clear_settings_cache, get_settings  # noqa: E402
from intervention_tracker.infrastructure.database.models import (  # noqa: E402
    Base,
    Role,
    Student,
    User,
    UserRole,
)
from intervention_tracker.infrastructure.database.seeds.initial import seed_database  # noqa: E402
from intervention_tracker.models.common import SessionClaims  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses SQLite)"
    )


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Provide freshly loaded test settings."""
    clear_settings_cache()
    return get_settings()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with every table."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a seeded session configured like the application's."""
    sessionmaker = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with sessionmaker() as session:
        await seed_database(session)
        yield session


async def insert_user(
    session: AsyncSession,
    sub: str,
    email: str,
    role_names: list[str],
    first_name: str = "Test",
    last_name: str = "User",
) -> int:
    """Insert a user holding the named roles and return its id."""
    user = User(cognito_sub=sub, email=email, first_name=first_name, last_name=last_name)
    session.add(user)
    await session.flush()

    for name in role_names:
        role = await session.scalar(select(Role).where(Role.name == name))
        session.add(UserRole(user_id=user.id, role_id=role.id))

    await session.commit()
    return user.id


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[int]]:
    """Provide a helper that inserts users holding the named roles."""

    async def factory(sub: str, email: str, role_names: list[str], **names: str) -> int:
        return await insert_user(db_session, sub, email, role_names, **names)

    return factory


@pytest.fixture
async def admin_id(db_session: AsyncSession) -> int:
    """Create an administrator account."""
    return await insert_user(
        db_session, "admin-sub", "admin@school.test", ["Administrator"], "Ada", "Admin"
    )


@pytest.fixture
async def teacher_id(db_session: AsyncSession) -> int:
    """Create a teacher account."""
    return await insert_user(
        db_session, "teacher-sub", "teacher@school.test", ["Teacher"], "Tom", "Teacher"
    )


@pytest.fixture
async def nurse_id(db_session: AsyncSession) -> int:
    """Create a nurse account (no programs tool)."""
    return await insert_user(
        db_session, "nurse-sub", "nurse@school.test", ["Nurse"], "Nina", "Nurse"
    )


@pytest.fixture
async def principal_id(db_session: AsyncSession) -> int:
    """Create a principal account (a role with no tool grants)."""
    return await insert_user(
        db_session, "principal-sub", "principal@school.test", ["Principal"], "Pat", "Principal"
    )


@pytest.fixture
def admin_claims() -> SessionClaims:
    return SessionClaims(sub="admin-sub", email="admin@school.test")


@pytest.fixture
def teacher_claims() -> SessionClaims:
    return SessionClaims(sub="teacher-sub", email="teacher@school.test")


@pytest.fixture
def nurse_claims() -> SessionClaims:
    return SessionClaims(sub="nurse-sub", email="nurse@school.test")


@pytest.fixture
def principal_claims() -> SessionClaims:
    return SessionClaims(sub="principal-sub", email="principal@school.test")


@pytest.fixture
def make_ctx(
    db_session: AsyncSession,
    settings: Settings,
) -> Callable[[SessionClaims | None], ActionContext]:
    """Build a fresh ActionContext for the given caller."""

    def factory(claims: SessionClaims | None) -> ActionContext:
        return ActionContext(db=db_session, claims=claims, settings=settings)

    return factory


@pytest.fixture
async def student_id(db_session: AsyncSession, admin_id: int) -> int:
    """Insert an active student and return its id."""
    student = Student(
        student_id="S-1001",
        first_name="Maya",
        last_name="Lopez",
        grade="3",
        status="active",
        created_by=admin_id,
        updated_by=admin_id,
    )
    db_session.add(student)
    await db_session.commit()
    return student.id
