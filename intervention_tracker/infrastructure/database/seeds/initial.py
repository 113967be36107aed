# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial seed data.

Every seeder is idempotent: rows that already exist (matched on their
natural key) are left untouched, so seeding can run on every deploy.
"""

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from intervention_tracker.infrastructure.database.models import (
    InterventionProgram,
    NavigationItem,
    Role,
    RoleTool,
    School,
    Setting,
    Tool,
)

logger = logging.getLogger(__name__)

ROLES = [
    ("Administrator", "Full system access with all permissions"),
    ("Teacher", "Regular classroom teacher"),
    ("Counselor", "School counselor or social worker"),
    ("Specialist", "Intervention specialist or resource teacher"),
    ("Nurse", "School nurse"),
    ("Principal", "School principal with administrative access"),
]

TOOLS = [
    ("students", "Student Management", "Create, view, and manage student records"),
    ("interventions", "Intervention Tracking", "Create and manage student interventions"),
    ("programs", "Program Management", "Manage intervention program templates"),
    ("reports", "Reports & Analytics", "View intervention reports and analytics"),
    ("schools", "School Management", "Manage school information"),
    ("calendar", "Calendar", "View and manage intervention schedules"),
    ("settings", "Settings", "Manage system settings"),
    ("users", "User Management", "Manage users and roles"),
]

# None grants every tool.
ROLE_TOOL_GRANTS: dict[str, list[str] | None] = {
    "Administrator": None,
    "Teacher": ["students", "interventions", "calendar", "reports"],
    "Counselor": ["students", "interventions", "programs", "calendar", "reports"],
    "Specialist": ["students", "interventions", "programs", "calendar", "reports"],
    "Nurse": ["students", "interventions", "calendar"],
}

PROGRAMS = [
    ("Reading Recovery", "Intensive reading intervention for struggling readers", "academic", 90),
    ("Math Foundations", "Basic math skills reinforcement program", "academic", 60),
    ("Behavior Check-In/Check-Out", "Daily behavior monitoring and support", "behavioral", 180),
    ("Social Skills Group", "Small group social skills instruction", "social_emotional", 45),
    ("Attendance Improvement Plan", "Structured support for chronic absenteeism", "attendance", 30),
    ("Peer Tutoring", "Student peer support program", "academic", 60),
    ("Homework Club", "After-school homework support", "academic", 180),
    ("Anger Management", "Individual or group anger management sessions", "behavioral", 45),
    ("Friendship Group", "Social skills development for peer relationships", "social_emotional", 30),
    ("Study Skills Workshop", "Organization and study skills training", "academic", 30),
]

NAVIGATION = [
    ("Students", "IconSchoolBell", "/students", "Manage student records", "students"),
    ("Interventions", "IconFirstAidKit", "/interventions", "Track and manage interventions", "interventions"),
    ("Reports", "IconChartPie", "/reports", "View intervention reports", "reports"),
    ("Programs", "IconBook", "/programs", "Manage intervention programs", "programs"),
    ("Calendar", "IconCalendarEvent", "/calendar", "Intervention calendar", "calendar"),
    ("Schools", "IconBuilding", "/schools", "Manage schools", "schools"),
    ("Settings", "IconAdjustments", "/settings", "System settings", "settings"),
    ("Users", "IconUsers", "/users", "User management", "users"),
]

SETTINGS = [
    # key, value, category, description, is_secret
    ("app_name", "Intervention Tracker", "general", "Application name", False),
    ("app_description", "K-12 Intervention Tracking System", "general", "Application description", False),
    ("default_school_year", "2024-2025", "academic", "Current school year", False),
    ("intervention_reminder_days", "7", "notifications", "Days before intervention review reminder", False),
    ("session_default_duration", "30", "interventions", "Default intervention session duration in minutes", False),
    ("AWS_REGION", "us-east-1", "storage", "AWS region for document storage", False),
    ("S3_BUCKET", "", "storage", "Bucket name for document storage", False),
    ("GITHUB_ISSUE_TOKEN", "", "external_services", "GitHub personal access token for creating issues", True),
]

SAMPLE_SCHOOLS = [
    ("Sample Elementary School", "Sample School District", "123 School St", "555-0100"),
    ("Sample Middle School", "Sample School District", "456 Education Ave", "555-0200"),
    ("Sample High School", "Sample School District", "789 Learning Blvd", "555-0300"),
]


async def seed_roles(session: AsyncSession) -> dict[str, Role]:
    """Seed system roles.

    Returns:
        Mapping of role name to role.
    """
    existing = {role.name: role for role in (await session.execute(select(Role))).scalars()}
    for name, description in ROLES:
        if name not in existing:
            role = Role(name=name, description=description, is_system=True)
            session.add(role)
            existing[name] = role
    await session.flush()
    logger.info("Seeded roles: %d total", len(existing))
    return existing


async def seed_tools(session: AsyncSession) -> dict[str, Tool]:
    """Seed tools.

    Returns:
        Mapping of tool identifier to tool.
    """
    existing = {tool.identifier: tool for tool in (await session.execute(select(Tool))).scalars()}
    for order, (identifier, name, description) in enumerate(TOOLS, start=1):
        if identifier not in existing:
            tool = Tool(
                identifier=identifier,
                name=name,
                description=description,
                url=f"/{identifier}",
                is_active=True,
                display_order=order,
            )
            session.add(tool)
            existing[identifier] = tool
    await session.flush()
    logger.info("Seeded tools: %d total", len(existing))
    return existing


async def seed_role_tools(
    session: AsyncSession,
    roles: dict[str, Role],
    tools: dict[str, Tool],
) -> int:
    """Grant tools to the seeded roles.

    Returns:
        Number of grants created.
    """
    result = await session.execute(select(RoleTool.role_id, RoleTool.tool_id))
    granted = {(row.role_id, row.tool_id) for row in result}

    created = 0
    for role_name, identifiers in ROLE_TOOL_GRANTS.items():
        role = roles.get(role_name)
        if role is None:
            continue
        for identifier in identifiers or list(tools):
            tool = tools[identifier]
            if (role.id, tool.id) not in granted:
                session.add(RoleTool(role_id=role.id, tool_id=tool.id))
                granted.add((role.id, tool.id))
                created += 1
    await session.flush()
    logger.info("Seeded role tool grants: %d new", created)
    return created


async def seed_programs(session: AsyncSession) -> int:
    """Seed intervention programs when none exist.

    Returns:
        Number of programs created.
    """
    count = (await session.execute(select(func.count(InterventionProgram.id)))).scalar() or 0
    if count:
        return 0
    for name, description, program_type, duration_days in PROGRAMS:
        session.add(
            InterventionProgram(
                name=name,
                description=description,
                type=program_type,
                duration_days=duration_days,
                is_active=True,
            )
        )
    await session.flush()
    logger.info("Seeded %d intervention programs", len(PROGRAMS))
    return len(PROGRAMS)


async def seed_navigation(session: AsyncSession, tools: dict[str, Tool]) -> int:
    """Seed top-level navigation linked to tools.

    Returns:
        Number of navigation items created.
    """
    result = await session.execute(select(NavigationItem.link))
    links = {row.link for row in result}

    created = 0
    for position, (label, icon, link, description, identifier) in enumerate(NAVIGATION, start=1):
        if link in links:
            continue
        tool = tools.get(identifier)
        session.add(
            NavigationItem(
                label=label,
                icon=icon,
                link=link,
                position=position,
                is_active=True,
                description=description,
                type="link",
                tool_id=tool.id if tool else None,
                tool_identifier=identifier,
            )
        )
        created += 1
    await session.flush()
    logger.info("Seeded %d navigation items", created)
    return created


async def seed_settings(session: AsyncSession) -> int:
    """Seed default settings.

    Returns:
        Number of settings created.
    """
    result = await session.execute(select(Setting.key))
    keys = {row.key for row in result}

    created = 0
    for key, value, category, description, is_secret in SETTINGS:
        if key in keys:
            continue
        session.add(
            Setting(
                key=key,
                value=value,
                category=category,
                description=description,
                is_secret=is_secret,
            )
        )
        created += 1
    await session.flush()
    logger.info("Seeded %d settings", created)
    return created


async def seed_sample_schools(session: AsyncSession) -> int:
    """Seed sample schools when none exist.

    Returns:
        Number of schools created.
    """
    count = (await session.execute(select(func.count(School.id)))).scalar() or 0
    if count:
        return 0
    for name, district, address, phone in SAMPLE_SCHOOLS:
        session.add(School(name=name, district=district, address=address, phone=phone))
    await session.flush()
    return len(SAMPLE_SCHOOLS)


async def seed_database(session: AsyncSession, include_sample_data: bool = False) -> dict:
    """Seed the database with reference data.

    Args:
        session: Database session.
        include_sample_data: Whether to add sample schools.

    Returns:
        Dictionary with seeded roles and tools plus creation counts.
    """
    logger.info("Seeding database...")

    roles = await seed_roles(session)
    tools = await seed_tools(session)
    grants = await seed_role_tools(session, roles, tools)
    programs = await seed_programs(session)
    navigation = await seed_navigation(session, tools)
    settings = await seed_settings(session)

    result = {
        "roles": roles,
        "tools": tools,
        "role_tools": grants,
        "programs": programs,
        "navigation": navigation,
        "settings": settings,
    }

    if include_sample_data:
        result["schools"] = await seed_sample_schools(session)

    await session.commit()

    logger.info("Database seeding complete")

    return result


if __name__ == "__main__":
    from intervention_tracker.core.config import get_settings
    from intervention_tracker.infrastructure.database.connection import (
        close_database,
        get_session,
        init_database,
    )
    from intervention_tracker.infrastructure.database.migrations.runner import run_migrations

    async def main():
        settings = get_settings()
        await run_migrations(settings.db.url)
        await init_database(settings)
        try:
            async with get_session() as session:
                await seed_database(session, include_sample_data=True)
        finally:
            await close_database()

    asyncio.run(main())
