# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models.

Importing this package registers every table on Base.metadata.
"""

from intervention_tracker.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
)
from intervention_tracker.infrastructure.database.models.document import Document
from intervention_tracker.infrastructure.database.models.intervention import (
    Intervention,
    InterventionAttachment,
    InterventionGoal,
    InterventionProgram,
    InterventionSession,
    InterventionTeamMember,
)
from intervention_tracker.infrastructure.database.models.navigation import NavigationItem
from intervention_tracker.infrastructure.database.models.school import School
from intervention_tracker.infrastructure.database.models.student import (
    Student,
    StudentGuardian,
)
from intervention_tracker.infrastructure.database.models.system import Job, Setting
from intervention_tracker.infrastructure.database.models.user import (
    Role,
    RoleTool,
    Tool,
    User,
    UserRole,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    "User",
    "Role",
    "UserRole",
    "Tool",
    "RoleTool",
    "School",
    "Student",
    "StudentGuardian",
    "InterventionProgram",
    "Intervention",
    "InterventionGoal",
    "InterventionSession",
    "InterventionTeamMember",
    "InterventionAttachment",
    "Document",
    "NavigationItem",
    "Setting",
    "Job",
]
