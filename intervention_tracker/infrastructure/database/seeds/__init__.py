# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package.

Seeds roles, tools, role/tool grants, intervention programs, navigation
and default settings.
"""

from intervention_tracker.infrastructure.database.seeds.initial import seed_database

__all__ = ["seed_database"]
