# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API version 1 routes.

This module aggregates all v1 API routers.
"""

from fastapi import APIRouter

from intervention_tracker.api.v1.interventions import router as interventions_router
from intervention_tracker.api.v1.jobs import router as jobs_router
from intervention_tracker.api.v1.navigation import router as navigation_router
from intervention_tracker.api.v1.programs import router as programs_router
from intervention_tracker.api.v1.roles import router as roles_router
from intervention_tracker.api.v1.schools import router as schools_router
from intervention_tracker.api.v1.settings import router as settings_router
from intervention_tracker.api.v1.students import router as students_router
from intervention_tracker.api.v1.tools import router as tools_router
from intervention_tracker.api.v1.users import router as users_router

router = APIRouter(prefix="/api/v1")

router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(roles_router, prefix="/roles", tags=["Roles"])
router.include_router(tools_router, prefix="/tools", tags=["Tools"])
router.include_router(schools_router, prefix="/schools", tags=["Schools"])
router.include_router(students_router, prefix="/students", tags=["Students"])
router.include_router(programs_router, prefix="/programs", tags=["Programs"])
router.include_router(interventions_router, prefix="/interventions", tags=["Interventions"])
router.include_router(navigation_router, prefix="/navigation", tags=["Navigation"])
router.include_router(settings_router, prefix="/settings", tags=["Settings"])
router.include_router(jobs_router, prefix="/jobs", tags=["Jobs"])

__all__ = ["router"]
