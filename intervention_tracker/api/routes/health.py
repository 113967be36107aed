# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from intervention_tracker import __version__
from intervention_tracker.core.config import get_settings
from intervention_tracker.infrastructure.database.connection import check_database_connection

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    ready: bool = Field(description="Whether the service is ready")
    database: bool = Field(description="Whether the database answered")
    latency_ms: float | None = Field(None, description="Database round trip in ms")


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report that the process is up."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check() -> JSONResponse:
    """Report whether the database is reachable; 503 when it is not."""
    start = time.time()
    database_ok = await check_database_connection()
    latency = round((time.time() - start) * 1000, 2)

    if not database_ok:
        logger.error("Readiness check failed: database unreachable")

    body = ReadinessResponse(
        ready=database_ok,
        database=database_ok,
        latency_ms=latency if database_ok else None,
    )
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content=body.model_dump(),
    )
