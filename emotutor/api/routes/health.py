# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints."""

import logging
import time
from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from emotutor.core.config import get_settings
from emotutor.infrastructure.database import check_database_connection
from emotutor.utils.datetime import utc_now

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
    database: str = Field(description="Database status: disabled, healthy or unhealthy")


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report service health.

    The service stays "healthy" without a database; with the database
    enabled and unreachable it reports "degraded".
    """
    settings = get_settings()

    if settings.database.enabled:
        database = "healthy" if await check_database_connection() else "unhealthy"
    else:
        database = "disabled"

    return HealthResponse(
        status="degraded" if database == "unhealthy" else "healthy",
        timestamp=utc_now(),
        version=settings.api.version,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        database=database,
    )
