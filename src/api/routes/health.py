# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides the health endpoint for the API.
"""

import time
import logging
from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from src import __version__
from src.core.config import get_settings
from src.infrastructure.database.connection import check_database_connection
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    checked_at: datetime = Field(description="When health was checked")
    database: ComponentHealth


async def check_database() -> ComponentHealth:
    """Check PostgreSQL database connection."""
    start = time.time()
    reachable = await check_database_connection()
    latency = (time.time() - start) * 1000

    if not reachable:
        logger.error("Database health check failed")
        return ComponentHealth(status="unhealthy")

    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check if the API is healthy.

    Returns:
        HealthResponse with database status.
    """
    settings = get_settings()
    db_health = await check_database()

    return HealthResponse(
        status="healthy" if db_health.status == "healthy" else "degraded",
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        checked_at=utc_now(),
        database=db_health,
    )
