# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get authenticated users
- Get service instances

Example:
    @router.get("/enrollments/courses/{course_id}")
    async def get_enrollment(
        db: AsyncSession = Depends(get_db),
        current_user: CurrentUser = Depends(require_auth),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.middleware.auth import CurrentUser, get_current_user
from src.core.config import get_settings
from src.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)
from src.infrastructure.notifications import NotificationService, get_notification_service

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Initialize the database connection pool."""
    await init_database(get_settings())


async def close_db() -> None:
    """Close the database connection pool."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Yields:
        AsyncSession for the request.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> CurrentUser:
    """Require authenticated user.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser.

    Raises:
        HTTPException: If not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(request: Request) -> CurrentUser:
    """Require admin user (org_admin or admin).

    Args:
        request: HTTP request.

    Returns:
        CurrentUser.

    Raises:
        HTTPException: If not authenticated or not admin.
    """
    user = require_auth(request)
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def require_instructor_or_admin(request: Request) -> CurrentUser:
    """Require instructor or admin user.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser.

    Raises:
        HTTPException: If not instructor or admin.
    """
    user = require_auth(request)
    if not (user.is_instructor or user.is_admin):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Instructor or admin access required",
        )
    return user


# =========================================================================
# Service Dependencies
# =========================================================================


def get_notifications() -> NotificationService:
    """Get the shared notification service.

    Returns:
        NotificationService.
    """
    return get_notification_service()
