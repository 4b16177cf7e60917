# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Compliance API endpoints.

This module provides compliance reporting endpoints:
- GET /summary - Organization compliance summary (admin)
- GET /users/{user_id} - A user's compliance records (admin or self)

Statuses are evaluated at request time.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.compliance.engine import ComplianceError
from src.domains.compliance.service import ComplianceService
from src.models.compliance import ComplianceSummaryResponse, UserComplianceResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/summary",
    response_model=ComplianceSummaryResponse,
    summary="Compliance summary",
    description="Compliance across the organization's mandatory courses. Requires admin access.",
)
async def get_summary(
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ComplianceSummaryResponse:
    """Get the compliance summary for the admin's organization."""
    if not current_user.organization_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organization access required",
        )

    service = ComplianceService(db)

    try:
        return await service.get_summary(current_user.organization_id)
    except ComplianceError as e:
        logger.error("Compliance summary failed: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Organization has enrollments in an invalid state",
        )


@router.get(
    "/users/{user_id}",
    response_model=UserComplianceResponse,
    summary="User compliance",
    description="A user's enrollments in mandatory or recertifying courses.",
)
async def get_user_detail(
    user_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> UserComplianceResponse:
    """Get a user's compliance records.

    Users may read their own records; admins may read anyone's.
    """
    if user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )

    service = ComplianceService(db)

    try:
        return await service.get_user_detail(user_id)
    except ComplianceError as e:
        logger.error("User compliance detail failed: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User has enrollments in an invalid state",
        )
