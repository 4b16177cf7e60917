# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Certificate API endpoints.

This module provides certificate endpoints:
- GET /me - List own certificates
- GET /verify/{code} - Verify a certificate by its code (public)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.certificate.service import CertificateNotFoundError, CertificateService
from src.models.certificate import CertificateListResponse, CertificateResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/me",
    response_model=CertificateListResponse,
    summary="My certificates",
    description="List the current user's certificates, newest first.",
)
async def list_my_certificates(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> CertificateListResponse:
    """List own certificates."""
    service = CertificateService(db)
    return await service.list_for_user(current_user.id)


@router.get(
    "/verify/{code}",
    response_model=CertificateResponse,
    summary="Verify certificate",
    description="Look up a certificate by its public code. No authentication required.",
)
async def verify_certificate(
    code: str,
    db: AsyncSession = Depends(get_db),
) -> CertificateResponse:
    """Verify a certificate code."""
    service = CertificateService(db)

    try:
        return await service.get_by_code(code)
    except CertificateNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Certificate not found",
        )
