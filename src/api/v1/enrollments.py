# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints.

This module provides endpoints for course enrollment:
- POST /courses/{course_id} - Enroll in a course
- POST /courses/{course_id}/modules/{module_id}/complete - Complete a module
- GET /courses/{course_id} - Get own enrollment
- PATCH /{enrollment_id}/status - Change enrollment status (admin)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.compliance.engine import ComplianceError
from src.domains.enrollment.service import (
    AlreadyEnrolledError,
    CourseModuleNotFoundError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    EnrollmentService,
)
from src.models.enrollment import EnrollmentResponse, UpdateEnrollmentStatusRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> EnrollmentService:
    """Get enrollment service instance.

    Args:
        db: Database session.

    Returns:
        Configured EnrollmentService instance.
    """
    return EnrollmentService(db=db)


def _invalid_state(e: ComplianceError) -> HTTPException:
    logger.error("Enrollment state invalid: %s", str(e))
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Enrollment is in an invalid state",
    )


@router.post(
    "/courses/{course_id}",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in course",
    description="Enroll the current user in a course.",
)
async def enroll(
    course_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """Enroll the current user in a course.

    Raises:
        HTTPException: If course not found or already enrolled.
    """
    service = _get_service(db)

    try:
        return await service.enroll(current_user.id, course_id)
    except CourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    except AlreadyEnrolledError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already enrolled in this course",
        )


@router.post(
    "/courses/{course_id}/modules/{module_id}/complete",
    response_model=EnrollmentResponse,
    summary="Complete module",
    description="Mark a course module as completed for the current user.",
)
async def complete_module(
    course_id: str,
    module_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """Mark a module as completed.

    Args:
        course_id: Course identifier.
        module_id: Module identifier.
        current_user: Authenticated user.
        db: Database session.

    Returns:
        Updated enrollment.

    Raises:
        HTTPException: If not enrolled or module not in course.
    """
    service = _get_service(db)

    try:
        return await service.complete_module(current_user.id, course_id, module_id)
    except EnrollmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not enrolled in this course",
        )
    except CourseModuleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Module not found",
        )
    except ComplianceError as e:
        raise _invalid_state(e)


@router.get(
    "/courses/{course_id}",
    response_model=EnrollmentResponse,
    summary="Get enrollment",
    description="Get the current user's enrollment with up-to-date compliance status.",
)
async def get_enrollment(
    course_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """Get own enrollment in a course."""
    service = _get_service(db)

    try:
        return await service.get_enrollment(current_user.id, course_id)
    except EnrollmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not enrolled in this course",
        )
    except ComplianceError as e:
        raise _invalid_state(e)


@router.patch(
    "/{enrollment_id}/status",
    response_model=EnrollmentResponse,
    summary="Update enrollment status",
    description="Change an enrollment's status. Requires admin access.",
)
async def update_status(
    enrollment_id: str,
    data: UpdateEnrollmentStatusRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """Change an enrollment's status."""
    logger.info(
        "Updating enrollment status: enrollment=%s, status=%s, by=%s",
        enrollment_id,
        data.status.value,
        current_user.id,
    )

    service = _get_service(db)

    try:
        return await service.update_status(enrollment_id, data.status)
    except EnrollmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found",
        )
    except ComplianceError as e:
        raise _invalid_state(e)
