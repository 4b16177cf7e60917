# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exam API endpoints.

This module provides endpoints for authoring and taking exams:
- POST / - Create an exam (instructor or admin)
- GET /course/{course_id} - List a course's exams
- GET /{exam_id} - Get exam questions (without answers)
- POST /{exam_id}/submit - Submit answers for grading
- GET /{exam_id}/attempts - List own attempts
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import (
    get_db,
    get_notifications,
    require_auth,
    require_instructor_or_admin,
)
from src.api.middleware.auth import CurrentUser
from src.domains.compliance.engine import ComplianceError
from src.domains.exam.scoring import EmptyExamError
from src.domains.exam.service import (
    ExamCourseNotFoundError,
    ExamNotFoundError,
    ExamPersistenceError,
    ExamService,
    InvalidExamError,
)
from src.infrastructure.notifications import NotificationService
from src.models.exam import (
    CreateExamRequest,
    ExamAttemptResponse,
    ExamDetailResponse,
    ExamSummaryResponse,
    SubmitExamRequest,
    SubmitExamResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ExamSummaryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create exam",
    description="Create an exam for a course. Requires instructor or admin role.",
)
async def create_exam(
    data: CreateExamRequest,
    current_user: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> ExamSummaryResponse:
    """Create an exam with its answer key.

    Args:
        data: Exam content.
        current_user: Authenticated instructor or admin.
        db: Database session.

    Returns:
        Summary of the created exam.

    Raises:
        HTTPException: If the course is missing, the exam cannot be
            graded, or it could not be stored.
    """
    logger.info("Creating exam: course=%s, by=%s", data.course_id, current_user.id)

    service = ExamService(db)

    try:
        return await service.create_exam(data, created_by=current_user.id)
    except ExamCourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    except InvalidExamError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except ExamPersistenceError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not store exam",
        )


@router.get(
    "/course/{course_id}",
    response_model=list[ExamSummaryResponse],
    summary="List course exams",
    description="List the exams of a course. Correct answers are not included.",
)
async def list_course_exams(
    course_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[ExamSummaryResponse]:
    """List a course's exams."""
    service = ExamService(db)
    return await service.list_course_exams(course_id)


@router.get(
    "/{exam_id}",
    response_model=ExamDetailResponse,
    summary="Get exam",
    description="Get an exam with its questions. Correct answers are not included.",
)
async def get_exam(
    exam_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> ExamDetailResponse:
    """Get an exam for taking."""
    service = ExamService(db)

    try:
        return await service.get_exam_for_student(exam_id)
    except ExamNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Exam not found",
        )


@router.post(
    "/{exam_id}/submit",
    response_model=SubmitExamResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit exam",
    description="Grade a submission. A passing attempt is issued a certificate.",
)
async def submit_exam(
    exam_id: str,
    data: SubmitExamRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
    notifications: NotificationService = Depends(get_notifications),
) -> SubmitExamResponse:
    """Submit answers for an exam.

    Args:
        exam_id: Exam identifier.
        data: Answers, one per question in order.
        current_user: Authenticated student.
        db: Database session.
        notifications: Notification service for the result email.

    Returns:
        The graded attempt and certificate reference on pass.

    Raises:
        HTTPException: If exam not found, cannot be graded, or not stored.
    """
    logger.info("Submitting exam: exam=%s, user=%s", exam_id, current_user.id)

    service = ExamService(db, notifications=notifications)

    try:
        result = await service.submit_exam(exam_id, current_user.id, data.answers)
    except ExamNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Exam not found",
        )
    except EmptyExamError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except ComplianceError as e:
        logger.error("Enrollment state invalid during exam submission: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Enrollment is in an invalid state",
        )
    except ExamPersistenceError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not store exam attempt",
        )

    return result.to_response()


@router.get(
    "/{exam_id}/attempts",
    response_model=list[ExamAttemptResponse],
    summary="List attempts",
    description="List the current user's attempts on an exam, newest first.",
)
async def list_attempts(
    exam_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[ExamAttemptResponse]:
    """List own attempts on an exam."""
    service = ExamService(db)
    return await service.list_attempts(exam_id, current_user.id)
