# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for course enrollments and module progress.

This module provides the EnrollmentService class for:
- Free enrollment in a course
- Module completion and progress tracking
- Manual enrollment status changes

Every mutation recomputes the enrollment's compliance in the same
transaction. Reads evaluate compliance against the current time without
writing it back.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.compliance.engine import apply_compliance, compute_status
from src.infrastructure.database.models import Course, Enrollment, generate_uuid
from src.models.common import ComplianceStatus, EnrollmentStatus
from src.models.enrollment import EnrollmentResponse
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    pass


class CourseNotFoundError(EnrollmentServiceError):
    """Raised when course is not found."""

    pass


class EnrollmentNotFoundError(EnrollmentServiceError):
    """Raised when enrollment is not found."""

    pass


class AlreadyEnrolledError(EnrollmentServiceError):
    """Raised when user is already enrolled in the course."""

    pass


class CourseModuleNotFoundError(EnrollmentServiceError):
    """Raised when a module does not belong to the course."""

    pass


def compute_progress(completed: int, total: int) -> int:
    """Percentage of modules completed, rounded half up and capped at 100."""
    if total <= 0:
        return 0
    return min(100, math.floor(completed / total * 100 + 0.5))


class EnrollmentService:
    """Service for managing course enrollments.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def enroll(
        self,
        user_id: str,
        course_id: str,
        now: datetime | None = None,
    ) -> EnrollmentResponse:
        """Enroll a user in a course.

        Args:
            user_id: User identifier.
            course_id: Course identifier.
            now: Enrollment instant, defaults to the current time.

        Returns:
            Enrollment response.

        Raises:
            CourseNotFoundError: If course not found.
            AlreadyEnrolledError: If user already enrolled.
        """
        now = now or utc_now()

        course = await self._get_course(course_id)

        existing = await self._find_enrollment(user_id, course_id)
        if existing:
            raise AlreadyEnrolledError(f"User {user_id} is already enrolled in course {course_id}")

        enrollment = Enrollment(
            id=generate_uuid(),
            user_id=user_id,
            course_id=course_id,
            progress=0,
            completed_modules=[],
            status=EnrollmentStatus.ACTIVE.value,
            compliance_status=ComplianceStatus.NOT_STARTED.value,
            enrolled_at=now,
        )
        self.db.add(enrollment)

        try:
            await self.db.commit()
        except IntegrityError as e:
            # Concurrent enroll for the same pair lost the unique constraint race
            await self.db.rollback()
            raise AlreadyEnrolledError(
                f"User {user_id} is already enrolled in course {course_id}"
            ) from e

        logger.info("Enrolled user %s in course %s", user_id, course_id)

        return self._to_response(enrollment, course, now)

    async def complete_module(
        self,
        user_id: str,
        course_id: str,
        module_id: str,
        now: datetime | None = None,
    ) -> EnrollmentResponse:
        """Mark a course module as completed.

        Completing a module twice has no further effect. Progress never goes
        down. When progress reaches 100 an active enrollment becomes
        completed and its completion date is stamped.

        Args:
            user_id: User identifier.
            course_id: Course identifier.
            module_id: Module identifier.
            now: Completion instant, defaults to the current time.

        Returns:
            Updated enrollment response.

        Raises:
            EnrollmentNotFoundError: If user not enrolled in the course.
            CourseModuleNotFoundError: If the module is not part of the course.
        """
        now = now or utc_now()

        enrollment = await self._find_enrollment(user_id, course_id, with_modules=True)
        if not enrollment:
            raise EnrollmentNotFoundError(f"User {user_id} is not enrolled in course {course_id}")

        course = enrollment.course
        module_ids = [m.id for m in course.modules]
        if module_id not in module_ids:
            raise CourseModuleNotFoundError(f"Module {module_id} not found in course {course_id}")

        completed = list(enrollment.completed_modules or [])
        if module_id not in completed:
            completed.append(module_id)
            enrollment.completed_modules = completed

        done = len(set(completed) & set(module_ids))
        enrollment.progress = max(enrollment.progress, compute_progress(done, len(module_ids)))

        if enrollment.progress >= 100 and enrollment.status == EnrollmentStatus.ACTIVE.value:
            enrollment.status = EnrollmentStatus.COMPLETED.value
            if enrollment.completed_at is None:
                enrollment.completed_at = now
            logger.info("User %s completed course %s", user_id, course_id)

        apply_compliance(enrollment, course, now)

        await self.db.commit()

        logger.debug(
            "Module %s completed: user=%s, course=%s, progress=%d",
            module_id,
            user_id,
            course_id,
            enrollment.progress,
        )

        return self._to_response(enrollment, course, now)

    async def update_status(
        self,
        enrollment_id: str,
        status: EnrollmentStatus,
        now: datetime | None = None,
    ) -> EnrollmentResponse:
        """Set an enrollment's status by hand.

        Args:
            enrollment_id: Enrollment identifier.
            status: New status.
            now: Change instant, defaults to the current time.

        Returns:
            Updated enrollment response.

        Raises:
            EnrollmentNotFoundError: If enrollment not found.
        """
        now = now or utc_now()

        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.id == enrollment_id)
            .options(selectinload(Enrollment.course))
        )
        enrollment = result.scalar_one_or_none()
        if not enrollment:
            raise EnrollmentNotFoundError(f"Enrollment {enrollment_id} not found")

        previous = enrollment.status
        enrollment.status = EnrollmentStatus(status).value
        if enrollment.status == EnrollmentStatus.COMPLETED.value and enrollment.completed_at is None:
            enrollment.completed_at = now

        apply_compliance(enrollment, enrollment.course, now)

        await self.db.commit()

        logger.info(
            "Enrollment %s status changed: %s -> %s",
            enrollment_id,
            previous,
            enrollment.status,
        )

        return self._to_response(enrollment, enrollment.course, now)

    async def get_enrollment(
        self,
        user_id: str,
        course_id: str,
        now: datetime | None = None,
    ) -> EnrollmentResponse:
        """Get a user's enrollment with compliance evaluated now.

        The stored row is not modified.

        Raises:
            EnrollmentNotFoundError: If user not enrolled in the course.
        """
        enrollment = await self._find_enrollment(user_id, course_id)
        if not enrollment:
            raise EnrollmentNotFoundError(f"User {user_id} is not enrolled in course {course_id}")

        return self._to_response(enrollment, enrollment.course, now or utc_now())

    async def _get_course(self, course_id: str) -> Course:
        result = await self.db.execute(select(Course).where(Course.id == course_id))
        course = result.scalar_one_or_none()
        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def _find_enrollment(
        self,
        user_id: str,
        course_id: str,
        with_modules: bool = False,
    ) -> Enrollment | None:
        loader = selectinload(Enrollment.course)
        if with_modules:
            loader = loader.selectinload(Course.modules)

        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
            .options(loader)
        )
        return result.scalar_one_or_none()

    def _to_response(
        self,
        enrollment: Enrollment,
        course: Course,
        now: datetime,
    ) -> EnrollmentResponse:
        """Convert model to response with effective compliance."""
        compliance = compute_status(enrollment, course, now)

        return EnrollmentResponse(
            id=enrollment.id,
            user_id=enrollment.user_id,
            course_id=enrollment.course_id,
            progress=enrollment.progress,
            completed_modules=list(enrollment.completed_modules or []),
            status=EnrollmentStatus(enrollment.status),
            compliance_status=compliance.status,
            enrolled_at=enrollment.enrolled_at,
            completed_at=enrollment.completed_at,
            expires_at=compliance.expires_at,
        )
