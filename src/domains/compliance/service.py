# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Compliance reporting service.

Reports evaluate every enrollment against the time of the request, so an
enrollment whose stored status is still ``compliant`` past its expiry is
reported as ``expired``. Only refresh_enrollment() writes the result back.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.compliance.engine import (
    ComplianceResult,
    apply_compliance,
    compute_status,
    days_until_expiry,
)
from src.infrastructure.database.models import Course, Enrollment
from src.models.common import ComplianceStatus, EnrollmentStatus
from src.models.compliance import (
    ComplianceCounts,
    ComplianceRecord,
    ComplianceSummaryResponse,
    UserComplianceResponse,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class ComplianceServiceError(Exception):
    """Base exception for compliance service errors."""

    pass


class ComplianceEnrollmentNotFoundError(ComplianceServiceError):
    """Raised when enrollment is not found."""

    pass


class ComplianceService:
    """Service for compliance reports.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize compliance service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def get_summary(
        self,
        organization_id: str,
        now: datetime | None = None,
    ) -> ComplianceSummaryResponse:
        """Summarize compliance across an organization's mandatory courses.

        Args:
            organization_id: Organization identifier.
            now: Evaluation instant, defaults to the current time.

        Returns:
            Status counts, mandatory course count and compliance rate.
        """
        now = now or utc_now()

        result = await self.db.execute(
            select(Course).where(
                Course.organization_id == organization_id,
                Course.is_mandatory.is_(True),
            )
        )
        courses = {course.id: course for course in result.scalars().all()}

        enrollments: list[Enrollment] = []
        if courses:
            result = await self.db.execute(
                select(Enrollment).where(Enrollment.course_id.in_(list(courses)))
            )
            enrollments = list(result.scalars().all())

        counts = Counter(
            compute_status(e, courses[e.course_id], now).status for e in enrollments
        )
        summary = ComplianceCounts(**{status.value: counts[status] for status in ComplianceStatus})

        total = len(enrollments)
        rate = summary.compliant / total * 100 if total else 0.0

        logger.debug(
            "Compliance summary for organization %s: %d courses, %d enrollments, rate=%.1f",
            organization_id,
            len(courses),
            total,
            rate,
        )

        return ComplianceSummaryResponse(
            organization_id=organization_id,
            summary=summary,
            mandatory_course_count=len(courses),
            total_enrollments=total,
            compliance_rate=rate,
            evaluated_at=now,
        )

    async def get_user_detail(
        self,
        user_id: str,
        now: datetime | None = None,
    ) -> UserComplianceResponse:
        """List a user's enrollments in mandatory or recertifying courses.

        Args:
            user_id: User identifier.
            now: Evaluation instant, defaults to the current time.

        Returns:
            The user's compliance records.
        """
        now = now or utc_now()

        result = await self.db.execute(
            select(Enrollment)
            .join(Enrollment.course)
            .where(
                Enrollment.user_id == user_id,
                or_(Course.is_mandatory.is_(True), Course.recertification_days > 0),
            )
            .options(selectinload(Enrollment.course))
            .order_by(Course.title)
        )
        enrollments = result.scalars().all()

        records = [
            self._to_record(e, compute_status(e, e.course, now), now)
            for e in enrollments
        ]

        return UserComplianceResponse(user_id=user_id, records=records, evaluated_at=now)

    async def refresh_enrollment(
        self,
        enrollment_id: str,
        now: datetime | None = None,
    ) -> ComplianceRecord:
        """Recompute an enrollment's compliance and store it.

        Args:
            enrollment_id: Enrollment identifier.
            now: Evaluation instant, defaults to the current time.

        Returns:
            The refreshed compliance record.

        Raises:
            ComplianceEnrollmentNotFoundError: If enrollment not found.
        """
        now = now or utc_now()

        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.id == enrollment_id)
            .options(selectinload(Enrollment.course))
        )
        enrollment = result.scalar_one_or_none()
        if not enrollment:
            raise ComplianceEnrollmentNotFoundError(f"Enrollment {enrollment_id} not found")

        previous = enrollment.compliance_status
        compliance = apply_compliance(enrollment, enrollment.course, now)

        await self.db.commit()

        if previous != compliance.status.value:
            logger.info(
                "Enrollment %s compliance changed: %s -> %s",
                enrollment_id,
                previous,
                compliance.status.value,
            )

        return self._to_record(enrollment, compliance, now)

    def _to_record(
        self,
        enrollment: Enrollment,
        compliance: ComplianceResult,
        now: datetime,
    ) -> ComplianceRecord:
        course = enrollment.course
        return ComplianceRecord(
            enrollment_id=enrollment.id,
            course_id=enrollment.course_id,
            course_title=course.title,
            is_mandatory=course.is_mandatory,
            recertification_days=course.recertification_days or 0,
            enrollment_status=EnrollmentStatus(enrollment.status),
            compliance_status=compliance.status,
            completed_at=enrollment.completed_at,
            expires_at=compliance.expires_at,
            days_until_expiry=days_until_expiry(compliance, now),
        )
