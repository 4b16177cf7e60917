# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Compliance status engine.

Derives an enrollment's compliance status and expiry date from its
completion state and the course's recertification policy. The engine is
a pure function of its inputs: the caller passes ``now`` explicitly and
nothing here reads the clock or touches the database.

Rules:
    1. Enrollment not completed: keep the previously recorded status
       (``not_started`` if there is none) and the previous expiry.
    2. Completed, course has no recertification (days <= 0): compliant,
       never expires.
    3. Completed, course recertifies every N days:
       expires_at = completed_at + N calendar days, then
       - now >= expires_at                 -> expired
       - now >  expires_at - 30 days       -> expiring_soon
       - otherwise                         -> compliant

The expiry instant itself is already expired. The 30 day window is a
platform-wide policy and is not configurable per course.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from src.models.common import ComplianceStatus, EnrollmentStatus
from src.utils.datetime import add_days, ensure_utc, whole_days_between

EXPIRING_SOON_WINDOW_DAYS = 30


class ComplianceError(Exception):
    """Base exception for compliance computation errors."""

    pass


class MissingCompletionDateError(ComplianceError):
    """Raised when a completed enrollment has no completion date."""

    pass


class EnrollmentState(Protocol):
    """Enrollment fields the engine reads and writes."""

    status: str
    completed_at: datetime | None
    compliance_status: str | None
    expires_at: datetime | None


class RecertificationPolicy(Protocol):
    """Course fields the engine reads."""

    recertification_days: int | None


@dataclass(frozen=True)
class ComplianceResult:
    """Outcome of a compliance computation.

    Attributes:
        status: Derived compliance status.
        expires_at: When the completion stops being valid, None if never
            or if the enrollment is not completed.
    """

    status: ComplianceStatus
    expires_at: datetime | None = None


def compute_status(
    enrollment: EnrollmentState,
    course: RecertificationPolicy,
    now: datetime,
) -> ComplianceResult:
    """Compute the compliance status of an enrollment.

    Args:
        enrollment: Enrollment (or any object with the same fields).
        course: Course owning the enrollment.
        now: Evaluation instant.

    Returns:
        ComplianceResult with status and expiry.

    Raises:
        MissingCompletionDateError: If the enrollment is completed but has
            no completed_at.
    """
    if enrollment.status != EnrollmentStatus.COMPLETED:
        prior = enrollment.compliance_status or ComplianceStatus.NOT_STARTED
        return ComplianceResult(
            status=ComplianceStatus(prior),
            expires_at=enrollment.expires_at,
        )

    if enrollment.completed_at is None:
        raise MissingCompletionDateError(
            "Completed enrollment has no completion date"
        )

    days = course.recertification_days or 0
    if days <= 0:
        return ComplianceResult(status=ComplianceStatus.COMPLIANT)

    expires_at = add_days(enrollment.completed_at, days)
    current = ensure_utc(now)

    if current >= expires_at:
        status = ComplianceStatus.EXPIRED
    elif current > add_days(expires_at, -EXPIRING_SOON_WINDOW_DAYS):
        status = ComplianceStatus.EXPIRING_SOON
    else:
        status = ComplianceStatus.COMPLIANT

    return ComplianceResult(status=status, expires_at=expires_at)


def apply_compliance(
    enrollment: EnrollmentState,
    course: RecertificationPolicy,
    now: datetime,
) -> ComplianceResult:
    """Compute compliance and store it on the enrollment.

    This is the only place compliance_status and expires_at are assigned.
    The caller is responsible for persisting the enrollment.

    Args:
        enrollment: Enrollment to update in place.
        course: Course owning the enrollment.
        now: Evaluation instant.

    Returns:
        The ComplianceResult that was applied.

    Raises:
        MissingCompletionDateError: If the enrollment is completed but has
            no completed_at.
    """
    result = compute_status(enrollment, course, now)
    enrollment.compliance_status = result.status.value
    enrollment.expires_at = result.expires_at
    return result


def days_until_expiry(result: ComplianceResult, now: datetime) -> int | None:
    """Whole days left before expiry, negative once expired.

    Args:
        result: A computed compliance result.
        now: Evaluation instant.

    Returns:
        Signed day count, or None when the result has no expiry.
    """
    if result.expires_at is None:
        return None
    return whole_days_between(now, result.expires_at)
