# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Compliance reporting schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.common import ComplianceStatus, EnrollmentStatus


class ComplianceCounts(BaseModel):
    """Number of enrollments per compliance status."""

    compliant: int = 0
    expiring_soon: int = 0
    expired: int = 0
    not_started: int = 0


class ComplianceSummaryResponse(BaseModel):
    """Organization-wide compliance across mandatory courses."""

    organization_id: str
    summary: ComplianceCounts
    mandatory_course_count: int
    total_enrollments: int
    compliance_rate: float = Field(description="Percentage of enrollments that are compliant")
    evaluated_at: datetime


class ComplianceRecord(BaseModel):
    """One enrollment in a compliance-relevant course."""

    enrollment_id: str
    course_id: str
    course_title: str
    is_mandatory: bool
    recertification_days: int
    enrollment_status: EnrollmentStatus
    compliance_status: ComplianceStatus
    completed_at: datetime | None = None
    expires_at: datetime | None = None
    days_until_expiry: int | None = None


class UserComplianceResponse(BaseModel):
    """A user's compliance records."""

    user_id: str
    records: list[ComplianceRecord]
    evaluated_at: datetime
