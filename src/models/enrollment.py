# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.common import ComplianceStatus, EnrollmentStatus


class UpdateEnrollmentStatusRequest(BaseModel):
    """Manual enrollment status change."""

    status: EnrollmentStatus = Field(description="New enrollment status")


class EnrollmentResponse(BaseModel):
    """Enrollment with its effective compliance status.

    compliance_status and expires_at are evaluated at response time, so
    they may be fresher than the stored columns.
    """

    id: str
    user_id: str
    course_id: str
    progress: int = Field(ge=0, le=100)
    completed_modules: list[str] = Field(default_factory=list)
    status: EnrollmentStatus
    compliance_status: ComplianceStatus
    enrolled_at: datetime
    completed_at: datetime | None = None
    expires_at: datetime | None = None
