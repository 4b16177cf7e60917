# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Certificate API schemas."""

from datetime import datetime

from pydantic import BaseModel


class CertificateResponse(BaseModel):
    """An issued certificate."""

    id: str
    certificate_code: str
    user_id: str
    course_id: str
    exam_id: str
    attempt_id: str
    issue_date: datetime
    pdf_url: str | None = None


class CertificateListResponse(BaseModel):
    """Certificates held by a user."""

    items: list[CertificateResponse]
    total: int
