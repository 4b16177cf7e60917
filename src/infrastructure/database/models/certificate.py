# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Certificate model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, generate_uuid
from src.utils.datetime import utc_now


class Certificate(Base, TimestampMixin):
    """Proof of a passing exam attempt.

    attempt_id is unique, so an attempt can mint at most one certificate.
    Several certificates per (user, exam) are allowed, one per passing
    attempt.
    """

    __tablename__ = "certificates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    exam_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False
    )
    attempt_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("exam_attempts.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    certificate_code: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    issue_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    pdf_url: Mapped[str | None] = mapped_column(String(500))
