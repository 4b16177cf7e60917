# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Certificate service.

Certificates are minted inside the exam submission transaction, so
issue() only adds the row to the session and leaves the commit to the
caller.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import Certificate, generate_uuid
from src.models.certificate import CertificateListResponse, CertificateResponse
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

CERTIFICATE_CODE_PREFIX = "CERT-"
CERTIFICATE_CODE_BYTES = 8


class CertificateServiceError(Exception):
    """Base exception for certificate service errors."""

    pass


class CertificateNotFoundError(CertificateServiceError):
    """Raised when a certificate is not found."""

    pass


def generate_certificate_code() -> str:
    """Generate a human-readable certificate identifier.

    Returns:
        ``CERT-`` followed by 16 upper-case hex characters drawn from the
        OS cryptographic random source.
    """
    return CERTIFICATE_CODE_PREFIX + secrets.token_hex(CERTIFICATE_CODE_BYTES).upper()


class CertificateService:
    """Service for issuing and looking up certificates.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize certificate service.

        Args:
            db: Async database session.
        """
        self.db = db

    def issue(
        self,
        user_id: str,
        course_id: str,
        exam_id: str,
        attempt_id: str,
        issued_at: datetime | None = None,
    ) -> Certificate:
        """Create a certificate for a passing attempt.

        The certificate is added to the session but not committed.

        Args:
            user_id: Certificate holder.
            course_id: Course the exam belongs to.
            exam_id: Exam that was passed.
            attempt_id: The passing attempt.
            issued_at: Issue timestamp, defaults to now.

        Returns:
            The pending Certificate.
        """
        certificate = Certificate(
            id=generate_uuid(),
            user_id=user_id,
            course_id=course_id,
            exam_id=exam_id,
            attempt_id=attempt_id,
            certificate_code=generate_certificate_code(),
            issue_date=issued_at or utc_now(),
        )
        self.db.add(certificate)

        logger.info(
            "Issued certificate %s: user=%s, exam=%s, attempt=%s",
            certificate.certificate_code,
            user_id,
            exam_id,
            attempt_id,
        )

        return certificate

    async def list_for_user(self, user_id: str) -> CertificateListResponse:
        """List a user's certificates, newest first.

        Args:
            user_id: Certificate holder.

        Returns:
            Certificates with total count.
        """
        result = await self.db.execute(
            select(Certificate)
            .where(Certificate.user_id == user_id)
            .order_by(Certificate.issue_date.desc())
        )
        certificates = result.scalars().all()

        items = [self._to_response(c) for c in certificates]
        return CertificateListResponse(items=items, total=len(items))

    async def get_by_code(self, code: str) -> CertificateResponse:
        """Look up a certificate by its public code.

        Args:
            code: Certificate code, case-insensitive.

        Returns:
            Certificate details.

        Raises:
            CertificateNotFoundError: If no certificate has this code.
        """
        result = await self.db.execute(
            select(Certificate).where(Certificate.certificate_code == code.strip().upper())
        )
        certificate = result.scalar_one_or_none()
        if not certificate:
            raise CertificateNotFoundError(f"Certificate {code} not found")

        return self._to_response(certificate)

    def _to_response(self, certificate: Certificate) -> CertificateResponse:
        """Convert model to response."""
        return CertificateResponse(
            id=certificate.id,
            certificate_code=certificate.certificate_code,
            user_id=certificate.user_id,
            course_id=certificate.course_id,
            exam_id=certificate.exam_id,
            attempt_id=certificate.attempt_id,
            issue_date=certificate.issue_date,
            pdf_url=certificate.pdf_url,
        )
