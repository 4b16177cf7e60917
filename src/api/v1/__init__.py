# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    exams: Exam authoring, taking and attempt history.
    enrollments: Course enrollment and module progress.
    compliance: Compliance reports.
    certificates: Own certificates and public verification.
"""

from fastapi import APIRouter

from src.api.v1 import certificates, compliance, enrollments, exams

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(exams.router, prefix="/exams", tags=["Exams"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])
router.include_router(compliance.router, prefix="/compliance", tags=["Compliance"])

# Public verification lives under /certificates/verify
router.include_router(certificates.router, prefix="/certificates", tags=["Certificates"])

__all__ = ["router"]
