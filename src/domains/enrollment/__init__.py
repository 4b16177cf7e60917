# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides course enrollment management including:
- Free enrollment in a course
- Module completion and progress
- Manual status changes
"""

from src.domains.enrollment.service import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    EnrollmentService,
    EnrollmentServiceError,
    CourseModuleNotFoundError,
    compute_progress,
)

__all__ = [
    "EnrollmentService",
    "EnrollmentServiceError",
    "CourseNotFoundError",
    "EnrollmentNotFoundError",
    "AlreadyEnrolledError",
    "CourseModuleNotFoundError",
    "compute_progress",
]
