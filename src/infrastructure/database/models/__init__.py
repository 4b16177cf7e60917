# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the LMS database.

Importing this package registers every table on Base.metadata.
"""

from src.infrastructure.database.models.base import Base, TimestampMixin, generate_uuid
from src.infrastructure.database.models.certificate import Certificate
from src.infrastructure.database.models.course import Course, CourseModule
from src.infrastructure.database.models.enrollment import Enrollment
from src.infrastructure.database.models.exam import Exam, ExamAttempt, ExamQuestion
from src.infrastructure.database.models.user import Badge, User, UserBadge

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "User",
    "Badge",
    "UserBadge",
    "Course",
    "CourseModule",
    "Enrollment",
    "Exam",
    "ExamQuestion",
    "ExamAttempt",
    "Certificate",
]
