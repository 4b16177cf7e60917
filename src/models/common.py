# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enumerations used by ORM models, services and API schemas.

Values are stored as plain strings in the database, so every enum is a
``str`` subclass and compares equal to its stored value.
"""

from enum import Enum


class EnrollmentStatus(str, Enum):
    """Lifecycle status of an enrollment."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ComplianceStatus(str, Enum):
    """Compliance classification of an enrollment."""

    NOT_STARTED = "not_started"
    COMPLIANT = "compliant"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


class AttemptStatus(str, Enum):
    """Outcome of an exam attempt.

    An attempt is created already graded, so PENDING is only the column
    default and never the state of a persisted submission.
    """

    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"


class QuestionType(str, Enum):
    """Supported exam question formats."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"


class BadgeCriteria(str, Enum):
    """What a badge is awarded for."""

    EXAM_PASSED = "exam_passed"
    LESSONS_COMPLETED = "lessons_completed"
    COURSE_COMPLETED = "course_completed"
    POINTS_MILESTONE = "points_milestone"


class UserRole(str, Enum):
    """Platform roles carried in access tokens."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ORG_ADMIN = "org_admin"
    ADMIN = "admin"
