# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.infrastructure.database.models import (
    Course,
    CourseModule,
    Enrollment,
    Exam,
    ExamQuestion,
    User,
)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "DB_HOST": "localhost",
        "DB_PORT": "5432",
        "DB_DATABASE": "lms_test",
        "JWT_SECRET_KEY": "test-secret-key-for-testing-only",
        "JWT_ALGORITHM": "HS256",
        "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
    }


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant."""
    return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.get = AsyncMock()
    return db


def _result_of(value: Any) -> MagicMock:
    result = MagicMock()
    if isinstance(value, list):
        result.scalars.return_value.all.return_value = value
        result.scalar_one_or_none.return_value = value[0] if value else None
    else:
        result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def result_of() -> Callable[[Any], MagicMock]:
    """Build a mock execute() result holding one row or a list of rows."""
    return _result_of


@pytest.fixture
def make_course() -> Callable[..., Course]:
    """Factory for transient Course rows."""

    def _make(
        recertification_days: int = 0,
        is_mandatory: bool = True,
        module_count: int = 0,
        organization_id: str = "org-1",
        title: str = "Fire Safety",
    ) -> Course:
        course = Course(
            id=str(uuid4()),
            organization_id=organization_id,
            title=title,
            is_mandatory=is_mandatory,
            recertification_days=recertification_days,
        )
        course.modules = [
            CourseModule(id=f"module-{i}", course_id=course.id, title=f"Module {i}", position=i)
            for i in range(module_count)
        ]
        return course

    return _make


@pytest.fixture
def make_enrollment(now) -> Callable[..., Enrollment]:
    """Factory for transient Enrollment rows attached to a course."""

    def _make(
        course: Course,
        status: str = "active",
        completed_at: datetime | None = None,
        compliance_status: str = "not_started",
        progress: int = 0,
        completed_modules: list[str] | None = None,
        user_id: str = "user-1",
        expires_at: datetime | None = None,
    ) -> Enrollment:
        enrollment = Enrollment(
            id=str(uuid4()),
            user_id=user_id,
            course_id=course.id,
            progress=progress,
            completed_modules=list(completed_modules or []),
            status=status,
            compliance_status=compliance_status,
            enrolled_at=now - timedelta(days=400),
            completed_at=completed_at,
            expires_at=expires_at,
        )
        enrollment.course = course
        return enrollment

    return _make


@pytest.fixture
def make_exam(make_course) -> Callable[..., Exam]:
    """Factory for transient Exam rows with questions."""

    def _make(
        correct_answers: list[int] = (0, 1),
        points: list[int] | None = None,
        passing_score: int = 70,
        course: Course | None = None,
    ) -> Exam:
        course = course or make_course(recertification_days=365)
        exam = Exam(
            id=str(uuid4()),
            course_id=course.id,
            title="Fire Safety Final",
            description=None,
            time_limit_minutes=60,
            passing_score=passing_score,
        )
        exam.course = course
        exam.questions = [
            ExamQuestion(
                id=str(uuid4()),
                exam_id=exam.id,
                position=i,
                question_text=f"Question {i + 1}",
                options=["A", "B", "C", "D"],
                correct_answer=answer,
                question_type="multiple-choice",
                points=(points[i] if points else 1),
            )
            for i, answer in enumerate(correct_answers)
        ]
        return exam

    return _make


@pytest.fixture
def sample_user() -> User:
    """Provide a sample student user."""
    return User(
        id="user-1",
        organization_id="org-1",
        email="student@example.com",
        name="Ada Student",
        role="student",
        points=0,
    )
