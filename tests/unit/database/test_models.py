# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database models.

Tests table definitions and the constraints the services rely on.
"""

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import configure_mappers

from src.infrastructure.database.models import (
    Base,
    Certificate,
    Course,
    Enrollment,
    Exam,
    TimestampMixin,
    UserBadge,
    generate_uuid,
)


def _unique_column_sets(model) -> set[frozenset[str]]:
    table = model.__table__
    sets = {
        frozenset(c.name for c in constraint.columns)
        for constraint in table.constraints
        if isinstance(constraint, UniqueConstraint)
    }
    sets.update(frozenset([c.name]) for c in table.columns if c.unique)
    return sets


class TestBase:
    """Test base model functionality."""

    def test_base_inherits_declarative_base(self):
        """Verify Base is a declarative base."""
        assert hasattr(Base, "metadata")
        assert hasattr(Base, "registry")

    def test_timestamp_mixin_has_created_at(self):
        """Verify TimestampMixin has created_at field."""
        assert hasattr(TimestampMixin, "created_at")
        assert hasattr(TimestampMixin, "updated_at")

    def test_generate_uuid(self):
        assert len(generate_uuid()) == 36
        assert generate_uuid() != generate_uuid()

    def test_all_tables_registered(self):
        assert set(Base.metadata.tables) == {
            "users",
            "badges",
            "user_badges",
            "courses",
            "course_modules",
            "enrollments",
            "exams",
            "exam_questions",
            "exam_attempts",
            "certificates",
        }


class TestConstraints:
    """Test uniqueness constraints."""

    def test_one_enrollment_per_user_and_course(self):
        assert frozenset({"user_id", "course_id"}) in _unique_column_sets(Enrollment)

    def test_one_certificate_per_attempt(self):
        uniques = _unique_column_sets(Certificate)

        assert frozenset({"attempt_id"}) in uniques
        assert frozenset({"certificate_code"}) in uniques

    def test_badge_granted_once(self):
        assert frozenset({"user_id", "badge_id"}) in _unique_column_sets(UserBadge)


class TestRelationships:
    """Test ordered relationships."""

    def setup_method(self):
        configure_mappers()

    def test_exam_questions_ordered_by_position(self):
        order_by = Exam.questions.property.order_by

        assert [c.name for c in order_by] == ["position"]

    def test_course_modules_ordered_by_position(self):
        order_by = Course.modules.property.order_by

        assert [c.name for c in order_by] == ["position"]
