# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for exam scoring and grading."""

from types import SimpleNamespace

import pytest

from src.domains.exam.scoring import EmptyExamError, grade, score_answers
from src.models.common import AttemptStatus


def _questions(*pairs: tuple[int, int]) -> list[SimpleNamespace]:
    """Questions from (correct_answer, points) pairs."""
    return [SimpleNamespace(correct_answer=c, points=p) for c, p in pairs]


class TestScoreAnswers:
    """Tests for score_answers."""

    def test_all_correct(self) -> None:
        result = score_answers(_questions((0, 1), (2, 1)), [0, 2])

        assert result.score == 2
        assert result.total_possible == 2
        assert result.percentage == 100.0
        assert result.correct_count == 2

    def test_half_correct_is_fifty_percent(self) -> None:
        result = score_answers(_questions((0, 1), (1, 1)), [0, 3])

        assert result.percentage == 50.0

    def test_weighted_points(self) -> None:
        result = score_answers(_questions((0, 3), (1, 1)), [0, 0])

        assert result.score == 3
        assert result.total_possible == 4
        assert result.percentage == 75.0
        assert result.correct_count == 1

    def test_missing_answers_are_wrong(self) -> None:
        result = score_answers(_questions((0, 1), (1, 1), (2, 1)), [0])

        assert result.score == 1
        assert result.total_possible == 3

    def test_null_answers_are_wrong(self) -> None:
        result = score_answers(_questions((0, 1), (1, 1)), [None, 1])

        assert result.score == 1

    def test_extra_answers_are_ignored(self) -> None:
        result = score_answers(_questions((0, 1),), [0, 1, 2, 3])

        assert result.score == 1
        assert result.total_possible == 1

    def test_zero_point_question_counts_nothing(self) -> None:
        result = score_answers(_questions((0, 0), (1, 2)), [0, 1])

        assert result.score == 2
        assert result.total_possible == 2
        assert result.correct_count == 2

    def test_no_questions_raises(self) -> None:
        with pytest.raises(EmptyExamError):
            score_answers([], [0])

    def test_no_points_raises(self) -> None:
        with pytest.raises(EmptyExamError):
            score_answers(_questions((0, 0), (1, 0)), [0, 1])


class TestGrade:
    """Tests for grade."""

    def test_pass_boundary_is_inclusive(self) -> None:
        assert grade(50.0, 50) == AttemptStatus.PASSED

    def test_below_passing_score_fails(self) -> None:
        assert grade(49.99, 50) == AttemptStatus.FAILED

    def test_zero_passing_score_always_passes(self) -> None:
        assert grade(0.0, 0) == AttemptStatus.PASSED

    def test_two_question_exam_half_right_passes_at_fifty(self) -> None:
        result = score_answers(_questions((0, 1), (1, 1)), [0, 0])

        assert result.percentage == 50.0
        assert grade(result.percentage, 50) == AttemptStatus.PASSED
