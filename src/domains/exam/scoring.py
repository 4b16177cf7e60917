# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exam scoring.

Pure functions that turn an answer vector into a score and a pass/fail
outcome. Answers are matched to questions by position; a missing or
null answer is simply wrong.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from src.models.common import AttemptStatus


class ScoringError(Exception):
    """Base exception for scoring errors."""

    pass


class EmptyExamError(ScoringError):
    """Raised when an exam has no questions or no points to score."""

    pass


class ScorableQuestion(Protocol):
    """Question fields used for scoring."""

    correct_answer: int
    points: int


@dataclass(frozen=True)
class ScoreResult:
    """Score of one submission.

    Attributes:
        score: Points earned.
        total_possible: Sum of all question points.
        percentage: score / total_possible * 100.
        correct_count: Number of questions answered correctly.
    """

    score: int
    total_possible: int
    percentage: float
    correct_count: int


def score_answers(
    questions: Sequence[ScorableQuestion],
    answers: Sequence[int | None],
) -> ScoreResult:
    """Score answers against questions in order.

    Answers beyond the last question are ignored.

    Args:
        questions: Exam questions in position order.
        answers: Chosen option index per question.

    Returns:
        ScoreResult for the submission.

    Raises:
        EmptyExamError: If the exam has no questions or all questions are
            worth zero points.
    """
    if not questions:
        raise EmptyExamError("Exam has no questions")

    score = 0
    total_possible = 0
    correct_count = 0

    for index, question in enumerate(questions):
        total_possible += question.points
        answer = answers[index] if index < len(answers) else None
        if answer is not None and answer == question.correct_answer:
            score += question.points
            correct_count += 1

    if total_possible <= 0:
        raise EmptyExamError("Exam questions carry no points")

    return ScoreResult(
        score=score,
        total_possible=total_possible,
        percentage=score / total_possible * 100,
        correct_count=correct_count,
    )


def grade(percentage: float, passing_score: float) -> AttemptStatus:
    """Decide pass or fail. Reaching the passing score exactly is a pass."""
    if percentage >= passing_score:
        return AttemptStatus.PASSED
    return AttemptStatus.FAILED
