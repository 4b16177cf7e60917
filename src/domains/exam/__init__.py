# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exam domain package.

This package provides exam taking functionality including:
- Scoring and pass/fail grading
- Submission with certificate issuance
- Attempt history
"""

from src.domains.exam.scoring import (
    EmptyExamError,
    ScoreResult,
    ScoringError,
    grade,
    score_answers,
)
from src.domains.exam.service import (
    PASS_POINTS,
    ExamNotFoundError,
    ExamPersistenceError,
    ExamService,
    ExamServiceError,
    SubmitExamResult,
)

__all__ = [
    "ExamService",
    "ExamServiceError",
    "ExamNotFoundError",
    "ExamPersistenceError",
    "SubmitExamResult",
    "PASS_POINTS",
    "EmptyExamError",
    "ScoreResult",
    "ScoringError",
    "grade",
    "score_answers",
]
