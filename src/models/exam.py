# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exam API schemas.

- SubmitExamRequest/SubmitExamResponse: grade a submission
- ExamDetailResponse: exam as shown to a student (no correct answers)
- ExamAttemptResponse: one attempt in a user's history
- CreateExamRequest: author an exam with its answer key
- ExamSummaryResponse: exam listed under a course
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.common import AttemptStatus, QuestionType


class SubmitExamRequest(BaseModel):
    """Answers in question order; null means the question was skipped."""

    answers: list[int | None] = Field(
        default_factory=list,
        description="Chosen option index per question, in question order",
    )


class ExamAttemptResponse(BaseModel):
    """A graded exam attempt."""

    id: str
    user_id: str
    exam_id: str
    course_id: str
    answers: list[int | None]
    score: int
    percentage: float
    status: AttemptStatus
    completed_at: datetime


class SubmitExamResponse(BaseModel):
    """Result of an exam submission."""

    attempt: ExamAttemptResponse
    certificate_id: str | None = Field(
        default=None,
        description="Certificate record id when the attempt passed",
    )
    certificate_code: str | None = Field(
        default=None,
        description="Human-readable certificate identifier when the attempt passed",
    )


class QuestionView(BaseModel):
    """A question without its correct answer."""

    position: int
    question_text: str
    options: list[str]
    question_type: QuestionType
    points: int


class ExamDetailResponse(BaseModel):
    """Exam content for a student taking it."""

    id: str
    course_id: str
    title: str
    description: str | None = None
    time_limit_minutes: int
    passing_score: int
    questions: list[QuestionView]


class QuestionCreate(BaseModel):
    """A question with its answer key, as authored by an instructor."""

    question_text: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0, description="Index into options")
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    points: int = Field(default=1, ge=0)


class CreateExamRequest(BaseModel):
    """Request to create an exam for a course."""

    course_id: str
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    time_limit_minutes: int = Field(default=60, ge=1)
    passing_score: int = Field(default=70, ge=0, le=100)
    questions: list[QuestionCreate] = Field(..., min_length=1)


class ExamSummaryResponse(BaseModel):
    """An exam as listed under its course."""

    id: str
    course_id: str
    title: str
    description: str | None = None
    time_limit_minutes: int
    passing_score: int
    question_count: int
    total_points: int
