# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exam service: authoring, grading, certificate issuance and result side effects.

submit_exam() runs in two phases. The first phase (attempt, certificate,
enrollment compliance) is one transaction and either commits as a whole
or surfaces an error. The second phase (points, result email) is started
as background tasks after the commit and only logs its failures. Points
are written on a session of their own, so a failed award never rolls
back or expires anything the submission holds.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Sequence
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.certificate.service import CertificateService
from src.domains.compliance.engine import apply_compliance
from src.domains.exam.scoring import grade, score_answers
from src.domains.gamification.service import GamificationService
from src.infrastructure.database.connection import get_session
from src.infrastructure.database.models import (
    Certificate,
    Course,
    Enrollment,
    Exam,
    ExamAttempt,
    ExamQuestion,
    User,
    generate_uuid,
)
from src.infrastructure.notifications import NotificationService, get_notification_service
from src.models.common import AttemptStatus
from src.models.exam import (
    CreateExamRequest,
    ExamAttemptResponse,
    ExamDetailResponse,
    ExamSummaryResponse,
    QuestionView,
    SubmitExamResponse,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

PASS_POINTS = 50


class ExamServiceError(Exception):
    """Base exception for exam service errors."""

    pass


class ExamNotFoundError(ExamServiceError):
    """Raised when an exam is not found."""

    pass


class ExamCourseNotFoundError(ExamServiceError):
    """Raised when an exam is authored for a course that does not exist."""

    pass


class InvalidExamError(ExamServiceError):
    """Raised when an authored exam could never be graded."""

    pass


class ExamPersistenceError(ExamServiceError):
    """Raised when an attempt or exam could not be stored. Nothing was written."""

    pass


@dataclass
class SubmitExamResult:
    """Outcome of an exam submission.

    Attributes:
        attempt: The persisted attempt.
        certificate: Certificate minted for a passing attempt, else None.
    """

    attempt: ExamAttempt
    certificate: Certificate | None = None

    @property
    def passed(self) -> bool:
        return self.attempt.status == AttemptStatus.PASSED.value

    def to_response(self) -> SubmitExamResponse:
        """Convert to the API response model."""
        return SubmitExamResponse(
            attempt=attempt_to_response(self.attempt),
            certificate_id=self.certificate.id if self.certificate else None,
            certificate_code=self.certificate.certificate_code if self.certificate else None,
        )


def attempt_to_response(attempt: ExamAttempt) -> ExamAttemptResponse:
    """Convert an attempt model to its response."""
    return ExamAttemptResponse(
        id=attempt.id,
        user_id=attempt.user_id,
        exam_id=attempt.exam_id,
        course_id=attempt.course_id,
        answers=list(attempt.answers),
        score=attempt.score,
        percentage=attempt.percentage,
        status=AttemptStatus(attempt.status),
        completed_at=attempt.completed_at,
    )


SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class ExamService:
    """Service for authoring and taking exams.

    Attributes:
        db: Async database session.
        notifications: Service used to email the result.
        certificates: Certificate service on the same session.
    """

    # Strong references to in-flight side effect tasks
    _background_tasks: set[asyncio.Task] = set()

    def __init__(
        self,
        db: AsyncSession,
        notifications: NotificationService | None = None,
        session_factory: SessionFactory | None = None,
        gamification_factory: Callable[[AsyncSession], GamificationService] = GamificationService,
    ) -> None:
        """Initialize exam service.

        Args:
            db: Async database session.
            notifications: Notification service, defaults to the shared instance.
            session_factory: Opens the separate session used for points,
                defaults to get_session().
            gamification_factory: Builds the points service on that session.
        """
        self.db = db
        self.notifications = notifications or get_notification_service()
        self.certificates = CertificateService(db)
        self._session_factory = session_factory or get_session
        self._gamification_factory = gamification_factory

    async def create_exam(
        self,
        data: CreateExamRequest,
        created_by: str,
    ) -> ExamSummaryResponse:
        """Create an exam with its questions.

        Args:
            data: Exam content including the answer key.
            created_by: Instructor or admin authoring the exam.

        Returns:
            Summary of the created exam.

        Raises:
            ExamCourseNotFoundError: If the course does not exist.
            InvalidExamError: If an answer key is out of range or the exam
                is worth no points.
            ExamPersistenceError: If the exam could not be stored.
        """
        for index, question in enumerate(data.questions, start=1):
            if question.correct_answer >= len(question.options):
                raise InvalidExamError(
                    f"Question {index}: correct_answer {question.correct_answer} "
                    f"is out of range for {len(question.options)} options"
                )

        total_points = sum(q.points for q in data.questions)
        if total_points <= 0:
            raise InvalidExamError("Exam must be worth at least one point")

        course = await self.db.get(Course, data.course_id)
        if not course:
            raise ExamCourseNotFoundError(f"Course {data.course_id} not found")

        exam = Exam(
            id=generate_uuid(),
            course_id=course.id,
            title=data.title,
            description=data.description,
            time_limit_minutes=data.time_limit_minutes,
            passing_score=data.passing_score,
            created_by=created_by,
        )
        exam.questions = [
            ExamQuestion(
                id=generate_uuid(),
                exam_id=exam.id,
                position=position,
                question_text=q.question_text,
                options=list(q.options),
                correct_answer=q.correct_answer,
                question_type=q.question_type.value,
                points=q.points,
            )
            for position, q in enumerate(data.questions)
        ]

        try:
            self.db.add(exam)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to create exam for course %s: %s", data.course_id, str(e))
            raise ExamPersistenceError(f"Could not store exam: {e}") from e

        logger.info(
            "Exam created: id=%s, course=%s, questions=%d, by=%s",
            exam.id,
            course.id,
            len(data.questions),
            created_by,
        )

        return ExamSummaryResponse(
            id=exam.id,
            course_id=course.id,
            title=data.title,
            description=data.description,
            time_limit_minutes=data.time_limit_minutes,
            passing_score=data.passing_score,
            question_count=len(data.questions),
            total_points=total_points,
        )

    async def list_course_exams(self, course_id: str) -> list[ExamSummaryResponse]:
        """List a course's exams, oldest first. Answer keys are not included."""
        result = await self.db.execute(
            select(Exam)
            .where(Exam.course_id == course_id)
            .options(selectinload(Exam.questions))
            .order_by(Exam.created_at)
        )
        return [
            ExamSummaryResponse(
                id=exam.id,
                course_id=exam.course_id,
                title=exam.title,
                description=exam.description,
                time_limit_minutes=exam.time_limit_minutes,
                passing_score=exam.passing_score,
                question_count=len(exam.questions),
                total_points=sum(q.points for q in exam.questions),
            )
            for exam in result.scalars().all()
        ]

    async def submit_exam(
        self,
        exam_id: str,
        user_id: str,
        answers: Sequence[int | None],
        now: datetime | None = None,
    ) -> SubmitExamResult:
        """Grade a submission and apply its consequences.

        Every call creates a new attempt. A passing attempt also mints a
        new certificate; earlier certificates for the same exam are kept.

        Args:
            exam_id: Exam being taken.
            user_id: Student submitting.
            answers: Chosen option index per question, None for unanswered.
            now: Submission instant, defaults to the current time.

        Returns:
            SubmitExamResult with the attempt and optional certificate.

        Raises:
            ExamNotFoundError: If the exam does not exist.
            EmptyExamError: If the exam has nothing to score.
            MissingCompletionDateError: If the owning enrollment is corrupt.
            ExamPersistenceError: If the attempt could not be stored.
        """
        now = now or utc_now()

        exam = await self._load_exam(exam_id)
        exam_title = exam.title

        score = score_answers(exam.questions, answers)
        status = grade(score.percentage, exam.passing_score)

        try:
            attempt = ExamAttempt(
                id=generate_uuid(),
                user_id=user_id,
                exam_id=exam.id,
                course_id=exam.course_id,
                answers=list(answers),
                score=score.score,
                percentage=score.percentage,
                status=status.value,
                completed_at=now,
            )
            self.db.add(attempt)
            await self.db.flush()

            certificate = None
            if status == AttemptStatus.PASSED:
                certificate = self.certificates.issue(
                    user_id=user_id,
                    course_id=exam.course_id,
                    exam_id=exam.id,
                    attempt_id=attempt.id,
                    issued_at=now,
                )

            await self._refresh_enrollment_compliance(user_id, exam, now)

            await self.db.commit()

        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Failed to store attempt: user=%s, exam=%s: %s",
                user_id,
                exam_id,
                str(e),
            )
            raise ExamPersistenceError(f"Could not store exam attempt: {e}") from e
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Exam submitted: user=%s, exam=%s, score=%d/%d (%.1f%%), status=%s",
            user_id,
            exam_id,
            score.score,
            score.total_possible,
            score.percentage,
            status.value,
        )

        result = SubmitExamResult(attempt=attempt, certificate=certificate)

        if status == AttemptStatus.PASSED:
            self._start_background(self._award_pass_points(user_id, exam_title))

        await self._dispatch_result_notification(
            user_id, exam_title, score.percentage, status.value
        )

        return result

    async def get_exam_for_student(self, exam_id: str) -> ExamDetailResponse:
        """Get an exam with its questions, without the answer key.

        Args:
            exam_id: Exam identifier.

        Returns:
            Exam details safe to show to a student.

        Raises:
            ExamNotFoundError: If the exam does not exist.
        """
        exam = await self._load_exam(exam_id)

        return ExamDetailResponse(
            id=exam.id,
            course_id=exam.course_id,
            title=exam.title,
            description=exam.description,
            time_limit_minutes=exam.time_limit_minutes,
            passing_score=exam.passing_score,
            questions=[
                QuestionView(
                    position=q.position,
                    question_text=q.question_text,
                    options=list(q.options),
                    question_type=q.question_type,
                    points=q.points,
                )
                for q in exam.questions
            ],
        )

    async def list_attempts(self, exam_id: str, user_id: str) -> list[ExamAttemptResponse]:
        """List a student's attempts on an exam, newest first."""
        result = await self.db.execute(
            select(ExamAttempt)
            .where(ExamAttempt.exam_id == exam_id, ExamAttempt.user_id == user_id)
            .order_by(ExamAttempt.completed_at.desc())
        )
        return [attempt_to_response(a) for a in result.scalars().all()]

    async def _load_exam(self, exam_id: str) -> Exam:
        result = await self.db.execute(
            select(Exam)
            .where(Exam.id == exam_id)
            .options(selectinload(Exam.questions), selectinload(Exam.course))
        )
        exam = result.scalar_one_or_none()
        if not exam:
            raise ExamNotFoundError(f"Exam {exam_id} not found")
        return exam

    async def _refresh_enrollment_compliance(
        self,
        user_id: str,
        exam: Exam,
        now: datetime,
    ) -> None:
        """Recompute compliance of the enrollment owning the exam's course.

        Enrollment status and progress are left alone; passing an exam does
        not complete the course.
        """
        result = await self.db.execute(
            select(Enrollment).where(
                Enrollment.user_id == user_id,
                Enrollment.course_id == exam.course_id,
            )
        )
        enrollment = result.scalar_one_or_none()
        if not enrollment:
            logger.debug(
                "No enrollment for user %s in course %s, compliance unchanged",
                user_id,
                exam.course_id,
            )
            return

        apply_compliance(enrollment, exam.course, now)

    def _start_background(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _award_pass_points(self, user_id: str, exam_title: str) -> None:
        try:
            async with self._session_factory() as session:
                await self._gamification_factory(session).award_points(
                    user_id, PASS_POINTS, f"Passed Exam: {exam_title}"
                )
        except Exception as e:
            logger.warning("Points award failed for user %s: %s", user_id, str(e))

    async def _dispatch_result_notification(
        self,
        user_id: str,
        exam_title: str,
        percentage: float,
        status: str,
    ) -> None:
        """Start the result email in the background."""
        try:
            user = await self.db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.warning("Cannot load user %s for result email: %s", user_id, str(e))
            return

        if not user or not user.email:
            logger.debug("No email address for user %s, result email skipped", user_id)
            return

        self._start_background(
            self._send_result_email(
                email=user.email,
                name=user.name,
                exam_title=exam_title,
                percentage=percentage,
                status=status,
            )
        )

    async def _send_result_email(
        self,
        email: str,
        name: str,
        exam_title: str,
        percentage: float,
        status: str,
    ) -> None:
        try:
            sent = await self.notifications.send_exam_result_email(
                email, name, exam_title, percentage, status
            )
            if not sent:
                logger.info("Result email to %s was not delivered", email)
        except Exception as e:
            logger.warning("Result email to %s failed: %s", email, str(e))
