# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for Exams API endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.domains.compliance.engine import MissingCompletionDateError
from src.domains.exam.scoring import EmptyExamError
from src.domains.exam.service import (
    ExamCourseNotFoundError,
    ExamNotFoundError,
    ExamPersistenceError,
    InvalidExamError,
)
from src.models.common import AttemptStatus, QuestionType
from src.models.exam import (
    ExamAttemptResponse,
    ExamDetailResponse,
    ExamSummaryResponse,
    QuestionView,
    SubmitExamResponse,
)

COMPLETED_AT = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _attempt(status: AttemptStatus = AttemptStatus.PASSED, percentage: float = 100.0):
    return ExamAttemptResponse(
        id="attempt-1",
        user_id="user-1",
        exam_id="exam-1",
        course_id="course-1",
        answers=[0, 1],
        score=2 if status == AttemptStatus.PASSED else 0,
        percentage=percentage,
        status=status,
        completed_at=COMPLETED_AT,
    )


@pytest.fixture
def mock_exam_service():
    """Patch ExamService in the exams router."""
    with patch("src.api.v1.exams.ExamService") as service_cls:
        yield service_cls


class TestExamsAPIRouting:
    """Tests for exams API routing."""

    def test_routes_registered(self, app):
        """Test that exam routes are registered."""
        routes = [route.path for route in app.routes]

        assert "/api/v1/exams/{exam_id}" in routes
        assert "/api/v1/exams/{exam_id}/submit" in routes
        assert "/api/v1/exams/{exam_id}/attempts" in routes
        assert "/api/v1/exams" in routes
        assert "/api/v1/exams/course/{course_id}" in routes


class TestSubmitExam:
    """Tests for POST /exams/{exam_id}/submit."""

    def test_passing_submission(self, client, mock_exam_service, api_db, api_notifications):
        result = MagicMock()
        result.to_response.return_value = SubmitExamResponse(
            attempt=_attempt(),
            certificate_id="cert-1",
            certificate_code="CERT-0123456789ABCDEF",
        )
        mock_exam_service.return_value.submit_exam = AsyncMock(return_value=result)

        response = client.post("/api/v1/exams/exam-1/submit", json={"answers": [0, 1]})

        assert response.status_code == 201
        body = response.json()
        assert body["attempt"]["status"] == "passed"
        assert body["certificate_code"] == "CERT-0123456789ABCDEF"
        mock_exam_service.assert_called_once_with(api_db, notifications=api_notifications)
        mock_exam_service.return_value.submit_exam.assert_awaited_once_with(
            "exam-1", "user-1", [0, 1]
        )

    def test_failing_submission_has_no_certificate(self, client, mock_exam_service):
        result = MagicMock()
        result.to_response.return_value = SubmitExamResponse(
            attempt=_attempt(AttemptStatus.FAILED, 0.0),
        )
        mock_exam_service.return_value.submit_exam = AsyncMock(return_value=result)

        response = client.post("/api/v1/exams/exam-1/submit", json={"answers": [None, 3]})

        assert response.status_code == 201
        body = response.json()
        assert body["attempt"]["status"] == "failed"
        assert body["certificate_id"] is None

    def test_requires_authentication(self, client, auth_state, mock_exam_service):
        auth_state["user"] = None

        response = client.post("/api/v1/exams/exam-1/submit", json={"answers": [0]})

        assert response.status_code == 401
        mock_exam_service.assert_not_called()

    @pytest.mark.parametrize(
        ("error", "expected_status"),
        [
            (ExamNotFoundError("Exam exam-1 not found"), 404),
            (EmptyExamError("Exam has no questions"), 422),
            (MissingCompletionDateError("Enrollment e-1 is completed without completion date"), 409),
            (ExamPersistenceError("Could not store attempt"), 503),
        ],
    )
    def test_error_mapping(self, client, mock_exam_service, error, expected_status):
        mock_exam_service.return_value.submit_exam = AsyncMock(side_effect=error)

        response = client.post("/api/v1/exams/exam-1/submit", json={"answers": [0]})

        assert response.status_code == expected_status

    def test_invalid_answers_rejected(self, client, mock_exam_service):
        response = client.post("/api/v1/exams/exam-1/submit", json={"answers": ["a"]})

        assert response.status_code == 422
        mock_exam_service.return_value.submit_exam.assert_not_called()


class TestGetExam:
    """Tests for GET /exams/{exam_id}."""

    def test_returns_questions_without_answers(self, client, mock_exam_service):
        mock_exam_service.return_value.get_exam_for_student = AsyncMock(
            return_value=ExamDetailResponse(
                id="exam-1",
                course_id="course-1",
                title="Fire Safety Final",
                time_limit_minutes=30,
                passing_score=70,
                questions=[
                    QuestionView(
                        position=0,
                        question_text="Where is the nearest exit?",
                        options=["Left", "Right"],
                        question_type=QuestionType.MULTIPLE_CHOICE,
                        points=1,
                    )
                ],
            )
        )

        response = client.get("/api/v1/exams/exam-1")

        assert response.status_code == 200
        question = response.json()["questions"][0]
        assert "correct_answer" not in question
        assert question["options"] == ["Left", "Right"]

    def test_not_found(self, client, mock_exam_service):
        mock_exam_service.return_value.get_exam_for_student = AsyncMock(
            side_effect=ExamNotFoundError("missing")
        )

        response = client.get("/api/v1/exams/missing")

        assert response.status_code == 404


class TestListAttempts:
    """Tests for GET /exams/{exam_id}/attempts."""

    def test_lists_own_attempts(self, client, mock_exam_service):
        mock_exam_service.return_value.list_attempts = AsyncMock(return_value=[_attempt()])

        response = client.get("/api/v1/exams/exam-1/attempts")

        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == ["attempt-1"]
        mock_exam_service.return_value.list_attempts.assert_awaited_once_with("exam-1", "user-1")


EXAM_PAYLOAD = {
    "course_id": "course-1",
    "title": "Fire Safety Final",
    "questions": [
        {"question_text": "Exit?", "options": ["A", "B", "C"], "correct_answer": 2},
    ],
}


def _summary(exam_id: str = "exam-1") -> ExamSummaryResponse:
    return ExamSummaryResponse(
        id=exam_id,
        course_id="course-1",
        title="Fire Safety Final",
        time_limit_minutes=60,
        passing_score=70,
        question_count=1,
        total_points=1,
    )


class TestCreateExam:
    """Tests for POST /exams."""

    @pytest.mark.parametrize("role", ["instructor", "org_admin", "admin"])
    def test_authoring_roles_can_create(self, client, auth_state, make_user, mock_exam_service, role):
        auth_state["user"] = make_user("author-1", role=role)
        mock_exam_service.return_value.create_exam = AsyncMock(return_value=_summary())

        response = client.post("/api/v1/exams", json=EXAM_PAYLOAD)

        assert response.status_code == 201
        assert response.json()["question_count"] == 1
        call = mock_exam_service.return_value.create_exam.await_args
        assert call.args[0].questions[0].correct_answer == 2
        assert call.kwargs["created_by"] == "author-1"

    def test_student_forbidden(self, client, mock_exam_service):
        response = client.post("/api/v1/exams", json=EXAM_PAYLOAD)

        assert response.status_code == 403
        mock_exam_service.assert_not_called()

    def test_questions_required(self, client, auth_state, make_user, mock_exam_service):
        auth_state["user"] = make_user("author-1", role="instructor")

        response = client.post("/api/v1/exams", json={**EXAM_PAYLOAD, "questions": []})

        assert response.status_code == 422
        mock_exam_service.assert_not_called()

    @pytest.mark.parametrize(
        ("error", "expected_status"),
        [
            (ExamCourseNotFoundError("Course course-1 not found"), 404),
            (InvalidExamError("Question 1: correct_answer 5 is out of range"), 422),
            (ExamPersistenceError("Could not store exam"), 503),
        ],
    )
    def test_error_mapping(
        self, client, auth_state, make_user, mock_exam_service, error, expected_status
    ):
        auth_state["user"] = make_user("author-1", role="instructor")
        mock_exam_service.return_value.create_exam = AsyncMock(side_effect=error)

        response = client.post("/api/v1/exams", json=EXAM_PAYLOAD)

        assert response.status_code == expected_status


class TestListCourseExams:
    """Tests for GET /exams/course/{course_id}."""

    def test_lists_exams(self, client, mock_exam_service):
        mock_exam_service.return_value.list_course_exams = AsyncMock(
            return_value=[_summary("exam-1"), _summary("exam-2")]
        )

        response = client.get("/api/v1/exams/course/course-1")

        assert response.status_code == 200
        body = response.json()
        assert [e["id"] for e in body] == ["exam-1", "exam-2"]
        assert all("questions" not in e for e in body)
        mock_exam_service.return_value.list_course_exams.assert_awaited_once_with("course-1")

    def test_requires_authentication(self, client, auth_state, mock_exam_service):
        auth_state["user"] = None

        response = client.get("/api/v1/exams/course/course-1")

        assert response.status_code == 401
