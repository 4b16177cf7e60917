# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification service for student-facing messages.

Renders the message for a notification type and hands it to the
delivery channel. Channel problems come back as a False return value;
they are never raised to the caller.
"""

import html
import logging

from src.infrastructure.notifications.channels import (
    EmailChannel,
    NotificationPayload,
)
from src.models.common import AttemptStatus

logger = logging.getLogger(__name__)

EXAM_RESULT_NOTIFICATION = "exam_result"


class NotificationService:
    """Service for sending notifications to users.

    Attributes:
        email: Email delivery channel.
    """

    def __init__(self, email_channel: EmailChannel | None = None) -> None:
        """Initialize the notification service.

        Args:
            email_channel: Email channel, defaults to one built from settings.
        """
        self.email = email_channel or EmailChannel()

    async def send_exam_result_email(
        self,
        email: str,
        name: str,
        exam_title: str,
        percentage: float,
        status: AttemptStatus | str,
    ) -> bool:
        """Email a student the result of an exam attempt.

        Args:
            email: Student email address.
            name: Student display name.
            exam_title: Title of the exam.
            percentage: Attempt percentage; rounded for display.
            status: passed or failed.

        Returns:
            True if the email was handed to the SMTP server.
        """
        passed = AttemptStatus(status) == AttemptStatus.PASSED
        score = round(percentage)

        title = f"Exam Results: {exam_title} - {'Passed!' if passed else 'Failed'}"
        if passed:
            outcome = (
                "Congratulations on passing the exam! "
                "You can download your certificate from your dashboard."
            )
        else:
            outcome = (
                "Unfortunately, you did not pass this time. "
                "We encourage you to review the course materials and try again."
            )

        message = "\n".join([
            f"Here are your results for the exam: {exam_title}",
            f"Status: {'PASSED' if passed else 'FAILED'}",
            f"Score: {score}%",
            "",
            outcome,
        ])

        payload = NotificationPayload(
            notification_type=EXAM_RESULT_NOTIFICATION,
            title=title,
            message=message,
            recipient_email=email,
            recipient_name=name,
            html_body=self._render_exam_result_html(name, exam_title, score, passed, outcome),
            data={"exam_title": exam_title, "percentage": score, "passed": passed},
        )

        result = await self.email.send(payload)

        logger.info(
            "Exam result notification for %s: %s",
            email,
            result.status.value,
        )

        return result.delivered

    @staticmethod
    def _render_exam_result_html(
        name: str,
        exam_title: str,
        score: int,
        passed: bool,
        outcome: str,
    ) -> str:
        """Render the HTML body of the exam result email."""
        background, border, heading = (
            ("#D1FAE5", "#34D399", "#065F46") if passed else ("#FEE2E2", "#F87171", "#991B1B")
        )
        status_label = "PASSED" if passed else "FAILED"

        return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Hello {html.escape(name)},</h2>
    <p>Here are your results for the exam: <strong>{html.escape(exam_title)}</strong></p>
    <div style="padding: 15px; margin: 20px 0; border-radius: 5px;
                background-color: {background}; border: 1px solid {border};">
        <h3 style="margin-top: 0; color: {heading};">Status: {status_label}</h3>
        <p style="font-size: 18px; margin-bottom: 0;">Score: <strong>{score}%</strong></p>
    </div>
    <p>{html.escape(outcome)}</p>
    <br />
    <p>Best regards,<br/>The LMS Team</p>
</div>
        """.strip()


# Singleton instance
_notification_service: NotificationService | None = None


def get_notification_service() -> NotificationService:
    """Get the singleton notification service.

    Returns:
        NotificationService instance.
    """
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service


def reset_notification_service() -> None:
    """Drop the singleton so the next call rebuilds it from settings."""
    global _notification_service
    _notification_service = None
