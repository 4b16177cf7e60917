# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notification channel using async SMTP.

Sends multipart (plain text + HTML) messages with aiosmtplib. The
channel is inert until SMTP host, username, password and sender address
are configured (see SMTPSettings); sends are then reported as skipped.
"""

import html
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

import aiosmtplib

from src.core.config import SMTPSettings, get_settings
from src.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)


class EmailChannel(BaseChannel):
    """Email notification channel using async SMTP."""

    def __init__(self, settings: SMTPSettings | None = None) -> None:
        """Initialize the email channel.

        Args:
            settings: SMTP settings, defaults to the application settings.
        """
        super().__init__()
        self._settings = settings or get_settings().smtp

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.EMAIL

    @property
    def is_configured(self) -> bool:
        """Whether SMTP delivery is possible."""
        return self._settings.is_configured

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send email notification via SMTP.

        Args:
            payload: The notification payload.

        Returns:
            ChannelResult with delivery status.
        """
        if not self.is_configured:
            return self.create_skipped_result("SMTP configuration incomplete")

        if not payload.recipient_email:
            return self.create_skipped_result("No recipient email address")

        message = self._build_email_message(payload)

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.host,
                port=self._settings.port,
                username=self._settings.username,
                password=self._settings.password.get_secret_value(),
                start_tls=self._settings.use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            self.logger.error(
                "Failed to send email to %s: %s",
                payload.recipient_email,
                str(e),
                exc_info=True,
            )
            return self.create_failure_result(
                f"SMTP error: {str(e)}",
                metadata={"recipient": payload.recipient_email},
            )

        self.logger.info("Email sent to %s: %s", payload.recipient_email, payload.title)

        return self.create_success_result(
            message_id=message["Message-ID"],
            metadata={"recipient": payload.recipient_email},
        )

    def _build_email_message(self, payload: NotificationPayload) -> MIMEMultipart:
        """Build MIME email message.

        Args:
            payload: Notification payload.

        Returns:
            MIMEMultipart message ready to send.
        """
        message = MIMEMultipart("alternative")

        message["From"] = f"{self._settings.from_name} <{self._settings.from_email}>"
        message["To"] = payload.recipient_email
        message["Subject"] = payload.title
        message["Message-ID"] = make_msgid()

        message.attach(MIMEText(self._build_plain_text(payload), "plain", "utf-8"))
        message.attach(MIMEText(payload.html_body or self._build_html(payload), "html", "utf-8"))

        return message

    def _build_plain_text(self, payload: NotificationPayload) -> str:
        """Build plain text email content."""
        lines = []
        if payload.recipient_name:
            lines.extend([f"Hello {payload.recipient_name},", ""])

        lines.extend([
            payload.message,
            "",
            "Best regards,",
            self._settings.from_name,
        ])

        return "\n".join(lines)

    def _build_html(self, payload: NotificationPayload) -> str:
        """Build a generic HTML body from title and message."""
        title = html.escape(payload.title)
        body = html.escape(payload.message).replace("\n", "<br>")

        return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>{title}</h2>
    <p>{body}</p>
    <p>Best regards,<br/>{html.escape(self._settings.from_name)}</p>
</div>
        """.strip()
