# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification channels for delivering notifications.

- EmailChannel: Sends email notifications via SMTP

Usage:
    from src.infrastructure.notifications.channels import (
        EmailChannel,
        NotificationPayload,
    )

    payload = NotificationPayload(
        notification_type="exam_result",
        title="Exam Results: Fire Safety - Passed!",
        message="You scored 85%.",
        recipient_email="student@example.com",
    )

    result = await EmailChannel().send(payload)
"""

from src.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    NotificationPayload,
)
from src.infrastructure.notifications.channels.email import EmailChannel

__all__ = [
    # Base types
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "NotificationPayload",
    # Channels
    "EmailChannel",
]
