# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification system.

Delivers student-facing messages (currently exam results) by email.

Usage:
    from src.infrastructure.notifications import get_notification_service

    sent = await get_notification_service().send_exam_result_email(
        email="student@example.com",
        name="Ada",
        exam_title="Fire Safety",
        percentage=85.0,
        status="passed",
    )

Configuration (environment variables):
- SMTP_HOST: SMTP server hostname
- SMTP_PORT: SMTP server port (default: 587)
- SMTP_USERNAME: SMTP authentication username
- SMTP_PASSWORD: SMTP authentication password
- SMTP_FROM_EMAIL: Sender email address
- SMTP_FROM_NAME: Sender display name
"""

from src.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    EmailChannel,
    NotificationPayload,
)
from src.infrastructure.notifications.service import (
    NotificationService,
    get_notification_service,
    reset_notification_service,
)

__all__ = [
    # Service
    "NotificationService",
    "get_notification_service",
    "reset_notification_service",
    # Channel types
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "NotificationPayload",
    # Channels
    "EmailChannel",
]
