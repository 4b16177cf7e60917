# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base classes for notification channels.

This module defines the abstract base class and shared types for all
notification channels. Each channel handles delivery through a specific
medium.

Channels report failures through ChannelResult instead of raising, so a
delivery problem never propagates into the operation that triggered it.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.utils.datetime import utc_now


class ChannelType(str, Enum):
    """Available notification channel types."""

    EMAIL = "email"


class DeliveryStatus(str, Enum):
    """Delivery status for a channel."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class NotificationPayload:
    """Payload for sending a notification.

    Attributes:
        notification_type: Kind of notification (e.g. exam_result).
        title: Notification title, used as email subject.
        message: Plain text body.
        recipient_email: Email address of the recipient.
        recipient_name: Display name of the recipient.
        recipient_id: User ID of the recipient, if known.
        html_body: Pre-rendered HTML body; channels fall back to a generic
            layout of title and message when absent.
        data: Additional structured data for the notification.
    """

    notification_type: str
    title: str
    message: str
    recipient_email: str
    recipient_name: str | None = None
    recipient_id: str | None = None
    html_body: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class ChannelResult:
    """Result of a channel send operation.

    Attributes:
        channel: Which channel was used.
        status: Delivery status.
        message_id: External message ID (if available).
        error_message: Error message if failed or skipped.
        metadata: Additional result metadata.
    """

    channel: ChannelType
    status: DeliveryStatus
    message_id: str | None = None
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def delivered(self) -> bool:
        """Whether the message left this service."""
        return self.status == DeliveryStatus.SENT


class BaseChannel(ABC):
    """Abstract base class for notification channels."""

    def __init__(self) -> None:
        """Initialize the channel."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        ...

    @abstractmethod
    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send a notification through this channel.

        Args:
            payload: The notification payload to send.

        Returns:
            ChannelResult with delivery status.
        """
        ...

    def create_success_result(
        self,
        message_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ChannelResult:
        """Create a successful channel result."""
        return ChannelResult(
            channel=self.channel_type,
            status=DeliveryStatus.SENT,
            message_id=message_id,
            metadata={"sent_at": utc_now().isoformat(), **(metadata or {})},
        )

    def create_failure_result(
        self,
        error_message: str,
        metadata: dict[str, Any] | None = None,
    ) -> ChannelResult:
        """Create a failed channel result."""
        return ChannelResult(
            channel=self.channel_type,
            status=DeliveryStatus.FAILED,
            error_message=error_message,
            metadata=metadata or {},
        )

    def create_skipped_result(self, reason: str) -> ChannelResult:
        """Create a skipped channel result."""
        return ChannelResult(
            channel=self.channel_type,
            status=DeliveryStatus.SKIPPED,
            error_message=reason,
        )
