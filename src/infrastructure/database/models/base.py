# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared column mixins for ORM models."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.utils.datetime import utc_now


def generate_uuid() -> str:
    """Generate a string UUID primary key."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Declarative base for all LMS tables."""

    pass


class TimestampMixin:
    """Adds created_at / updated_at columns maintained by the ORM."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
