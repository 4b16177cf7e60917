# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from src.utils.datetime import (
    add_days,
    ensure_utc,
    utc_now,
    whole_days_between,
)
from src.utils.logging import (
    bind_context,
    clear_context,
    get_context,
    get_logger,
    setup_logging,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "get_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "add_days",
    "whole_days_between",
]
