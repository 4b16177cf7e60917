# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Compliance domain package.

- engine: pure compliance status computation
- service: compliance reports and explicit refresh
"""

from src.domains.compliance.engine import (
    EXPIRING_SOON_WINDOW_DAYS,
    ComplianceError,
    ComplianceResult,
    MissingCompletionDateError,
    apply_compliance,
    compute_status,
    days_until_expiry,
)
from src.domains.compliance.service import (
    ComplianceEnrollmentNotFoundError,
    ComplianceService,
    ComplianceServiceError,
)

__all__ = [
    # Engine
    "EXPIRING_SOON_WINDOW_DAYS",
    "ComplianceError",
    "ComplianceResult",
    "MissingCompletionDateError",
    "apply_compliance",
    "compute_status",
    "days_until_expiry",
    # Service
    "ComplianceService",
    "ComplianceServiceError",
    "ComplianceEnrollmentNotFoundError",
]
