# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer.

This package contains domain services that encapsulate business logic.

Domains:
    auth: Access token validation.
    certificate: Certificate issuance and verification.
    compliance: Compliance status engine and compliance reporting.
    enrollment: Course enrollment and module progress.
    exam: Exam scoring and the exam submission pipeline.
    gamification: Points and badge milestones.
"""
