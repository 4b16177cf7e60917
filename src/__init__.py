"""LMS Compliance Core.

Compliance/recertification tracking and the exam-to-certificate pipeline
of the multi-tenant learning management backend.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
