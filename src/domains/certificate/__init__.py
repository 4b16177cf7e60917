# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Certificate domain package."""

from src.domains.certificate.service import (
    CERTIFICATE_CODE_PREFIX,
    CertificateNotFoundError,
    CertificateService,
    CertificateServiceError,
    generate_certificate_code,
)

__all__ = [
    "CertificateService",
    "CertificateServiceError",
    "CertificateNotFoundError",
    "CERTIFICATE_CODE_PREFIX",
    "generate_certificate_code",
]
