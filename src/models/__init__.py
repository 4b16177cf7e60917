# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request/response models and shared enumerations.

Import from the submodules directly:
- common: status enumerations
- enrollment, exam, compliance, certificate: API schemas per domain
"""
