# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gamification domain package: points and milestone badges."""

from src.domains.gamification.service import GamificationService, PointsAward

__all__ = [
    "GamificationService",
    "PointsAward",
]
