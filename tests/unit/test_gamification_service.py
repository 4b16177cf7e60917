# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Gamification service."""

import pytest
from sqlalchemy.exc import OperationalError

from src.domains.gamification.service import GamificationService
from src.infrastructure.database.models import Badge, UserBadge


@pytest.fixture
def gamification_service(mock_db):
    """Create gamification service with mock database."""
    return GamificationService(db=mock_db)


def _badge(badge_id: str, threshold: int) -> Badge:
    return Badge(
        id=badge_id,
        name=f"{threshold} Points",
        description=f"Earned {threshold} points",
        icon="star",
        criteria_type="points_milestone",
        criteria_value=threshold,
    )


class TestAwardPoints:
    """Tests for award_points."""

    @pytest.mark.asyncio
    async def test_adds_points(self, gamification_service, mock_db, result_of, sample_user):
        sample_user.points = 10
        sample_user.badges = []
        mock_db.get.return_value = sample_user
        mock_db.execute.return_value = result_of([])

        award = await gamification_service.award_points("user-1", 50, "Passed Exam: Fire Safety")

        assert award.total_points == 60
        assert award.badges_awarded == []
        assert sample_user.points == 60
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_grants_reached_milestones_once(
        self, gamification_service, mock_db, result_of, sample_user
    ):
        held = _badge("badge-50", 50)
        sample_user.points = 60
        sample_user.badges = [UserBadge(id="ub-1", user_id="user-1", badge_id=held.id)]
        mock_db.get.return_value = sample_user
        mock_db.execute.return_value = result_of([held, _badge("badge-100", 100), _badge("badge-500", 500)])

        award = await gamification_service.award_points("user-1", 50, "Passed Exam: Fire Safety")

        assert award.badges_awarded == ["100 Points"]
        granted = [c.args[0] for c in mock_db.add.call_args_list]
        assert len(granted) == 1
        assert granted[0].badge_id == "badge-100"

    @pytest.mark.asyncio
    async def test_missing_user_is_ignored(self, gamification_service, mock_db):
        mock_db.get.return_value = None

        award = await gamification_service.award_points("ghost", 50, "Passed Exam")

        assert award is None
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storage_failure_rolls_back(
        self, gamification_service, mock_db, result_of, sample_user
    ):
        sample_user.badges = []
        mock_db.get.return_value = sample_user
        mock_db.execute.return_value = result_of([])
        mock_db.commit.side_effect = OperationalError("UPDATE", {}, Exception("deadlock"))

        award = await gamification_service.award_points("user-1", 50, "Passed Exam")

        assert award is None
        mock_db.rollback.assert_awaited_once()
