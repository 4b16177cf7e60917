# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gamification service for points and badge milestones.

award_points() is a best-effort side effect: callers never depend on it
succeeding, so it handles its own failures by rolling back its changes
and logging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.infrastructure.database.models import Badge, User, UserBadge, generate_uuid
from src.models.common import BadgeCriteria
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class PointsAward:
    """Outcome of a points award.

    Attributes:
        user_id: User who received the points.
        amount: Points added.
        total_points: User's balance after the award.
        badges_awarded: Names of badges unlocked by this award.
    """

    user_id: str
    amount: int
    total_points: int
    badges_awarded: list[str] = field(default_factory=list)


class GamificationService:
    """Service for awarding points and milestone badges.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize gamification service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def award_points(
        self,
        user_id: str,
        amount: int,
        reason: str,
    ) -> PointsAward | None:
        """Add points to a user and grant any points milestone badges.

        Args:
            user_id: User to reward.
            amount: Points to add.
            reason: Human-readable reason, logged with the award.

        Returns:
            PointsAward, or None if the user does not exist or the award
            could not be stored.
        """
        try:
            user = await self.db.get(User, user_id, options=[selectinload(User.badges)])
            if user is None:
                logger.warning("Cannot award points: user %s not found", user_id)
                return None

            user.points += amount

            result = await self.db.execute(
                select(Badge).where(Badge.criteria_type == BadgeCriteria.POINTS_MILESTONE.value)
            )
            milestones = result.scalars().all()

            held = {user_badge.badge_id for user_badge in user.badges}
            awarded: list[str] = []
            for badge in milestones:
                if badge.id in held or user.points < badge.criteria_value:
                    continue
                self.db.add(
                    UserBadge(
                        id=generate_uuid(),
                        user_id=user.id,
                        badge_id=badge.id,
                        awarded_at=utc_now(),
                    )
                )
                awarded.append(badge.name)

            await self.db.commit()

        except Exception:
            await self.db.rollback()
            logger.error(
                "Failed to award %d points to user %s (%s)",
                amount,
                user_id,
                reason,
                exc_info=True,
            )
            return None

        logger.info(
            "Awarded %d points to user %s for: %s (badges: %s)",
            amount,
            user_id,
            reason,
            ", ".join(awarded) or "none",
        )

        return PointsAward(
            user_id=user_id,
            amount=amount,
            total_points=user.points,
            badges_awarded=awarded,
        )
