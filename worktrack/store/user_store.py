"""
User lookups and the per-user leave settings read by the accounting engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.core.config import settings
from worktrack.core.exceptions import NotFoundError
from worktrack.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaveQuota:
    planned: int
    unplanned: int
    parental: int

    @classmethod
    def defaults(cls) -> "LeaveQuota":
        return cls(
            planned=settings.DEFAULT_PLANNED_QUOTA,
            unplanned=settings.DEFAULT_UNPLANNED_QUOTA,
            parental=settings.DEFAULT_PARENTAL_QUOTA,
        )


@dataclass(frozen=True)
class UserLeaveSettings:
    quota: LeaveQuota = field(default_factory=LeaveQuota.defaults)
    default_wfh_days: frozenset[str] = frozenset()
    onboarding_completed: bool = False


def _pick(value: int | None, default: int) -> int:
    return default if value is None else int(value)


class UserStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> User | None:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.email))
        return list(result.scalars().all())

    async def leave_settings(self, user_id: str) -> UserLeaveSettings:
        """Settings for *user_id*; missing users or values fall back to defaults."""
        user = await self.get(user_id)
        if user is None:
            logger.debug("No settings for user %s, using defaults", user_id)
            return UserLeaveSettings()
        defaults = LeaveQuota.defaults()
        return UserLeaveSettings(
            quota=LeaveQuota(
                planned=_pick(user.planned_quota, defaults.planned),
                unplanned=_pick(user.unplanned_quota, defaults.unplanned),
                parental=_pick(user.parental_quota, defaults.parental),
            ),
            default_wfh_days=frozenset(user.default_wfh_days or ()),
            onboarding_completed=bool(user.onboarding_completed),
        )

    async def update_settings(
        self,
        user_id: str,
        *,
        quota: LeaveQuota,
        default_wfh_days: list[str],
    ) -> User:
        user = await self.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.planned_quota = quota.planned
        user.unplanned_quota = quota.unplanned
        user.parental_quota = quota.parental
        user.default_wfh_days = list(default_wfh_days)
        user.onboarding_completed = True
        user.updated_at = datetime.now(timezone.utc)
        await self.session.commit()
        await self.session.refresh(user)
        return user
