"""
User settings endpoints — leave quota and default work-from-home days.

GET returns the stored values, falling back to the configured default
quotas for anything never set. POST replaces them and marks onboarding
as completed.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from worktrack.api.v1.deps import get_current_user, get_user_store
from worktrack.core.calendar import DAY_NAMES
from worktrack.models.user import User
from worktrack.schemas.user import (LeaveQuotaSchema, UserSettingsRead,
                                    UserSettingsUpdate)
from worktrack.store.user_store import LeaveQuota, UserStore

router = APIRouter(prefix="/user", tags=["settings"])
logger = logging.getLogger(__name__)


async def _read_settings(users: UserStore, user_id: str) -> UserSettingsRead:
    leave_settings = await users.leave_settings(user_id)
    quota = leave_settings.quota
    return UserSettingsRead(
        leave_quota=LeaveQuotaSchema(
            planned=quota.planned,
            unplanned=quota.unplanned,
            parental=quota.parental,
        ),
        default_wfh_days=sorted(leave_settings.default_wfh_days, key=DAY_NAMES.index),
        onboarding_completed=leave_settings.onboarding_completed,
    )


@router.get("/settings", response_model=UserSettingsRead)
async def get_settings(
    users: UserStore = Depends(get_user_store),
    user: User = Depends(get_current_user),
) -> UserSettingsRead:
    """Get the caller's leave quota and WFH pattern."""
    return await _read_settings(users, user.id)


@router.post("/settings", response_model=UserSettingsRead)
async def update_settings(
    body: UserSettingsUpdate,
    users: UserStore = Depends(get_user_store),
    user: User = Depends(get_current_user),
) -> UserSettingsRead:
    """Replace the caller's leave quota and WFH pattern."""
    await users.update_settings(
        user.id,
        quota=LeaveQuota(
            planned=body.leave_quota.planned,
            unplanned=body.leave_quota.unplanned,
            parental=body.leave_quota.parental,
        ),
        default_wfh_days=body.default_wfh_days,
    )
    logger.info("Settings updated for %s: %s", user.id, body.model_dump())
    return await _read_settings(users, user.id)
