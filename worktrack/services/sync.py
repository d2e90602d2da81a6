"""
Backfill engine — fills unmarked past weekdays of a month.

A day is only eligible once it is strictly before *today*; weekends and
days that already carry a record are skipped.  Existing records are never
touched, and the atomic insert-if-absent in the store makes reruns (and
concurrent runs) report the already-taken days as skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from worktrack.core.calendar import (DAY_NAMES, check_month, format_day,
                                     month_days, month_span)
from worktrack.core.config import settings
from worktrack.core.exceptions import AttendanceError, NotFoundError
from worktrack.store.attendance_store import AttendanceStore, DayWrite
from worktrack.store.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    user_id: str
    user_email: str | None = None
    synced_dates: list[str] = field(default_factory=list)
    skipped_dates: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def default_status(day: date, wfh_days: Iterable[str]) -> str:
    """``wfh`` on the user's work-from-home weekdays, ``present`` otherwise."""
    return "wfh" if DAY_NAMES[day.weekday()] in set(wfh_days) else "present"


async def sync_month(
    store: AttendanceStore,
    users: UserStore,
    *,
    user_id: str,
    year: int,
    month: int,
    today: date,
) -> SyncResult:
    check_month(year, month)
    user = await users.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    leave_settings = await users.leave_settings(user_id)

    existing = {format_day(r.date) for r in await store.find(user_id, *month_span(year, month))}
    result = SyncResult(user_id=user_id, user_email=user.email)

    for day in month_days(year, month):
        if day >= today:
            break
        if day.weekday() >= 5:
            continue
        key = format_day(day)
        if key in existing:
            result.skipped_dates.append(key)
            continue
        write = DayWrite(
            day=day,
            status=default_status(day, leave_settings.default_wfh_days),
            notes=settings.SYNC_NOTE,
        )
        if await store.insert_if_absent(user_id=user_id, user_email=user.email, write=write):
            result.synced_dates.append(key)
        else:
            result.skipped_dates.append(key)

    await store.commit()
    logger.info(
        "Synced %04d-%02d for %s: %d written, %d skipped",
        year, month, user_id, len(result.synced_dates), len(result.skipped_dates),
    )
    return result


async def sync_users(
    store: AttendanceStore,
    users: UserStore,
    *,
    user_ids: Iterable[str],
    year: int,
    month: int,
    today: date,
) -> list[SyncResult]:
    """Sync several users; one user's failure is reported, not propagated."""
    check_month(year, month)
    results: list[SyncResult] = []
    for user_id in user_ids:
        try:
            results.append(
                await sync_month(store, users, user_id=user_id, year=year, month=month, today=today)
            )
        except AttendanceError as exc:
            logger.warning("Sync failed for %s: %s", user_id, exc.message)
            results.append(SyncResult(user_id=user_id, error=exc.message))
        except SQLAlchemyError as exc:
            await store.rollback()
            logger.error("Sync failed for %s: %s", user_id, exc, exc_info=True)
            results.append(SyncResult(user_id=user_id, error="Database error during sync"))
    return results
