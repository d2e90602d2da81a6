"""
Day marking, today's auto-mark and monthly statistics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from worktrack.core.calendar import (DateLike, calendar_day, format_day,
                                     month_days, month_span)
from worktrack.core.config import settings
from worktrack.core.exceptions import ValidationError
from worktrack.models.attendance import (LEAVE_STATUSES, VALID_STATUSES,
                                         AttendanceRecord)
from worktrack.services.leave_codec import decode
from worktrack.services.sync import default_status
from worktrack.store.attendance_store import AttendanceStore, DayWrite
from worktrack.store.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyStats:
    year: int
    month: int
    weekdays: int
    work_from_office: int
    work_from_home: int
    absent_days: int
    today_status: str | None = None

    @property
    def total_working_days(self) -> int:
        return self.work_from_office + self.work_from_home

    @property
    def attendance_rate(self) -> int:
        if not self.weekdays:
            return 0
        return round(self.total_working_days / self.weekdays * 100)


async def mark_day(
    store: AttendanceStore,
    *,
    user_id: str,
    user_email: str | None,
    day: DateLike,
    status: str,
    notes: str | None = None,
) -> AttendanceRecord:
    """Set a day's status, replacing whatever was recorded for it."""
    if status not in VALID_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}', expected one of: " + ", ".join(VALID_STATUSES)
        )
    leave_category = is_paid = None
    if status in LEAVE_STATUSES:
        annotation = decode(notes)
        leave_category, is_paid = annotation.category.value, annotation.is_paid

    write = DayWrite(
        day=calendar_day(day),
        status=status,
        notes=notes,
        leave_category=leave_category,
        is_paid=is_paid,
    )
    record = await store.upsert_day(user_id=user_id, user_email=user_email, write=write)
    await store.commit()
    logger.info("Marked %s as %s for %s", write.day, status, user_id)
    return record


async def get_day_record(store: AttendanceStore, user_id: str, day: DateLike) -> AttendanceRecord | None:
    return await store.find_one_for_day(user_id, day)


async def auto_mark_today(
    store: AttendanceStore,
    users: UserStore,
    *,
    user_id: str,
    user_email: str | None,
    today: date,
) -> AttendanceRecord | None:
    """Record today from the WFH pattern unless it is a weekend or already marked."""
    if today.weekday() >= 5:
        return None
    existing = await store.find_one_for_day(user_id, today)
    if existing is not None:
        return existing

    leave_settings = await users.leave_settings(user_id)
    write = DayWrite(
        day=today,
        status=default_status(today, leave_settings.default_wfh_days),
        notes=settings.AUTO_MARK_NOTE,
    )
    if await store.insert_if_absent(user_id=user_id, user_email=user_email, write=write):
        logger.info("Auto-marked %s as %s for %s", today, write.status, user_id)
    await store.commit()
    return await store.find_one_for_day(user_id, today)


async def monthly_stats(
    store: AttendanceStore,
    *,
    user_id: str,
    year: int,
    month: int,
    today: date,
) -> MonthlyStats:
    records = [
        r for r in await store.find(user_id, *month_span(year, month))
        if calendar_day(r.date).weekday() < 5
    ]
    today_key = format_day(today)
    today_status = next(
        (r.status for r in records if format_day(r.date) == today_key), None
    )
    return MonthlyStats(
        year=year,
        month=month,
        weekdays=sum(1 for d in month_days(year, month) if d.weekday() < 5),
        work_from_office=sum(1 for r in records if r.status == "present"),
        work_from_home=sum(1 for r in records if r.status == "wfh"),
        absent_days=sum(1 for r in records if r.status in LEAVE_STATUSES),
        today_status=today_status,
    )
