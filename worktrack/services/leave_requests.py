"""
Leave request splitter plus single-day leave edit / delete.

A request covers the weekdays of ``[start, end]``.  The first ``paid_days``
of them, in chronological order, are charged to the category's remaining
quota; the rest are written as unpaid.  The whole batch is applied in one
transaction, so a failure leaves nothing behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from worktrack.core.calendar import (DateLike, calendar_day, format_day,
                                     range_span, weekdays_between)
from worktrack.core.exceptions import (ConflictError, NotFoundError,
                                       ValidationError)
from worktrack.models.attendance import LEAVE_STATUSES, AttendanceRecord
from worktrack.services.leave_codec import (UNPAID_REQUEST_TYPE,
                                            LeaveAnnotation, LeaveCategory,
                                            encode, parse_request_type)
from worktrack.services.quota import classify_record, compute_yearly_quota
from worktrack.store.attendance_store import AttendanceStore, DayWrite
from worktrack.store.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeavePlan:
    category: LeaveCategory
    weekdays: tuple[date, ...]
    paid_days: int
    free_text: str = ""

    @property
    def unpaid_days(self) -> int:
        return len(self.weekdays) - self.paid_days

    @property
    def paid_dates(self) -> list[str]:
        return [format_day(d) for d in self.weekdays[: self.paid_days]]

    @property
    def unpaid_dates(self) -> list[str]:
        return [format_day(d) for d in self.weekdays[self.paid_days:]]

    def writes(self) -> list[DayWrite]:
        writes = []
        for index, day in enumerate(self.weekdays):
            paid = index < self.paid_days
            writes.append(
                DayWrite(
                    day=day,
                    status="absent",
                    notes=encode(self.category, paid, self.free_text),
                    leave_category=self.category.value,
                    is_paid=paid,
                )
            )
        return writes


def plan_leave(
    category: LeaveCategory,
    weekdays: list[date],
    remaining: int,
    free_text: str | None = None,
) -> LeavePlan:
    ordered = tuple(sorted(weekdays))
    return LeavePlan(
        category=category,
        weekdays=ordered,
        paid_days=min(len(ordered), max(0, remaining)),
        free_text=(free_text or "").strip(),
    )


async def request_leave(
    store: AttendanceStore,
    users: UserStore,
    *,
    user_id: str,
    user_email: str | None,
    leave_type: str,
    start: DateLike,
    end: DateLike,
    notes: str | None = None,
) -> LeavePlan:
    category = parse_request_type(leave_type)
    start_day, end_day = calendar_day(start), calendar_day(end)
    if end_day < start_day:
        raise ValidationError("End date must not be before start date")
    weekdays = weekdays_between(start_day, end_day)
    if not weekdays:
        raise ValidationError("The requested range contains no weekdays")

    requested = {format_day(d) for d in weekdays}
    existing = await store.find(user_id, *range_span(weekdays[0], weekdays[-1]), statuses=LEAVE_STATUSES)
    conflicts = sorted({format_day(r.date) for r in existing} & requested)
    if conflicts:
        raise ConflictError(
            "Leave already exists on: " + ", ".join(conflicts),
            dates=conflicts,
        )

    snapshot = await compute_yearly_quota(store, users, user_id, start_day.year)
    plan = plan_leave(category, weekdays, snapshot.balance(category).remaining, notes)

    try:
        await store.apply(user_id=user_id, user_email=user_email, writes=plan.writes())
        await store.commit()
    except SQLAlchemyError:
        await store.rollback()
        raise

    logger.info(
        "Leave for %s (%s): %d paid, %d unpaid, %s..%s",
        user_id, category.value, plan.paid_days, plan.unpaid_days,
        format_day(start_day), format_day(end_day),
    )
    return plan


async def edit_leave(
    store: AttendanceStore,
    *,
    user_id: str,
    original_date: DateLike,
    new_date: DateLike | None = None,
    leave_type: str | None = None,
    is_paid: bool | None = None,
    notes: str | None = None,
) -> AttendanceRecord:
    """Rewrite one leave day in place. Quota is not re-checked."""
    record = await store.find_one_for_day(user_id, original_date, statuses=LEAVE_STATUSES)
    if record is None:
        raise NotFoundError(f"No leave found on {format_day(original_date)}")

    current = classify_record(record)
    category, paid = current.category, current.is_paid
    if leave_type:
        if leave_type.strip().lower() == UNPAID_REQUEST_TYPE:
            paid = False
        else:
            category, paid = parse_request_type(leave_type), True
    if is_paid is not None:
        paid = is_paid
    annotation = LeaveAnnotation(
        category=category,
        is_paid=paid,
        free_text=current.free_text if notes is None else notes.strip(),
    )

    fields: dict = {
        "status": "absent",
        "notes": annotation.encode(),
        "leave_category": annotation.category.value,
        "is_paid": annotation.is_paid,
    }
    if new_date is not None and calendar_day(new_date) != calendar_day(record.date):
        target = calendar_day(new_date)
        if await store.find_one_for_day(user_id, target) is not None:
            raise ConflictError(
                f"A record already exists on {format_day(target)}",
                dates=[format_day(target)],
            )
        fields["date"] = target

    try:
        await store.update(record, **fields)
        await store.commit()
    except SQLAlchemyError:
        await store.rollback()
        raise
    logger.info("Edited leave %s for %s -> %s", format_day(original_date), user_id, annotation.label)
    return record


async def delete_leave(store: AttendanceStore, *, user_id: str, day: DateLike) -> None:
    record = await store.find_one_for_day(user_id, day, statuses=LEAVE_STATUSES)
    if record is None:
        raise NotFoundError(f"No leave found on {format_day(day)}")
    await store.delete(record)
    await store.commit()
    logger.info("Deleted leave %s for %s", format_day(day), user_id)
