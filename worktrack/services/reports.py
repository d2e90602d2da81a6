"""
Read-only reports: monthly work mode, yearly leaves, the admin "today"
overview, per-user metrics and the leave listing.
"""

from __future__ import annotations

import calendar as cal_mod
import logging
from dataclasses import dataclass, field
from datetime import date

from worktrack.core.calendar import (DAY_NAMES, calendar_day, day_span,
                                     format_day, is_weekend, month_days,
                                     month_span, weekday_name, year_span)
from worktrack.models.attendance import LEAVE_STATUSES, AttendanceRecord
from worktrack.services.leave_codec import LeaveAnnotation
from worktrack.services.quota import YearlyQuotaSnapshot, classify_record, tally
from worktrack.store.attendance_store import AttendanceStore
from worktrack.store.user_store import UserStore

logger = logging.getLogger(__name__)

UNMARKED = "unmarked"


# ── Monthly work mode ───────────────────────────────────────────────
@dataclass(frozen=True)
class WorkDayRow:
    date: str
    day_name: str
    status: str
    notes: str | None = None


@dataclass
class MonthlyWorkReport:
    year: int
    month: int
    rows: list[WorkDayRow] = field(default_factory=list)

    @property
    def month_name(self) -> str:
        return cal_mod.month_name[self.month]

    def summary(self) -> dict:
        def count(*statuses: str) -> int:
            return sum(1 for r in self.rows if r.status in statuses)

        return {
            "total_work_days": len(self.rows),
            "work_from_office": count("present"),
            "work_from_home": count("wfh"),
            "leaves": count(*LEAVE_STATUSES),
            "unmarked": count(UNMARKED),
        }


async def monthly_work_report(
    store: AttendanceStore,
    *,
    user_id: str,
    year: int,
    month: int,
) -> MonthlyWorkReport:
    by_day = {format_day(r.date): r for r in await store.find(user_id, *month_span(year, month))}
    report = MonthlyWorkReport(year=year, month=month)
    for day in month_days(year, month):
        if day.weekday() >= 5:
            continue
        record = by_day.get(format_day(day))
        report.rows.append(
            WorkDayRow(
                date=format_day(day),
                day_name=weekday_name(day),
                status=record.status if record else UNMARKED,
                notes=record.notes if record else None,
            )
        )
    return report


# ── Leaves ──────────────────────────────────────────────────────────
@dataclass(frozen=True)
class LeaveEntry:
    date: str
    day_name: str
    status: str
    annotation: LeaveAnnotation

    @classmethod
    def from_record(cls, record: AttendanceRecord) -> "LeaveEntry":
        return cls(
            date=format_day(record.date),
            day_name=weekday_name(record.date),
            status=record.status,
            annotation=classify_record(record),
        )

    @property
    def month_name(self) -> str:
        return cal_mod.month_name[calendar_day(self.date).month]


async def list_leaves(store: AttendanceStore, *, user_id: str, year: int) -> list[LeaveEntry]:
    records = await store.find(user_id, *year_span(year), statuses=LEAVE_STATUSES)
    return [LeaveEntry.from_record(r) for r in records]


@dataclass
class YearlyLeavesReport:
    year: int
    entries: list[LeaveEntry]
    quota: YearlyQuotaSnapshot

    def by_month(self) -> dict[str, list[LeaveEntry]]:
        grouped: dict[str, list[LeaveEntry]] = {}
        for entry in self.entries:
            grouped.setdefault(entry.month_name, []).append(entry)
        return grouped


async def yearly_leaves_report(
    store: AttendanceStore,
    users: UserStore,
    *,
    user_id: str,
    year: int,
) -> YearlyLeavesReport:
    records = await store.find(user_id, *year_span(year), statuses=LEAVE_STATUSES)
    leave_settings = await users.leave_settings(user_id)
    return YearlyLeavesReport(
        year=year,
        entries=[LeaveEntry.from_record(r) for r in records],
        quota=tally(records, leave_settings.quota, year),
    )


# ── Admin: today ────────────────────────────────────────────────────
@dataclass(frozen=True)
class UserDayStatus:
    user_id: str
    email: str
    name: str | None
    is_admin: bool
    status: str | None
    notes: str | None


@dataclass
class TodayOverview:
    today: date
    users: list[UserDayStatus]

    @property
    def is_weekend(self) -> bool:
        return is_weekend(self.today)

    @property
    def formatted(self) -> str:
        return (
            f"{weekday_name(self.today)}, {cal_mod.month_name[self.today.month]} "
            f"{self.today.day}, {self.today.year}"
        )

    def summary(self) -> dict:
        statuses = [u.status for u in self.users]
        return {
            "total": len(statuses),
            "present": statuses.count("present"),
            "wfh": statuses.count("wfh"),
            "leave": sum(1 for s in statuses if s in LEAVE_STATUSES),
            "not_marked": statuses.count(None),
        }


async def today_overview(store: AttendanceStore, users: UserStore, *, today: date) -> TodayOverview:
    by_user = {r.user_id: r for r in await store.find(None, *day_span(today))}
    rows = []
    for user in await users.list_all():
        record = by_user.get(user.id)
        rows.append(
            UserDayStatus(
                user_id=user.id,
                email=user.email,
                name=user.name,
                is_admin=bool(user.is_admin),
                status=record.status if record else None,
                notes=record.notes if record else None,
            )
        )
    logger.debug("Today overview for %s: %d users", today, len(rows))
    return TodayOverview(today=today, users=rows)


# ── Admin: user metrics ─────────────────────────────────────────────
RECENT_ACTIVITY_LIMIT = 10


@dataclass
class ModeCounts:
    present: int = 0
    wfh: int = 0
    leave: int = 0

    def add(self, status: str) -> None:
        if status == "present":
            self.present += 1
        elif status == "wfh":
            self.wfh += 1
        elif status in LEAVE_STATUSES:
            self.leave += 1


@dataclass
class WeekdayPattern:
    day_name: str
    total: int = 0
    present: int = 0
    wfh: int = 0


@dataclass
class UserMetrics:
    """Year-at-a-glance view of one user for the admin dashboard."""

    year: int
    yearly: ModeCounts
    months: list[ModeCounts]
    day_pattern: list[WeekdayPattern]
    quota: YearlyQuotaSnapshot
    recent: list[AttendanceRecord]
    default_wfh_days: list[str]

    def monthly_breakdown(self) -> list[tuple[int, str, ModeCounts]]:
        return [(i, cal_mod.month_name[i], counts) for i, counts in enumerate(self.months, start=1)]


async def user_metrics(
    store: AttendanceStore,
    users: UserStore,
    *,
    user_id: str,
    year: int,
    recent_limit: int = RECENT_ACTIVITY_LIMIT,
) -> UserMetrics:
    records = await store.find(user_id, *year_span(year))
    leave_settings = await users.leave_settings(user_id)

    yearly = ModeCounts()
    months = [ModeCounts() for _ in range(12)]
    pattern = {name: WeekdayPattern(name) for name in DAY_NAMES[:5]}
    for record in records:
        day = calendar_day(record.date)
        yearly.add(record.status)
        months[day.month - 1].add(record.status)
        if day.weekday() < 5:
            slot = pattern[DAY_NAMES[day.weekday()]]
            slot.total += 1
            if record.status == "present":
                slot.present += 1
            elif record.status == "wfh":
                slot.wfh += 1

    return UserMetrics(
        year=year,
        yearly=yearly,
        months=months,
        day_pattern=list(pattern.values()),
        quota=tally(records, leave_settings.quota, year),
        recent=list(reversed(records))[:recent_limit],
        default_wfh_days=sorted(leave_settings.default_wfh_days, key=DAY_NAMES.index),
    )
