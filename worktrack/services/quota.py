"""
Quota ledger — yearly used/remaining leave per category.

Nothing here is persisted: the snapshot is recomputed from the user's leave
records on every call, so edits that bypass the quota arithmetic can never
leave a stale balance behind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from worktrack.core.calendar import year_span
from worktrack.models.attendance import LEAVE_STATUSES, AttendanceRecord
from worktrack.services.leave_codec import (QUOTA_CATEGORIES, LeaveAnnotation,
                                            LeaveCategory, decode)
from worktrack.store.attendance_store import AttendanceStore
from worktrack.store.user_store import LeaveQuota, UserStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryBalance:
    used: int
    quota: int

    @property
    def remaining(self) -> int:
        return max(0, self.quota - self.used)


@dataclass(frozen=True)
class YearlyQuotaSnapshot:
    year: int
    planned: CategoryBalance
    unplanned: CategoryBalance
    parental: CategoryBalance
    unpaid_count: int = 0
    other_count: int = 0

    def balance(self, category: LeaveCategory) -> CategoryBalance:
        if category not in QUOTA_CATEGORIES:
            raise KeyError(f"No quota for leave category {category!r}")
        return getattr(self, LeaveCategory(category).value)

    @property
    def total_used(self) -> int:
        """Paid days only; unpaid days never consume quota."""
        return self.planned.used + self.unplanned.used + self.parental.used

    @property
    def total_quota(self) -> int:
        return self.planned.quota + self.unplanned.quota + self.parental.quota

    @property
    def total_remaining(self) -> int:
        return max(0, self.total_quota - self.total_used)


def classify_record(record: AttendanceRecord) -> LeaveAnnotation:
    """Leave annotation of a record, preferring the structured columns.

    Rows written before the structured columns existed are classified from
    their notes alone; a note without a label is ``other`` whatever the status.
    """
    decoded = decode(record.notes)
    if record.leave_category is not None:
        return LeaveAnnotation(
            category=LeaveCategory(record.leave_category),
            is_paid=record.is_paid is not False,
            free_text=decoded.free_text,
        )
    return decoded


def tally(records: Iterable[AttendanceRecord], quota: LeaveQuota, year: int) -> YearlyQuotaSnapshot:
    used = {category: 0 for category in QUOTA_CATEGORIES}
    unpaid = other = 0
    for record in records:
        if not record.is_leave:
            continue
        annotation = classify_record(record)
        if not annotation.is_paid:
            unpaid += 1
        elif annotation.category in used:
            used[annotation.category] += 1
        else:
            other += 1

    return YearlyQuotaSnapshot(
        year=year,
        planned=CategoryBalance(used[LeaveCategory.PLANNED], quota.planned),
        unplanned=CategoryBalance(used[LeaveCategory.UNPLANNED], quota.unplanned),
        parental=CategoryBalance(used[LeaveCategory.PARENTAL], quota.parental),
        unpaid_count=unpaid,
        other_count=other,
    )


async def compute_yearly_quota(
    store: AttendanceStore,
    users: UserStore,
    user_id: str,
    year: int,
) -> YearlyQuotaSnapshot:
    start, end = year_span(year)
    records = await store.find(user_id, start, end, statuses=LEAVE_STATUSES)
    leave_settings = await users.leave_settings(user_id)
    snapshot = tally(records, leave_settings.quota, year)
    logger.debug(
        "Quota for %s/%d: used=%d unpaid=%d",
        user_id, year, snapshot.total_used, snapshot.unpaid_count,
    )
    return snapshot
