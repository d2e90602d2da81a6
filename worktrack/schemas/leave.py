"""Pydantic schemas for leave requests, quota snapshots and leave reports."""

from __future__ import annotations

from pydantic import BaseModel, Field

from worktrack.services.leave_codec import UNPAID_REQUEST_TYPE
from worktrack.services.quota import CategoryBalance as _Balance
from worktrack.services.quota import YearlyQuotaSnapshot
from worktrack.services.reports import LeaveEntry


# ── Request / edit ──────────────────────────────────────────────────
class LeaveRequest(BaseModel):
    leave_type: str  # planned-leave | unplanned-leave | parental-leave
    start_date: str
    end_date: str
    notes: str | None = Field(default=None, max_length=400)


class LeaveRequestResponse(BaseModel):
    success: bool = True
    leave_type: str
    paid_days: int
    unpaid_days: int
    paid_dates: list[str]
    unpaid_dates: list[str]
    message: str


class LeaveEdit(BaseModel):
    original_date: str
    new_date: str | None = None
    leave_type: str | None = Field(
        default=None,
        description=f"planned-leave | unplanned-leave | parental-leave | {UNPAID_REQUEST_TYPE}",
    )
    is_paid: bool | None = None
    notes: str | None = Field(default=None, max_length=400)


# ── Quota snapshot ──────────────────────────────────────────────────
class CategoryBalanceRead(BaseModel):
    used: int
    quota: int
    remaining: int

    @classmethod
    def of(cls, balance: _Balance) -> "CategoryBalanceRead":
        return cls(used=balance.used, quota=balance.quota, remaining=balance.remaining)


class QuotaSnapshotRead(BaseModel):
    year: int
    planned: CategoryBalanceRead
    unplanned: CategoryBalanceRead
    parental: CategoryBalanceRead
    unpaid: int
    other: int
    total_used: int
    total_quota: int
    total_remaining: int

    @classmethod
    def of(cls, snapshot: YearlyQuotaSnapshot) -> "QuotaSnapshotRead":
        return cls(
            year=snapshot.year,
            planned=CategoryBalanceRead.of(snapshot.planned),
            unplanned=CategoryBalanceRead.of(snapshot.unplanned),
            parental=CategoryBalanceRead.of(snapshot.parental),
            unpaid=snapshot.unpaid_count,
            other=snapshot.other_count,
            total_used=snapshot.total_used,
            total_quota=snapshot.total_quota,
            total_remaining=snapshot.total_remaining,
        )


# ── Leave listing / reports ────────────────────────────────────────
class LeaveEntryRead(BaseModel):
    date: str
    day_name: str
    status: str
    leave_category: str
    leave_type: str  # label, e.g. "Planned Leave" / "Unpaid Leave"
    display_type: str  # e.g. "Planned (Unpaid)"
    is_paid: bool
    notes: str | None = None

    @classmethod
    def of(cls, entry: LeaveEntry) -> "LeaveEntryRead":
        annotation = entry.annotation
        return cls(
            date=entry.date,
            day_name=entry.day_name,
            status=entry.status,
            leave_category=annotation.category.value,
            leave_type=annotation.label,
            display_type=annotation.display_type,
            is_paid=annotation.is_paid,
            notes=annotation.free_text or None,
        )


class YearlyLeavesReportResponse(BaseModel):
    year: int
    records: list[LeaveEntryRead]
    leaves_by_month: dict[str, list[LeaveEntryRead]]
    quota: QuotaSnapshotRead
    user_id: str | None = None
    user_email: str | None = None


class MigrationResponse(BaseModel):
    migrated: int
