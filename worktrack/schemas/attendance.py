"""Pydantic schemas for attendance marking, stats, reports and sync."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from worktrack.models.attendance import VALID_STATUSES


# ── Records ─────────────────────────────────────────────────────────
class AttendanceRead(BaseModel):
    id: int
    user_id: str
    day: str
    status: str
    notes: str | None = None
    leave_category: str | None = None
    is_paid: bool | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class MarkRequest(BaseModel):
    date: str | None = None  # YYYY-MM-DD, defaults to today
    status: str
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in VALID_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(VALID_STATUSES)}")
        return v


class TodayResponse(BaseModel):
    date: str
    weekday: str
    is_weekend: bool
    record: AttendanceRead | None = None


# ── Stats ───────────────────────────────────────────────────────────
class MonthlyStatsResponse(BaseModel):
    year: int
    month: int
    weekdays: int
    total_working_days: int
    work_from_office: int
    work_from_home: int
    absent_days: int
    attendance_rate: int
    today_status: str | None = None


# ── Monthly work-mode report ───────────────────────────────────────
class WorkDayRow(BaseModel):
    date: str
    day_name: str
    status: str
    notes: str | None = None

    model_config = {"from_attributes": True}


class MonthlyWorkSummary(BaseModel):
    total_work_days: int
    work_from_office: int
    work_from_home: int
    leaves: int
    unmarked: int


class MonthlyWorkReportResponse(BaseModel):
    year: int
    month: int
    month_name: str
    records: list[WorkDayRow]
    summary: MonthlyWorkSummary
    user_id: str | None = None
    user_email: str | None = None


# ── Sync ────────────────────────────────────────────────────────────
class SyncRequest(BaseModel):
    year: int
    month: int


class SyncResponse(BaseModel):
    user_id: str
    user_email: str | None = None
    synced_dates: list[str] = Field(default_factory=list)
    skipped_dates: list[str] = Field(default_factory=list)
    error: str | None = None

    model_config = {"from_attributes": True}


class AdminSyncRequest(SyncRequest):
    user_ids: list[str]

    @field_validator("user_ids")
    @classmethod
    def _user_ids(cls, v: list[str]) -> list[str]:
        ids = [u.strip() for u in v if u and u.strip()]
        if not ids:
            raise ValueError("At least one user id is required")
        return list(dict.fromkeys(ids))


class AdminSyncSummary(BaseModel):
    users: int
    succeeded: int
    failed: int
    total_synced: int
    total_skipped: int


class AdminSyncResponse(BaseModel):
    year: int
    month: int
    results: list[SyncResponse]
    summary: AdminSyncSummary


# ── Health ──────────────────────────────────────────────────────────
class HealthResponse(BaseModel):
    db: bool


class DeleteResponse(BaseModel):
    success: bool
    message: str
