"""Pydantic schemas for users, their leave settings and the admin views."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from worktrack.core.calendar import DAY_NAMES
from worktrack.schemas.attendance import AttendanceRead
from worktrack.schemas.leave import QuotaSnapshotRead


class UserRead(BaseModel):
    id: str
    email: str
    name: str | None = None
    is_admin: bool = False
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class AdminCheckResponse(BaseModel):
    is_admin: bool


# ── Leave settings ──────────────────────────────────────────────────
class LeaveQuotaSchema(BaseModel):
    planned: int = Field(ge=0)
    unplanned: int = Field(ge=0)
    parental: int = Field(default=0, ge=0)


class UserSettingsRead(BaseModel):
    leave_quota: LeaveQuotaSchema
    default_wfh_days: list[str]
    onboarding_completed: bool


class UserSettingsUpdate(BaseModel):
    leave_quota: LeaveQuotaSchema
    default_wfh_days: list[str] = Field(default_factory=list)

    @field_validator("default_wfh_days")
    @classmethod
    def _days(cls, v: list[str]) -> list[str]:
        by_lower = {name.lower(): name for name in DAY_NAMES}
        days = []
        for raw in v:
            name = by_lower.get(raw.strip().lower())
            if name is None:
                raise ValueError(f"'{raw}' is not a day name")
            if name not in days:
                days.append(name)
        return sorted(days, key=DAY_NAMES.index)


# ── Admin: today overview ──────────────────────────────────────────
class UserDayStatusRead(BaseModel):
    user_id: str
    email: str
    name: str | None = None
    is_admin: bool
    status: str | None = None
    notes: str | None = None

    model_config = {"from_attributes": True}


class TodayDate(BaseModel):
    formatted: str
    iso: str
    is_weekend: bool


class TodaySummary(BaseModel):
    total: int
    present: int
    wfh: int
    leave: int
    not_marked: int


class TodayOverviewResponse(BaseModel):
    date: TodayDate
    summary: TodaySummary
    users: list[UserDayStatusRead]


# ── Admin: user metrics ─────────────────────────────────────────────
class ModeCountsRead(BaseModel):
    present: int
    wfh: int
    leave: int

    model_config = {"from_attributes": True}


class MonthMetricsRead(ModeCountsRead):
    month: int
    name: str


class WeekdayPatternRead(BaseModel):
    day_name: str
    total: int
    present: int
    wfh: int

    model_config = {"from_attributes": True}


class UserMetricsResponse(BaseModel):
    user: UserRead
    year: int
    yearly: ModeCountsRead
    monthly: list[MonthMetricsRead]
    day_pattern: list[WeekdayPatternRead]
    quota: QuotaSnapshotRead
    recent_activity: list[AttendanceRead]
    default_wfh_days: list[str]
