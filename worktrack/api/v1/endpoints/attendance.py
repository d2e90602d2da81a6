"""
Attendance endpoints — mark a day, today's record, monthly stats,
monthly work-mode report and the user's own sync.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from worktrack.api.v1.deps import (get_attendance_store, get_current_user,
                                   get_today, get_user_store)
from worktrack.core.calendar import format_day, is_weekend, weekday_name
from worktrack.models.attendance import AttendanceRecord
from worktrack.models.user import User
from worktrack.schemas.attendance import (AttendanceRead, MarkRequest,
                                          MonthlyStatsResponse,
                                          MonthlyWorkReportResponse,
                                          MonthlyWorkSummary, SyncRequest,
                                          SyncResponse, TodayResponse,
                                          WorkDayRow)
from worktrack.services import attendance as attendance_service
from worktrack.services.reports import MonthlyWorkReport, monthly_work_report
from worktrack.services.sync import sync_month
from worktrack.store.attendance_store import AttendanceStore
from worktrack.store.user_store import UserStore

router = APIRouter(prefix="/attendance", tags=["attendance"])
logger = logging.getLogger(__name__)


def work_report_response(report: MonthlyWorkReport, user: User | None = None) -> MonthlyWorkReportResponse:
    return MonthlyWorkReportResponse(
        year=report.year,
        month=report.month,
        month_name=report.month_name,
        records=[WorkDayRow.model_validate(row) for row in report.rows],
        summary=MonthlyWorkSummary(**report.summary()),
        user_id=user.id if user else None,
        user_email=user.email if user else None,
    )


@router.post("/mark", response_model=AttendanceRead)
async def mark_attendance(
    body: MarkRequest,
    store: AttendanceStore = Depends(get_attendance_store),
    today: date = Depends(get_today),
    user: User = Depends(get_current_user),
) -> AttendanceRecord:
    """Set the status of a day (today when no date is given)."""
    return await attendance_service.mark_day(
        store,
        user_id=user.id,
        user_email=user.email,
        day=body.date or today,
        status=body.status,
        notes=body.notes,
    )


@router.get("/today", response_model=TodayResponse)
async def get_today_record(
    store: AttendanceStore = Depends(get_attendance_store),
    today: date = Depends(get_today),
    user: User = Depends(get_current_user),
) -> TodayResponse:
    record = await attendance_service.get_day_record(store, user.id, today)
    return TodayResponse(
        date=format_day(today),
        weekday=weekday_name(today),
        is_weekend=is_weekend(today),
        record=AttendanceRead.model_validate(record) if record else None,
    )


@router.get("/stats", response_model=MonthlyStatsResponse)
async def get_monthly_stats(
    year: int | None = Query(default=None),
    month: int | None = Query(default=None),
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
    user: User = Depends(get_current_user),
) -> MonthlyStatsResponse:
    """Monthly counts; today is auto-marked from the WFH pattern first."""
    await attendance_service.auto_mark_today(
        store, users, user_id=user.id, user_email=user.email, today=today
    )
    stats = await attendance_service.monthly_stats(
        store,
        user_id=user.id,
        year=today.year if year is None else year,
        month=today.month if month is None else month,
        today=today,
    )
    return MonthlyStatsResponse(
        year=stats.year,
        month=stats.month,
        weekdays=stats.weekdays,
        total_working_days=stats.total_working_days,
        work_from_office=stats.work_from_office,
        work_from_home=stats.work_from_home,
        absent_days=stats.absent_days,
        attendance_rate=stats.attendance_rate,
        today_status=stats.today_status,
    )


@router.get("/monthly-report", response_model=MonthlyWorkReportResponse)
async def get_monthly_report(
    year: int | None = Query(default=None),
    month: int | None = Query(default=None),
    store: AttendanceStore = Depends(get_attendance_store),
    today: date = Depends(get_today),
    user: User = Depends(get_current_user),
) -> MonthlyWorkReportResponse:
    year = today.year if year is None else year
    month = today.month if month is None else month
    report = await monthly_work_report(
        store, user_id=user.id, year=year, month=month
    )
    return work_report_response(report)


@router.post("/sync", response_model=SyncResponse)
async def sync_own_month(
    body: SyncRequest,
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
    user: User = Depends(get_current_user),
) -> SyncResponse:
    """Backfill unmarked past weekdays of the month from the WFH pattern."""
    result = await sync_month(
        store, users, user_id=user.id, year=body.year, month=body.month, today=today
    )
    return SyncResponse.model_validate(result)
