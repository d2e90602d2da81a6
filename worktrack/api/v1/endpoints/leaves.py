"""
Leave endpoints — request, edit, delete, quota snapshot and reports.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from worktrack.api.v1.deps import (get_attendance_store, get_current_user,
                                   get_today, get_user_store)
from worktrack.models.attendance import AttendanceRecord
from worktrack.models.user import User
from worktrack.schemas.attendance import AttendanceRead, DeleteResponse
from worktrack.schemas.leave import (LeaveEdit, LeaveEntryRead, LeaveRequest,
                                     LeaveRequestResponse, QuotaSnapshotRead,
                                     YearlyLeavesReportResponse)
from worktrack.services import leave_requests
from worktrack.services.quota import compute_yearly_quota
from worktrack.services.reports import (YearlyLeavesReport, list_leaves,
                                        yearly_leaves_report)
from worktrack.store.attendance_store import AttendanceStore
from worktrack.store.user_store import UserStore

router = APIRouter(prefix="/attendance", tags=["leaves"])
logger = logging.getLogger(__name__)


def leaves_report_response(report: YearlyLeavesReport, user: User | None = None) -> YearlyLeavesReportResponse:
    return YearlyLeavesReportResponse(
        year=report.year,
        records=[LeaveEntryRead.of(e) for e in report.entries],
        leaves_by_month={
            month: [LeaveEntryRead.of(e) for e in entries]
            for month, entries in report.by_month().items()
        },
        quota=QuotaSnapshotRead.of(report.quota),
        user_id=user.id if user else None,
        user_email=user.email if user else None,
    )


@router.post("/leave-request", response_model=LeaveRequestResponse)
async def request_leave(
    body: LeaveRequest,
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    user: User = Depends(get_current_user),
) -> LeaveRequestResponse:
    """Book leave over a date range; days beyond the remaining quota are unpaid."""
    plan = await leave_requests.request_leave(
        store,
        users,
        user_id=user.id,
        user_email=user.email,
        leave_type=body.leave_type,
        start=body.start_date,
        end=body.end_date,
        notes=body.notes,
    )
    message = f"{plan.paid_days} paid day(s) booked"
    if plan.unpaid_days:
        message += f", {plan.unpaid_days} day(s) exceed the quota and are unpaid"
    return LeaveRequestResponse(
        leave_type=plan.category.value,
        paid_days=plan.paid_days,
        unpaid_days=plan.unpaid_days,
        paid_dates=plan.paid_dates,
        unpaid_dates=plan.unpaid_dates,
        message=message,
    )


@router.get("/leaves", response_model=QuotaSnapshotRead)
async def get_leave_stats(
    year: int | None = Query(default=None),
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
    user: User = Depends(get_current_user),
) -> QuotaSnapshotRead:
    year = today.year if year is None else year
    snapshot = await compute_yearly_quota(store, users, user.id, year)
    return QuotaSnapshotRead.of(snapshot)


@router.get("/leave-records", response_model=list[LeaveEntryRead])
async def get_leave_records(
    year: int | None = Query(default=None),
    store: AttendanceStore = Depends(get_attendance_store),
    today: date = Depends(get_today),
    user: User = Depends(get_current_user),
) -> list[LeaveEntryRead]:
    year = today.year if year is None else year
    entries = await list_leaves(store, user_id=user.id, year=year)
    return [LeaveEntryRead.of(e) for e in entries]


@router.get("/yearly-leaves-report", response_model=YearlyLeavesReportResponse)
async def get_yearly_leaves_report(
    year: int | None = Query(default=None),
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
    user: User = Depends(get_current_user),
) -> YearlyLeavesReportResponse:
    year = today.year if year is None else year
    report = await yearly_leaves_report(store, users, user_id=user.id, year=year)
    return leaves_report_response(report)


@router.put("/leave", response_model=AttendanceRead)
async def edit_leave(
    body: LeaveEdit,
    store: AttendanceStore = Depends(get_attendance_store),
    user: User = Depends(get_current_user),
) -> AttendanceRecord:
    """Move a leave day and/or change its type, paid state or note."""
    return await leave_requests.edit_leave(
        store,
        user_id=user.id,
        original_date=body.original_date,
        new_date=body.new_date,
        leave_type=body.leave_type,
        is_paid=body.is_paid,
        notes=body.notes,
    )


@router.delete("/leave", response_model=DeleteResponse)
async def delete_leave(
    date: str = Query(..., description="YYYY-MM-DD"),
    store: AttendanceStore = Depends(get_attendance_store),
    user: User = Depends(get_current_user),
) -> DeleteResponse:
    await leave_requests.delete_leave(store, user_id=user.id, day=date)
    return DeleteResponse(success=True, message=f"Leave on {date} deleted")
