"""
Admin endpoints — user list, today's overview, per-user reports and
metrics, multi-user sync and the legacy leave-note migration.

Every route except ``/admin/check`` requires the admin API key
(``X-API-Key``) or an account flagged ``is_admin``.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from worktrack.api.v1.deps import (get_attendance_store, get_today,
                                   get_user_store, is_admin_request,
                                   require_admin)
from worktrack.api.v1.endpoints.attendance import work_report_response
from worktrack.api.v1.endpoints.leaves import leaves_report_response
from worktrack.core.calendar import format_day
from worktrack.core.exceptions import NotFoundError
from worktrack.models.user import User
from worktrack.schemas.attendance import (AdminSyncRequest, AdminSyncResponse,
                                          AdminSyncSummary, AttendanceRead,
                                          MonthlyWorkReportResponse,
                                          SyncResponse)
from worktrack.schemas.leave import (MigrationResponse, QuotaSnapshotRead,
                                     YearlyLeavesReportResponse)
from worktrack.schemas.user import (AdminCheckResponse, ModeCountsRead,
                                    MonthMetricsRead, TodayDate,
                                    TodayOverviewResponse, TodaySummary,
                                    UserDayStatusRead, UserMetricsResponse,
                                    UserRead, WeekdayPatternRead)
from worktrack.services.migrations import migrate_legacy_leave_notes
from worktrack.services.reports import (monthly_work_report, today_overview,
                                        user_metrics, yearly_leaves_report)
from worktrack.services.sync import sync_users
from worktrack.store.attendance_store import AttendanceStore
from worktrack.store.user_store import UserStore

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


async def _get_user_or_404(users: UserStore, user_id: str) -> User:
    user = await users.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("/check", response_model=AdminCheckResponse)
async def check_admin(is_admin: bool = Depends(is_admin_request)) -> AdminCheckResponse:
    return AdminCheckResponse(is_admin=is_admin)


@router.get("/users", response_model=list[UserRead], dependencies=[Depends(require_admin)])
async def list_users(users: UserStore = Depends(get_user_store)) -> list[User]:
    return await users.list_all()


@router.get("/today", response_model=TodayOverviewResponse, dependencies=[Depends(require_admin)])
async def get_today_overview(
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
) -> TodayOverviewResponse:
    """Every user's status for today."""
    overview = await today_overview(store, users, today=today)
    return TodayOverviewResponse(
        date=TodayDate(
            formatted=overview.formatted,
            iso=format_day(overview.today),
            is_weekend=overview.is_weekend,
        ),
        summary=TodaySummary(**overview.summary()),
        users=[UserDayStatusRead.model_validate(u) for u in overview.users],
    )


@router.get(
    "/work-report",
    response_model=MonthlyWorkReportResponse,
    dependencies=[Depends(require_admin)],
)
async def get_work_report(
    user_id: str = Query(...),
    year: int | None = Query(default=None),
    month: int | None = Query(default=None),
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
) -> MonthlyWorkReportResponse:
    user = await _get_user_or_404(users, user_id)
    year = today.year if year is None else year
    month = today.month if month is None else month
    report = await monthly_work_report(
        store, user_id=user.id, year=year, month=month
    )
    return work_report_response(report, user)


@router.get(
    "/leave-report",
    response_model=YearlyLeavesReportResponse,
    dependencies=[Depends(require_admin)],
)
async def get_leave_report(
    user_id: str = Query(...),
    year: int | None = Query(default=None),
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
) -> YearlyLeavesReportResponse:
    user = await _get_user_or_404(users, user_id)
    year = today.year if year is None else year
    report = await yearly_leaves_report(store, users, user_id=user.id, year=year)
    return leaves_report_response(report, user)


@router.get(
    "/user-metrics",
    response_model=UserMetricsResponse,
    dependencies=[Depends(require_admin)],
)
async def get_user_metrics(
    user_id: str = Query(...),
    year: int | None = Query(default=None),
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
) -> UserMetricsResponse:
    """Year-at-a-glance metrics for one user."""
    user = await _get_user_or_404(users, user_id)
    year = today.year if year is None else year
    metrics = await user_metrics(store, users, user_id=user.id, year=year)
    return UserMetricsResponse(
        user=UserRead.model_validate(user),
        year=metrics.year,
        yearly=ModeCountsRead.model_validate(metrics.yearly),
        monthly=[
            MonthMetricsRead(month=month, name=name, present=c.present, wfh=c.wfh, leave=c.leave)
            for month, name, c in metrics.monthly_breakdown()
        ],
        day_pattern=[WeekdayPatternRead.model_validate(p) for p in metrics.day_pattern],
        quota=QuotaSnapshotRead.of(metrics.quota),
        recent_activity=[AttendanceRead.model_validate(r) for r in metrics.recent],
        default_wfh_days=metrics.default_wfh_days,
    )


@router.post("/sync", response_model=AdminSyncResponse, dependencies=[Depends(require_admin)])
async def sync_many(
    body: AdminSyncRequest,
    store: AttendanceStore = Depends(get_attendance_store),
    users: UserStore = Depends(get_user_store),
    today: date = Depends(get_today),
) -> AdminSyncResponse:
    """Sync a month for several users; failures are reported per user."""
    results = await sync_users(
        store, users, user_ids=body.user_ids, year=body.year, month=body.month, today=today
    )
    failed = sum(1 for r in results if not r.ok)
    summary = AdminSyncSummary(
        users=len(results),
        succeeded=len(results) - failed,
        failed=failed,
        total_synced=sum(len(r.synced_dates) for r in results),
        total_skipped=sum(len(r.skipped_dates) for r in results),
    )
    logger.info("Admin sync %04d-%02d: %s", body.year, body.month, summary.model_dump())
    return AdminSyncResponse(
        year=body.year,
        month=body.month,
        results=[SyncResponse.model_validate(r) for r in results],
        summary=summary,
    )


@router.post(
    "/migrate-leave-notes",
    response_model=MigrationResponse,
    dependencies=[Depends(require_admin)],
)
async def migrate_leave_notes(store: AttendanceStore = Depends(get_attendance_store)) -> MigrationResponse:
    """Backfill structured leave fields on rows that only encode them in notes."""
    return MigrationResponse(migrated=await migrate_legacy_leave_notes(store))
