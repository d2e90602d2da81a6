"""Tests for the admin endpoints."""

import pytest
from httpx import AsyncClient

ADMIN_HEADERS = {"X-API-Key": "test-admin-key"}


@pytest.mark.asyncio
async def test_admin_check(async_client: AsyncClient, alice, bob, auth_headers):
    """Admin access comes from the API key or an admin account."""
    regular = await async_client.get("/api/v1/admin/check", headers=auth_headers(alice))
    admin = await async_client.get("/api/v1/admin/check", headers=auth_headers(bob))
    by_key = await async_client.get("/api/v1/admin/check", headers=ADMIN_HEADERS)
    wrong_key = await async_client.get("/api/v1/admin/check", headers={"X-API-Key": "nope"})
    anonymous = await async_client.get("/api/v1/admin/check")

    assert regular.json() == {"is_admin": False}
    assert admin.json() == {"is_admin": True}
    assert by_key.json() == {"is_admin": True}
    assert wrong_key.json() == {"is_admin": False}
    assert anonymous.json() == {"is_admin": False}


@pytest.mark.asyncio
async def test_admin_routes_forbidden_for_regular_users(async_client: AsyncClient, alice, auth_headers):
    resp = await async_client.get("/api/v1/admin/users", headers=auth_headers(alice))
    assert resp.status_code == 403
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_list_users(async_client: AsyncClient, alice, bob, auth_headers):
    resp = await async_client.get("/api/v1/admin/users", headers=auth_headers(bob))
    assert resp.status_code == 200
    assert [u["email"] for u in resp.json()] == ["alice@example.com", "bob@example.com"]
    assert resp.json()[1]["is_admin"] is True


@pytest.mark.asyncio
async def test_today_overview(async_client: AsyncClient, alice, bob, auth_headers):
    await async_client.post("/api/v1/attendance/mark", json={"status": "wfh"}, headers=auth_headers(alice))

    resp = await async_client.get("/api/v1/admin/today", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["date"] == {
        "formatted": "Wednesday, January 15, 2025",
        "iso": "2025-01-15",
        "is_weekend": False,
    }
    assert data["summary"] == {"total": 2, "present": 0, "wfh": 1, "leave": 0, "not_marked": 1}
    statuses = {u["email"]: u["status"] for u in data["users"]}
    assert statuses == {"alice@example.com": "wfh", "bob@example.com": None}


@pytest.mark.asyncio
async def test_work_report_for_user(async_client: AsyncClient, alice, auth_headers):
    await async_client.post(
        "/api/v1/attendance/mark", json={"status": "present", "date": "2025-01-06"}, headers=auth_headers(alice)
    )
    resp = await async_client.get(
        "/api/v1/admin/work-report",
        params={"user_id": alice.id, "year": 2025, "month": 1},
        headers=ADMIN_HEADERS,
    )
    data = resp.json()
    assert data["user_email"] == "alice@example.com"
    assert data["summary"]["work_from_office"] == 1
    assert data["summary"]["unmarked"] == 22


@pytest.mark.asyncio
async def test_reports_for_unknown_user_404(async_client: AsyncClient):
    work = await async_client.get("/api/v1/admin/work-report", params={"user_id": "ghost"}, headers=ADMIN_HEADERS)
    leave = await async_client.get("/api/v1/admin/leave-report", params={"user_id": "ghost"}, headers=ADMIN_HEADERS)
    assert work.status_code == 404
    assert leave.status_code == 404


@pytest.mark.asyncio
async def test_leave_report_for_user(async_client: AsyncClient, alice, auth_headers):
    await async_client.post(
        "/api/v1/attendance/leave-request",
        json={"leave_type": "planned-leave", "start_date": "2025-02-03", "end_date": "2025-02-04"},
        headers=auth_headers(alice),
    )
    resp = await async_client.get(
        "/api/v1/admin/leave-report", params={"user_id": alice.id, "year": 2025}, headers=ADMIN_HEADERS
    )
    data = resp.json()
    assert data["user_id"] == alice.id
    assert [r["display_type"] for r in data["records"]] == ["Planned", "Planned"]
    assert data["quota"]["planned"]["remaining"] == 13


@pytest.mark.asyncio
async def test_multi_user_sync(async_client: AsyncClient, alice, bob):
    """One unknown user is reported without stopping the others."""
    resp = await async_client.post(
        "/api/v1/admin/sync",
        json={"user_ids": [alice.id, "ghost", bob.id], "year": 2025, "month": 1},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["summary"] == {
        "users": 3,
        "succeeded": 2,
        "failed": 1,
        "total_synced": 20,
        "total_skipped": 0,
    }
    ghost = next(r for r in data["results"] if r["user_id"] == "ghost")
    assert ghost["error"] == "User not found"


@pytest.mark.asyncio
async def test_migrate_leave_notes(async_client: AsyncClient, alice, auth_headers):
    await async_client.post(
        "/api/v1/attendance/mark",
        json={"status": "planned-leave", "date": "2025-01-06"},
        headers=auth_headers(alice),
    )
    resp = await async_client.post("/api/v1/admin/migrate-leave-notes", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    # mark_day already stores structured fields, so nothing is left to migrate
    assert resp.json() == {"migrated": 0}


@pytest.mark.asyncio
async def test_user_metrics(async_client: AsyncClient, alice, auth_headers):
    """Yearly and monthly counts, weekday pattern, quota and newest-first activity."""
    headers = auth_headers(alice)
    await async_client.post("/api/v1/attendance/sync", json={"year": 2025, "month": 1}, headers=headers)
    await async_client.post(
        "/api/v1/attendance/leave-request",
        json={"leave_type": "planned-leave", "start_date": "2025-02-03", "end_date": "2025-02-04"},
        headers=headers,
    )

    resp = await async_client.get(
        "/api/v1/admin/user-metrics", params={"user_id": alice.id, "year": 2025}, headers=ADMIN_HEADERS
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["email"] == "alice@example.com"
    assert data["yearly"] == {"present": 6, "wfh": 4, "leave": 2}
    assert len(data["monthly"]) == 12
    assert data["monthly"][0] == {"present": 6, "wfh": 4, "leave": 0, "month": 1, "name": "January"}
    assert data["monthly"][1]["leave"] == 2
    pattern = {p["day_name"]: p for p in data["day_pattern"]}
    assert list(pattern) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    assert pattern["Monday"] == {"day_name": "Monday", "total": 3, "present": 2, "wfh": 0}
    assert pattern["Thursday"] == {"day_name": "Thursday", "total": 2, "present": 0, "wfh": 2}
    assert data["quota"]["planned"] == {"used": 2, "quota": 15, "remaining": 13}
    recent = [r["day"] for r in data["recent_activity"]]
    assert len(recent) == 10
    assert recent[0] == "2025-02-04"
    assert recent[-1] == "2025-01-03"
    assert data["default_wfh_days"] == ["Thursday", "Friday"]


@pytest.mark.asyncio
async def test_user_metrics_guards(async_client: AsyncClient, alice, auth_headers):
    forbidden = await async_client.get(
        "/api/v1/admin/user-metrics", params={"user_id": alice.id}, headers=auth_headers(alice)
    )
    missing = await async_client.get("/api/v1/admin/user-metrics", params={"user_id": "ghost"}, headers=ADMIN_HEADERS)
    bad_year = await async_client.get(
        "/api/v1/admin/user-metrics", params={"user_id": alice.id, "year": 10000}, headers=ADMIN_HEADERS
    )
    assert forbidden.status_code == 403
    assert missing.status_code == 404
    assert bad_year.status_code == 400
