"""Tests for the leave request splitter and leave edit / delete."""

from datetime import date

import pytest

from worktrack.core.calendar import format_day, year_span
from worktrack.core.exceptions import (ConflictError, NotFoundError,
                                       ValidationError)
from worktrack.models.attendance import LEAVE_STATUSES
from worktrack.services.leave_codec import LeaveCategory, decode
from worktrack.services.leave_requests import (delete_leave, edit_leave,
                                               plan_leave, request_leave)
from worktrack.services.quota import compute_yearly_quota
from worktrack.store.attendance_store import DayWrite
from worktrack.store.user_store import LeaveQuota


def test_plan_is_paid_first_chronologically():
    days = [date(2025, 3, 7), date(2025, 3, 3), date(2025, 3, 5), date(2025, 3, 4), date(2025, 3, 6)]
    plan = plan_leave(LeaveCategory.PLANNED, days, remaining=2)

    assert plan.paid_dates == ["2025-03-03", "2025-03-04"]
    assert plan.unpaid_dates == ["2025-03-05", "2025-03-06", "2025-03-07"]
    assert [w.is_paid for w in plan.writes()] == [True, True, False, False, False]


@pytest.mark.asyncio
async def test_unpaid_overflow(store, user_store, alice):
    """Quota 2, four weekdays requested: two paid then two unpaid."""
    await user_store.update_settings(
        alice.id, quota=LeaveQuota(planned=2, unplanned=10, parental=0), default_wfh_days=[]
    )

    plan = await request_leave(
        store, user_store, user_id=alice.id, user_email=alice.email,
        leave_type="planned-leave", start="2025-03-03", end="2025-03-06", notes="holiday",
    )
    assert (plan.paid_days, plan.unpaid_days) == (2, 2)

    records = await store.find(alice.id, *year_span(2025), statuses=LEAVE_STATUSES)
    decoded = [(format_day(r.date), decode(r.notes)) for r in records]
    assert [(d, a.category, a.is_paid) for d, a in decoded] == [
        ("2025-03-03", LeaveCategory.PLANNED, True),
        ("2025-03-04", LeaveCategory.PLANNED, True),
        ("2025-03-05", LeaveCategory.OTHER, False),
        ("2025-03-06", LeaveCategory.OTHER, False),
    ]
    assert all(a.free_text == "holiday" for _, a in decoded)
    # Structured fields keep the requested category on unpaid days
    assert {r.leave_category for r in records} == {"planned"}

    snapshot = await compute_yearly_quota(store, user_store, alice.id, 2025)
    assert snapshot.planned.remaining == 0
    assert snapshot.unpaid_count == 2


@pytest.mark.asyncio
async def test_conflict_writes_nothing(store, user_store, alice):
    await store.upsert_day(
        user_id=alice.id, user_email=alice.email,
        write=DayWrite(day=date(2025, 3, 5), status="absent", notes="Unplanned Leave",
                       leave_category="unplanned", is_paid=True),
    )
    await store.commit()

    with pytest.raises(ConflictError) as exc:
        await request_leave(
            store, user_store, user_id=alice.id, user_email=alice.email,
            leave_type="planned-leave", start="2025-03-03", end="2025-03-07",
        )
    assert exc.value.dates == ["2025-03-05"]
    assert len(await store.find(alice.id, *year_span(2025))) == 1


@pytest.mark.asyncio
async def test_leave_overwrites_work_marks(store, user_store, alice):
    """A present/wfh mark on a requested day is replaced, keeping one record per day."""
    await store.upsert_day(
        user_id=alice.id, user_email=alice.email,
        write=DayWrite(day=date(2025, 3, 4), status="wfh", notes="Synced"),
    )
    await store.commit()

    await request_leave(
        store, user_store, user_id=alice.id, user_email=alice.email,
        leave_type="unplanned", start="2025-03-04", end="2025-03-04",
    )
    records = await store.find(alice.id, *year_span(2025))
    assert len(records) == 1
    assert records[0].status == "absent"
    assert records[0].notes == "Unplanned Leave"


@pytest.mark.asyncio
async def test_weekends_are_not_booked(store, user_store, alice):
    plan = await request_leave(
        store, user_store, user_id=alice.id, user_email=alice.email,
        leave_type="planned-leave", start="2025-03-07", end="2025-03-10",
    )
    assert plan.paid_dates == ["2025-03-07", "2025-03-10"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("leave_type", "start", "end"),
    [
        ("planned-leave", "2025-03-07", "2025-03-03"),
        ("sabbatical", "2025-03-03", "2025-03-04"),
        ("planned-leave", "2025-03-08", "2025-03-09"),
        ("planned-leave", "03/03/2025", "2025-03-04"),
    ],
)
async def test_invalid_requests_rejected(store, user_store, alice, leave_type, start, end):
    with pytest.raises(ValidationError):
        await request_leave(
            store, user_store, user_id=alice.id, user_email=alice.email,
            leave_type=leave_type, start=start, end=end,
        )
    assert await store.find(alice.id, *year_span(2025)) == []


@pytest.mark.asyncio
async def test_edit_moves_and_recategorises(store, user_store, alice):
    await request_leave(
        store, user_store, user_id=alice.id, user_email=alice.email,
        leave_type="planned-leave", start="2025-03-03", end="2025-03-03", notes="trip",
    )

    record = await edit_leave(
        store, user_id=alice.id, original_date="2025-03-03", new_date="2025-03-12",
        leave_type="parental-leave",
    )
    assert format_day(record.date) == "2025-03-12"
    assert record.day == "2025-03-12"
    assert record.notes == "Parental Leave - trip"
    assert await store.find_one_for_day(alice.id, "2025-03-03") is None


@pytest.mark.asyncio
async def test_edit_to_unpaid_keeps_category(store, user_store, alice):
    await request_leave(
        store, user_store, user_id=alice.id, user_email=alice.email,
        leave_type="unplanned-leave", start="2025-03-03", end="2025-03-03",
    )
    record = await edit_leave(
        store, user_id=alice.id, original_date="2025-03-03", leave_type="unpaid-leave", notes="",
    )
    assert record.notes == "Unpaid Leave"
    assert record.leave_category == "unplanned"
    assert record.is_paid is False


@pytest.mark.asyncio
async def test_edit_conflicts_with_any_record_on_new_date(store, user_store, alice):
    await request_leave(
        store, user_store, user_id=alice.id, user_email=alice.email,
        leave_type="planned-leave", start="2025-03-03", end="2025-03-03",
    )
    await store.upsert_day(
        user_id=alice.id, user_email=alice.email,
        write=DayWrite(day=date(2025, 3, 4), status="present"),
    )
    await store.commit()

    with pytest.raises(ConflictError) as exc:
        await edit_leave(store, user_id=alice.id, original_date="2025-03-03", new_date="2025-03-04")
    assert exc.value.dates == ["2025-03-04"]


@pytest.mark.asyncio
async def test_edit_and_delete_missing_leave(store, alice):
    with pytest.raises(NotFoundError):
        await edit_leave(store, user_id=alice.id, original_date="2025-03-03", leave_type="planned")
    with pytest.raises(NotFoundError):
        await delete_leave(store, user_id=alice.id, day="2025-03-03")


@pytest.mark.asyncio
async def test_delete_only_touches_leave(store, user_store, alice):
    await store.upsert_day(
        user_id=alice.id, user_email=alice.email,
        write=DayWrite(day=date(2025, 3, 4), status="present"),
    )
    await store.commit()
    with pytest.raises(NotFoundError):
        await delete_leave(store, user_id=alice.id, day="2025-03-04")

    await request_leave(
        store, user_store, user_id=alice.id, user_email=alice.email,
        leave_type="planned-leave", start="2025-03-05", end="2025-03-05",
    )
    await delete_leave(store, user_id=alice.id, day="2025-03-05")
    assert await store.find_one_for_day(alice.id, "2025-03-05") is None
