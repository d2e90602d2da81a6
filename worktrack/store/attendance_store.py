"""
Attendance record store.

Every lookup goes through the calendar day's full UTC span; nothing ever
matches on an exact stored instant.  Writes are flushed but not committed:
the calling operation owns the transaction and decides when to commit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.core.calendar import (DateLike, calendar_day, day_span,
                                     format_day, storage_instant)
from worktrack.models.attendance import LEAVE_STATUSES, AttendanceRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayWrite:
    """One planned write for a calendar day, applied by ``AttendanceStore.apply``."""

    day: date
    status: str
    notes: str | None = None
    leave_category: str | None = None
    is_paid: bool | None = None


class AttendanceStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Reads ───────────────────────────────────────────────────────
    async def find(
        self,
        user_id: str | None,
        start: datetime,
        end: datetime,
        statuses: Iterable[str] | None = None,
    ) -> list[AttendanceRecord]:
        """Records whose instant falls in ``[start, end]``, oldest first."""
        stmt = (
            select(AttendanceRecord)
            .where(AttendanceRecord.date >= start, AttendanceRecord.date <= end)
            .order_by(AttendanceRecord.date.asc(), AttendanceRecord.id.asc())
        )
        if user_id is not None:
            stmt = stmt.where(AttendanceRecord.user_id == user_id)
        if statuses is not None:
            stmt = stmt.where(AttendanceRecord.status.in_(list(statuses)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_one_for_day(
        self,
        user_id: str,
        day: DateLike,
        statuses: Iterable[str] | None = None,
    ) -> AttendanceRecord | None:
        start, end = day_span(day)
        records = await self.find(user_id, start, end, statuses)
        return records[0] if records else None

    async def find_unclassified_leaves(self) -> list[AttendanceRecord]:
        """Leave rows that predate the structured ``leave_category`` column."""
        stmt = (
            select(AttendanceRecord)
            .where(
                AttendanceRecord.status.in_(LEAVE_STATUSES),
                AttendanceRecord.leave_category.is_(None),
            )
            .order_by(AttendanceRecord.date.asc(), AttendanceRecord.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # ── Writes ──────────────────────────────────────────────────────
    async def insert_if_absent(
        self,
        *,
        user_id: str,
        user_email: str | None,
        write: DayWrite,
    ) -> bool:
        """Insert a record unless the day is already taken. Returns ``True`` if written.

        Relies on the ``(user_id, day)`` unique constraint, so two concurrent
        callers cannot both insert the same day.
        """
        values = self._row_values(user_id, user_email, write)
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            if await self.find_one_for_day(user_id, write.day) is not None:
                return False
            self.session.add(AttendanceRecord(**values))
            await self.session.flush()
            return True

        stmt = (
            insert(AttendanceRecord)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["user_id", "day"])
        )
        result = await self.session.execute(stmt)
        return bool(result.rowcount)

    async def upsert_day(
        self,
        *,
        user_id: str,
        user_email: str | None,
        write: DayWrite,
    ) -> AttendanceRecord:
        """Update the day's record in place, or create it at the storage instant."""
        existing = await self.find_one_for_day(user_id, write.day)
        if existing is not None:
            return await self.update(
                existing,
                status=write.status,
                notes=write.notes,
                leave_category=write.leave_category,
                is_paid=write.is_paid,
            )
        record = AttendanceRecord(**self._row_values(user_id, user_email, write))
        self.session.add(record)
        await self.session.flush()
        return record

    async def apply(
        self,
        *,
        user_id: str,
        user_email: str | None,
        writes: Sequence[DayWrite],
    ) -> list[AttendanceRecord]:
        """Apply a batch of day writes inside the current transaction."""
        return [
            await self.upsert_day(user_id=user_id, user_email=user_email, write=w)
            for w in writes
        ]

    async def update(self, record: AttendanceRecord, **fields) -> AttendanceRecord:
        if "date" in fields:
            new_day = calendar_day(fields.pop("date"))
            fields["date"] = storage_instant(new_day)
            fields["day"] = format_day(new_day)
        for field, value in fields.items():
            setattr(record, field, value)
        record.updated_at = datetime.now(timezone.utc)
        await self.session.flush()
        return record

    async def delete(self, record: AttendanceRecord) -> None:
        await self.session.delete(record)
        await self.session.flush()

    # ── Transaction boundary ────────────────────────────────────────
    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    @staticmethod
    def _row_values(user_id: str, user_email: str | None, write: DayWrite) -> dict:
        now = datetime.now(timezone.utc)
        return {
            "user_id": user_id,
            "user_email": user_email,
            "date": storage_instant(write.day),
            "day": format_day(write.day),
            "status": write.status,
            "notes": write.notes,
            "leave_category": write.leave_category,
            "is_paid": write.is_paid,
            "created_at": now,
            "updated_at": now,
        }
