"""
Attendance record model — one row per (user, calendar day).

``date`` is always the UTC-noon instant of the day and ``day`` its
``YYYY-MM-DD`` form; the unique constraint on ``(user_id, day)`` is what
guarantees a single record per calendar day.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (Boolean, Column, DateTime, ForeignKey, Index, Integer,
                        String, UniqueConstraint)

from worktrack.db.base import Base

WORK_STATUSES = ("present", "wfh", "absent")
# Written by earlier versions of the app; read but never produced
LEGACY_LEAVE_STATUSES = ("leave", "planned-leave", "unplanned-leave", "parental-leave")
LEAVE_STATUSES = ("absent",) + LEGACY_LEAVE_STATUSES
VALID_STATUSES = WORK_STATUSES + LEGACY_LEAVE_STATUSES


class AttendanceRecord(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("user_id", "day", name="uq_attendance_user_day"),
        Index("ix_attendance_user_date", "user_id", "date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: str = Column(String(64), ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
    user_email: str | None = Column(String(320), nullable=True)  # type: ignore[assignment]
    date: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    day: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # YYYY-MM-DD
    status: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    # present | wfh | absent (+ legacy leave statuses)
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    leave_category: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    # planned | unplanned | parental | other; NULL on non-leave and legacy rows
    is_paid: bool | None = Column(Boolean, nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_leave(self) -> bool:
        return self.status in LEAVE_STATUSES
