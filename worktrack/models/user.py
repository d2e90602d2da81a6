"""
User model — identity plus the leave settings the accounting engine reads.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, false

from worktrack.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: str = Column(String(64), primary_key=True)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    name: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    is_admin: bool = Column(Boolean, default=False, server_default=false())  # type: ignore[assignment]
    # NULL quota means "use the configured default"
    planned_quota: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    unplanned_quota: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    parental_quota: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    default_wfh_days: list[str] | None = Column(JSON, nullable=True)  # type: ignore[assignment]
    onboarding_completed: bool = Column(Boolean, default=False, server_default=false())  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
