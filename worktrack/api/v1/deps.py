"""
FastAPI dependencies — database session, clock, stores and auth guards.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import AsyncGenerator
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import Cookie, Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.core.calendar import today_in_reference
from worktrack.core.config import settings
from worktrack.core.security import decode_access_token
from worktrack.db.session import async_session_factory
from worktrack.models.user import User
from worktrack.store.attendance_store import AttendanceStore
from worktrack.store.user_store import UserStore

logger = logging.getLogger(__name__)

# Tokens are issued by the identity provider; we only verify them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_attendance_store(db: AsyncSession = Depends(get_db)) -> AttendanceStore:
    return AttendanceStore(db)


def get_user_store(db: AsyncSession = Depends(get_db)) -> UserStore:
    return UserStore(db)


# ── Clock ───────────────────────────────────────────────────────────
def get_now() -> datetime:
    """Reference instant for the request; overridden in tests."""
    return datetime.now(timezone.utc)


def get_today(now: datetime = Depends(get_now)) -> date:
    return today_in_reference(now).as_date


# ── Auth dependencies ───────────────────────────────────────────────
def _extract_token(header_token: str | None, cookie_token: str | None) -> str | None:
    # Priority: Header > Cookie ("Bearer <token>" or bare "<token>")
    if header_token:
        return header_token
    if cookie_token:
        if cookie_token.startswith("Bearer "):
            return cookie_token.split(" ", 1)[1]
        return cookie_token
    return None


async def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),
    users: UserStore = Depends(get_user_store),
) -> User | None:
    """Resolve the caller from a bearer JWT, or ``None`` when unauthenticated."""
    final_token = _extract_token(token, access_token)
    if not final_token:
        return None

    payload = decode_access_token(final_token)
    if payload is None:
        return None

    user_id: str | None = payload.get("sub")
    user = await users.get(user_id) if user_id else None
    if user is None and payload.get("email"):
        # Identity provider ids can change; fall back to the email claim
        user = await users.get_by_email(payload["email"])
    if user is None:
        logger.warning("Token subject %s has no matching user", user_id)
    return user


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def _valid_api_key(api_key: str | None) -> bool:
    if not api_key or not settings.ADMIN_API_KEY:
        return False
    return hmac.compare_digest(api_key, settings.ADMIN_API_KEY)


async def is_admin_request(
    x_api_key: Optional[str] = Header(default=None),
    user: User | None = Depends(get_optional_user),
) -> bool:
    if _valid_api_key(x_api_key):
        return True
    return bool(user is not None and user.is_admin)


async def require_admin(is_admin: bool = Depends(is_admin_request)) -> None:
    """Allow callers with the admin API key or an admin account."""
    if not is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
