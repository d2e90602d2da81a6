"""
Async SQLAlchemy engine & session factory (asyncpg / aiosqlite drivers).

The attendance store's atomic day insert is written for PostgreSQL and
SQLite; any other backend works but loses that guarantee.
"""

from __future__ import annotations

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from worktrack.core.config import settings

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> dict:
    url = make_url(database_url)
    backend = url.get_backend_name()

    if backend == "postgresql":
        return {
            "pool_pre_ping": True,
            "pool_size": 20,
            "max_overflow": 10,
            "pool_recycle": 300,
        }
    if backend == "sqlite":
        options: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise each checkout sees an empty database
            options["poolclass"] = StaticPool
        return options

    logger.warning("Backend %s has no atomic day insert; falling back to check-then-insert", backend)
    return {"pool_pre_ping": True}


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    **engine_options(settings.DATABASE_URL),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
