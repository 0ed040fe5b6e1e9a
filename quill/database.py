"""
Quill – Async SQLAlchemy engine, session factory, and declarative base.

The engine and session factory are built by ``create_app`` and kept on
``app.state``; request handlers reach them through :func:`get_db`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


# ── Declarative base ──
class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Engine ──
def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for ``database_url``."""
    engine_kwargs = {
        "echo": echo,
        "future": True,
    }

    # If using PostgreSQL behind PgBouncer (transaction mode), disable
    # prepared statement caching.
    if "postgresql" in database_url:
        engine_kwargs["connect_args"] = {"statement_cache_size": 0}

    # An in-memory SQLite database only lives as long as its connection.
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool

    engine = create_async_engine(database_url, **engine_kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


# ── Session factory ──
def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    # Make sure every model is registered on the metadata.
    import quill.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ── Dependency for FastAPI routes ──
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield an async database session, auto-closed on exit."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
