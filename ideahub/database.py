"""
IdeaHub – Async SQLAlchemy engine, session, and declarative base.

The engine is owned by a ``Database`` instance built by the application
factory and kept on ``app.state``; nothing here opens a connection at
import time.
"""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


# ── Declarative base ──
class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class Database:
    """Engine + session factory for one database URL."""

    def __init__(self, url: str, echo: bool = False):
        engine_kwargs = {
            "echo": echo,
        }

        # If using PostgreSQL (Render/Supabase), disable prepared statement caching
        # because PgBouncer (transaction mode) does not support it properly.
        if "postgresql" in url:
            engine_kwargs["connect_args"] = {"statement_cache_size": 0}

        # In-memory SQLite lives and dies with a single connection.
        if url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            engine_kwargs["poolclass"] = StaticPool

        self.url = url
        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        # Register every model on Base.metadata before creating tables.
        import ideahub.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


# ── Dependency for FastAPI routes ──
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield an async database session, rolled back on error and closed on exit."""
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
