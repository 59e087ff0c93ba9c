# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Database Connection Management — Async SQLAlchemy 2.0 with tenant-bound sessions.

Every session handed out here is a TenantSession: it cannot be opened
without a RequestTenantContext, and the isolation hooks read that context
on each statement and flush.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text

from tenantry.core.config import StampPolicy, settings
from tenantry.core.tenant import RequestTenantContext, TenantId


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all ORM models."""
    pass


class TenantSession(AsyncSession):
    """AsyncSession whose sync session enforces tenant isolation."""

    @property
    def tenant_context(self) -> RequestTenantContext:
        return self.sync_session.info["tenant_context"]


# ── Engine & Session Factory ────────────────────────────────

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[TenantSession]] = None


def get_engine() -> AsyncEngine:
    """Get or create the async engine singleton."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            echo=settings.DB_ECHO,
        )
    return _engine


def _build_factory(engine: AsyncEngine) -> async_sessionmaker[TenantSession]:
    # Deferred: isolation imports the model registry, which imports Base from here.
    from tenantry.storage.isolation import TenantSyncSession

    return async_sessionmaker(
        bind=engine,
        class_=TenantSession,
        sync_session_class=TenantSyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_session_factory() -> async_sessionmaker[TenantSession]:
    """Get or create the session factory singleton."""
    global _session_factory
    if _session_factory is None:
        _session_factory = _build_factory(get_engine())
    return _session_factory


def open_session(
    context: RequestTenantContext,
    stamp_policy: Optional[StampPolicy] = None,
) -> TenantSession:
    """Open a session bound to one request's tenant context."""
    factory = get_session_factory()
    return factory(tenant_context=context, stamp_policy=stamp_policy)


@asynccontextmanager
async def tenant_session(
    tenant_id: Optional[TenantId],
    stamp_policy: Optional[StampPolicy] = None,
) -> AsyncIterator[TenantSession]:
    """
    Unit of work for code running outside an HTTP request.

    Seeding, migrations and scheduled jobs pass the target tenant, or None
    to run as the platform (tenant-scoped inserts then need an explicit
    tenant_id). Commits on success, rolls back on error.
    """
    context = RequestTenantContext.for_tenant(tenant_id)
    async with open_session(context, stamp_policy) as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Lifecycle ───────────────────────────────────────────────

async def init_db() -> None:
    """Verify database connection on startup."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    """Dispose engine on shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def create_all_tables() -> None:
    """Create all tables from ORM metadata (dev/test use)."""
    import tenantry.storage.models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all_tables() -> None:
    """Drop all tables (test cleanup only)."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ── Test Support ────────────────────────────────────────────

def override_engine_for_test(engine: AsyncEngine) -> None:
    """Inject a test engine (e.g. SQLite in-memory)."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = _build_factory(engine)
