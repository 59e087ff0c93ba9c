# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Shared test fixtures for all Tenantry tests.

Database fixtures run against SQLite in-memory through aiosqlite; the
isolation hooks are dialect-independent.
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from tenantry.core.tenant import RequestTenantContext
from tenantry.storage.database import (
    close_db,
    create_all_tables,
    drop_all_tables,
    open_session,
    override_engine_for_test,
    tenant_session,
)
from tenantry.storage.models import Tenant

TENANT_A = uuid.UUID("11111111-1111-1111-1111-111111111111")
TENANT_B = uuid.UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture
def tenant_a() -> uuid.UUID:
    return TENANT_A


@pytest.fixture
def tenant_b() -> uuid.UUID:
    return TENANT_B


@pytest.fixture
async def db_engine():
    """In-memory database with all tables, torn down after each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    override_engine_for_test(engine)
    await create_all_tables()

    yield engine

    await drop_all_tables()
    await close_db()


@pytest.fixture
async def tenants(db_engine):
    """Two tenants, created by a platform (unscoped) unit of work."""
    async with tenant_session(None) as db:
        db.add(Tenant(id=TENANT_A, name="Tenant A", subdomain="tenant-a"))
        db.add(Tenant(id=TENANT_B, name="Tenant B", subdomain="tenant-b"))
    return TENANT_A, TENANT_B


@pytest.fixture
def session_for():
    """Open a session bound to a fresh context for the given tenant (or None)."""

    def _open(tenant_id, stamp_policy=None):
        return open_session(RequestTenantContext.for_tenant(tenant_id), stamp_policy)

    return _open
