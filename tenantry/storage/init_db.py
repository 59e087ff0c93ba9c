# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Database Initialization — Create tables and seed demo tenants.

Runs outside any request, so it uses a platform session (no active tenant)
and supplies tenant_id explicitly on every tenant-scoped row.
"""

import asyncio
import logging
import uuid
from datetime import date
from typing import Optional

from tenantry.core.config import settings
from tenantry.core.logging import setup_logging
from tenantry.storage.database import close_db, create_all_tables, tenant_session
from tenantry.storage.models import Department, Employee, Tenant

logger = logging.getLogger("tenantry.init_db")

DEMO_TENANTS = (
    (uuid.UUID("11111111-1111-1111-1111-111111111111"), "Acme Corp", "acme"),
    (uuid.UUID("22222222-2222-2222-2222-222222222222"), "Globex Ltd", "globex"),
)


async def seed_tenant(
    name: str,
    subdomain: str,
    tenant_id: Optional[uuid.UUID] = None,
    with_sample_data: bool = True,
) -> uuid.UUID:
    """Create a tenant and, optionally, one department and employee it owns."""
    tenant_id = tenant_id or uuid.uuid4()
    async with tenant_session(None) as db:
        db.add(Tenant(id=tenant_id, name=name, subdomain=subdomain))
        await db.flush()
        if with_sample_data:
            dept = Department(tenant_id=tenant_id, name="Engineering", code="ENG")
            db.add(dept)
            await db.flush()
            db.add(Employee(
                tenant_id=tenant_id,
                employee_code="EMP001",
                first_name="Demo",
                last_name="Employee",
                email=f"demo@{subdomain}.example.com",
                joining_date=date.today(),
                department_id=dept.id,
            ))
    logger.info("Seeded tenant %s (%s)", subdomain, tenant_id, extra={"tenant_id": tenant_id})
    return tenant_id


async def main():
    """Create all tables and seed demo tenants."""
    setup_logging(settings.LOG_LEVEL)
    logger.info("[init_db] Creating tables...")
    await create_all_tables()
    for tenant_id, name, subdomain in DEMO_TENANTS:
        await seed_tenant(name, subdomain, tenant_id=tenant_id)
    logger.info("[init_db] Done.")
    await close_db()


if __name__ == "__main__":
    asyncio.run(main())
