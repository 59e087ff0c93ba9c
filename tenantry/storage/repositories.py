# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Repository Layer — CRUD over tenant-bound sessions.

Each repository takes a TenantSession. None of the queries here mention
tenant_id: the session's isolation hooks add the predicate on read and stamp
the owner on insert. A record owned by another tenant is indistinguishable
from one that does not exist.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select, update

from tenantry.core.errors import TenantReassignmentError
from tenantry.storage.database import TenantSession
from tenantry.storage.models import Department, Employee

ModelT = TypeVar("ModelT")


class TenantRepository(Generic[ModelT]):
    """Generic typed access to one model."""

    model: Type[ModelT]

    def __init__(self, db: TenantSession):
        self.db = db

    async def add(self, **values: Any) -> ModelT:
        """Insert a new row. tenant_id is filled from the session context."""
        record = self.model(**values)
        self.db.add(record)
        await self.db.flush()
        return record

    async def get(self, record_id: uuid.UUID) -> Optional[ModelT]:
        """Get by primary key; None when missing or owned by another tenant."""
        return await self.db.get(self.model, record_id)

    async def list(self, limit: int = 50, offset: int = 0) -> List[ModelT]:
        result = await self.db.execute(
            select(self.model)
            .order_by(self.model.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def update(self, record_id: uuid.UUID, values: Dict[str, Any]) -> Optional[ModelT]:
        """Apply values to a visible row. Returns None if nothing was visible."""
        record = await self.get(record_id)
        if record is None:
            return None
        for key, value in values.items():
            setattr(record, key, value)
        await self.db.flush()
        return record

    async def delete(self, record_id: uuid.UUID) -> bool:
        """Delete a visible row. Returns whether a row was removed."""
        record = await self.get(record_id)
        if record is None:
            return False
        await self.db.delete(record)
        await self.db.flush()
        return True

    async def bulk_update(self, values: Dict[str, Any]) -> int:
        """
        Update every visible row in one statement. Returns the affected row count.

        Loaded instances are not synchronized; re-read them afterwards.
        """
        if "tenant_id" in values:
            raise TenantReassignmentError(self.model.__name__)
        result = await self.db.execute(
            update(self.model)
            .values(**values, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def bulk_delete(self, record_ids: List[uuid.UUID]) -> int:
        """Delete visible rows by id in one statement. Returns the affected row count."""
        result = await self.db.execute(
            delete(self.model)
            .where(self.model.id.in_(record_ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


# ── Core HR ─────────────────────────────────────────────────

class DepartmentRepository(TenantRepository[Department]):
    model = Department

    async def get_by_code(self, code: str) -> Optional[Department]:
        result = await self.db.execute(
            select(Department).where(Department.code == code)
        )
        return result.scalar_one_or_none()

    async def list_children(self, parent_id: uuid.UUID) -> List[Department]:
        result = await self.db.execute(
            select(Department)
            .where(Department.parent_department_id == parent_id)
            .order_by(Department.name)
        )
        return list(result.scalars().all())


class EmployeeRepository(TenantRepository[Employee]):
    model = Employee

    async def get_by_code(self, employee_code: str) -> Optional[Employee]:
        result = await self.db.execute(
            select(Employee).where(Employee.employee_code == employee_code)
        )
        return result.scalar_one_or_none()

    async def list_by_department(self, department_id: uuid.UUID) -> List[Employee]:
        result = await self.db.execute(
            select(Employee)
            .where(Employee.department_id == department_id)
            .order_by(Employee.last_name, Employee.first_name)
        )
        return list(result.scalars().all())
