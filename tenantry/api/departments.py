# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Departments API — CRUD over a tenant-scoped table.

Handlers never mention tenant_id: reads are filtered and inserts stamped
by the session. Another tenant's department id behaves as a missing one.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from tenantry.api.deps import get_tenant_db, require_authenticated
from tenantry.api.errors import DuplicateRecordError, RecordNotFoundError
from tenantry.storage.database import TenantSession
from tenantry.storage.repositories import DepartmentRepository

router = APIRouter(
    prefix="/departments",
    tags=["departments"],
    dependencies=[Depends(require_authenticated)],
)


class DepartmentRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    code: str = Field(min_length=1, max_length=32)
    description: Optional[str] = None
    parent_department_id: Optional[uuid.UUID] = None

class DepartmentResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str
    code: str
    description: Optional[str] = None
    is_active: bool
    parent_department_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


async def _check_parent(repo: DepartmentRepository, parent_id: Optional[uuid.UUID]) -> None:
    if parent_id is not None and await repo.get(parent_id) is None:
        raise RecordNotFoundError("Department", parent_id)


@router.get("", response_model=List[DepartmentResponse])
async def list_departments(
    limit: int = 50,
    offset: int = 0,
    db: TenantSession = Depends(get_tenant_db),
):
    """List departments visible to the caller."""
    return await DepartmentRepository(db).list(limit=limit, offset=offset)


@router.post("", response_model=DepartmentResponse, status_code=201)
async def create_department(
    req: DepartmentRequest,
    db: TenantSession = Depends(get_tenant_db),
):
    repo = DepartmentRepository(db)
    if await repo.get_by_code(req.code) is not None:
        raise DuplicateRecordError("Department", "code", req.code)
    await _check_parent(repo, req.parent_department_id)
    return await repo.add(**req.model_dump())


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(
    department_id: uuid.UUID,
    db: TenantSession = Depends(get_tenant_db),
):
    dept = await DepartmentRepository(db).get(department_id)
    if dept is None:
        raise RecordNotFoundError("Department", department_id)
    return dept


@router.put("/{department_id}", response_model=DepartmentResponse)
async def update_department(
    department_id: uuid.UUID,
    req: DepartmentRequest,
    db: TenantSession = Depends(get_tenant_db),
):
    repo = DepartmentRepository(db)
    existing = await repo.get_by_code(req.code)
    if existing is not None and existing.id != department_id:
        raise DuplicateRecordError("Department", "code", req.code)
    await _check_parent(repo, req.parent_department_id)
    dept = await repo.update(department_id, req.model_dump())
    if dept is None:
        raise RecordNotFoundError("Department", department_id)
    return dept


@router.delete("/{department_id}", status_code=204)
async def delete_department(
    department_id: uuid.UUID,
    db: TenantSession = Depends(get_tenant_db),
):
    if not await DepartmentRepository(db).delete(department_id):
        raise RecordNotFoundError("Department", department_id)
