# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Employees API — Tenant-scoped employee profiles.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from tenantry.api.deps import get_tenant_db, require_authenticated
from tenantry.api.errors import DuplicateRecordError, RecordNotFoundError
from tenantry.storage.database import TenantSession
from tenantry.storage.repositories import DepartmentRepository, EmployeeRepository

router = APIRouter(
    prefix="/employees",
    tags=["employees"],
    dependencies=[Depends(require_authenticated)],
)


class EmployeeRequest(BaseModel):
    employee_code: str = Field(min_length=1, max_length=32)
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=3, max_length=256)
    phone: Optional[str] = None
    joining_date: date
    department_id: Optional[uuid.UUID] = None

class EmployeeResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: uuid.UUID
    tenant_id: uuid.UUID
    employee_code: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str] = None
    joining_date: date
    status: str
    department_id: Optional[uuid.UUID] = None
    created_at: datetime


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    department_id: Optional[uuid.UUID] = None,
    limit: int = 50,
    offset: int = 0,
    db: TenantSession = Depends(get_tenant_db),
):
    """List employees visible to the caller, optionally by department."""
    repo = EmployeeRepository(db)
    if department_id is not None:
        return await repo.list_by_department(department_id)
    return await repo.list(limit=limit, offset=offset)


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    req: EmployeeRequest,
    db: TenantSession = Depends(get_tenant_db),
):
    repo = EmployeeRepository(db)
    if await repo.get_by_code(req.employee_code) is not None:
        raise DuplicateRecordError("Employee", "employee_code", req.employee_code)
    # A department of another tenant is invisible here, so it cannot be referenced
    if req.department_id is not None:
        if await DepartmentRepository(db).get(req.department_id) is None:
            raise RecordNotFoundError("Department", req.department_id)
    return await repo.add(**req.model_dump())


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: uuid.UUID,
    db: TenantSession = Depends(get_tenant_db),
):
    employee = await EmployeeRepository(db).get(employee_id)
    if employee is None:
        raise RecordNotFoundError("Employee", employee_id)
    return employee
