# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Tenant-Scoped Model Registry — Which tables are isolated per tenant.

Built once at import time and read-only afterwards. A model owning tenant
data that is missing here is readable by every tenant; the registry tests
check this list against every mapped class.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Tuple, Type

from tenantry.storage.models import (
    # Core HR
    Department,
    Designation,
    Employee,
    EmployeeJobHistory,
    Location,
    # Workforce
    AttendanceLog,
    EmployeeRoster,
    ShiftMaster,
    # Leave
    LeaveBalance,
    LeaveRequest,
    LeaveType,
    # Workflow
    UserTask,
    # Payroll
    PayrollRun,
    Payslip,
    SalaryComponent,
    SalaryStructure,
    # Assets
    Asset,
    AssetAssignment,
    # Global
    FormTemplate,
    RefreshToken,
    Region,
    Tenant,
    User,
)

TENANT_SCOPED_MODELS: Tuple[Type[Any], ...] = (
    Department,
    Designation,
    Location,
    Employee,
    EmployeeJobHistory,
    ShiftMaster,
    EmployeeRoster,
    AttendanceLog,
    LeaveType,
    LeaveBalance,
    LeaveRequest,
    UserTask,
    SalaryComponent,
    SalaryStructure,
    PayrollRun,
    Payslip,
    Asset,
    AssetAssignment,
)

# Shared by all tenants. User keeps an optional tenant reference but is
# resolved by the authentication layer, not filtered here.
GLOBAL_MODELS: Tuple[Type[Any], ...] = (
    Region,
    Tenant,
    User,
    RefreshToken,
    FormTemplate,
)

_SCOPED: FrozenSet[Type[Any]] = frozenset(TENANT_SCOPED_MODELS)


def is_tenant_scoped(obj_or_cls: Any) -> bool:
    """True if the instance or class is a registered tenant-scoped model."""
    cls = obj_or_cls if isinstance(obj_or_cls, type) else type(obj_or_cls)
    return cls in _SCOPED
