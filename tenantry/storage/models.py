# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
ORM Models — Table definitions for the HR platform.

Global tables (shared by all tenants):
  - regions, tenants, users, refresh_tokens, form_templates

Tenant-scoped tables (every row owned by exactly one tenant):
  - Core HR: departments, designations, locations, employees, employee_job_histories
  - Workforce: shift_masters, employee_rosters, attendance_logs
  - Leave: leave_types, leave_balances, leave_requests
  - Workflow: user_tasks
  - Payroll: salary_components, salary_structures, payroll_runs, payslips
  - Assets: assets, asset_assignments

Only identity, ownership and descriptive columns live here; business rules
belong to the services that use these tables.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric,
    String, Text, Time, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import declared_attr

from tenantry.storage.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


def _genuuid():
    return uuid.uuid4()


class BaseEntity:
    """Primary key and audit timestamps shared by every table."""

    id = Column(Uuid, primary_key=True, default=_genuuid)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class TenantScopedMixin:
    """Owning tenant column. Classes using it must also be listed in storage.registry."""

    @declared_attr
    def tenant_id(cls):
        return Column(Uuid, ForeignKey("tenants.id"), nullable=False, index=True)


# ── Platform (global) ───────────────────────────────────────

class Region(BaseEntity, Base):
    __tablename__ = "regions"

    code = Column(String(8), nullable=False, unique=True)
    name = Column(String(128), nullable=False)
    currency_code = Column(String(3), nullable=False)
    timezone = Column(String(64), nullable=False, default="UTC")

    def __repr__(self):
        return f"<Region {self.code}>"


class Tenant(BaseEntity, Base):
    __tablename__ = "tenants"

    name = Column(String(256), nullable=False)
    subdomain = Column(String(64), nullable=False, unique=True)
    region_id = Column(Uuid, ForeignKey("regions.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    subscription_start = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    subscription_end = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Tenant {self.subdomain}>"


class User(BaseEntity, Base):
    """Login identity. Platform administrators have no tenant."""

    __tablename__ = "users"

    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=True, index=True)
    email = Column(String(256), nullable=False, unique=True)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    password_hash = Column(String(256), nullable=False)
    role = Column(String(8), nullable=False)  # SA/TA/MGR/PA/EMP
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User {self.email} role={self.role}>"


class RefreshToken(BaseEntity, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(512), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)


class FormTemplate(BaseEntity, Base):
    """Region-specific dynamic form schema."""

    __tablename__ = "form_templates"

    region_id = Column(Uuid, ForeignKey("regions.id"), nullable=False)
    module = Column(String(64), nullable=False)
    schema_json = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)


# ── Core HR ─────────────────────────────────────────────────

class Department(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "departments"

    name = Column(String(128), nullable=False)
    code = Column(String(32), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    head_user_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
    parent_department_id = Column(Uuid, ForeignKey("departments.id"), nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_departments_tenant_code"),
    )

    def __repr__(self):
        return f"<Department {self.code}>"


class Designation(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "designations"

    title = Column(String(128), nullable=False)
    code = Column(String(32), nullable=False)
    level = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True)


class Location(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "locations"

    name = Column(String(128), nullable=False)
    code = Column(String(32), nullable=False)
    address = Column(Text, nullable=True)
    latitude = Column(Numeric(9, 6), nullable=True)
    longitude = Column(Numeric(9, 6), nullable=True)
    radius_meters = Column(Integer, nullable=False, default=100)
    is_active = Column(Boolean, nullable=False, default=True)


class Employee(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "employees"

    user_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
    employee_code = Column(String(32), nullable=False)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    email = Column(String(256), nullable=False)
    phone = Column(String(32), nullable=True)
    joining_date = Column(Date, nullable=False)
    status = Column(String(16), nullable=False, default="active")  # active/notice/exited
    department_id = Column(Uuid, ForeignKey("departments.id"), nullable=True)
    designation_id = Column(Uuid, ForeignKey("designations.id"), nullable=True)
    location_id = Column(Uuid, ForeignKey("locations.id"), nullable=True)
    reporting_manager_id = Column(Uuid, ForeignKey("employees.id"), nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "employee_code", name="uq_employees_tenant_code"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Employee {self.employee_code}>"


class EmployeeJobHistory(TenantScopedMixin, BaseEntity, Base):
    """Temporal job record; valid_to is NULL for the current row."""

    __tablename__ = "employee_job_histories"

    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    department_id = Column(Uuid, ForeignKey("departments.id"), nullable=True)
    designation_id = Column(Uuid, ForeignKey("designations.id"), nullable=True)
    change_type = Column(String(32), nullable=False)  # joining/promotion/transfer
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date, nullable=True)


# ── Workforce ───────────────────────────────────────────────

class ShiftMaster(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "shift_masters"

    name = Column(String(64), nullable=False)
    code = Column(String(16), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    grace_period_minutes = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class EmployeeRoster(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "employee_rosters"

    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    shift_id = Column(Uuid, ForeignKey("shift_masters.id"), nullable=False)
    effective_date = Column(Date, nullable=False)


class AttendanceLog(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "attendance_logs"

    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    clock_in = Column(DateTime(timezone=True), nullable=True)
    clock_out = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(16), nullable=False, default="present")
    is_regularized = Column(Boolean, nullable=False, default=False)


# ── Leave ───────────────────────────────────────────────────

class LeaveType(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "leave_types"

    name = Column(String(64), nullable=False)
    code = Column(String(16), nullable=False)
    max_days_per_year = Column(Numeric(5, 2), nullable=False, default=0)
    is_carry_forward = Column(Boolean, nullable=False, default=False)
    requires_approval = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)


class LeaveBalance(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "leave_balances"

    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type_id = Column(Uuid, ForeignKey("leave_types.id"), nullable=False)
    year = Column(Integer, nullable=False)
    accrued = Column(Numeric(5, 2), nullable=False, default=0)
    used = Column(Numeric(5, 2), nullable=False, default=0)


class LeaveRequest(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "leave_requests"

    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type_id = Column(Uuid, ForeignKey("leave_types.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    days_count = Column(Numeric(5, 2), nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="pending")  # pending/approved/rejected/cancelled
    approved_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)


# ── Workflow ────────────────────────────────────────────────

class UserTask(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "user_tasks"

    owner_user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(256), nullable=False)
    entity_type = Column(String(64), nullable=False)
    entity_id = Column(Uuid, nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    action_url = Column(String(512), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    actioned_at = Column(DateTime(timezone=True), nullable=True)


# ── Payroll ─────────────────────────────────────────────────

class SalaryComponent(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "salary_components"

    name = Column(String(64), nullable=False)
    code = Column(String(16), nullable=False)
    type = Column(String(16), nullable=False)  # earning/deduction
    is_taxable = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)


class SalaryStructure(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "salary_structures"

    name = Column(String(128), nullable=False)
    components_json = Column(JSON, nullable=False, default=list)


class PayrollRun(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "payroll_runs"

    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default="draft")  # draft/processing/completed
    processed_at = Column(DateTime(timezone=True), nullable=True)


class Payslip(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "payslips"

    payroll_run_id = Column(Uuid, ForeignKey("payroll_runs.id"), nullable=False, index=True)
    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    gross_earnings = Column(Numeric(12, 2), nullable=False, default=0)
    total_deductions = Column(Numeric(12, 2), nullable=False, default=0)
    net_pay = Column(Numeric(12, 2), nullable=False, default=0)
    breakdown_json = Column(JSON, nullable=True)


# ── Assets ──────────────────────────────────────────────────

class Asset(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "assets"

    asset_code = Column(String(32), nullable=False)
    asset_type = Column(String(64), nullable=False)
    make = Column(String(64), nullable=True)
    model = Column(String(64), nullable=True)
    serial_number = Column(String(128), nullable=True)
    status = Column(String(16), nullable=False, default="available")


class AssetAssignment(TenantScopedMixin, BaseEntity, Base):
    __tablename__ = "asset_assignments"

    asset_id = Column(Uuid, ForeignKey("assets.id"), nullable=False, index=True)
    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    assigned_date = Column(Date, nullable=False)
    returned_date = Column(Date, nullable=True)
