# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Tenancy Errors — Raised by the isolation core.

These signal a misconfigured pipeline, never bad client input. They must
surface as server errors and never be downgraded to "not found".
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID


class TenancyError(Exception):
    """Base class for isolation-core failures."""

    code = "TENANCY_ERROR"


class ContextAlreadySetError(TenancyError):
    """A second set() was attempted on one RequestTenantContext."""

    code = "TENANT_CONTEXT_ALREADY_SET"

    def __init__(self, current: Optional[UUID], attempted: UUID):
        self.current = current
        self.attempted = attempted
        super().__init__("Tenant ID has already been set for this request")


class MissingTenantContextError(TenancyError):
    """A tenant-scoped record was about to be persisted without an owner."""

    code = "TENANT_CONTEXT_MISSING"

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(
            f"Cannot create tenant-scoped {entity} without a tenant context. "
            "Ensure the caller carries a tenant claim or supply tenant_id explicitly."
        )


class TenantMismatchError(TenancyError):
    """A new record names a tenant other than the active one (reject_foreign policy)."""

    code = "TENANT_MISMATCH"

    def __init__(self, entity: str, supplied: UUID, active: UUID):
        self.entity = entity
        self.supplied = supplied
        self.active = active
        super().__init__(
            f"{entity} carries tenant_id {supplied} but the active tenant is {active}"
        )


class TenantReassignmentError(TenancyError):
    """An existing record's tenant_id was modified."""

    code = "TENANT_REASSIGNMENT"

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"tenant_id of an existing {entity} cannot be changed")
