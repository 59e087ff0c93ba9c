# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Tenant Context — Per-request tenant identity.

A RequestTenantContext is created fresh for each request (or background unit
of work), populated at most once by the resolution step, and handed to the
data access layer. It is never pooled and offers no reset.
"""

from __future__ import annotations

import uuid
from typing import Optional, Union

from tenantry.core.errors import ContextAlreadySetError

TenantId = uuid.UUID


def parse_tenant_id(value: Union[str, uuid.UUID, None]) -> Optional[TenantId]:
    """
    Parse a raw claim value into a TenantId.

    Returns None for missing, blank, malformed or all-zero values.
    """
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = uuid.UUID(text)
        except ValueError:
            return None
    if parsed.int == 0:
        return None
    return parsed


class RequestTenantContext:
    """Holds at most one TenantId for the lifetime of a request."""

    __slots__ = ("_tenant_id", "_is_set")

    def __init__(self) -> None:
        self._tenant_id: Optional[TenantId] = None
        self._is_set = False

    @property
    def tenant_id(self) -> Optional[TenantId]:
        return self._tenant_id

    @property
    def is_set(self) -> bool:
        return self._is_set

    def get(self) -> Optional[TenantId]:
        """Active tenant, or None when no tenant scoping applies."""
        return self._tenant_id

    def set(self, tenant_id: TenantId) -> None:
        """Bind the tenant. A second call always fails, even with the same value."""
        if self._is_set:
            raise ContextAlreadySetError(self._tenant_id, tenant_id)
        if tenant_id is None:
            raise ValueError("tenant_id must not be None")
        if not isinstance(tenant_id, uuid.UUID):
            raise TypeError(f"tenant_id must be a UUID, got {type(tenant_id).__name__}")
        self._tenant_id = tenant_id
        self._is_set = True

    @classmethod
    def for_tenant(cls, tenant_id: Optional[TenantId]) -> "RequestTenantContext":
        """Fresh context for background jobs; None yields a platform context."""
        ctx = cls()
        if tenant_id is not None:
            ctx.set(tenant_id)
        return ctx

    def __repr__(self) -> str:
        return f"RequestTenantContext(tenant={self._tenant_id!r}, set={self._is_set})"
