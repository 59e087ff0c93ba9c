# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Observability API — Health check, metrics and resolved-tenant echo.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tenantry.api.deps import get_tenant_context, get_verified_claims
from tenantry.core.claims import VerifiedClaims
from tenantry.core.metrics import tenancy_metrics
from tenantry.core.tenant import RequestTenantContext

router = APIRouter(tags=["observability"])


@router.get("/health")
async def health_check():
    return {
        "status": "ok",
        "version": "0.1.0",
        "metrics": tenancy_metrics.snapshot(),
    }


@router.get("/api/metrics")
async def get_metrics():
    """Return current tenancy metrics."""
    return tenancy_metrics.snapshot()


@router.get("/api/tenant")
async def get_resolved_tenant(
    context: RequestTenantContext = Depends(get_tenant_context),
    claims: VerifiedClaims = Depends(get_verified_claims),
):
    """Which tenant this request resolved to (None for platform callers)."""
    tenant_id = context.get()
    return {
        "tenant_id": str(tenant_id) if tenant_id else None,
        "scoped": tenant_id is not None,
        "authenticated": claims.authenticated,
    }
