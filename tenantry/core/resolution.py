# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Tenant Resolution — Populates a RequestTenantContext from verified claims.

Runs once per request, after authentication and before any data access.
A missing tenant claim is valid (platform administrators, public endpoints);
only an authenticated non-administrator without one is flagged.
"""

from __future__ import annotations

import logging
from typing import Optional

from tenantry.core.claims import VerifiedClaims
from tenantry.core.config import TenantrySettings, settings as default_settings
from tenantry.core.errors import ContextAlreadySetError
from tenantry.core.metrics import (
    MALFORMED_CLAIM,
    MISSING_CLAIM,
    PLATFORM,
    RESOLVED,
    tenancy_metrics,
)
from tenantry.core.tenant import RequestTenantContext, TenantId, parse_tenant_id

logger = logging.getLogger("tenantry.resolution")


def resolve_tenant(
    claims: VerifiedClaims,
    context: RequestTenantContext,
    path: str = "",
    config: Optional[TenantrySettings] = None,
) -> Optional[TenantId]:
    """
    Read the tenant claim and bind it to context.

    Returns the resolved tenant (or None). Raises ContextAlreadySetError
    if the context was already populated for this request.
    """
    cfg = config or default_settings
    raw = claims.first(cfg.TENANT_CLAIM_NAMES)
    role = claims.first(cfg.ROLE_CLAIM_NAMES)
    user_id = claims.first(cfg.SUBJECT_CLAIM_NAMES)

    tenant_id = parse_tenant_id(raw) if raw is not None else None

    if raw is not None and tenant_id is None:
        logger.warning(
            "Rejected malformed tenant claim %r for user %s",
            raw, user_id,
            extra={"path": path, "user_id": user_id},
        )
        tenancy_metrics.record_resolution(MALFORMED_CLAIM)
        return None

    if tenant_id is not None:
        try:
            context.set(tenant_id)
        except ContextAlreadySetError:
            logger.error(
                "Tenant context already set (current=%s, attempted=%s); resolution ran twice",
                context.get(), tenant_id,
                extra={"path": path, "tenant_id": tenant_id, "user_id": user_id},
            )
            raise
        logger.debug(
            "Tenant context set",
            extra={"path": path, "tenant_id": tenant_id, "user_id": user_id},
        )
        tenancy_metrics.record_resolution(RESOLVED)
        return tenant_id

    if claims.authenticated and role != cfg.PLATFORM_ADMIN_ROLE:
        logger.warning(
            "Authenticated user %s with role %s has no tenant_id claim",
            user_id, role,
            extra={"path": path, "user_id": user_id},
        )
        tenancy_metrics.record_resolution(MISSING_CLAIM)
    else:
        logger.debug(
            "No tenant context (authenticated=%s, role=%s)",
            claims.authenticated, role or "None",
            extra={"path": path, "tenant_id": None},
        )
        tenancy_metrics.record_resolution(PLATFORM)
    return None
