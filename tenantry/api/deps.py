# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
API Dependencies — FastAPI dependency injection.

The chain encodes pipeline order:

    get_verified_claims  →  get_tenant_context  →  get_tenant_db

A handler can only reach a database session through a context, and a
context is only populated from verified claims. FastAPI caches each
dependency per request, so resolution runs exactly once.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request

from tenantry.core.claims import VerifiedClaims
from tenantry.core.resolution import resolve_tenant
from tenantry.core.tenant import RequestTenantContext
from tenantry.storage.database import TenantSession, open_session


async def get_verified_claims(request: Request) -> VerifiedClaims:
    """
    Claims placed on request.state.claims by the authentication layer.

    Requests it did not authenticate are treated as anonymous.
    """
    claims = getattr(request.state, "claims", None)
    if isinstance(claims, VerifiedClaims):
        return claims
    return VerifiedClaims.anonymous()


async def get_tenant_context(
    request: Request,
    claims: VerifiedClaims = Depends(get_verified_claims),
) -> RequestTenantContext:
    """Fresh per-request context, populated from the caller's tenant claim."""
    context = RequestTenantContext()
    resolve_tenant(claims, context, path=request.url.path)
    request.state.tenant_id = context.get()
    return context


async def get_tenant_db(
    context: RequestTenantContext = Depends(get_tenant_context),
) -> AsyncGenerator[TenantSession, None]:
    """Yields a session isolated to the request's tenant."""
    async with open_session(context) as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def require_authenticated(
    claims: VerifiedClaims = Depends(get_verified_claims),
) -> VerifiedClaims:
    """Reject anonymous callers on endpoints that expose tenant data."""
    if not claims.authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    return claims
