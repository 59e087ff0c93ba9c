# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.
"""Unit tests for API dependencies (claims → context chain)."""

import uuid

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from tenantry.api.deps import get_tenant_context, get_verified_claims, require_authenticated
from tenantry.core.claims import VerifiedClaims

T1 = uuid.UUID("11111111-1111-1111-1111-111111111111")


def _request(path="/api/employees"):
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": [],
    })


class TestGetVerifiedClaims:
    @pytest.mark.asyncio
    async def test_reads_claims_from_state(self):
        req = _request()
        claims = VerifiedClaims(values={"tenant_id": str(T1)}, authenticated=True)
        req.state.claims = claims
        assert await get_verified_claims(req) is claims

    @pytest.mark.asyncio
    async def test_missing_claims_are_anonymous(self):
        claims = await get_verified_claims(_request())
        assert claims.authenticated is False

    @pytest.mark.asyncio
    async def test_foreign_object_is_ignored(self):
        req = _request()
        req.state.claims = {"tenant_id": str(T1)}
        claims = await get_verified_claims(req)
        assert claims.authenticated is False
        assert claims.first(["tenant_id"]) is None


class TestGetTenantContext:
    @pytest.mark.asyncio
    async def test_builds_fresh_context_per_call(self):
        claims = VerifiedClaims(values={"tenant_id": str(T1)}, authenticated=True)
        first = await get_tenant_context(_request(), claims)
        second = await get_tenant_context(_request(), claims)
        assert first is not second
        assert first.get() == second.get() == T1

    @pytest.mark.asyncio
    async def test_records_tenant_on_request_state(self):
        req = _request()
        claims = VerifiedClaims(values={"tenant_id": str(T1)}, authenticated=True)
        await get_tenant_context(req, claims)
        assert req.state.tenant_id == T1

    @pytest.mark.asyncio
    async def test_platform_caller_gets_empty_context(self):
        claims = VerifiedClaims(values={"role": "SA"}, authenticated=True)
        ctx = await get_tenant_context(_request(), claims)
        assert ctx.get() is None


class TestRequireAuthenticated:
    @pytest.mark.asyncio
    async def test_anonymous_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            await require_authenticated(VerifiedClaims.anonymous())
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_authenticated_passes(self):
        claims = VerifiedClaims(values={"role": "EMP"}, authenticated=True)
        assert await require_authenticated(claims) is claims
