# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.
"""API tests: tenant isolation observed through HTTP."""

import uuid
from typing import Optional

import pytest
from fastapi import Header
from httpx import ASGITransport, AsyncClient

from tenantry.api.deps import get_verified_claims
from tenantry.core.claims import VerifiedClaims
from tenantry.main import app


async def _claims_from_test_headers(
    x_test_tenant: Optional[str] = Header(None, alias="X-Test-Tenant"),
    x_test_role: Optional[str] = Header(None, alias="X-Test-Role"),
) -> VerifiedClaims:
    """Stands in for the authentication layer."""
    if x_test_role is None:
        return VerifiedClaims.anonymous()
    values = {"role": x_test_role, "sub": f"user-{x_test_role.lower()}"}
    if x_test_tenant is not None:
        values["tenant_id"] = x_test_tenant
    return VerifiedClaims(values=values, authenticated=True)


def _as(tenant_id=None, role="TA"):
    headers = {"X-Test-Role": role}
    if tenant_id is not None:
        headers["X-Test-Tenant"] = str(tenant_id)
    return headers


@pytest.fixture
async def client(tenants):
    app.dependency_overrides[get_verified_claims] = _claims_from_test_headers
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def _create_employee(client, tenant_id, code="E1", **extra):
    payload = {
        "employee_code": code,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": f"{code.lower()}@example.com",
        "joining_date": "2024-01-15",
    }
    payload.update(extra)
    resp = await client.post("/api/employees", json=payload, headers=_as(tenant_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestEmployeeIsolationScenario:
    @pytest.mark.asyncio
    async def test_created_employee_is_stamped(self, client, tenant_a):
        data = await _create_employee(client, tenant_a)
        assert data["tenant_id"] == str(tenant_a)
        assert data["full_name"] == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_other_tenant_list_excludes_record(self, client, tenant_a, tenant_b):
        e1 = await _create_employee(client, tenant_a)

        resp = await client.get("/api/employees", headers=_as(tenant_b))
        assert resp.status_code == 200
        assert e1["id"] not in [e["id"] for e in resp.json()]

        resp = await client.get("/api/employees", headers=_as(tenant_a))
        assert [e["id"] for e in resp.json()] == [e1["id"]]

    @pytest.mark.asyncio
    async def test_cross_tenant_fetch_is_404_not_403(self, client, tenant_a, tenant_b):
        e1 = await _create_employee(client, tenant_a)

        resp = await client.get(f"/api/employees/{e1['id']}", headers=_as(tenant_b))
        assert resp.status_code == 404
        assert resp.json()["code"] == "RECORD_NOT_FOUND"

        missing = await client.get(f"/api/employees/{uuid.uuid4()}", headers=_as(tenant_b))
        assert missing.json()["code"] == resp.json()["code"]

    @pytest.mark.asyncio
    async def test_cannot_reference_other_tenant_department(self, client, tenant_a, tenant_b):
        resp = await client.post("/api/departments", json={"name": "Eng", "code": "ENG"}, headers=_as(tenant_a))
        dept_a = resp.json()["id"]

        payload = {
            "employee_code": "E9", "first_name": "B", "last_name": "B",
            "email": "b@example.com", "joining_date": "2024-01-01",
            "department_id": dept_a,
        }
        resp = await client.post("/api/employees", json=payload, headers=_as(tenant_b))
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_same_employee_code_allowed_per_tenant(self, client, tenant_a, tenant_b):
        await _create_employee(client, tenant_a, code="E1")
        await _create_employee(client, tenant_b, code="E1")
        resp = await client.post(
            "/api/employees",
            json={"employee_code": "E1", "first_name": "x", "last_name": "y",
                  "email": "dup@example.com", "joining_date": "2024-01-01"},
            headers=_as(tenant_a),
        )
        assert resp.status_code == 409


class TestDepartmentAPI:
    @pytest.mark.asyncio
    async def test_cross_tenant_update_and_delete_are_404(self, client, tenant_a, tenant_b):
        resp = await client.post("/api/departments", json={"name": "Eng", "code": "ENG"}, headers=_as(tenant_a))
        dept_id = resp.json()["id"]

        resp = await client.put(
            f"/api/departments/{dept_id}", json={"name": "Hacked", "code": "ENG"}, headers=_as(tenant_b)
        )
        assert resp.status_code == 404

        resp = await client.delete(f"/api/departments/{dept_id}", headers=_as(tenant_b))
        assert resp.status_code == 404

        resp = await client.get(f"/api/departments/{dept_id}", headers=_as(tenant_a))
        assert resp.status_code == 200
        assert resp.json()["name"] == "Eng"

    @pytest.mark.asyncio
    async def test_own_update_and_delete(self, client, tenant_a):
        resp = await client.post("/api/departments", json={"name": "Eng", "code": "ENG"}, headers=_as(tenant_a))
        dept_id = resp.json()["id"]

        resp = await client.put(
            f"/api/departments/{dept_id}", json={"name": "Engineering", "code": "ENG"}, headers=_as(tenant_a)
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Engineering"
        assert resp.json()["updated_at"] is not None

        resp = await client.delete(f"/api/departments/{dept_id}", headers=_as(tenant_a))
        assert resp.status_code == 204
        resp = await client.get(f"/api/departments/{dept_id}", headers=_as(tenant_a))
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_platform_admin_lists_all_tenants(self, client, tenant_a, tenant_b):
        await client.post("/api/departments", json={"name": "A", "code": "A"}, headers=_as(tenant_a))
        await client.post("/api/departments", json={"name": "B", "code": "B"}, headers=_as(tenant_b))

        resp = await client.get("/api/departments", headers=_as(None, role="SA"))
        assert resp.status_code == 200
        assert {d["tenant_id"] for d in resp.json()} == {str(tenant_a), str(tenant_b)}

    @pytest.mark.asyncio
    async def test_insert_without_tenant_is_server_error(self, client):
        resp = await client.post("/api/departments", json={"name": "X", "code": "X"}, headers=_as(None, role="SA"))
        assert resp.status_code == 500
        assert resp.json()["code"] == "TENANT_CONTEXT_MISSING"

    @pytest.mark.asyncio
    async def test_anonymous_rejected(self, client):
        resp = await client.get("/api/departments")
        assert resp.status_code == 401


class TestResolvedTenantEndpoint:
    @pytest.mark.asyncio
    async def test_reports_tenant(self, client, tenant_a):
        resp = await client.get("/api/tenant", headers=_as(tenant_a, role="EMP"))
        assert resp.json() == {"tenant_id": str(tenant_a), "scoped": True, "authenticated": True}

    @pytest.mark.asyncio
    async def test_malformed_claim_leaves_request_unscoped(self, client):
        resp = await client.get("/api/tenant", headers={"X-Test-Role": "EMP", "X-Test-Tenant": "nope"})
        assert resp.status_code == 200
        assert resp.json()["scoped"] is False

    @pytest.mark.asyncio
    async def test_trace_id_propagated(self, client):
        resp = await client.get("/health", headers={"X-Trace-Id": "trace-123"})
        assert resp.status_code == 200
        assert resp.headers["X-Trace-Id"] == "trace-123"
        assert "counters" in resp.json()["metrics"]
