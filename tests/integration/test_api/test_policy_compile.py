"""
Policy Compilation API Integration Tests

Endpoint Summary:
=================
- POST /api/v1/policy/compile/{connector_id}  - Compile a connector's policy
- GET  /health                                - Liveness
"""

import pytest
from httpx import AsyncClient

from app.policy_engine import verify_snapshot
from app.schemas.policy import PolicySnapshot

# pylint: disable=unused-argument


class TestCompilePolicy:
    """Tests for POST /api/v1/policy/compile/{connector_id}."""

    @pytest.mark.asyncio
    async def test_compile_success(self, client: AsyncClient, scenario):
        """
        Scenario: C1 → N1 → R1, rule binds G1 {U1 cert-u1, U2 no cert}.
        Expected: 200, version 1, one resource allowing cert-u1 only.
        """
        response = await client.post("/api/v1/policy/compile/con_1")

        assert response.status_code == 200
        data = response.json()
        assert data["connector_id"] == "con_1"
        assert data["policy_version"] == 1
        assert data["resources"] == [
            {
                "resource_id": "res_1",
                "address": "db.internal.company.com",
                "protocol": "TCP",
                "port_from": 5432,
                "port_to": 5432,
                "allowed_identities": ["cert-u1"],
            }
        ]
        assert len(data["policy_hash"]) == 64
        assert data["signature"]

    @pytest.mark.asyncio
    async def test_response_is_verifiable(self, client: AsyncClient, scenario):
        """
        Expected: the JSON body parses back into a snapshot whose hash and
        signature verify.
        """
        response = await client.post("/api/v1/policy/compile/con_1")

        snapshot = PolicySnapshot.model_validate(response.json())
        assert verify_snapshot(snapshot) is True

    @pytest.mark.asyncio
    async def test_recompile_keeps_version(self, client: AsyncClient, scenario):
        """
        Expected: same version and hash on an unchanged recompile.
        """
        first = (await client.post("/api/v1/policy/compile/con_1")).json()
        second = (await client.post("/api/v1/policy/compile/con_1")).json()

        assert second["policy_version"] == first["policy_version"] == 1
        assert second["policy_hash"] == first["policy_hash"]
        assert second["compiled_at"] == first["compiled_at"]

    @pytest.mark.asyncio
    async def test_unknown_connector(self, client: AsyncClient):
        """
        Expected: 404 with NOT_FOUND error body.
        """
        response = await client.post("/api/v1/policy/compile/con_missing")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["details"]["connector_id"] == "con_missing"


class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        """Liveness reports healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "portcullis"
