"""
Entity Store Constraint Tests

Enum-valued columns are checked before insert/update; port ranges are
enforced by CHECK constraints.
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories import ConnectorRepository, ResourceRepository, UserRepository

# pylint: disable=unused-argument


class TestEnumValidation:
    """Invalid enum values are rejected on flush."""

    @pytest.mark.asyncio
    async def test_invalid_protocol(self, test_db: AsyncSession, remote_network):
        """
        Expected: ValueError naming the allowed protocols.
        """
        with pytest.raises(ValueError, match="protocol"):
            await ResourceRepository(test_db).create(
                id="res_bad",
                name="Bad",
                address="10.0.0.1",
                protocol="ICMP",
                remote_network_id="net_1",
            )

    @pytest.mark.asyncio
    async def test_invalid_connector_status_on_update(self, test_db: AsyncSession, connector):
        """
        Expected: ValueError when updating to an unknown status.
        """
        with pytest.raises(ValueError, match="status"):
            await ConnectorRepository(test_db).update("con_1", status="sleeping")


class TestPortConstraints:
    """CHECK constraints on resource ports."""

    @pytest.mark.asyncio
    async def test_port_out_of_range(self, test_db: AsyncSession, remote_network):
        """
        Expected: IntegrityError for port 70000.
        """
        with pytest.raises(IntegrityError):
            await ResourceRepository(test_db).create(
                id="res_bad",
                name="Bad",
                address="10.0.0.1",
                port_from=70000,
                remote_network_id="net_1",
            )

    @pytest.mark.asyncio
    async def test_port_range_reversed(self, test_db: AsyncSession, remote_network):
        """
        Expected: IntegrityError when port_to < port_from.
        """
        with pytest.raises(IntegrityError):
            await ResourceRepository(test_db).create(
                id="res_bad",
                name="Bad",
                address="10.0.0.1",
                port_from=8080,
                port_to=8000,
                remote_network_id="net_1",
            )


class TestCertificateIdentity:
    """Certificate identities are unique across users."""

    @pytest.mark.asyncio
    async def test_duplicate_certificate_identity(self, test_db: AsyncSession, certified_user):
        """
        Expected: IntegrityError issuing cert-u1 to a second user.
        """
        users = UserRepository(test_db)
        await users.create(id="usr_9", name="Eve", email="eve@company.com")

        with pytest.raises(IntegrityError):
            await users.issue_certificate_identity("usr_9", "cert-u1")
