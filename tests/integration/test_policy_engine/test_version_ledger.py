"""
Version Ledger Integration Tests

Tests for VersionLedger compare-and-swap writes.
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.policy_engine import VersionLedger

# pylint: disable=unused-argument

HASH_A = "a" * 64
HASH_B = "b" * 64
NOW = datetime(2026, 2, 20, 10, 0, tzinfo=UTC)


class TestVersionLedger:
    """Tests for VersionLedger."""

    @pytest.mark.asyncio
    async def test_no_entry(self, test_db: AsyncSession, connector):
        """
        Expected: None and current version 0.
        """
        ledger = VersionLedger(test_db)

        assert await ledger.get_version("con_1") is None
        assert await ledger.current_version("con_1") == 0

    @pytest.mark.asyncio
    async def test_first_record_and_advance(self, test_db: AsyncSession, connector):
        """
        Expected: insert at 1, then advance to 2 from 1.
        """
        ledger = VersionLedger(test_db)

        assert await ledger.record_version("con_1", 1, HASH_A, NOW, expected_version=0) is True
        assert await ledger.record_version("con_1", 2, HASH_B, NOW, expected_version=1) is True
        await test_db.commit()

        entry = await ledger.get_version("con_1")
        assert entry.version == 2
        assert entry.policy_hash == HASH_B
        assert entry.compiled_at == NOW

    @pytest.mark.asyncio
    async def test_stale_expected_version_loses(self, test_db: AsyncSession, connector):
        """
        Scenario: a writer still expecting version 1 after the entry reached 2.
        Expected: False and the entry is unchanged.
        """
        ledger = VersionLedger(test_db)
        await ledger.record_version("con_1", 1, HASH_A, NOW, expected_version=0)
        await ledger.record_version("con_1", 2, HASH_B, NOW, expected_version=1)
        await test_db.commit()

        assert await ledger.record_version("con_1", 2, HASH_A, NOW, expected_version=1) is False
        assert (await ledger.get_version("con_1")).policy_hash == HASH_B

    @pytest.mark.asyncio
    async def test_version_must_increase(self, test_db: AsyncSession, connector):
        """
        Expected: ValueError for a non-increasing version.
        """
        with pytest.raises(ValueError):
            await VersionLedger(test_db).record_version(
                "con_1", 1, HASH_A, NOW, expected_version=1
            )
