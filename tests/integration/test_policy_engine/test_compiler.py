"""
Policy Compiler Integration Tests

Compiles connector policies against a real database session.

Fixture Layout (see conftest.py):
=================================
    net_1 ── con_1 (connector)
      └── res_1 (db.internal.company.com:5432)
             └── rule "Engineering DB Access" (enabled) → grp_1
                                                           ├── usr_1 (cert-u1)
                                                           └── usr_2 (no certificate)
"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.core.exceptions import (
    ConnectorNotFoundError,
    PolicyVersionConflictError,
    StoreUnavailableError,
)
from app.db.repositories import (
    AccessRuleRepository,
    ConnectorRepository,
    GroupRepository,
    ResourceRepository,
    UserRepository,
)
from app.models.access_rule import AccessRuleGroup
from app.policy_engine import PolicyCompiler, VersionLedger, verify_snapshot

# pylint: disable=unused-argument


def _identities(snapshot, resource_id: str = "res_1") -> list[str]:
    for entry in snapshot.resources:
        if entry.resource_id == resource_id:
            return entry.allowed_identities
    raise AssertionError(f"{resource_id} missing from snapshot")


# =============================================================================
# EXAMPLE SCENARIO
# =============================================================================


class TestCompileScenario:
    """
    Group G1 contains U1 (certificate cert-u1) and U2 (no certificate).
    Resource R1 has one enabled rule binding G1. Connector C1's network owns R1.
    """

    @pytest.mark.asyncio
    async def test_only_certified_members_are_allowed(self, test_db: AsyncSession, scenario):
        """
        Compile C1.

        Scenario: U2 has no certificate.
        Expected: R1 allows exactly cert-u1, version 1.
        """
        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert snapshot.connector_id == "con_1"
        assert snapshot.policy_version == 1
        assert [entry.resource_id for entry in snapshot.resources] == ["res_1"]
        entry = snapshot.resources[0]
        assert entry.allowed_identities == ["cert-u1"]
        assert entry.address == "db.internal.company.com"
        assert entry.protocol.value == "TCP"
        assert entry.port_from == 5432
        assert entry.port_to == 5432

    @pytest.mark.asyncio
    async def test_removing_member_denies_all_and_bumps_version(
        self, test_db: AsyncSession, scenario
    ):
        """
        Remove U1 from G1 and recompile.

        Scenario: R1's only certified principal is gone.
        Expected: allowed_identities is empty, version advances to 2.
        """
        compiler = PolicyCompiler(test_db)
        first = await compiler.compile("con_1")

        await GroupRepository(test_db).remove_member("grp_1", "usr_1")
        await test_db.commit()

        second = await compiler.compile("con_1")

        assert _identities(second) == []
        assert second.policy_version == 2
        assert second.policy_hash != first.policy_hash

    @pytest.mark.asyncio
    async def test_snapshot_is_signed(self, test_db: AsyncSession, scenario):
        """
        Compiled snapshots carry a verifiable signature.

        Expected: verify_snapshot succeeds with the configured key.
        """
        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert snapshot.valid_until > snapshot.compiled_at
        assert verify_snapshot(snapshot) is True


# =============================================================================
# DETERMINISM & VERSIONING
# =============================================================================


class TestCompileVersioning:
    """Version advances only when compiled content changes."""

    @pytest.mark.asyncio
    async def test_recompile_unchanged_state_is_identical(
        self, test_db: AsyncSession, scenario
    ):
        """
        Compile twice with no state change.

        Expected: same version, hash, compiled_at and resources.
        """
        compiler = PolicyCompiler(test_db)
        first = await compiler.compile("con_1")
        second = await compiler.compile("con_1")

        assert second.policy_version == first.policy_version == 1
        assert second.policy_hash == first.policy_hash
        assert second.compiled_at == first.compiled_at
        assert second.resources == first.resources

    @pytest.mark.asyncio
    async def test_unchanged_compile_leaves_ledger_untouched(
        self, test_db: AsyncSession, scenario
    ):
        """
        Expected: the ledger entry after a no-op compile equals the one before.
        """
        compiler = PolicyCompiler(test_db)
        ledger = VersionLedger(test_db)
        await compiler.compile("con_1")
        before = await ledger.get_version("con_1")

        await compiler.compile("con_1")
        after = await ledger.get_version("con_1")

        assert after == before

    @pytest.mark.asyncio
    async def test_versions_increase_by_one_per_change(self, test_db: AsyncSession, scenario):
        """
        Alternate state changes and no-op compiles.

        Expected: 1, 2, 2, 3.
        """
        compiler = PolicyCompiler(test_db)
        users = UserRepository(test_db)
        groups = GroupRepository(test_db)
        versions = [(await compiler.compile("con_1")).policy_version]

        await users.issue_certificate_identity("usr_2", "cert-u2")
        await test_db.commit()
        versions.append((await compiler.compile("con_1")).policy_version)
        versions.append((await compiler.compile("con_1")).policy_version)

        await groups.remove_member("grp_1", "usr_2")
        await test_db.commit()
        versions.append((await compiler.compile("con_1")).policy_version)

        assert versions == [1, 2, 2, 3]

    @pytest.mark.asyncio
    async def test_port_change_changes_hash(self, test_db: AsyncSession, scenario):
        """
        Change a resource's port.

        Expected: new hash and version.
        """
        compiler = PolicyCompiler(test_db)
        first = await compiler.compile("con_1")

        await ResourceRepository(test_db).update("res_1", port_from=6432, port_to=6432)
        await test_db.commit()
        second = await compiler.compile("con_1")

        assert second.policy_hash != first.policy_hash
        assert second.policy_version == first.policy_version + 1
        assert second.resources[0].port_from == 6432

    @pytest.mark.asyncio
    async def test_resources_are_sorted_by_id(self, test_db: AsyncSession, scenario):
        """
        Add resources whose ids sort before and after res_1.

        Expected: entries ascending by resource_id.
        """
        resources = ResourceRepository(test_db)
        await resources.create(id="res_9", name="Wiki", address="wiki", remote_network_id="net_1")
        await resources.create(id="res_0", name="Cache", address="cache", remote_network_id="net_1")
        await test_db.commit()

        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert [e.resource_id for e in snapshot.resources] == ["res_0", "res_1", "res_9"]

    @pytest.mark.asyncio
    async def test_identities_are_sorted(self, test_db: AsyncSession, scenario):
        """
        Grant identities that sort before and after cert-u1.

        Expected: allowed_identities sorted lexicographically.
        """
        users = UserRepository(test_db)
        groups = GroupRepository(test_db)
        await users.create(id="usr_3", name="Z", email="z@company.com", certificate_identity="cert-z")
        await users.create(id="usr_4", name="A", email="a@company.com", certificate_identity="cert-a")
        await groups.add_member("grp_1", "usr_3")
        await groups.add_member("grp_1", "usr_4")
        await test_db.commit()

        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert _identities(snapshot) == ["cert-a", "cert-u1", "cert-z"]


# =============================================================================
# FAIL-CLOSED & RULE FILTERING
# =============================================================================


class TestCompileFailClosed:
    """Resources nobody may reach are still emitted, with an empty allow-list."""

    @pytest.mark.asyncio
    async def test_resource_without_rules_is_deny_all(self, test_db: AsyncSession, scenario):
        """
        Add a resource with no rules.

        Expected: present in the snapshot with allowed_identities == [].
        """
        await ResourceRepository(test_db).create(
            id="res_2", name="API Gateway", address="api.company.com", remote_network_id="net_1"
        )
        await test_db.commit()

        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert _identities(snapshot, "res_2") == []

    @pytest.mark.asyncio
    async def test_disabled_rule_grants_nothing(self, test_db: AsyncSession, scenario):
        """
        Disable the only rule on R1.

        Expected: R1 deny-all, version advances.
        """
        compiler = PolicyCompiler(test_db)
        first = await compiler.compile("con_1")

        await AccessRuleRepository(test_db).set_enabled(scenario["rule"].id, False)
        await test_db.commit()
        second = await compiler.compile("con_1")

        assert _identities(second) == []
        assert second.policy_version == first.policy_version + 1

    @pytest.mark.asyncio
    async def test_rule_without_groups_grants_nothing(
        self, test_db: AsyncSession, connector, resource
    ):
        """
        An enabled rule bound to no groups.

        Expected: deny-all.
        """
        await AccessRuleRepository(test_db).create_with_groups(
            name="Empty", resource_id="res_1", group_ids=[]
        )
        await test_db.commit()

        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert _identities(snapshot) == []

    @pytest.mark.asyncio
    async def test_resources_of_other_networks_are_excluded(
        self, test_db: AsyncSession, scenario
    ):
        """
        A resource detached from the network.

        Expected: it disappears from the connector's snapshot.
        """
        await ResourceRepository(test_db).detach_from_network("res_1")
        await test_db.commit()

        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert snapshot.resources == []

    @pytest.mark.asyncio
    async def test_binding_to_missing_group_contributes_nothing(
        self, test_db: AsyncSession, scenario, sqlite_only
    ):
        """
        A rule still bound to a group that no longer exists.

        Expected: compile succeeds and the dangling binding adds no identities.
        """
        test_db.add(AccessRuleGroup(rule_id=scenario["rule"].id, group_id="grp_deleted"))
        await test_db.commit()

        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert _identities(snapshot) == ["cert-u1"]


# =============================================================================
# TOPOLOGY & IDENTITY CHANGES
# =============================================================================


class TestCompileTopology:
    """Changes outside the rule itself that reach the compiled policy."""

    @pytest.mark.asyncio
    async def test_connectors_in_same_network_share_content(
        self, test_db: AsyncSession, scenario
    ):
        """
        A second connector in N1.

        Expected: both compile to the same resources and hash, each with its
        own version and signature.
        """
        await ConnectorRepository(test_db).create(
            id="con_2", name="AWS-Prod-Connector-2", remote_network_id="net_1"
        )
        await test_db.commit()

        compiler = PolicyCompiler(test_db)
        snapshots = [await compiler.compile(cid) for cid in ("con_1", "con_2")]

        assert snapshots[0].policy_hash == snapshots[1].policy_hash
        assert snapshots[0].resources == snapshots[1].resources
        assert [s.policy_version for s in snapshots] == [1, 1]
        assert snapshots[0].signature != snapshots[1].signature

    @pytest.mark.asyncio
    async def test_revoked_certificate_drops_identity(self, test_db: AsyncSession, scenario):
        """
        Revoke U1's certificate.

        Expected: deny-all and a new version.
        """
        compiler = PolicyCompiler(test_db)
        await compiler.compile("con_1")

        await UserRepository(test_db).revoke_certificate_identity("usr_1")
        await test_db.commit()
        snapshot = await compiler.compile("con_1")

        assert _identities(snapshot) == []
        assert snapshot.policy_version == 2

    @pytest.mark.asyncio
    async def test_deleted_group_grants_nothing(self, test_db: AsyncSession, scenario):
        """
        Delete G1, the rule's only group.

        Expected: the rule contributes no identities.
        """
        compiler = PolicyCompiler(test_db)
        await compiler.compile("con_1")

        assert await GroupRepository(test_db).delete("grp_1") is True
        await test_db.commit()
        snapshot = await compiler.compile("con_1")

        assert _identities(snapshot) == []
        assert snapshot.policy_version == 2


# =============================================================================
# ERRORS & CONCURRENCY
# =============================================================================


class TestCompileFailures:
    """A failed compile never changes the ledger."""

    @pytest.mark.asyncio
    async def test_unknown_connector(self, test_db: AsyncSession, scenario):
        """
        Expected: ConnectorNotFoundError and no ledger entry.
        """
        with pytest.raises(ConnectorNotFoundError) as exc_info:
            await PolicyCompiler(test_db).compile("con_missing")

        assert exc_info.value.connector_id == "con_missing"
        assert await VersionLedger(test_db).get_version("con_missing") is None

    @pytest.mark.asyncio
    async def test_store_error_keeps_prior_version(
        self, test_db: AsyncSession, scenario, monkeypatch
    ):
        """
        The store fails while loading resources.

        Expected: StoreUnavailableError and the ledger still at version 1.
        """
        compiler = PolicyCompiler(test_db)
        await compiler.compile("con_1")

        async def failing(self, remote_network_id):
            raise OperationalError("SELECT resources", {}, Exception("connection lost"))

        monkeypatch.setattr(ResourceRepository, "list_by_remote_network", failing)

        with pytest.raises(StoreUnavailableError) as exc_info:
            await compiler.compile("con_1")

        assert exc_info.value.error_code == "STORE_UNAVAILABLE"
        monkeypatch.undo()
        entry = await VersionLedger(test_db).get_version("con_1")
        assert entry.version == 1

    @pytest.mark.asyncio
    async def test_store_error_after_ledger_write_rolls_back(
        self, test_db: AsyncSession, scenario, monkeypatch
    ):
        """
        The store fails right after the ledger row was written.

        Expected: StoreUnavailableError and no ledger entry survives.
        """
        original = VersionLedger.record_version

        async def write_then_fail(self, *args, **kwargs):
            await original(self, *args, **kwargs)
            raise OperationalError("COMMIT", {}, Exception("connection lost"))

        monkeypatch.setattr(VersionLedger, "record_version", write_then_fail)

        with pytest.raises(StoreUnavailableError):
            await PolicyCompiler(test_db).compile("con_1")

        monkeypatch.undo()
        assert await VersionLedger(test_db).get_version("con_1") is None

    @pytest.mark.asyncio
    async def test_lost_race_is_retried(self, test_db: AsyncSession, scenario, monkeypatch):
        """
        A concurrent compile records the same content first.

        Scenario: the first ledger write loses the race.
        Expected: the retry sees the committed version and returns it unchanged.
        """
        original = VersionLedger.record_version
        calls = []

        async def racing(self, connector_id, version, policy_hash, compiled_at, *, expected_version):
            calls.append(version)
            if len(calls) == 1:
                await original(
                    self, connector_id, version, policy_hash, compiled_at,
                    expected_version=expected_version,
                )
                await self.repo.session.commit()
                return False
            return await original(
                self, connector_id, version, policy_hash, compiled_at,
                expected_version=expected_version,
            )

        monkeypatch.setattr(VersionLedger, "record_version", racing)

        snapshot = await PolicyCompiler(test_db).compile("con_1")

        assert calls == [1]
        assert snapshot.policy_version == 1

    @pytest.mark.asyncio
    async def test_persistent_conflict_gives_up(
        self, test_db: AsyncSession, scenario, monkeypatch
    ):
        """
        Every ledger write loses.

        Expected: PolicyVersionConflictError after the configured attempts, no entry.
        """
        attempts = []

        async def always_lose(self, connector_id, version, policy_hash, compiled_at, *, expected_version):
            attempts.append(version)
            return False

        monkeypatch.setattr(VersionLedger, "record_version", always_lose)

        with pytest.raises(PolicyVersionConflictError) as exc_info:
            await PolicyCompiler(test_db).compile("con_1")

        assert len(attempts) == settings.POLICY_COMPILE_MAX_RETRIES
        assert exc_info.value.status_code == 409
        monkeypatch.undo()
        assert await VersionLedger(test_db).get_version("con_1") is None
