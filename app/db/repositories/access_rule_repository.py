"""
Access Rule Repository

Database operations for access rules and their group bindings.

Common Operations:
==================
- create_with_groups()             → Create a rule and bind its groups in one flush
- list_enabled_for_resource()      → Enabled rules of a resource (compilation hot path)
- get_group_ids()                  → Groups bound to one rule
- get_group_ids_for_rules()        → Groups bound to several rules, one query
- set_enabled()                    → Enable/disable without deleting
- bind_group() / unbind_group()    → Mutate access_rule_groups
"""

from collections import defaultdict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories.base import BaseRepository
from app.models.access_rule import AccessRule, AccessRuleGroup


class AccessRuleRepository(BaseRepository[AccessRule]):
    """Repository for AccessRule and AccessRuleGroup database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(AccessRule, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # COMPILATION QUERIES
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_enabled_for_resource(self, resource_id: str) -> list[AccessRule]:
        """
        Get the enabled rules of a resource, ordered by id.

        Args:
            resource_id: Resource identifier

        Returns:
            Enabled rules

        SQL Generated:
            SELECT * FROM access_rules
            WHERE resource_id = 'res-...' AND enabled = true
            ORDER BY id ASC
        """
        result = await self.session.execute(
            select(AccessRule)
            .where(
                AccessRule.resource_id == resource_id,
                AccessRule.enabled.is_(True),
            )
            .order_by(AccessRule.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_group_ids(self, rule_id: str) -> list[str]:
        """
        Get the group ids bound to a rule, sorted.

        Args:
            rule_id: Rule identifier

        Returns:
            Sorted group ids
        """
        result = await self.session.execute(
            select(AccessRuleGroup.group_id)
            .where(AccessRuleGroup.rule_id == rule_id)
            .order_by(AccessRuleGroup.group_id)
        )
        return list(result.scalars().all())

    async def get_group_ids_for_rules(self, rule_ids: list[str]) -> dict[str, list[str]]:
        """
        Get the group ids bound to each of several rules.

        Args:
            rule_ids: Rule identifiers

        Returns:
            Mapping rule_id -> sorted group ids (rules with no groups are absent)
        """
        if not rule_ids:
            return {}

        result = await self.session.execute(
            select(AccessRuleGroup.rule_id, AccessRuleGroup.group_id)
            .where(AccessRuleGroup.rule_id.in_(rule_ids))
            .order_by(AccessRuleGroup.rule_id, AccessRuleGroup.group_id)
        )
        bindings: dict[str, list[str]] = defaultdict(list)
        for rule_id, group_id in result.all():
            bindings[rule_id].append(group_id)
        return dict(bindings)

    # ═══════════════════════════════════════════════════════════════════════════
    # MUTATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_with_groups(
        self,
        *,
        name: str,
        resource_id: str,
        group_ids: list[str],
        enabled: bool = True,
    ) -> AccessRule:
        """
        Create a rule and bind it to groups.

        Args:
            name: Rule name
            resource_id: Resource the rule grants access to
            group_ids: Groups to bind (duplicates are ignored)
            enabled: Whether the rule starts enabled

        Returns:
            The created rule
        """
        rule = await self.create(name=name, resource_id=resource_id, enabled=enabled)
        for group_id in sorted(set(group_ids)):
            self.session.add(AccessRuleGroup(rule_id=rule.id, group_id=group_id))
        await self.session.flush()
        return rule

    async def set_enabled(self, rule_id: str, enabled: bool) -> AccessRule | None:
        """
        Enable or disable a rule. The rule and its bindings are kept.

        Args:
            rule_id: Rule identifier
            enabled: New state

        Returns:
            Updated rule, or None if not found
        """
        return await self.update(rule_id, enabled=enabled)

    async def bind_group(self, rule_id: str, group_id: str) -> bool:
        """
        Bind a group to a rule.

        Args:
            rule_id: Rule identifier
            group_id: Group identifier

        Returns:
            True if bound, False if the binding already existed
        """
        existing = await self.session.get(AccessRuleGroup, (rule_id, group_id))
        if existing:
            return False

        self.session.add(AccessRuleGroup(rule_id=rule_id, group_id=group_id))
        await self.session.flush()
        return True

    async def unbind_group(self, rule_id: str, group_id: str) -> bool:
        """
        Remove a group from a rule.

        Args:
            rule_id: Rule identifier
            group_id: Group identifier

        Returns:
            True if removed, False if there was no such binding
        """
        result = await self.session.execute(
            delete(AccessRuleGroup).where(
                AccessRuleGroup.rule_id == rule_id,
                AccessRuleGroup.group_id == group_id,
            )
        )
        await self.session.flush()
        return result.rowcount > 0
