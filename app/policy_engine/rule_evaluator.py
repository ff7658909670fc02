"""
Rule Evaluator

Computes which certificate identities may reach a resource.

Evaluation:
    allowed_identities(resource) =
        ⋃ resolve_identities(group)
          for rule in enabled rules of resource
          for group in groups bound to rule

Access is allow-list only. A resource with no enabled rule, or whose rules
bind no groups, or whose groups have no certified members, resolves to the
empty set and is enforced as deny-all.

Bindings to a group that no longer exists contribute nothing and are logged.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AccessRuleNotFoundError
from app.core.logging import logger
from app.db.repositories import AccessRuleRepository, GroupRepository
from app.policy_engine.identity_resolver import IdentityResolver


class RuleEvaluator:
    """Evaluate access rules against the identity resolver."""

    def __init__(
        self,
        session: AsyncSession,
        resolver: IdentityResolver | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            session: Database session
            resolver: Identity resolver to share memoised lookups with;
                a new one is created when omitted
        """
        self.rule_repo = AccessRuleRepository(session)
        self.group_repo = GroupRepository(session)
        self.resolver = resolver or IdentityResolver(session)

    async def allowed_identities(self, resource_id: str) -> set[str]:
        """Union of identities granted access to a resource by enabled rules.

        Args:
            resource_id: Resource identifier

        Returns:
            Set of certificate identities (empty means deny all)
        """
        rules = await self.rule_repo.list_enabled_for_resource(resource_id)
        if not rules:
            return set()

        rule_ids = [rule.id for rule in rules]
        bindings = await self.rule_repo.get_group_ids_for_rules(rule_ids)
        return await self._resolve_bindings(bindings, resource_id=resource_id)

    async def count_rule_identities(self, rule_id: str) -> int:
        """Number of distinct identities a single rule's groups resolve to.

        The rule's enabled flag is ignored; this previews what the rule
        grants once enabled.

        Args:
            rule_id: Rule identifier

        Returns:
            Count of distinct certificate identities

        Raises:
            AccessRuleNotFoundError: If the rule does not exist
        """
        rule = await self.rule_repo.get(rule_id)
        if not rule:
            raise AccessRuleNotFoundError(rule_id)

        group_ids = await self.rule_repo.get_group_ids(rule_id)
        identities = await self._resolve_bindings(
            {rule_id: group_ids},
            resource_id=rule.resource_id,
        )
        return len(identities)

    async def _resolve_bindings(
        self,
        bindings: dict[str, list[str]],
        resource_id: str,
    ) -> set[str]:
        """Resolve rule → groups bindings into one identity set."""
        all_group_ids = sorted({g for group_ids in bindings.values() for g in group_ids})
        existing = await self.group_repo.get_existing_ids(all_group_ids)

        identities: set[str] = set()
        for rule_id in sorted(bindings):
            for group_id in bindings[rule_id]:
                if group_id not in existing:
                    logger.warning(
                        "Access rule bound to missing group",
                        rule_id=rule_id,
                        group_id=group_id,
                        resource_id=resource_id,
                    )
                    continue
                identities |= await self.resolver.resolve_identities(group_id)
        return identities
