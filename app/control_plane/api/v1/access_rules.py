"""
Access Rule Endpoints

Operator previews of what an access rule grants.
"""

from fastapi import APIRouter

from app.control_plane.api.dependencies import Evaluator
from app.schemas.policy import IdentityCountResponse

router = APIRouter()


@router.get(
    "/{rule_id}/identity-count",
    response_model=IdentityCountResponse,
    summary="Count identities granted by a rule",
    description=(
        "Number of distinct certificate identities the rule's groups resolve "
        "to. Disabled rules are counted as if enabled."
    ),
)
async def get_identity_count(rule_id: str, evaluator: Evaluator) -> IdentityCountResponse:
    """Identity count of a rule.

    Raises:
        404: Access rule not found
    """
    count = await evaluator.count_rule_identities(rule_id)
    return IdentityCountResponse(rule_id=rule_id, count=count)
