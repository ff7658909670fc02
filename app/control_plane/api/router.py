"""
Control Plane API Router

Aggregates all control plane routes.
"""

from fastapi import APIRouter

from app.control_plane.api.v1 import access_rules, connectors, policy
from app.schemas.common import ErrorResponse

# Error bodies every route group can return
_ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Entity not found"},
    503: {"model": ErrorResponse, "description": "Policy store unavailable"},
}

router = APIRouter(responses=_ERROR_RESPONSES)

router.include_router(
    policy.router,
    prefix="/policy",
    tags=["Control Plane: Policy Compilation"],
    responses={409: {"model": ErrorResponse, "description": "Version conflict"}},
)
router.include_router(
    connectors.router,
    prefix="/connectors",
    tags=["Control Plane: Connectors"],
)
router.include_router(
    access_rules.router,
    prefix="/access-rules",
    tags=["Control Plane: Access Rules"],
)
