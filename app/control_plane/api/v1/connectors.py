"""
Connector Endpoints

Endpoints called by connectors: fetch the current policy, check whether the
applied policy is stale, and report heartbeats.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from app.config.constants import INITIAL_POLICY_VERSION
from app.control_plane.api.dependencies import Compiler, Staleness
from app.policy_engine.staleness import StalenessResult
from app.schemas.policy import HeartbeatRequest, PolicySnapshot, StalenessResponse

router = APIRouter()


def _to_response(result: StalenessResult) -> StalenessResponse:
    return StalenessResponse(
        update_available=result.update_available,
        current_version=result.current_version,
    )


@router.get(
    "/{connector_id}/policy",
    response_model=PolicySnapshot,
    summary="Fetch the latest policy",
    description=(
        "Return the connector's current signed policy snapshot, compiling it "
        "when no valid cached snapshot matches the ledger version."
    ),
)
async def fetch_policy(connector_id: str, compiler: Compiler) -> PolicySnapshot:
    """Latest policy snapshot for a polling connector.

    Raises:
        404: Connector not found
        503: Policy store unavailable
    """
    return await compiler.fetch_latest(connector_id)


@router.get(
    "/{connector_id}/policy/staleness",
    response_model=StalenessResponse,
    summary="Check policy staleness",
    description=(
        "Compare the version a connector reports having applied with the "
        "latest compiled version. Never triggers a compile."
    ),
)
async def check_staleness(
    connector_id: str,
    staleness: Staleness,
    reported_version: Annotated[int, Query(ge=INITIAL_POLICY_VERSION)] = INITIAL_POLICY_VERSION,
) -> StalenessResponse:
    """Staleness of a connector's applied policy.

    Raises:
        404: Connector not found
    """
    result = await staleness.check_staleness(connector_id, reported_version)
    return _to_response(result)


@router.patch(
    "/{connector_id}/heartbeat",
    response_model=StalenessResponse,
    summary="Record a connector heartbeat",
    description=(
        "Store the connector's self-reported policy version and mark it "
        "online. The response tells the connector whether to fetch a newer policy."
    ),
)
async def record_heartbeat(
    connector_id: str,
    data: HeartbeatRequest,
    staleness: Staleness,
) -> StalenessResponse:
    """Record a heartbeat.

    Raises:
        404: Connector not found
        422: Invalid body
    """
    result = await staleness.record_heartbeat(connector_id, data.last_policy_version)
    return _to_response(result)
