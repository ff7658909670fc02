"""
Policy Compilation Endpoints

Operator-triggered compilation of a connector's policy.
"""

from fastapi import APIRouter, status

from app.control_plane.api.dependencies import Compiler
from app.schemas.policy import PolicySnapshot

router = APIRouter()


@router.post(
    "/compile/{connector_id}",
    response_model=PolicySnapshot,
    status_code=status.HTTP_200_OK,
    summary="Compile a connector's policy",
    description="""
Derive the resources a connector must enforce and the certificate identities
allowed to reach each one.

The version advances only when the compiled content differs from the last
compiled version; recompiling unchanged state returns the same version and
hash.

**Example response:**
```json
{
    "connector_id": "con_1",
    "policy_version": 2,
    "compiled_at": "2026-02-20T10:31:12Z",
    "valid_until": "2026-02-20T11:31:12Z",
    "policy_hash": "3f1c...",
    "signature": "9ab0...",
    "resources": [
        {
            "resource_id": "res_1",
            "address": "10.0.1.20",
            "protocol": "TCP",
            "port_from": 5432,
            "port_to": null,
            "allowed_identities": ["identity-usr_1", "identity-usr_2"]
        }
    ]
}
```
""",
)
async def compile_policy(connector_id: str, compiler: Compiler) -> PolicySnapshot:
    """Compile the policy of a connector.

    Raises:
        404: Connector not found
        409: Version conflict persisted across retries
        503: Policy store unavailable
    """
    return await compiler.compile(connector_id)
