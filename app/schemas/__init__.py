"""
Pydantic Schemas

Request/response models for API endpoints.
"""

from app.schemas.common import (
    BaseSchema,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
)
from app.schemas.policy import (
    HeartbeatRequest,
    IdentityCountResponse,
    PolicySnapshot,
    ResourcePolicyEntry,
    StalenessResponse,
)

__all__ = [
    # Common
    "BaseSchema",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    # Policy
    "HeartbeatRequest",
    "IdentityCountResponse",
    "PolicySnapshot",
    "ResourcePolicyEntry",
    "StalenessResponse",
]
