"""Core utilities module."""

from app.core.exceptions import (
    PortcullisException,
    NotFoundError,
    ValidationError,
    ConflictError,
    ServiceUnavailableError,
    ConnectorNotFoundError,
    AccessRuleNotFoundError,
    StoreUnavailableError,
    PolicyVersionConflictError,
)

__all__ = [
    "PortcullisException",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ServiceUnavailableError",
    "ConnectorNotFoundError",
    "AccessRuleNotFoundError",
    "StoreUnavailableError",
    "PolicyVersionConflictError",
]
