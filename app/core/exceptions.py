"""
Custom Exceptions

Application-specific exceptions with HTTP status codes.
"""

from typing import Any, Optional


class PortcullisException(Exception):
    """Base exception for all Portcullis errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API response."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


class NotFoundError(PortcullisException):
    """Resource not found error."""

    def __init__(
        self,
        resource: str,
        resource_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=details,
        )


class ValidationError(PortcullisException):
    """Validation error."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class ConflictError(PortcullisException):
    """Resource conflict error."""

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details=details,
        )


class ServiceUnavailableError(PortcullisException):
    """Service temporarily unavailable error."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=503,
            error_code="SERVICE_UNAVAILABLE",
            details=details,
        )


class ConnectorNotFoundError(NotFoundError):
    """Connector not found error."""

    def __init__(self, connector_id: str) -> None:
        super().__init__(
            resource="Connector",
            resource_id=connector_id,
            details={"connector_id": connector_id},
        )
        self.connector_id = connector_id


class AccessRuleNotFoundError(NotFoundError):
    """Access rule not found error."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(resource="Access rule", resource_id=rule_id)


# =============================================================================
# Policy Compilation Exceptions
# =============================================================================


class StoreUnavailableError(ServiceUnavailableError):
    """The entity store could not be reached or a transaction aborted.

    Nothing was persisted; the caller may retry the whole operation.
    """

    def __init__(
        self,
        message: str = "Entity store unavailable",
        original_error: Optional[Exception] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        extra_details = details or {}
        if original_error:
            extra_details["error_type"] = type(original_error).__name__
        super().__init__(message=message, details=extra_details)
        self.original_error = original_error
        self.error_code = "STORE_UNAVAILABLE"


class PolicyVersionConflictError(ConflictError):
    """Concurrent compiles kept racing on the same connector's ledger entry."""

    def __init__(self, connector_id: str, attempts: int) -> None:
        super().__init__(
            message=(
                f"Policy version for connector '{connector_id}' changed "
                f"concurrently {attempts} times, giving up"
            ),
            details={"connector_id": connector_id, "attempts": attempts},
        )
        self.error_code = "POLICY_VERSION_CONFLICT"
