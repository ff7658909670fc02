"""
Common Schemas

Shared schemas used across the application.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.utils import utc_now


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ErrorDetail(BaseModel):
    """Error detail in response."""

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    service: str = "portcullis"
    version: str = "0.1.0"
    timestamp: datetime = Field(default_factory=utc_now)
