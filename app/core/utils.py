"""
Common Utilities

Helper functions used throughout the application.
"""

import uuid
from datetime import UTC, datetime


def generate_short_id(prefix: str = "") -> str:
    """Generate a short, URL-safe ID.

    Args:
        prefix: Optional prefix for the ID

    Returns:
        Short ID string (e.g., "usr-abc123def456")
    """
    short_uuid = uuid.uuid4().hex[:12]
    if prefix:
        return f"{prefix}-{short_uuid}"
    return short_uuid


def id_factory(prefix: str):
    """Build a column default that generates prefixed short IDs."""

    def _generate() -> str:
        return generate_short_id(prefix)

    return _generate


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime with UTC timezone
    """
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from the database.

    SQLite drops timezone information on DateTime(timezone=True) columns;
    every timestamp this service writes is UTC, so a naive value is UTC.

    Args:
        value: Datetime that may or may not carry tzinfo

    Returns:
        Timezone-aware datetime in UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
