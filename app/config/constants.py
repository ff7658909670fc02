"""
Application Constants

Centralized constants used throughout the application.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User lifecycle status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class ResourceType(str, Enum):
    """How a resource is reached by clients."""

    STANDARD = "STANDARD"
    BROWSER = "BROWSER"
    BACKGROUND = "BACKGROUND"


class Protocol(str, Enum):
    """Transport protocol enforced by a connector for a resource."""

    TCP = "TCP"
    UDP = "UDP"


class NetworkLocation(str, Enum):
    """Where a remote network lives."""

    AWS = "AWS"
    GCP = "GCP"
    AZURE = "AZURE"
    ON_PREM = "ON_PREM"
    OTHER = "OTHER"


class ConnectorStatus(str, Enum):
    """Connector liveness as last reported."""

    ONLINE = "online"
    OFFLINE = "offline"


# =============================================================================
# IDENTIFIER PREFIXES
# =============================================================================

USER_ID_PREFIX = "usr"
GROUP_ID_PREFIX = "grp"
RESOURCE_ID_PREFIX = "res"
ACCESS_RULE_ID_PREFIX = "rule"
REMOTE_NETWORK_ID_PREFIX = "net"
CONNECTOR_ID_PREFIX = "con"


# =============================================================================
# PORT RANGE
# =============================================================================

MIN_PORT = 1
MAX_PORT = 65535


# =============================================================================
# POLICY SNAPSHOT
# =============================================================================

# Version reported for a connector that has never been compiled
INITIAL_POLICY_VERSION = 0

# Length of a hex-encoded SHA-256 digest
POLICY_HASH_LENGTH = 64
