"""
Portcullis SQLAlchemy Models

This package contains all database models of the entity store.

Model Hierarchy:
================
    RemoteNetwork
       ├── Connectors (enforcement points inside the network)
       │      └── ConnectorPolicyVersion (version ledger, one per connector)
       └── Resources (protected destinations, detached when the network is deleted)
              └── AccessRules (enabled/disabled grants)
                     └── AccessRuleGroup (rule ↔ group bindings)

    Group
       └── GroupMembership (group ↔ user)

    User (certificate_identity = policy principal)

Compilation reads everything and writes only ConnectorPolicyVersion:

    Connector → RemoteNetwork → Resources → enabled AccessRules
              → bound Groups → member Users → certificate identities

Usage:
======
    from app.models import Connector, Resource, AccessRule

    connector = await session.get(Connector, "con-1a2b3c4d5e6f")
    connector.remote_network.resources   # resources this connector enforces
"""

from app.models.access_rule import AccessRule, AccessRuleGroup
from app.models.base import Base, TimestampMixin
from app.models.connector import Connector
from app.models.group import Group, GroupMembership
from app.models.policy_version import ConnectorPolicyVersion
from app.models.remote_network import RemoteNetwork
from app.models.resource import Resource
from app.models.user import User

__all__ = [
    # Base classes and mixins
    "Base",
    "TimestampMixin",
    # Identities
    "User",
    "Group",
    "GroupMembership",
    # Topology
    "RemoteNetwork",
    "Connector",
    "Resource",
    # Access
    "AccessRule",
    "AccessRuleGroup",
    # Version ledger
    "ConnectorPolicyVersion",
]
