"""
Portcullis - Policy Control Plane

Compiles the allow-list each network connector enforces:
- Entity Store: users, groups, remote networks, connectors, resources, access rules
- Policy Engine: identity resolution, compilation, version ledger, staleness
- Control Plane API: compile, fetch, staleness and heartbeat endpoints
- Data Layer: PostgreSQL, Redis
"""

__version__ = "0.1.0"
