"""
Database Module

This module provides database connectivity and session management for Portcullis.

Architecture Overview:
======================
┌─────────────────────────────────────────────────────────────────────────────┐
│                        DATABASE LAYER                                       │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   FastAPI Route                                                             │
│       │                                                                     │
│       │  Dependency Injection: get_db()                                     │
│       ▼                                                                     │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │              AsyncSession (from session.py)                 │          │
│   │  - One session per request                                  │          │
│   │  - Auto-commit on success, auto-rollback on exception       │          │
│   └─────────────────────────────────────────────────────────────┘          │
│       │                                                                     │
│       │  Passed to the policy engine / repositories                         │
│       ▼                                                                     │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │              Repository (from repositories/)                │          │
│   │  - UserRepository, GroupRepository                          │          │
│   │  - RemoteNetworkRepository, ConnectorRepository             │          │
│   │  - ResourceRepository, AccessRuleRepository                 │          │
│   │  - PolicyVersionRepository                                  │          │
│   └─────────────────────────────────────────────────────────────┘          │
│       │                                                                     │
│       │  SQL Queries                                                        │
│       ▼                                                                     │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │              PostgreSQL / SQLite                            │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Usage in FastAPI:
=================
    from fastapi import Depends
    from app.db import get_db
    from app.db.repositories import ConnectorRepository

    @app.get("/connectors/{connector_id}")
    async def get_connector(connector_id: str, db: AsyncSession = Depends(get_db)):
        repo = ConnectorRepository(db)
        return await repo.get(connector_id)
"""

from app.db.session import (
    get_db,
    init_db,
    close_db,
    AsyncSessionLocal,
)

__all__ = [
    "get_db",
    "init_db",
    "close_db",
    "AsyncSessionLocal",
]
