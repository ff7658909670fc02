#!/usr/bin/env python3
"""
Database Seeder

Creates the demo networks, connectors, identities, resources and access rules
for development. Cleans existing data before inserting fresh data.

Run from project root:
    python -m scripts.seed_db
"""

import asyncio
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import ConnectorStatus, NetworkLocation, ResourceType, UserStatus
from app.core.logging import logger
from app.db.repositories import (
    AccessRuleRepository,
    ConnectorRepository,
    GroupRepository,
    RemoteNetworkRepository,
    ResourceRepository,
    UserRepository,
)
from app.db.session import AsyncSessionLocal, close_db, init_db

REMOTE_NETWORKS = [
    ("net_1", "Production AWS", NetworkLocation.AWS),
    ("net_2", "Office LAN", NetworkLocation.ON_PREM),
    ("net_3", "Staging GCP", NetworkLocation.GCP),
]

# (id, name, hostname, network, status, last seen)
CONNECTORS = [
    ("con_1", "AWS-Prod-Connector-1", "ip-172-31-0-1.ec2.internal", "net_1",
     ConnectorStatus.ONLINE, "2026-02-20T10:30:00+00:00"),
    ("con_2", "AWS-Prod-Connector-2", "ip-172-31-0-2.ec2.internal", "net_1",
     ConnectorStatus.ONLINE, "2026-02-20T10:25:00+00:00"),
    ("con_3", "Office-Connector-1", "office-server.local", "net_2",
     ConnectorStatus.ONLINE, "2026-02-20T10:15:00+00:00"),
    ("con_4", "GCP-Staging-Connector-1", "gcp-staging-vm-1", "net_3",
     ConnectorStatus.ONLINE, "2026-02-20T10:05:00+00:00"),
    ("con_5", "GCP-Staging-Connector-2", "gcp-staging-vm-2", "net_3",
     ConnectorStatus.OFFLINE, "2026-02-19T14:00:00+00:00"),
]

USERS = [
    ("usr_1", "Alice Johnson", "alice@company.com", "identity-usr_1", UserStatus.ACTIVE),
    ("usr_2", "Bob Smith", "bob@company.com", "identity-usr_2", UserStatus.ACTIVE),
    ("usr_3", "Charlie Davis", "charlie@company.com", "identity-usr_3", UserStatus.ACTIVE),
    ("usr_4", "Diana Wilson", "diana@company.com", "identity-usr_4", UserStatus.INACTIVE),
]

GROUPS = [
    ("grp_1", "Engineering", "Engineering team with database and API access"),
    ("grp_2", "Marketing", "Marketing department"),
    ("grp_3", "Admin", "System administrators"),
]

GROUP_MEMBERS = [
    ("grp_1", "usr_1"),
    ("grp_1", "usr_3"),
    ("grp_2", "usr_2"),
    ("grp_3", "usr_1"),
]

# (id, name, type, address, port_from, port_to, description, network)
RESOURCES = [
    ("res_1", "Database Server", ResourceType.STANDARD, "db.internal.company.com",
     5432, 5432, "Production PostgreSQL database for main application", "net_1"),
    ("res_2", "API Gateway", ResourceType.BROWSER, "api.company.com",
     443, 443, "Main API endpoint for frontend applications", "net_1"),
    ("res_3", "S3 Bucket", ResourceType.BACKGROUND, "company-assets.s3.amazonaws.com",
     443, 443, "Asset storage bucket", "net_1"),
    ("res_4", "Internal Wiki", ResourceType.BROWSER, "wiki.internal.company.com",
     None, None, "Internal Confluence Wiki", "net_2"),
]

# (id, name, resource, groups)
ACCESS_RULES = [
    ("rule_1", "Engineering DB Access", "res_1", ["grp_1"]),
    ("rule_2", "Engineering API Access", "res_2", ["grp_1"]),
]

# Child tables first so foreign keys never block a delete
TABLES = [
    "connector_policy_versions",
    "access_rule_groups",
    "access_rules",
    "resources",
    "connectors",
    "remote_networks",
    "group_members",
    "groups",
    "users",
]


async def clean_seed_data(session: AsyncSession) -> None:
    """Remove existing data before reseeding."""
    logger.info("Cleaning existing seed data")
    for table in TABLES:
        await session.execute(text(f"DELETE FROM {table}"))
        logger.info("Cleared table", table=table)
    await session.commit()


async def seed_database() -> None:
    """Seed the database with the demo data set."""
    logger.info("Starting database seeding")
    await init_db()

    async with AsyncSessionLocal() as session:
        await clean_seed_data(session)

        network_repo = RemoteNetworkRepository(session)
        connector_repo = ConnectorRepository(session)
        user_repo = UserRepository(session)
        group_repo = GroupRepository(session)
        resource_repo = ResourceRepository(session)
        rule_repo = AccessRuleRepository(session)

        for network_id, name, location in REMOTE_NETWORKS:
            await network_repo.create(id=network_id, name=name, location=location.value)

        for connector_id, name, hostname, network_id, status, last_seen in CONNECTORS:
            await connector_repo.create(
                id=connector_id,
                name=name,
                hostname=hostname,
                remote_network_id=network_id,
                status=status.value,
                last_seen_at=datetime.fromisoformat(last_seen),
                installed=True,
            )

        for user_id, name, email, identity, status in USERS:
            await user_repo.create(
                id=user_id,
                name=name,
                email=email,
                certificate_identity=identity,
                status=status.value,
            )

        for group_id, name, description in GROUPS:
            await group_repo.create(id=group_id, name=name, description=description)

        for group_id, user_id in GROUP_MEMBERS:
            await group_repo.add_member(group_id, user_id)

        for resource_id, name, rtype, address, port_from, port_to, description, network_id in RESOURCES:
            await resource_repo.create(
                id=resource_id,
                name=name,
                type=rtype.value,
                address=address,
                port_from=port_from,
                port_to=port_to,
                description=description,
                remote_network_id=network_id,
            )

        for rule_id, name, resource_id, group_ids in ACCESS_RULES:
            await rule_repo.create(id=rule_id, name=name, resource_id=resource_id)
            for group_id in group_ids:
                await rule_repo.bind_group(rule_id, group_id)

        await session.commit()

    logger.info(
        "Database seeding completed",
        networks=len(REMOTE_NETWORKS),
        connectors=len(CONNECTORS),
        users=len(USERS),
        groups=len(GROUPS),
        resources=len(RESOURCES),
        rules=len(ACCESS_RULES),
    )
    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_database())
