"""initial schema (identities, networks, resources, access rules, version ledger)

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-02-20 00:00:00

"""
from alembic import op
import sqlalchemy as sa

# Revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # identities
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("certificate_identity", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("certificate_identity", name="uq_users_certificate_identity"),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "groups",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_groups"),
    )

    op.create_table(
        "group_members",
        sa.Column("group_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.ForeignKeyConstraint(
            ["group_id"], ["groups.id"],
            name="fk_group_members_group_id_groups", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_group_members_user_id_users", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("group_id", "user_id", name="pk_group_members"),
    )
    op.create_index("ix_group_members_user_id", "group_members", ["user_id"])

    # networks
    op.create_table(
        "remote_networks",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_remote_networks"),
    )

    op.create_table(
        "connectors",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("hostname", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("remote_network_id", sa.String(64), nullable=False),
        sa.Column("last_policy_version", sa.Integer(), nullable=False),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("installed", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["remote_network_id"], ["remote_networks.id"],
            name="fk_connectors_remote_network_id_remote_networks", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_connectors"),
    )
    op.create_index("ix_connectors_remote_network_id", "connectors", ["remote_network_id"])

    # resources and rules
    op.create_table(
        "resources",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("protocol", sa.String(8), nullable=False, server_default="TCP"),
        sa.Column("port_from", sa.Integer(), nullable=True),
        sa.Column("port_to", sa.Integer(), nullable=True),
        sa.Column("alias", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("remote_network_id", sa.String(64), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["remote_network_id"], ["remote_networks.id"],
            name="fk_resources_remote_network_id_remote_networks", ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_resources"),
        sa.CheckConstraint(
            "port_from IS NULL OR (port_from >= 1 AND port_from <= 65535)",
            name="ck_resources_port_from_range",
        ),
        sa.CheckConstraint(
            "port_to IS NULL OR (port_to >= 1 AND port_to <= 65535)",
            name="ck_resources_port_to_range",
        ),
        sa.CheckConstraint(
            "port_from IS NULL OR port_to IS NULL OR port_to >= port_from",
            name="ck_resources_port_order",
        ),
        sa.CheckConstraint(
            "port_to IS NULL OR port_from IS NOT NULL",
            name="ck_resources_port_to_requires_port_from",
        ),
    )
    op.create_index("ix_resources_remote_network_id", "resources", ["remote_network_id"])

    op.create_table(
        "access_rules",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("resource_id", sa.String(64), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["resource_id"], ["resources.id"],
            name="fk_access_rules_resource_id_resources", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_access_rules"),
    )
    op.create_index(
        "ix_access_rules_resource_enabled", "access_rules", ["resource_id", "enabled"]
    )

    op.create_table(
        "access_rule_groups",
        sa.Column("rule_id", sa.String(64), nullable=False),
        sa.Column("group_id", sa.String(64), nullable=False),
        sa.ForeignKeyConstraint(
            ["rule_id"], ["access_rules.id"],
            name="fk_access_rule_groups_rule_id_access_rules", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["group_id"], ["groups.id"],
            name="fk_access_rule_groups_group_id_groups", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("rule_id", "group_id", name="pk_access_rule_groups"),
    )
    op.create_index("ix_access_rule_groups_group_id", "access_rule_groups", ["group_id"])

    # version ledger
    op.create_table(
        "connector_policy_versions",
        sa.Column("connector_id", sa.String(64), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("policy_hash", sa.String(64), nullable=False),
        sa.Column("compiled_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["connector_id"], ["connectors.id"],
            name="fk_connector_policy_versions_connector_id_connectors", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("connector_id", name="pk_connector_policy_versions"),
        sa.CheckConstraint("version >= 1", name="ck_connector_policy_versions_version_positive"),
    )


def downgrade() -> None:
    op.drop_table("connector_policy_versions")
    op.drop_index("ix_access_rule_groups_group_id", table_name="access_rule_groups")
    op.drop_table("access_rule_groups")
    op.drop_index("ix_access_rules_resource_enabled", table_name="access_rules")
    op.drop_table("access_rules")
    op.drop_index("ix_resources_remote_network_id", table_name="resources")
    op.drop_table("resources")
    op.drop_index("ix_connectors_remote_network_id", table_name="connectors")
    op.drop_table("connectors")
    op.drop_table("remote_networks")
    op.drop_index("ix_group_members_user_id", table_name="group_members")
    op.drop_table("group_members")
    op.drop_table("groups")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
