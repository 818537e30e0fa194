"""Hosts, nodes and remote-access ext clients.

Revision ID: 20261001100000
Revises: 20261001000000
Create Date: 2026-10-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "20261001100000"
down_revision: Union[str, None] = "20261001000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _jsonb(name: str, nullable: bool = False) -> sa.Column:
    default = None if nullable else sa.text("'[]'::jsonb")
    return sa.Column(
        name,
        postgresql.JSONB(astext_type=sa.Text()),
        nullable=nullable,
        server_default=default,
    )


def upgrade() -> None:
    op.create_table(
        "hosts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("interface", sa.String(length=15), nullable=False, server_default=""),
        sa.Column("listen_port", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("mtu", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("public_key", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("mac_address", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("traffic_key_public", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("endpoint_ip", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("internet_gateway", sa.String(length=64), nullable=False, server_default=""),
        _jsonb("interfaces"),
        sa.Column("ip_forwarding", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("auto_update", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_docker", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_k8s", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_static", sa.Boolean(), nullable=False, server_default=sa.false()),
        _jsonb("nodes"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "nodes",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("host_id", sa.String(length=36), nullable=False),
        sa.Column("network", sa.String(length=64), nullable=False),
        sa.Column("address", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("address6", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("local_address", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("server", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("connected", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("action", sa.String(length=32), nullable=False, server_default="noop"),
        sa.Column("is_ingress_gateway", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ingress_gateway_range", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("ingress_gateway_range6", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("is_egress_gateway", sa.Boolean(), nullable=False, server_default=sa.false()),
        _jsonb("egress_gateway_ranges"),
        sa.Column("egress_gateway_nat_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        _jsonb("egress_gateway_request", nullable=True),
        sa.Column("is_relay", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_relayed", sa.Boolean(), nullable=False, server_default=sa.false()),
        _jsonb("relayed_nodes"),
        sa.Column("dns_on", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("persistent_keepalive", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("default_acl", sa.String(length=16), nullable=False, server_default=""),
        sa.Column("owner_id", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("failover", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("failover_node", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("pending_delete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("expiration_date_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "last_modified",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_nodes_host_id"), "nodes", ["host_id"], unique=False)
    op.create_index(op.f("ix_nodes_network"), "nodes", ["network"], unique=False)
    op.create_table(
        "ext_clients",
        sa.Column("network", sa.String(length=64), nullable=False),
        sa.Column("client_id", sa.String(length=64), nullable=False),
        sa.Column("owner_id", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("ingress_gateway_id", sa.String(length=64), nullable=False),
        sa.Column("remote_access_client_id", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "last_modified",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("network", "client_id"),
    )
    op.create_index(op.f("ix_ext_clients_owner_id"), "ext_clients", ["owner_id"], unique=False)
    op.create_index(
        op.f("ix_ext_clients_ingress_gateway_id"),
        "ext_clients",
        ["ingress_gateway_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_ext_clients_ingress_gateway_id"), table_name="ext_clients")
    op.drop_index(op.f("ix_ext_clients_owner_id"), table_name="ext_clients")
    op.drop_table("ext_clients")
    op.drop_index(op.f("ix_nodes_network"), table_name="nodes")
    op.drop_index(op.f("ix_nodes_host_id"), table_name="nodes")
    op.drop_table("nodes")
    op.drop_table("hosts")
