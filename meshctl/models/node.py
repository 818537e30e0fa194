"""ORM model for a device's membership in one mesh network."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from meshctl.models.base import Base, JSONType

NODE_NOOP = "noop"


class Node(Base):
    """
    Per-network membership record of a Host.

    Addresses are stored in interface notation (ip/prefix); an empty string
    means the address is unset.
    """

    __tablename__ = "nodes"

    id = Column(String(64), primary_key=True)
    host_id = Column(String(36), nullable=False, index=True)
    network = Column(String(64), nullable=False, index=True)
    address = Column(String(64), nullable=False, default="")
    address6 = Column(String(64), nullable=False, default="")
    local_address = Column(String(64), nullable=False, default="")
    server = Column(String(255), nullable=False, default="")
    connected = Column(Boolean, nullable=False, default=True)
    action = Column(String(32), nullable=False, default=NODE_NOOP)
    is_ingress_gateway = Column(Boolean, nullable=False, default=False)
    ingress_gateway_range = Column(String(64), nullable=False, default="")
    ingress_gateway_range6 = Column(String(64), nullable=False, default="")
    is_egress_gateway = Column(Boolean, nullable=False, default=False)
    egress_gateway_ranges = Column(JSONType, nullable=False, default=list)
    egress_gateway_nat_enabled = Column(Boolean, nullable=False, default=False)
    egress_gateway_request = Column(JSONType, nullable=True)
    is_relay = Column(Boolean, nullable=False, default=False)
    is_relayed = Column(Boolean, nullable=False, default=False)
    relayed_nodes = Column(JSONType, nullable=False, default=list)
    dns_on = Column(Boolean, nullable=False, default=False)
    persistent_keepalive = Column(Integer, nullable=False, default=0)
    default_acl = Column(String(16), nullable=False, default="")
    owner_id = Column(String(40), nullable=False, default="")
    failover = Column(Boolean, nullable=False, default=False)
    failover_node = Column(String(64), nullable=False, default="")
    pending_delete = Column(Boolean, nullable=False, default=False)
    expiration_date_time = Column(DateTime(timezone=True), nullable=True)
    last_modified = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
