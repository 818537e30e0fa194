"""Request/response schemas for legacy node migration."""

from datetime import datetime

from pydantic import BaseModel, Field


class LegacyNodeCredentials(BaseModel):
    """Identifier of a stored legacy node and the plain password it was enrolled with."""

    id: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class MigrationRequest(BaseModel):
    """All legacy nodes of one device, in the order they should be migrated."""

    host_name: str = Field(default="", max_length=255)
    legacy_nodes: list[LegacyNodeCredentials] = Field(default_factory=list)


class ServerConfig(BaseModel):
    """Server descriptor returned to a migrated host so it can reach the broker."""

    server: str
    version: str
    api: str
    broker: str
    broker_type: str
    mq_username: str = ""
    traffic_key: str = ""


class HostView(BaseModel):
    id: str
    name: str
    interface: str
    listen_port: int
    mtu: int
    public_key: str
    mac_address: str
    traffic_key_public: str
    endpoint_ip: str
    internet_gateway: str
    interfaces: list[dict] = Field(default_factory=list)
    ip_forwarding: bool
    auto_update: bool
    is_docker: bool
    is_k8s: bool
    is_static: bool
    nodes: list[str] = Field(default_factory=list)

    class Config:
        from_attributes = True


class NodeView(BaseModel):
    id: str
    host_id: str
    network: str
    address: str
    address6: str
    local_address: str
    server: str
    connected: bool
    action: str
    is_ingress_gateway: bool
    ingress_gateway_range: str
    ingress_gateway_range6: str
    is_egress_gateway: bool
    egress_gateway_ranges: list[str] = Field(default_factory=list)
    egress_gateway_nat_enabled: bool
    is_relay: bool
    is_relayed: bool
    relayed_nodes: list[str] = Field(default_factory=list)
    dns_on: bool
    persistent_keepalive: int
    default_acl: str
    owner_id: str
    failover: bool
    failover_node: str
    pending_delete: bool
    expiration_date_time: datetime | None = None

    class Config:
        from_attributes = True


class HostPull(BaseModel):
    """Migration result: the new Host, the Nodes that were persisted, and the server descriptor."""

    host: HostView
    nodes: list[NodeView] = Field(default_factory=list)
    server_config: ServerConfig
