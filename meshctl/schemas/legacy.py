"""Decoder for the pre-split flat node record format consumed by migration."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LEGACY_TRUE = frozenset({"yes", "true", "on", "1"})

# Flags were written as "yes"/"no" strings; some writers emitted JSON booleans or null.
LegacyFlag = str | bool | None


def parse_legacy_bool(value: LegacyFlag) -> bool:
    """Legacy records encode flags as strings ("yes"/"no"); anything unrecognized is False."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return value.strip().lower() in _LEGACY_TRUE


class LegacyNetworkSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    address_range: str = Field(default="", alias="addressrange")
    address_range6: str = Field(default="", alias="addressrange6")


class LegacyTrafficKeys(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mine: str = ""
    server: str = ""


class LegacyNode(BaseModel):
    """
    Old-format node: host-level and node-level fields in one record, plus the
    bcrypt hash of the node password. Flags keep their raw form here; they are
    converted with parse_legacy_bool at the migration boundary. Slices and
    nested objects written as null decode to their empty value.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    network: str = ""
    name: str = ""
    password: str = ""
    address: str = ""
    address6: str = ""
    local_address: str = Field(default="", alias="localaddress")
    interfaces: list[dict] = Field(default_factory=list)
    network_settings: LegacyNetworkSettings = Field(
        default_factory=LegacyNetworkSettings, alias="networksettings"
    )
    listen_port: int = Field(default=0, alias="listenport")
    mtu: int = 0
    public_key: str = Field(default="", alias="publickey")
    endpoint: str = ""
    mac_address: str = Field(default="", alias="macaddress")
    internet_gateway: str = Field(default="", alias="internetgateway")
    persistent_keepalive: int = Field(default=0, alias="persistentkeepalive")
    traffic_keys: LegacyTrafficKeys = Field(
        default_factory=LegacyTrafficKeys, alias="traffickeys"
    )
    server: str = ""
    connected: LegacyFlag = ""
    ip_forwarding: LegacyFlag = Field(default="", alias="ipforwarding")
    is_static: LegacyFlag = Field(default="", alias="isstatic")
    is_docker: LegacyFlag = Field(default="", alias="isdocker")
    is_k8s: LegacyFlag = Field(default="", alias="isk8s")
    is_egress_gateway: LegacyFlag = Field(default="", alias="isegressgateway")
    egress_gateway_ranges: list[str] = Field(default_factory=list, alias="egressgatewayranges")
    egress_gateway_nat_enabled: LegacyFlag = Field(default="", alias="egressgatewaynatenabled")
    egress_gateway_request: dict | None = Field(default=None, alias="egressgatewayrequest")
    is_ingress_gateway: LegacyFlag = Field(default="", alias="isingressgateway")
    ingress_gateway_range: str = Field(default="", alias="ingressgatewayrange")
    ingress_gateway_range6: str = Field(default="", alias="ingressgatewayrange6")
    is_relay: LegacyFlag = Field(default="", alias="isrelay")
    is_relayed: LegacyFlag = Field(default="", alias="isrelayed")
    relay_addrs: list[str] = Field(default_factory=list, alias="relayaddrs")
    dns_on: LegacyFlag = Field(default="", alias="dnson")
    default_acl: str = Field(default="", alias="defaultacl")
    owner_id: str = Field(default="", alias="ownerid")
    failover: LegacyFlag = ""
    failover_node: str = Field(default="", alias="failovernode")
    expiration_date_time: int = Field(default=0, alias="expdatetime")

    @field_validator("interfaces", "egress_gateway_ranges", "relay_addrs", mode="before")
    @classmethod
    def null_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("network_settings", "traffic_keys", mode="before")
    @classmethod
    def null_object(cls, v: Any) -> Any:
        return {} if v is None else v
