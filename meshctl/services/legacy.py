"""Conversion of old flat node records into the Host/Node pair."""

import base64
import binascii
import ipaddress
import re
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from meshctl.models import Host, Node
from meshctl.models.node import NODE_NOOP
from meshctl.schemas.legacy import LegacyNode, parse_legacy_bool

if TYPE_CHECKING:
    from meshctl.core.config import Settings

WIREGUARD_KEY_LEN = 32

_MAC_OCTET = re.compile(r"^[0-9a-fA-F]{2}$")


def parse_wireguard_key(value: str) -> str:
    """Canonical base64 of a 32-byte key, or "" when the value is not a key."""
    if not value:
        return ""
    try:
        raw = base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError):
        return ""
    if len(raw) != WIREGUARD_KEY_LEN:
        return ""
    return base64.b64encode(raw).decode("ascii")


def parse_mac_address(value: str) -> str:
    """Lower-case colon-separated hardware address (6, 8 or 20 octets), or ""."""
    if not value:
        return ""
    octets = re.split(r"[:-]", value.strip())
    if len(octets) not in (6, 8, 20) or not all(_MAC_OCTET.match(o) for o in octets):
        return ""
    return ":".join(o.lower() for o in octets)


def parse_ip(value: str) -> str:
    if not value:
        return ""
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return ""


def parse_udp_address(value: str) -> str:
    """Normalize "ip:port" / "[ipv6]:port"; hostnames are not resolved and yield ""."""
    if not value:
        return ""
    host, sep, port = value.strip().rpartition(":")
    if not sep or not port.isdigit() or not 0 <= int(port) <= 65535:
        return ""
    host = host.removeprefix("[").removesuffix("]")
    ip = parse_ip(host)
    if not ip:
        return ""
    if ":" in ip:
        return f"[{ip}]:{int(port)}"
    return f"{ip}:{int(port)}"


def address_in_range(address: str, address_range: str) -> str:
    """
    Interface notation of address with the prefix length of address_range.
    A malformed range (or address) yields "" rather than an error.
    """
    if not address_range:
        return ""
    try:
        network = ipaddress.ip_network(address_range.strip(), strict=False)
        ip = ipaddress.ip_address(address.strip())
    except ValueError:
        return ""
    if ip.version != network.version:
        return ""
    return f"{ip}/{network.prefixlen}"


def _parse_uuid(value: str) -> str:
    if not value:
        return ""
    try:
        return str(uuid.UUID(value))
    except ValueError:
        return ""


def _expiration(timestamp: int) -> datetime | None:
    if timestamp <= 0:
        return None
    try:
        return datetime.fromtimestamp(timestamp, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def convert_legacy_host(legacy: LegacyNode, settings: "Settings") -> Host:
    """New Host identity for the device behind a legacy record. The caller sets the name."""
    return Host(
        id=str(uuid.uuid4()),
        name="",
        interface=settings.HOST_INTERFACE_NAME,
        listen_port=legacy.listen_port,
        mtu=legacy.mtu,
        public_key=parse_wireguard_key(legacy.public_key),
        mac_address=parse_mac_address(legacy.mac_address),
        traffic_key_public=legacy.traffic_keys.mine,
        endpoint_ip=parse_ip(legacy.endpoint),
        internet_gateway=parse_udp_address(legacy.internet_gateway),
        interfaces=list(legacy.interfaces),
        ip_forwarding=parse_legacy_bool(legacy.ip_forwarding),
        auto_update=settings.AUTO_UPDATE_ENABLED,
        is_docker=parse_legacy_bool(legacy.is_docker),
        is_k8s=parse_legacy_bool(legacy.is_k8s),
        is_static=parse_legacy_bool(legacy.is_static),
        nodes=[],
    )


def convert_legacy_node(legacy: LegacyNode, host_id: str) -> Node:
    """Node for one legacy record; keeps the legacy id so existing references stay valid."""
    settings_ranges = legacy.network_settings
    return Node(
        id=legacy.id,
        host_id=host_id,
        network=legacy.network,
        address=address_in_range(legacy.address, settings_ranges.address_range),
        address6=address_in_range(legacy.address6, settings_ranges.address_range6),
        local_address=parse_ip(legacy.local_address),
        server=legacy.server,
        connected=parse_legacy_bool(legacy.connected),
        action=NODE_NOOP,
        is_ingress_gateway=parse_legacy_bool(legacy.is_ingress_gateway),
        ingress_gateway_range=legacy.ingress_gateway_range,
        ingress_gateway_range6=legacy.ingress_gateway_range6,
        is_egress_gateway=parse_legacy_bool(legacy.is_egress_gateway),
        egress_gateway_ranges=list(legacy.egress_gateway_ranges),
        egress_gateway_nat_enabled=parse_legacy_bool(legacy.egress_gateway_nat_enabled),
        egress_gateway_request=legacy.egress_gateway_request,
        is_relay=parse_legacy_bool(legacy.is_relay),
        is_relayed=parse_legacy_bool(legacy.is_relayed),
        relayed_nodes=list(legacy.relay_addrs),
        dns_on=parse_legacy_bool(legacy.dns_on),
        persistent_keepalive=max(legacy.persistent_keepalive, 0),
        default_acl=legacy.default_acl,
        owner_id=legacy.owner_id,
        failover=parse_legacy_bool(legacy.failover),
        failover_node=_parse_uuid(legacy.failover_node),
        pending_delete=False,
        expiration_date_time=_expiration(legacy.expiration_date_time),
        last_modified=datetime.now(UTC),
    )
