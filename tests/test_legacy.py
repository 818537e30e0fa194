"""Unit tests for meshctl.services.legacy and parse_legacy_bool: legacy field adapters and Host/Node conversion."""

import unittest

from meshctl.schemas.legacy import LegacyNode, parse_legacy_bool
from meshctl.services.legacy import (
    address_in_range,
    convert_legacy_host,
    convert_legacy_node,
    parse_mac_address,
    parse_udp_address,
    parse_wireguard_key,
)
from tests.support import WG_KEY, legacy_payload, make_settings

LEGACY_ID = "3f1c2a9e-7b51-4c55-9a52-2f5b8f0b6d11"


def _legacy(**fields: object) -> LegacyNode:
    return LegacyNode.model_validate(legacy_payload(LEGACY_ID, "nodepass", **fields))


class TestParseLegacyBool(unittest.TestCase):
    def test_truthy_values(self) -> None:
        for value in ("yes", "YES", " yes ", "true", "on", "1", True):
            with self.subTest(value=value):
                self.assertTrue(parse_legacy_bool(value))

    def test_falsy_values(self) -> None:
        for value in ("no", "", "false", "off", "0", "maybe", None, False):
            with self.subTest(value=value):
                self.assertFalse(parse_legacy_bool(value))


class TestFieldAdapters(unittest.TestCase):
    def test_wireguard_key(self) -> None:
        self.assertEqual(parse_wireguard_key(WG_KEY), WG_KEY)
        self.assertEqual(parse_wireguard_key("not-a-key"), "")
        self.assertEqual(parse_wireguard_key("c2hvcnQ="), "")

    def test_mac_address(self) -> None:
        self.assertEqual(parse_mac_address("AA-BB-CC-DD-EE-FF"), "aa:bb:cc:dd:ee:ff")
        self.assertEqual(parse_mac_address("aa:bb:cc:dd:ee"), "")
        self.assertEqual(parse_mac_address("zz:bb:cc:dd:ee:ff"), "")

    def test_udp_address(self) -> None:
        self.assertEqual(parse_udp_address("192.168.1.1:51820"), "192.168.1.1:51820")
        self.assertEqual(parse_udp_address("[fd00::1]:51820"), "[fd00::1]:51820")
        self.assertEqual(parse_udp_address("192.168.1.1"), "")
        self.assertEqual(parse_udp_address("gateway.local:51820"), "")
        self.assertEqual(parse_udp_address("192.168.1.1:99999"), "")

    def test_address_in_range(self) -> None:
        self.assertEqual(address_in_range("10.10.0.5", "10.10.0.0/16"), "10.10.0.5/16")
        self.assertEqual(address_in_range("fd00::5", "fd00::/64"), "fd00::5/64")

    def test_malformed_range_gives_empty_address(self) -> None:
        self.assertEqual(address_in_range("10.10.0.5", "10.10.0.0/99"), "")
        self.assertEqual(address_in_range("10.10.0.5", ""), "")
        self.assertEqual(address_in_range("garbage", "10.10.0.0/16"), "")
        self.assertEqual(address_in_range("fd00::5", "10.10.0.0/16"), "")


class TestConvertLegacyHost(unittest.TestCase):
    def test_host_fields(self) -> None:
        settings = make_settings(HOST_INTERFACE_NAME="mesh0", AUTO_UPDATE_ENABLED=True)
        host = convert_legacy_host(_legacy(), settings)

        self.assertEqual(len(host.id), 36)
        self.assertEqual(host.interface, "mesh0")
        self.assertEqual(host.listen_port, 51821)
        self.assertEqual(host.mtu, 1420)
        self.assertEqual(host.public_key, WG_KEY)
        self.assertEqual(host.mac_address, "aa:bb:cc:dd:ee:ff")
        self.assertEqual(host.endpoint_ip, "203.0.113.7")
        self.assertEqual(host.internet_gateway, "192.168.1.1:51820")
        self.assertEqual(host.traffic_key_public, "bWluZS10cmFmZmljLWtleQ==")
        self.assertTrue(host.ip_forwarding)
        self.assertTrue(host.auto_update)
        self.assertTrue(host.is_k8s)
        self.assertFalse(host.is_docker)
        self.assertFalse(host.is_static)
        self.assertEqual(host.nodes, [])

    def test_each_conversion_gets_fresh_id(self) -> None:
        settings = make_settings()
        self.assertNotEqual(
            convert_legacy_host(_legacy(), settings).id,
            convert_legacy_host(_legacy(), settings).id,
        )


class TestConvertLegacyNode(unittest.TestCase):
    def test_node_fields(self) -> None:
        node = convert_legacy_node(_legacy(isingressgateway="yes", relayaddrs=["10.10.0.9"]), "host-1")

        self.assertEqual(node.id, LEGACY_ID)
        self.assertEqual(node.host_id, "host-1")
        self.assertEqual(node.network, "netA")
        self.assertEqual(node.address, "10.10.0.5/16")
        self.assertEqual(node.address6, "fd00::5/64")
        self.assertEqual(node.local_address, "192.168.1.20")
        self.assertTrue(node.connected)
        self.assertTrue(node.is_ingress_gateway)
        self.assertTrue(node.dns_on)
        self.assertEqual(node.relayed_nodes, ["10.10.0.9"])
        self.assertEqual(node.persistent_keepalive, 20)
        self.assertEqual(node.owner_id, "alice")
        self.assertEqual(node.action, "noop")
        self.assertFalse(node.pending_delete)

    def test_malformed_range_does_not_abort(self) -> None:
        node = convert_legacy_node(
            _legacy(networksettings={"addressrange": "bogus", "addressrange6": "fd00::/64"}),
            "host-1",
        )
        self.assertEqual(node.address, "")
        self.assertEqual(node.address6, "fd00::5/64")

    def test_invalid_failover_node_is_dropped(self) -> None:
        node = convert_legacy_node(_legacy(failovernode="not-a-uuid"), "host-1")
        self.assertEqual(node.failover_node, "")


if __name__ == "__main__":
    unittest.main()
