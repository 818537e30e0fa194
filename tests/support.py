"""Shared fixtures: in-memory SQLite record store and entity builders."""

import json
from collections.abc import Callable

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from meshctl.core.config import get_settings
from meshctl.core.security import hash_password
from meshctl.models import Base, ExtClient, Host, LegacyNodeRecord, Node, SystemState, User
from meshctl.services.store import RecordStore

# Low bcrypt cost keeps the suite fast; verify_password reads the cost from the hash.
TEST_ROUNDS = 4

TRAFFIC_KEY = "c2VydmVyLXRyYWZmaWMta2V5LXB1YmxpYy0wMDAwMDA="
WG_KEY = "GHuXaz1Lw6wnGlCjkvdZNzYUdOAQ1LfUjFOXWKGYAUE="


def make_session_factory() -> Callable[[], Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def make_store() -> RecordStore:
    return RecordStore(make_session_factory()())


def make_settings(**overrides: object):
    """Settings copy with test-friendly values."""
    values = {"TRAFFIC_KEY_PUBLIC": TRAFFIC_KEY, "BASIC_AUTH_ENABLED": True}
    values.update(overrides)
    return get_settings().model_copy(update=values)


def add_user(
    store: RecordStore,
    username: str,
    password: str = "password1",
    is_admin: bool = False,
    is_super_admin: bool = False,
    remote_gw_ids: list[str] | None = None,
    origin: str = "local",
) -> User:
    user = User(
        username=username,
        password_hash=hash_password(password, rounds=TEST_ROUNDS),
        is_admin=is_admin,
        is_super_admin=is_super_admin,
        remote_gw_ids=list(remote_gw_ids or []),
        origin=origin,
    )
    store.session.add(user)
    if is_super_admin:
        store.get_state().superadmin_username = username
    store.session.commit()
    return user


def add_gateway(
    store: RecordStore,
    node_id: str,
    network: str,
    host_name: str,
    is_ingress_gateway: bool = True,
    pending_delete: bool = False,
    with_host: bool = True,
) -> Node:
    host_id = f"host-{node_id}"
    if with_host:
        store.session.add(Host(id=host_id, name=host_name, nodes=[node_id]))
    node = Node(
        id=node_id,
        host_id=host_id,
        network=network,
        is_ingress_gateway=is_ingress_gateway,
        pending_delete=pending_delete,
    )
    store.session.add(node)
    store.session.commit()
    return node


def add_ext_client(
    store: RecordStore,
    client_id: str,
    network: str,
    owner_id: str,
    gateway_id: str,
    remote_access_client_id: str = "rac-1",
) -> ExtClient:
    ext_client = ExtClient(
        client_id=client_id,
        network=network,
        owner_id=owner_id,
        ingress_gateway_id=gateway_id,
        remote_access_client_id=remote_access_client_id,
    )
    store.session.add(ext_client)
    store.session.commit()
    return ext_client


def legacy_payload(legacy_id: str, password: str, **fields: object) -> dict:
    """Old-format node record as it was stored on disk (string flags, flat fields)."""
    payload = {
        "id": legacy_id,
        "network": "netA",
        "name": "device-1",
        "password": hash_password(password, rounds=TEST_ROUNDS),
        "address": "10.10.0.5",
        "address6": "fd00::5",
        "localaddress": "192.168.1.20",
        "networksettings": {"addressrange": "10.10.0.0/16", "addressrange6": "fd00::/64"},
        "listenport": 51821,
        "mtu": 1420,
        "publickey": WG_KEY,
        "endpoint": "203.0.113.7",
        "macaddress": "AA-BB-CC-DD-EE-FF",
        "internetgateway": "192.168.1.1:51820",
        "persistentkeepalive": 20,
        "traffickeys": {"mine": "bWluZS10cmFmZmljLWtleQ==", "server": ""},
        "connected": "yes",
        "ipforwarding": "yes",
        "isstatic": "no",
        "isdocker": "no",
        "isk8s": "yes",
        "isingressgateway": "no",
        "isegressgateway": "no",
        "isrelay": "no",
        "isrelayed": "no",
        "dnson": "yes",
        "defaultacl": "yes",
        "ownerid": "alice",
        "failover": "no",
        "failovernode": "",
    }
    payload.update(fields)
    return payload


def add_legacy_record(store: RecordStore, legacy_id: str, password: str, **fields: object) -> None:
    store.session.add(
        LegacyNodeRecord(id=legacy_id, record=json.dumps(legacy_payload(legacy_id, password, **fields)))
    )
    store.session.commit()


def set_traffic_key(store: RecordStore, key: str) -> SystemState:
    state = store.get_state()
    state.traffic_key_public = key
    store.session.commit()
    return state
