"""
Batch migration of legacy node records into one Host and its Nodes.

All records of the batch are fetched, decoded and password-checked before
anything is written, so credential or decode failures leave the store
untouched. The Host is created from the first record; a Host or traffic-key
failure aborts the batch. Nodes are then upserted one by one: a Node that
fails to persist is logged and left out of the result while the rest of the
batch continues.
"""

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from meshctl.core.errors import BadRequestError, InternalError, UnauthorizedError
from meshctl.core.security import verify_password
from meshctl.models import Node
from meshctl.schemas.legacy import LegacyNode
from meshctl.schemas.migration import HostPull, HostView, MigrationRequest, NodeView
from meshctl.services.legacy import convert_legacy_host, convert_legacy_node
from meshctl.services.server_info import get_server_info, retrieve_public_traffic_key
from meshctl.services.store import RecordStore

if TYPE_CHECKING:
    from meshctl.core.config import Settings

logger = logging.getLogger(__name__)


def _load_verified(store: RecordStore, request: MigrationRequest) -> list[LegacyNode]:
    """Fetch, decode and verify every legacy record in request order; the first failure aborts."""
    verified: list[LegacyNode] = []
    for entry in request.legacy_nodes:
        record = store.get_legacy_record(entry.id)
        try:
            legacy = LegacyNode.model_validate_json(record.record)
        except ValidationError as e:
            logger.error("Decoding legacy node failed", extra={"legacy_id": entry.id, "error": str(e)})
            raise BadRequestError(f"decode legacy node {entry.id}: invalid record") from e
        if not verify_password(entry.password, legacy.password):
            logger.error("Legacy node invalid password", extra={"legacy_id": entry.id})
            raise UnauthorizedError(f"invalid password for legacy node {entry.id}")
        verified.append(legacy)
    return verified


def migrate_legacy_nodes(
    store: RecordStore,
    request: MigrationRequest,
    settings: "Settings",
) -> HostPull:
    if not request.legacy_nodes:
        raise BadRequestError("no legacy nodes to migrate")
    legacy_nodes = _load_verified(store, request)

    first = legacy_nodes[0]
    host = convert_legacy_host(first, settings)
    host.name = request.host_name or first.name
    try:
        store.create_host(host)
    except InternalError as e:
        logger.error("Create host failed", extra={"legacy_id": first.id, "error": e.message})
        raise
    server_config = get_server_info(settings, host_id=host.id)
    try:
        server_config.traffic_key = retrieve_public_traffic_key(store, settings)
    except InternalError as e:
        logger.error("Retrieving traffic key failed", extra={"host_id": host.id, "error": e.message})
        raise

    nodes: list[Node] = []
    for legacy in legacy_nodes:
        node = convert_legacy_node(legacy, host.id)
        try:
            saved = store.upsert_node(node, host=host, consumed_legacy_id=legacy.id)
        except InternalError as e:
            logger.error(
                "Migrating node failed; skipping",
                extra={"legacy_id": legacy.id, "host_id": host.id, "error": e.message},
            )
            continue
        nodes.append(saved)

    logger.info(
        "Migrated legacy nodes",
        extra={"host_id": host.id, "requested": len(legacy_nodes), "migrated": len(nodes)},
    )
    return HostPull(
        host=HostView.model_validate(host),
        nodes=[NodeView.model_validate(n) for n in nodes],
        server_config=server_config,
    )
