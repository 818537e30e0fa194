"""Remote-access gateway bindings on users and the per-user gateway view."""

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from meshctl.core.errors import BadRequestError, NotFoundError
from meshctl.models import Host, Node, User
from meshctl.schemas.gateway import ExtClientView, UserRemoteGateway
from meshctl.services.store import RecordStore

if TYPE_CHECKING:
    from meshctl.services.cleanup import ExtClientCleanup

logger = logging.getLogger(__name__)


def _require_params(username: str, gateway_id: str) -> None:
    if not username or not gateway_id:
        raise BadRequestError("required params `username` and `remote_access_gateway_id`")


def attach_gateway(store: RecordStore, username: str, gateway_id: str) -> User:
    """Authorize a non-admin user to connect through an ingress gateway. Attaching twice is a no-op."""
    _require_params(username, gateway_id)
    user = store.get_user(username)
    if user.is_elevated:
        raise BadRequestError("superadmins/admins have access to all gateways")
    try:
        node = store.get_node(gateway_id)
    except NotFoundError as e:
        raise BadRequestError(f"failed to fetch remote access gateway node: {e.message}") from e
    if not node.is_ingress_gateway:
        raise BadRequestError("node is not a remote access gateway")

    current = list(user.remote_gw_ids or [])
    if node.id in current:
        return user
    user.remote_gw_ids = [*current, node.id]
    store.upsert_user(user)
    logger.info("Gateway attached to user", extra={"user": username, "gateway_id": node.id})
    return user


def detach_gateway(
    store: RecordStore,
    username: str,
    gateway_id: str,
    cleanup: "ExtClientCleanup | None" = None,
) -> User:
    """
    Revoke a gateway from a user. When the gateway was bound, the user's
    clients on it are removed in the background; detaching an unbound
    gateway changes nothing.
    """
    _require_params(username, gateway_id)
    user = store.get_user(username)
    current = list(user.remote_gw_ids or [])
    if gateway_id not in current:
        return user
    user.remote_gw_ids = [gw for gw in current if gw != gateway_id]
    store.upsert_user(user)
    logger.info("Gateway detached from user", extra={"user": username, "gateway_id": gateway_id})
    if cleanup is not None:
        cleanup.submit(username, gateway_id)
    return user


def _resolve_gateway(store: RecordStore, gateway_id: str) -> tuple[Node, Host] | None:
    """Gateway Node and its Host, or None when either is missing or the Node is being deleted."""
    try:
        node = store.get_node(gateway_id)
    except NotFoundError:
        return None
    if node.pending_delete:
        return None
    try:
        host = store.get_host(node.host_id)
    except NotFoundError:
        return None
    return node, host


def resolve_user_gateways(
    store: RecordStore,
    username: str,
    remote_access_client_id: str,
) -> dict[str, list[UserRemoteGateway]]:
    """
    Group a user's authorized gateways by network.

    Gateways that already have a client of this user with the given remote
    access client id come first, marked connected; the remaining authorized
    gateways follow in binding order. Each gateway appears at most once.
    """
    if not username:
        raise BadRequestError("required params username")
    if not remote_access_client_id:
        raise BadRequestError("remote access client id cannot be empty")
    user = store.get_user(username)
    if user.is_elevated:
        raise BadRequestError("admins can visit dashboard to create remote clients")

    pending = list(user.remote_gw_ids or [])
    user_gws: dict[str, list[UserRemoteGateway]] = defaultdict(list)

    for ext_client in store.list_ext_clients():
        if ext_client.remote_access_client_id != remote_access_client_id:
            continue
        if ext_client.owner_id != username:
            continue
        resolved = _resolve_gateway(store, ext_client.ingress_gateway_id)
        if resolved is None:
            continue
        node, host = resolved
        if node.id not in pending:
            continue
        user_gws[node.network].append(
            UserRemoteGateway(
                gw_id=node.id,
                gw_name=host.name,
                network=node.network,
                gw_client=ExtClientView.model_validate(ext_client),
                connected=True,
            )
        )
        pending.remove(node.id)

    for gateway_id in pending:
        resolved = _resolve_gateway(store, gateway_id)
        if resolved is None:
            continue
        node, host = resolved
        user_gws[node.network].append(
            UserRemoteGateway(
                gw_id=node.id,
                gw_name=host.name,
                network=node.network,
            )
        )

    return dict(user_gws)
