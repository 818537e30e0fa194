"""Remote-access gateway endpoints: attach/detach a gateway to a user, and the user's gateway view."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from meshctl.api.v1.auth import get_ext_client_cleanup, get_store, require_admin, require_self
from meshctl.models.user import User
from meshctl.schemas.gateway import UserRemoteGateway
from meshctl.schemas.user import UserResponse
from meshctl.services import gateways
from meshctl.services.cleanup import ExtClientCleanup
from meshctl.services.store import RecordStore

router = APIRouter()


@router.post("/{username}/remote_access_gw/{remote_access_gateway_id}", response_model=UserResponse)
def attach_user_to_remote_access_gw(
    username: str,
    remote_access_gateway_id: str,
    _admin: Annotated[User, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_store)],
) -> User:
    """Authorize {username} to connect through the ingress gateway node."""
    return gateways.attach_gateway(store, username, remote_access_gateway_id)


@router.delete("/{username}/remote_access_gw/{remote_access_gateway_id}", response_model=UserResponse)
def remove_user_from_remote_access_gw(
    username: str,
    remote_access_gateway_id: str,
    _admin: Annotated[User, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_store)],
    cleanup: Annotated[ExtClientCleanup, Depends(get_ext_client_cleanup)],
) -> User:
    """
    Revoke the gateway from {username}. The user's clients bound to it are
    deleted in the background; the response does not wait for that.
    """
    return gateways.detach_gateway(store, username, remote_access_gateway_id, cleanup)


@router.get("/{username}/remote_access_gw", response_model=dict[str, list[UserRemoteGateway]])
def get_user_remote_access_gws(
    username: str,
    _caller: Annotated[User, Depends(require_self)],
    store: Annotated[RecordStore, Depends(get_store)],
    remote_access_clientid: Annotated[str, Query(max_length=255)] = "",
) -> dict[str, list[UserRemoteGateway]]:
    """Authorized gateways of the caller grouped by network, connected ones first."""
    return gateways.resolve_user_gateways(store, username, remote_access_clientid)
