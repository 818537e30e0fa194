"""Node endpoints: migration of legacy node records."""

from typing import Annotated

from fastapi import APIRouter, Depends

from meshctl.api.v1.auth import get_store
from meshctl.core.config import get_settings
from meshctl.schemas.migration import HostPull, MigrationRequest
from meshctl.services.migration import migrate_legacy_nodes
from meshctl.services.store import RecordStore

router = APIRouter()


@router.put("/migrate", response_model=HostPull)
def migrate(
    body: MigrationRequest,
    store: Annotated[RecordStore, Depends(get_store)],
) -> HostPull:
    """
    Convert a device's legacy node records into a new Host and its Nodes.

    Each record is authenticated by its own node password; no bearer token is
    needed. Nodes that fail to persist are left out of the response.
    """
    return migrate_legacy_nodes(store, body, get_settings())
