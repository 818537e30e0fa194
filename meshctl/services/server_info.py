"""Server descriptor handed to hosts: broker identity and the server's public traffic key."""

from typing import TYPE_CHECKING

from meshctl.core.config import EMQX_BROKER_TYPE
from meshctl.core.errors import InternalError
from meshctl.schemas.migration import ServerConfig
from meshctl.services.store import RecordStore

if TYPE_CHECKING:
    from meshctl.core.config import Settings


def get_server_info(settings: "Settings", host_id: str = "") -> ServerConfig:
    """With an EMQX broker every host authenticates to the broker as its own host id."""
    mq_username = host_id if settings.BROKER_TYPE == EMQX_BROKER_TYPE else ""
    return ServerConfig(
        server=settings.SERVER_NAME,
        version=settings.SERVER_VERSION,
        api=settings.API_ENDPOINT,
        broker=settings.BROKER_ENDPOINT,
        broker_type=settings.BROKER_TYPE,
        mq_username=mq_username,
    )


def retrieve_public_traffic_key(store: RecordStore, settings: "Settings") -> str:
    """Stored key first, then TRAFFIC_KEY_PUBLIC. Raises InternalError when neither is set."""
    state = store.find_state()
    if state is not None and state.traffic_key_public:
        return state.traffic_key_public
    if settings.TRAFFIC_KEY_PUBLIC:
        return settings.TRAFFIC_KEY_PUBLIC
    raise InternalError("server traffic key is not configured")
