"""Background removal of remote-access clients after a user loses a gateway."""

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

from sqlalchemy.orm import Session

from meshctl.core.errors import MeshError
from meshctl.services.store import RecordStore

logger = logging.getLogger(__name__)


def _log_failure(future: "Future[int]") -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("ExtClient cleanup failed", exc_info=exc)


class ExtClientCleanup:
    """
    Bounded worker pool for fire-and-forget ExtClient deletion.

    Each task opens its own session, so it never shares state with the request
    that submitted it. Failures are reported to the log only; submit() returns
    the Future so tests and shutdown can wait on it.
    """

    def __init__(self, session_factory: Callable[[], Session], max_workers: int = 2) -> None:
        self._session_factory = session_factory
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="extclient-cleanup",
        )

    def submit(self, username: str, gateway_id: str) -> "Future[int]":
        future = self._executor.submit(self.remove_clients, username, gateway_id)
        future.add_done_callback(_log_failure)
        return future

    def remove_clients(self, username: str, gateway_id: str) -> int:
        """Delete every ExtClient owned by username and bound to gateway_id. Returns the number deleted."""
        session = self._session_factory()
        try:
            store = RecordStore(session)
            deleted = 0
            for ext_client in store.list_ext_clients():
                if ext_client.owner_id != username or ext_client.ingress_gateway_id != gateway_id:
                    continue
                try:
                    store.delete_ext_client(ext_client.network, ext_client.client_id)
                    deleted += 1
                except MeshError as e:
                    logger.error(
                        "Failed to delete ext client",
                        extra={
                            "client_id": ext_client.client_id,
                            "network": ext_client.network,
                            "error": e.message,
                        },
                    )
            if deleted:
                logger.info(
                    "Removed ext clients of detached gateway",
                    extra={"user": username, "gateway_id": gateway_id, "deleted": deleted},
                )
            return deleted
        finally:
            session.close()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
