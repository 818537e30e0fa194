"""Record store: get/put/delete/list of control-plane entities over a SQLAlchemy session."""

import logging
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from meshctl.core.errors import InternalError, NotFoundError
from meshctl.models import ExtClient, Host, LegacyNodeRecord, Node, SystemState, User
from meshctl.models.system import SYSTEM_STATE_ID

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Thin persistence seam used by every service.

    Lookups raise NotFoundError when the entity is absent; writes commit
    immediately and raise InternalError (after rolling back) on database
    failure. Callers that need several rows written atomically stage them on
    the session and call commit() once.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def commit(self, action: str) -> None:
        self._guarded(self.session.commit, action)

    def flush(self, action: str) -> None:
        """Send pending changes inside the open transaction without committing it."""
        self._guarded(self.session.flush, action)

    def _guarded(self, write: Callable[[], None], action: str) -> None:
        try:
            write()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Store write failed", extra={"action": action, "error": str(e)})
            raise InternalError(f"failed to {action}") from e

    def rollback(self) -> None:
        self.session.rollback()

    # Users

    def find_user(self, username: str) -> User | None:
        if not username:
            return None
        return self.session.get(User, username)

    def get_user(self, username: str) -> User:
        user = self.find_user(username)
        if user is None:
            raise NotFoundError(f"user {username} not found")
        return user

    def list_users(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.username)))

    def list_superadmins(self) -> list[User]:
        stmt = select(User).where(User.is_super_admin.is_(True)).order_by(User.username)
        return list(self.session.scalars(stmt))

    def upsert_user(self, user: User) -> User:
        self.session.add(user)
        self.commit(f"save user {user.username}")
        return user

    def delete_user(self, username: str) -> None:
        user = self.get_user(username)
        self.session.delete(user)
        self.commit(f"delete user {username}")

    # System state

    def find_state(self) -> SystemState | None:
        return self.session.get(SystemState, SYSTEM_STATE_ID)

    def get_state(self, for_update: bool = False) -> SystemState:
        """Return the singleton row, staging a new one on the session if none exists yet."""
        stmt = select(SystemState).where(SystemState.id == SYSTEM_STATE_ID)
        if for_update:
            stmt = stmt.with_for_update()
        state = self.session.scalars(stmt).first()
        if state is None:
            state = SystemState(id=SYSTEM_STATE_ID)
            self.session.add(state)
        return state

    # Hosts and nodes

    def get_host(self, host_id: str) -> Host:
        host = self.session.get(Host, host_id) if host_id else None
        if host is None:
            raise NotFoundError(f"host {host_id} not found")
        return host

    def create_host(self, host: Host) -> Host:
        self.session.add(host)
        self.commit(f"create host {host.id}")
        return host

    def get_node(self, node_id: str) -> Node:
        node = self.session.get(Node, node_id) if node_id else None
        if node is None:
            raise NotFoundError(f"node {node_id} not found")
        return node

    def upsert_node(
        self,
        node: Node,
        host: Host | None = None,
        consumed_legacy_id: str | None = None,
    ) -> Node:
        """
        Insert or replace a Node. When host is given its back-reference list is
        extended, and consumed_legacy_id (if any) is deleted, all in the same commit.
        """
        merged = self.session.merge(node)
        if host is not None and merged.id not in (host.nodes or []):
            host.nodes = [*(host.nodes or []), merged.id]
        if consumed_legacy_id:
            legacy = self.session.get(LegacyNodeRecord, consumed_legacy_id)
            if legacy is not None:
                self.session.delete(legacy)
        self.commit(f"save node {merged.id}")
        return merged

    # Remote-access clients

    def list_ext_clients(self) -> list[ExtClient]:
        stmt = select(ExtClient).order_by(ExtClient.network, ExtClient.client_id)
        return list(self.session.scalars(stmt))

    def delete_ext_client(self, network: str, client_id: str) -> None:
        ext_client = self.session.get(ExtClient, (network, client_id))
        if ext_client is None:
            raise NotFoundError(f"ext client {client_id} not found in network {network}")
        self.session.delete(ext_client)
        self.commit(f"delete ext client {client_id}")

    # Legacy records

    def get_legacy_record(self, legacy_id: str) -> LegacyNodeRecord:
        record = self.session.get(LegacyNodeRecord, legacy_id) if legacy_id else None
        if record is None:
            raise NotFoundError(f"legacy node {legacy_id} not found")
        return record
