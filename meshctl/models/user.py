"""ORM model for control-plane user accounts (auth, role flags, gateway bindings)."""

from sqlalchemy import Boolean, Column, DateTime, String, func

from meshctl.models.base import Base, JSONType

ORIGIN_LOCAL = "local"
ORIGIN_OAUTH = "oauth"


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    is_super_admin is held by at most one user; system_state.superadmin_username
    names that user. remote_gw_ids is an insertion-ordered set of ingress
    gateway Node ids the user may connect through.
    """

    __tablename__ = "users"

    username = Column(String(40), primary_key=True)
    password_hash = Column(String(255), nullable=False, default="")
    is_admin = Column(Boolean, nullable=False, default=False)
    is_super_admin = Column(Boolean, nullable=False, default=False)
    remote_gw_ids = Column(JSONType, nullable=False, default=list)
    origin = Column(String(16), nullable=False, default=ORIGIN_LOCAL)
    promoted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    @property
    def is_elevated(self) -> bool:
        return bool(self.is_admin or self.is_super_admin)

    @property
    def is_external(self) -> bool:
        return (self.origin or ORIGIN_LOCAL) != ORIGIN_LOCAL
