"""ORM model for remote-access client profiles bound to an ingress gateway."""

from sqlalchemy import Boolean, Column, DateTime, String, func

from meshctl.models.base import Base


class ExtClient(Base):
    """A remote-access profile bound to exactly one ingress gateway Node; keyed by (network, client_id)."""

    __tablename__ = "ext_clients"

    network = Column(String(64), primary_key=True)
    client_id = Column(String(64), primary_key=True)
    owner_id = Column(String(40), nullable=False, default="", index=True)
    ingress_gateway_id = Column(String(64), nullable=False, index=True)
    remote_access_client_id = Column(String(255), nullable=False, default="")
    enabled = Column(Boolean, nullable=False, default=True)
    last_modified = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
