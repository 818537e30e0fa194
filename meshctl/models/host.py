"""ORM model for a physical or virtual device identity."""

from sqlalchemy import Boolean, Column, Integer, String

from meshctl.models.base import Base, JSONType


class Host(Base):
    """One row per device; owns one Node per mesh network the device joins (nodes)."""

    __tablename__ = "hosts"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False, default="")
    interface = Column(String(15), nullable=False, default="")
    listen_port = Column(Integer, nullable=False, default=0)
    mtu = Column(Integer, nullable=False, default=0)
    public_key = Column(String(64), nullable=False, default="")
    mac_address = Column(String(64), nullable=False, default="")
    traffic_key_public = Column(String(255), nullable=False, default="")
    endpoint_ip = Column(String(64), nullable=False, default="")
    internet_gateway = Column(String(64), nullable=False, default="")
    interfaces = Column(JSONType, nullable=False, default=list)
    ip_forwarding = Column(Boolean, nullable=False, default=False)
    auto_update = Column(Boolean, nullable=False, default=False)
    is_docker = Column(Boolean, nullable=False, default=False)
    is_k8s = Column(Boolean, nullable=False, default=False)
    is_static = Column(Boolean, nullable=False, default=False)
    nodes = Column(JSONType, nullable=False, default=list)
