"""Singleton row holding control-plane wide state."""

from sqlalchemy import Column, DateTime, Integer, String, func

from meshctl.models.base import Base

SYSTEM_STATE_ID = 1


class SystemState(Base):
    """
    Exactly one row (id=1).

    superadmin_username is written only in the same transaction as the user
    rows it describes (first super-admin creation and role transfer).
    """

    __tablename__ = "system_state"

    id = Column(Integer, primary_key=True, default=SYSTEM_STATE_ID)
    superadmin_username = Column(String(40), nullable=True)
    traffic_key_public = Column(String(255), nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
