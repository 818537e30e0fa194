"""ORM model for pre-migration flat node records."""

from sqlalchemy import Column, String, Text

from meshctl.models.base import Base


class LegacyNodeRecord(Base):
    """Raw JSON of an old-format node; consumed (deleted) once its Node has been migrated."""

    __tablename__ = "legacy_nodes"

    id = Column(String(64), primary_key=True)
    record = Column(Text, nullable=False)
