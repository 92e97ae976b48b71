from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from tomorrow_architect.db.base import Base


class StorageEntry(Base):
    """One serialized blob per storage key, the server-side localStorage."""

    __tablename__ = "storage_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    schema_version = Column(Integer, nullable=False, default=1)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )
