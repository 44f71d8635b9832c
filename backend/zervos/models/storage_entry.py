"""Key/value row backing the SQL storage area."""

from sqlalchemy import Column, DateTime, String, Text, func

from zervos.core.database import Base


class StorageEntry(Base):
    """One persisted storage key and its serialized value."""

    __tablename__ = "storage_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
