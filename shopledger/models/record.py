from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String

from shopledger.database.base import Base


class Record(Base):
    """One document of a collection; the payload holds the record fields."""

    __tablename__ = "records"

    collection = Column(String(40), primary_key=True)
    id = Column(String(64), primary_key=True)

    owner_id = Column(String(128))
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    data = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("idx_records_collection_owner", "collection", "owner_id"),
    )


class CollectionVersion(Base):
    __tablename__ = "collection_versions"

    collection = Column(String(40), primary_key=True)
    version = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


__all__ = ["CollectionVersion", "Record"]
