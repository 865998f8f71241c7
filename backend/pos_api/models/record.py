"""
Collection store table.

Every collection (orders, ktv_rooms, ...) shares one table keyed by
(collection, record_id). The JSON payload is the document; ``version``
backs the optimistic concurrency check.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, BigInteger, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class CollectionRecord(TimestampMixin, Base):
    """A single record of a named collection."""

    __tablename__ = "collection_record"

    pk: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    collection: Mapped[str] = mapped_column(String(64), nullable=False)
    record_id: Mapped[str] = mapped_column(String(128), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        UniqueConstraint("collection", "record_id", name="uq_collection_record"),
        Index("ix_collection_record_collection", "collection", "pk"),
    )

    def __repr__(self) -> str:
        return f"<CollectionRecord({self.collection}/{self.record_id}, v{self.version})>"
