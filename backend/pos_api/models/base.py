"""
Base classes for persisted models.

- Base: SQLAlchemy declarative base for the store's tables.
- TimestampMixin: created/updated audit timestamps.
- Document: Pydantic base for records kept in the collection store.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class TimestampMixin:
    """Audit timestamps maintained by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )


class Document(BaseModel):
    """
    A record stored in the collection store.

    Documents are immutable; services derive a changed copy with
    ``model_copy(update=...)`` and only keep it once the store confirmed the
    write. ``version`` is assigned by the store and never written back.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    id: str
    version: int = 0

    def to_record(self) -> dict[str, Any]:
        """JSON-compatible dict for the store (without the version)."""
        return self.model_dump(mode="json", exclude={"version"})
