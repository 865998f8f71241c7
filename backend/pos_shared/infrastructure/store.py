"""
Collection store interface.

The engine persists every record through four primitives addressed by
collection name and record id: create, update, delete and list (plus a
``get`` convenience). Records are plain JSON-compatible dicts that always
contain an ``"id"`` key; the store owns a monotonically increasing
``version`` per record for optimistic concurrency.

Implementations must:
- raise ``PersistenceFailureError`` when the backing storage fails, leaving
  nothing half-written;
- raise ``StaleRecordError`` when ``expected_version`` does not match;
- raise ``NotFoundError`` when updating or deleting an unknown record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class StoredRecord:
    """A record as returned by the store."""

    collection: str
    id: str
    version: int
    data: dict[str, Any] = field(default_factory=dict)

    def as_document(self) -> dict[str, Any]:
        """Record data merged with its store-assigned version."""
        return {**self.data, "id": self.id, "version": self.version}


class CollectionStore(ABC):
    """Abstract key/value collection store."""

    @abstractmethod
    def create(self, collection: str, record: dict[str, Any]) -> StoredRecord:
        """Insert a new record. ``record["id"]`` must be unique in the collection."""
        ...

    @abstractmethod
    def update(
        self,
        collection: str,
        record_id: str,
        partial: dict[str, Any],
        expected_version: int | None = None,
    ) -> StoredRecord:
        """
        Merge ``partial`` into the stored record and bump its version.

        When ``expected_version`` is given the write only succeeds if the
        stored version still matches.
        """
        ...

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None:
        """Remove a record."""
        ...

    @abstractmethod
    def list(self, collection: str) -> list[StoredRecord]:
        """All records in a collection, in insertion order."""
        ...

    def get(self, collection: str, record_id: str) -> StoredRecord | None:
        """Single record by id, or None. Implementations may override with a direct lookup."""
        for record in self.list(collection):
            if record.id == record_id:
                return record
        return None
