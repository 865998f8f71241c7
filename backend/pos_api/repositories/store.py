"""
SQLAlchemy implementation of the collection store.

All collections live in the ``collection_record`` table. Every write commits
through ``safe_commit`` and is confirmed before the call returns; any
database error is rolled back and surfaced as ``PersistenceFailureError`` so
callers never assume an unconfirmed write succeeded.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, update as sql_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_api.models import CollectionRecord
from pos_shared.config.logging import get_logger
from pos_shared.infrastructure.db import safe_commit
from pos_shared.infrastructure.store import CollectionStore, StoredRecord
from pos_shared.utils.exceptions import (
    DuplicateEntityError,
    NotFoundError,
    PersistenceFailureError,
    StaleRecordError,
    ValidationError,
)

logger = get_logger(__name__)


class SqlCollectionStore(CollectionStore):
    """Collection store backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self._db = db

    @property
    def session(self) -> Session:
        return self._db

    def _find(self, collection: str, record_id: str) -> CollectionRecord | None:
        return self._db.scalar(
            select(CollectionRecord).where(
                CollectionRecord.collection == collection,
                CollectionRecord.record_id == record_id,
            )
        )

    def _fail(self, operation: str, collection: str, exc: SQLAlchemyError, **context: Any) -> PersistenceFailureError:
        try:
            self._db.rollback()
        except SQLAlchemyError:
            logger.error("Rollback failed", operation=operation, collection=collection, exc_info=True)
        return PersistenceFailureError(operation, collection, error=str(exc), **context)

    @staticmethod
    def _to_stored(row: CollectionRecord) -> StoredRecord:
        return StoredRecord(
            collection=row.collection,
            id=row.record_id,
            version=row.version,
            data=dict(row.data),
        )

    def create(self, collection: str, record: dict[str, Any]) -> StoredRecord:
        record_id = record.get("id")
        if not record_id:
            raise ValidationError("Record must have an id", collection=collection)

        data = dict(record)
        data.pop("version", None)
        try:
            if self._find(collection, record_id) is not None:
                raise DuplicateEntityError(collection, record_id)

            row = CollectionRecord(
                collection=collection,
                record_id=record_id,
                version=1,
                data=data,
            )
            self._db.add(row)
            safe_commit(self._db)
        except SQLAlchemyError as exc:
            raise self._fail("create", collection, exc, record_id=record_id) from exc

        logger.debug("Record created", collection=collection, record_id=record_id)
        return StoredRecord(collection=collection, id=record_id, version=1, data=data)

    def update(
        self,
        collection: str,
        record_id: str,
        partial: dict[str, Any],
        expected_version: int | None = None,
    ) -> StoredRecord:
        try:
            row = self._find(collection, record_id)
            if row is None:
                raise NotFoundError(collection, record_id)

            current_version = row.version
            if expected_version is not None and current_version != expected_version:
                raise StaleRecordError(collection, record_id, expected_version, current_version)

            changes = dict(partial)
            changes.pop("version", None)
            merged = {**row.data, **changes, "id": record_id}

            # Compare-and-swap on the version so a concurrent writer between
            # the read above and this statement is detected.
            result = self._db.execute(
                sql_update(CollectionRecord)
                .where(
                    CollectionRecord.pk == row.pk,
                    CollectionRecord.version == current_version,
                )
                .values(data=merged, version=current_version + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self._db.rollback()
                raise StaleRecordError(collection, record_id, current_version)

            safe_commit(self._db)
            self._db.expire(row)
        except SQLAlchemyError as exc:
            raise self._fail("update", collection, exc, record_id=record_id) from exc

        logger.debug(
            "Record updated",
            collection=collection,
            record_id=record_id,
            version=current_version + 1,
        )
        return StoredRecord(
            collection=collection,
            id=record_id,
            version=current_version + 1,
            data=merged,
        )

    def delete(self, collection: str, record_id: str) -> None:
        try:
            row = self._find(collection, record_id)
            if row is None:
                raise NotFoundError(collection, record_id)
            self._db.delete(row)
            safe_commit(self._db)
        except SQLAlchemyError as exc:
            raise self._fail("delete", collection, exc, record_id=record_id) from exc

        logger.debug("Record deleted", collection=collection, record_id=record_id)

    def list(self, collection: str) -> list[StoredRecord]:
        try:
            rows = self._db.scalars(
                select(CollectionRecord)
                .where(CollectionRecord.collection == collection)
                .order_by(CollectionRecord.pk)
            ).all()
        except SQLAlchemyError as exc:
            raise self._fail("list", collection, exc) from exc
        return [self._to_stored(row) for row in rows]

    def get(self, collection: str, record_id: str) -> StoredRecord | None:
        try:
            row = self._find(collection, record_id)
        except SQLAlchemyError as exc:
            raise self._fail("get", collection, exc, record_id=record_id) from exc
        return self._to_stored(row) if row is not None else None
