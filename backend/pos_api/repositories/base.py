"""
Base document repository.

Typed access to one collection of the collection store. Documents go in and
come out as frozen pydantic models; the store-assigned version travels with
each document so ``save`` can detect concurrent modification.
"""

from typing import ClassVar, Generic, TypeVar

from pos_api.models import Document
from pos_shared.infrastructure.store import CollectionStore, StoredRecord
from pos_shared.utils.exceptions import NotFoundError


DocumentT = TypeVar("DocumentT", bound=Document)


class DocumentRepository(Generic[DocumentT]):
    """
    Repository over a single collection.

    Subclasses set:
    - collection: store collection name
    - document_type: the Document subclass kept in it
    - entity_name: human name used in NotFound messages
    """

    collection: ClassVar[str]
    document_type: ClassVar[type[Document]]
    entity_name: ClassVar[str] = "Record"

    def __init__(self, store: CollectionStore):
        self._store = store

    @property
    def store(self) -> CollectionStore:
        return self._store

    def _to_document(self, record: StoredRecord) -> DocumentT:
        return self.document_type.model_validate(record.as_document())  # type: ignore[return-value]

    def find_by_id(self, document_id: str) -> DocumentT | None:
        record = self._store.get(self.collection, document_id)
        return self._to_document(record) if record is not None else None

    def get(self, document_id: str) -> DocumentT:
        """Like find_by_id but raises NotFoundError."""
        document = self.find_by_id(document_id)
        if document is None:
            raise NotFoundError(self.entity_name, document_id)
        return document

    def find_all(self) -> list[DocumentT]:
        return [self._to_document(record) for record in self._store.list(self.collection)]

    def add(self, document: DocumentT) -> DocumentT:
        """Insert a new document. Returns it with the store-assigned version."""
        record = self._store.create(self.collection, document.to_record())
        return self._to_document(record)

    def save(self, document: DocumentT) -> DocumentT:
        """
        Write a changed document back.

        The write is conditional on the stored version still being
        ``document.version``; otherwise StaleRecordError is raised.
        """
        expected = document.version or None
        record = self._store.update(
            self.collection,
            document.id,
            document.to_record(),
            expected_version=expected,
        )
        return self._to_document(record)

    def remove(self, document_id: str) -> None:
        self._store.delete(self.collection, document_id)
