"""
Payment Record Repository.
"""

from pos_api.models import PaymentRecord
from pos_shared.config.constants import Collections
from pos_shared.infrastructure.store import CollectionStore

from .base import DocumentRepository


class PaymentRecordRepository(DocumentRepository[PaymentRecord]):
    collection = Collections.PAYMENT_RECORDS
    document_type = PaymentRecord
    entity_name = "Payment record"

    def find_by_room(self, room_id: str) -> list[PaymentRecord]:
        return [record for record in self.find_all() if record.room_id == room_id]


def get_payment_record_repository(store: CollectionStore) -> PaymentRecordRepository:
    return PaymentRecordRepository(store)
