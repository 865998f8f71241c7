"""
KTV Room Repository.
"""

from pos_api.models import KTVRoom
from pos_shared.config.constants import Collections, KTVRoomStatus
from pos_shared.infrastructure.store import CollectionStore

from .base import DocumentRepository


class KTVRoomRepository(DocumentRepository[KTVRoom]):
    """Repository for KTV rooms (with their embedded session)."""

    collection = Collections.KTV_ROOMS
    document_type = KTVRoom
    entity_name = "KTV room"

    def find_by_status(self, status: KTVRoomStatus) -> list[KTVRoom]:
        return [room for room in self.find_all() if room.status == status]


def get_ktv_room_repository(store: CollectionStore) -> KTVRoomRepository:
    return KTVRoomRepository(store)
