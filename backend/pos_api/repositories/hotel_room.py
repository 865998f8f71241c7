"""
Hotel Room Repository.
"""

from pos_api.models import HotelRoom
from pos_shared.config.constants import Collections
from pos_shared.infrastructure.store import CollectionStore

from .base import DocumentRepository


class HotelRoomRepository(DocumentRepository[HotelRoom]):
    collection = Collections.HOTEL_ROOMS
    document_type = HotelRoom
    entity_name = "Hotel room"

    def find_by_floor(self, floor: int) -> list[HotelRoom]:
        return sorted(
            (room for room in self.find_all() if room.floor == floor),
            key=lambda room: room.id,
        )


def get_hotel_room_repository(store: CollectionStore) -> HotelRoomRepository:
    return HotelRoomRepository(store)
