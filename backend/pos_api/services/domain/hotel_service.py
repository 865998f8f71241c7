"""
Hotel Room Domain Service.

Room registry, occupancy, and room-service ordering. Occupancy and dining
are independent: a room-service order is accepted for any registered room
and never changes the room's status.
"""

from collections.abc import Iterable

from pos_api.models import HotelRoom, Order
from pos_api.repositories import HotelRoomRepository
from pos_shared.config.constants import HotelRoomStatus, OrderSource
from pos_shared.config.logging import get_logger, mask_guest_name
from pos_shared.utils.exceptions import ValidationError

from .base_service import DomainService
from .order_service import OrderService

logger = get_logger(__name__)


class HotelService(DomainService):
    """Domain service for hotel rooms and room-service orders."""

    def __init__(self, store, **collaborators):
        super().__init__(store, **collaborators)
        self._rooms = HotelRoomRepository(store)
        self._orders = OrderService(store, **collaborators)

    def list_rooms(self, floor: int | None = None) -> list[HotelRoom]:
        if floor is not None:
            return self._rooms.find_by_floor(floor)
        return sorted(self._rooms.find_all(), key=lambda room: room.id)

    def get_room(self, room_number: str) -> HotelRoom:
        return self._rooms.get(room_number)

    def add_room(self, room: HotelRoom) -> HotelRoom:
        return self._rooms.add(room)

    def set_status(
        self,
        room_number: str,
        status: HotelRoomStatus,
        guest_name: str | None = None,
    ) -> HotelRoom:
        """Check a guest in (Occupied) or out (Vacant)."""
        room = self._rooms.get(room_number)
        if status == HotelRoomStatus.OCCUPIED and not (guest_name and guest_name.strip()):
            raise ValidationError("Guest name is required to occupy a room", room=room_number)

        guest = guest_name.strip() if status == HotelRoomStatus.OCCUPIED and guest_name else None
        saved = self._rooms.save(room.model_copy(update={"status": status, "guest_name": guest}))
        logger.info(
            "Hotel room status changed",
            room=saved.id,
            status=saved.status.value,
            guest=mask_guest_name(guest) if guest else None,
        )
        return saved

    def place_room_service_order(
        self,
        room_number: str,
        lines: Iterable[tuple[str, int]],
        notes: str | None = None,
    ) -> Order:
        """Room-service order from ``(menu_item_id, quantity)`` lines."""
        room = self._rooms.get(room_number)
        return self._orders.create_from_menu(
            room.room_number,
            OrderSource.ROOM_SERVICE,
            lines,
            notes=notes,
        )
