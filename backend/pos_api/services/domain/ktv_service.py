"""
KTV Room Domain Service.

Room lifecycle other than checkout:
    Available --open--> InUse --checkout--> Cleaning --finish cleaning--> Available

Checkout itself belongs to the payment reconciler because it writes the
payment record and the KTV order before releasing the room.
"""

from datetime import datetime

from pos_api.models import KTVRoom, KTVSession, OrderItem
from pos_api.repositories import KTVRoomRepository
from pos_shared.config.constants import AuditAction, KTVRoomStatus, Limits, MenuTag
from pos_shared.config.logging import ktv_logger as logger, mask_guest_name
from pos_shared.utils.exceptions import (
    RoomNotAvailableError,
    SessionNotActiveError,
    ValidationError,
)

from .base_service import DomainService
from .billing_service import BillingService, KTVBill
from .menu_service import MenuService


def merge_session_item(items: list[OrderItem], new_item: OrderItem) -> list[OrderItem]:
    """Add a line to session items, bumping the quantity if the item is already there."""
    merged: list[OrderItem] = []
    found = False
    for item in items:
        if not found and item.reference_id == new_item.reference_id:
            quantity = item.quantity + new_item.quantity
            if quantity > Limits.MAX_QUANTITY:
                raise ValidationError(
                    f"Quantity cannot exceed {Limits.MAX_QUANTITY}",
                    reference_id=item.reference_id,
                    value=quantity,
                )
            merged.append(item.model_copy(update={"quantity": quantity}))
            found = True
        else:
            merged.append(item)
    if not found:
        merged.append(new_item)
    return merged


class KTVService(DomainService):
    """Domain service for KTV rooms and sessions."""

    def __init__(self, store, **collaborators):
        super().__init__(store, **collaborators)
        self._rooms = KTVRoomRepository(store)
        self._menu = MenuService(store, **collaborators)
        self._billing = BillingService(self.settings)

    def list_rooms(self, status: KTVRoomStatus | None = None) -> list[KTVRoom]:
        if status is not None:
            return self._rooms.find_by_status(status)
        return self._rooms.find_all()

    def get_room(self, room_id: str) -> KTVRoom:
        return self._rooms.get(room_id)

    def add_room(self, room: KTVRoom) -> KTVRoom:
        return self._rooms.add(room)

    def open_session(self, room_id: str, guest_name: str, now: datetime | None = None) -> KTVRoom:
        """
        Start a session in an Available room.

        Raises:
            RoomNotAvailableError: room is InUse, Cleaning or Maintenance
        """
        room = self._rooms.get(room_id)
        if room.status != KTVRoomStatus.AVAILABLE:
            raise RoomNotAvailableError(room.id, room.status, KTVRoomStatus.AVAILABLE)
        if not guest_name or not guest_name.strip():
            raise ValidationError("Guest name is required", room_id=room.id, field="guest_name")

        session = KTVSession(guest_name=guest_name.strip(), start_time=now or self.now())
        saved = self._rooms.save(
            room.model_copy(update={"status": KTVRoomStatus.IN_USE, "current_session": session})
        )

        logger.info("KTV session opened", room_id=saved.id, guest=mask_guest_name(session.guest_name))
        self.audit(AuditAction.KTV_OPENED, room_id=saved.id, start_time=session.start_time.isoformat())
        return saved

    def add_session_item(self, room_id: str, menu_item_id: str, quantity: int = 1) -> KTVRoom:
        """
        Add a KTV-servable menu item to the running session.

        Raises:
            SessionNotActiveError: room has no session
            ValidationError: the item is not on the KTV menu
        """
        room = self._rooms.get(room_id)
        session = room.current_session
        if not room.has_active_session or session is None:
            raise SessionNotActiveError(room.id)

        menu_item = self._menu.get_item(menu_item_id)
        if not menu_item.has_tag(MenuTag.KTV_SERVABLE):
            raise ValidationError(
                f"Menu item '{menu_item.name}' is not served in KTV rooms",
                menu_item_id=menu_item.id,
            )

        line = self._menu.snapshot(menu_item_id, quantity)
        updated_session = session.model_copy(update={"items": merge_session_item(session.items, line)})
        saved = self._rooms.save(room.model_copy(update={"current_session": updated_session}))

        logger.info(
            "KTV session item added",
            room_id=saved.id,
            menu_item_id=menu_item_id,
            quantity=quantity,
        )
        return saved

    def preview_bill(self, room_id: str, now: datetime | None = None) -> KTVBill:
        """Bill as it would be charged at ``now``. Does not write anything."""
        return self._billing.ktv_bill(self._rooms.get(room_id), now or self.now())

    def finish_cleaning(self, room_id: str) -> KTVRoom:
        """
        Release a cleaned room for the next guest.

        Raises:
            RoomNotAvailableError: room is not in Cleaning
        """
        room = self._rooms.get(room_id)
        if room.status != KTVRoomStatus.CLEANING:
            raise RoomNotAvailableError(room.id, room.status, KTVRoomStatus.CLEANING)

        saved = self._rooms.save(room.model_copy(update={"status": KTVRoomStatus.AVAILABLE}))
        logger.info("KTV room cleaned", room_id=saved.id)
        self.audit(AuditAction.KTV_CLEANED, room_id=saved.id)
        return saved
