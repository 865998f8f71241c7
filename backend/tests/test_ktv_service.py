"""
Tests for KTV room sessions: open, add items, preview and cleaning.
"""

import pytest

from pos_api.models import OrderItem
from pos_api.services.domain import KTVService, PaymentReconciler, merge_session_item
from pos_shared.config.constants import AuditAction, KTVRoomStatus, PaymentMethod
from pos_shared.utils.exceptions import (
    NotFoundError,
    RoomNotAvailableError,
    SessionNotActiveError,
    ValidationError,
)


@pytest.fixture
def ktv(store, collaborators):
    return KTVService(store, **collaborators)


def _line(reference_id: str, quantity: int) -> OrderItem:
    return OrderItem(reference_id=reference_id, name=reference_id, unit_price_cents=100, quantity=quantity)


class TestOpenSession:
    def test_opens_available_room(self, ktv, ktv_room, clock, audit_sink):
        room = ktv.open_session("VIP01", "  Li Na ")

        assert room.status == KTVRoomStatus.IN_USE
        assert room.current_session.guest_name == "Li Na"
        assert room.current_session.start_time == clock.current
        assert room.current_session.items == []
        assert room.version == ktv_room.version + 1
        assert audit_sink.actions == [AuditAction.KTV_OPENED]

    def test_room_in_use_rejected(self, ktv, ktv_room):
        ktv.open_session("VIP01", "Li Na")

        with pytest.raises(RoomNotAvailableError):
            ktv.open_session("VIP01", "Someone Else")

        assert ktv.get_room("VIP01").current_session.guest_name == "Li Na"

    def test_blank_guest_rejected(self, ktv, ktv_room):
        with pytest.raises(ValidationError):
            ktv.open_session("VIP01", "   ")

        assert ktv.get_room("VIP01").status == KTVRoomStatus.AVAILABLE

    def test_unknown_room(self, ktv):
        with pytest.raises(NotFoundError):
            ktv.open_session("NOPE", "Li Na")


class TestSessionItems:
    def test_items_merge_by_menu_item(self, ktv, ktv_room, menu):
        ktv.open_session("VIP01", "Li Na")
        ktv.add_session_item("VIP01", "drink-beer", 1)

        room = ktv.add_session_item("VIP01", "drink-beer", 2)

        (line,) = room.current_session.items
        assert line.reference_id == "drink-beer"
        assert line.quantity == 3
        assert room.current_session.items_fee_cents == 15_000

    def test_non_ktv_item_rejected(self, ktv, ktv_room, menu):
        ktv.open_session("VIP01", "Li Na")

        with pytest.raises(ValidationError):
            ktv.add_session_item("VIP01", "dish-rice", 1)

        assert ktv.get_room("VIP01").current_session.items == []

    def test_requires_active_session(self, ktv, ktv_room, menu):
        with pytest.raises(SessionNotActiveError):
            ktv.add_session_item("VIP01", "drink-beer", 1)

    def test_menu_price_change_does_not_touch_session(self, store, collaborators, ktv, ktv_room, menu):
        from pos_api.repositories import get_menu_item_repository

        ktv.open_session("VIP01", "Li Na")
        ktv.add_session_item("VIP01", "drink-beer", 1)
        repo = get_menu_item_repository(store)
        repo.save(repo.get("drink-beer").model_copy(update={"price_cents": 9_900}))

        assert ktv.get_room("VIP01").current_session.items[0].unit_price_cents == 5_000


class TestMergeSessionItem:
    def test_appends_new_reference(self):
        merged = merge_session_item([_line("a", 1)], _line("b", 2))

        assert [(i.reference_id, i.quantity) for i in merged] == [("a", 1), ("b", 2)]

    def test_quantity_cap(self):
        with pytest.raises(ValidationError):
            merge_session_item([_line("a", 999)], _line("a", 1))


class TestPreviewBill:
    def test_preview_does_not_write(self, ktv, ktv_room, menu, clock):
        opened = ktv.open_session("VIP01", "Li Na")
        clock.advance(minutes=125)

        bill = ktv.preview_bill("VIP01")

        assert bill.chargeable_hours == 3
        assert bill.room_fee_cents == 26_400
        assert ktv.get_room("VIP01").version == opened.version

    def test_preview_without_session(self, ktv, ktv_room):
        with pytest.raises(SessionNotActiveError):
            ktv.preview_bill("VIP01")


class TestFinishCleaning:
    def test_cleaning_to_available(self, store, collaborators, ktv, ktv_room, clock, audit_sink):
        ktv.open_session("VIP01", "Li Na")
        clock.advance(minutes=45)
        PaymentReconciler(store, **collaborators).confirm_checkout("VIP01", PaymentMethod.CASH)

        room = ktv.finish_cleaning("VIP01")

        assert room.status == KTVRoomStatus.AVAILABLE
        assert room.current_session is None
        assert audit_sink.actions[-1] == AuditAction.KTV_CLEANED
        assert ktv.open_session("VIP01", "Next Guest").status == KTVRoomStatus.IN_USE

    @pytest.mark.parametrize("status", [KTVRoomStatus.AVAILABLE, KTVRoomStatus.MAINTENANCE])
    def test_only_from_cleaning(self, ktv, store, ktv_room, status):
        from pos_api.repositories import get_ktv_room_repository

        repo = get_ktv_room_repository(store)
        repo.save(repo.get("VIP01").model_copy(update={"status": status}))

        with pytest.raises(RoomNotAvailableError):
            ktv.finish_cleaning("VIP01")


class TestListRooms:
    def test_filter_by_status(self, ktv, ktv_room):
        from pos_api.models import KTVRoom

        ktv.add_room(KTVRoom(id="K02", name="K 02", hourly_rate_cents=5_000))
        ktv.open_session("K02", "Guest")

        assert [r.id for r in ktv.list_rooms(KTVRoomStatus.AVAILABLE)] == ["VIP01"]
        assert [r.id for r in ktv.list_rooms(KTVRoomStatus.IN_USE)] == ["K02"]
        assert len(ktv.list_rooms()) == 2
