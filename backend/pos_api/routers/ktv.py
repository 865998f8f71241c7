"""
KTV router - /api/ktv/*
Room sessions, bill preview, checkout and cleaning.
"""

from fastapi import APIRouter, Depends, Header

from pos_api.core.concurrency import check_if_match
from pos_api.core.dependencies import get_ktv_service, get_menu_service, get_payment_reconciler
from pos_api.services.domain import KTVService, MenuService, PaymentReconciler
from pos_shared.config.constants import Collections, KTVRoomStatus
from pos_shared.utils.schemas import (
    AddSessionItemRequest,
    CheckoutOutput,
    CheckoutRequest,
    KTVBillOutput,
    KTVRoomOutput,
    MenuItemOutput,
    OpenSessionRequest,
)

router = APIRouter(prefix="/api/ktv", tags=["ktv"])


@router.get("/rooms", response_model=list[KTVRoomOutput])
def list_rooms(
    status: KTVRoomStatus | None = None,
    service: KTVService = Depends(get_ktv_service),
) -> list[KTVRoomOutput]:
    return [KTVRoomOutput.from_room(room) for room in service.list_rooms(status)]


@router.get("/menu", response_model=list[MenuItemOutput])
def ktv_menu(menu: MenuService = Depends(get_menu_service)) -> list[MenuItemOutput]:
    """Items that can be served in KTV rooms."""
    return [MenuItemOutput.from_item(item) for item in menu.ktv_menu()]


@router.get("/rooms/{room_id}", response_model=KTVRoomOutput)
def get_room(room_id: str, service: KTVService = Depends(get_ktv_service)) -> KTVRoomOutput:
    return KTVRoomOutput.from_room(service.get_room(room_id))


@router.post("/rooms/{room_id}/open", response_model=KTVRoomOutput)
def open_session(
    room_id: str,
    body: OpenSessionRequest,
    if_match: str | None = Header(default=None),
    service: KTVService = Depends(get_ktv_service),
) -> KTVRoomOutput:
    check_if_match(service.get_room(room_id), Collections.KTV_ROOMS, if_match)
    return KTVRoomOutput.from_room(service.open_session(room_id, body.guest_name))


@router.post("/rooms/{room_id}/items", response_model=KTVRoomOutput)
def add_session_item(
    room_id: str,
    body: AddSessionItemRequest,
    if_match: str | None = Header(default=None),
    service: KTVService = Depends(get_ktv_service),
) -> KTVRoomOutput:
    check_if_match(service.get_room(room_id), Collections.KTV_ROOMS, if_match)
    room = service.add_session_item(room_id, body.menu_item_id, body.quantity)
    return KTVRoomOutput.from_room(room)


@router.get("/rooms/{room_id}/bill", response_model=KTVBillOutput)
def preview_bill(room_id: str, service: KTVService = Depends(get_ktv_service)) -> KTVBillOutput:
    """Bill as of now. Nothing is written."""
    return KTVBillOutput.from_bill(service.preview_bill(room_id))


@router.post("/rooms/{room_id}/checkout", response_model=CheckoutOutput)
def checkout(
    room_id: str,
    body: CheckoutRequest,
    if_match: str | None = Header(default=None),
    service: KTVService = Depends(get_ktv_service),
    payments: PaymentReconciler = Depends(get_payment_reconciler),
) -> CheckoutOutput:
    """
    Charge the session and move the room to Cleaning.

    The payment record and the KTV order are written before the room is released.
    """
    check_if_match(service.get_room(room_id), Collections.KTV_ROOMS, if_match)
    return CheckoutOutput.from_result(payments.confirm_checkout(room_id, body.payment_method))


@router.post("/rooms/{room_id}/finish-cleaning", response_model=KTVRoomOutput)
def finish_cleaning(
    room_id: str,
    if_match: str | None = Header(default=None),
    service: KTVService = Depends(get_ktv_service),
) -> KTVRoomOutput:
    check_if_match(service.get_room(room_id), Collections.KTV_ROOMS, if_match)
    return KTVRoomOutput.from_room(service.finish_cleaning(room_id))
