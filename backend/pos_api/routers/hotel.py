"""
Hotel router - /api/hotel/*
Room registry, occupancy and room-service orders.
"""

from fastapi import APIRouter, Depends, status

from pos_api.core.dependencies import get_hotel_service
from pos_api.services.domain import HotelService
from pos_shared.utils.schemas import (
    HotelRoomOutput,
    OrderOutput,
    RoomServiceOrderRequest,
    UpdateHotelRoomRequest,
)

router = APIRouter(prefix="/api/hotel", tags=["hotel"])


@router.get("/rooms", response_model=list[HotelRoomOutput])
def list_rooms(
    floor: int | None = None,
    service: HotelService = Depends(get_hotel_service),
) -> list[HotelRoomOutput]:
    return [HotelRoomOutput.from_room(room) for room in service.list_rooms(floor)]


@router.get("/rooms/{room_number}", response_model=HotelRoomOutput)
def get_room(room_number: str, service: HotelService = Depends(get_hotel_service)) -> HotelRoomOutput:
    return HotelRoomOutput.from_room(service.get_room(room_number))


@router.put("/rooms/{room_number}/status", response_model=HotelRoomOutput)
def set_room_status(
    room_number: str,
    body: UpdateHotelRoomRequest,
    service: HotelService = Depends(get_hotel_service),
) -> HotelRoomOutput:
    room = service.set_status(room_number, body.status, body.guest_name)
    return HotelRoomOutput.from_room(room)


@router.post(
    "/rooms/{room_number}/orders",
    response_model=OrderOutput,
    status_code=status.HTTP_201_CREATED,
)
def place_room_service_order(
    room_number: str,
    body: RoomServiceOrderRequest,
    service: HotelService = Depends(get_hotel_service),
) -> OrderOutput:
    """Room-service order. Accepted whether the room is vacant or occupied."""
    order = service.place_room_service_order(
        room_number,
        [item.as_line() for item in body.items],
        notes=body.notes,
    )
    return OrderOutput.from_order(order)
