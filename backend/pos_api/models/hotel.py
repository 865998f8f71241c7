"""
Hotel room document.
"""

from __future__ import annotations

from typing import Optional

from pos_shared.config.constants import HotelRoomStatus

from .base import Document


class HotelRoom(Document):
    """
    A hotel room. The id is the room number (e.g. "8201").

    Occupancy is tracked separately from dining: room-service orders can be
    placed against vacant or occupied rooms alike.
    """

    floor: int
    status: HotelRoomStatus = HotelRoomStatus.VACANT
    guest_name: Optional[str] = None

    @property
    def room_number(self) -> str:
        return self.id
