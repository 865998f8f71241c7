"""
KTV documents: KTVRoom, KTVSession.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pos_shared.config.constants import KTVRoomStatus, KTVRoomType, Limits

from .base import Document
from .order import OrderItem


class KTVSession(BaseModel):
    """
    Occupancy of a KTV room by a guest, from open to checkout.
    Items are drinks/food accrued during the session, snapshotted like order lines.
    """

    model_config = ConfigDict(frozen=True)

    guest_name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    start_time: datetime
    items: list[OrderItem] = Field(default_factory=list)

    @property
    def items_fee_cents(self) -> int:
        return sum(item.subtotal_cents for item in self.items)


class KTVRoom(Document):
    """
    A KTV room.

    Invariant: ``current_session`` is set if and only if ``status`` is InUse.
    """

    name: str
    room_type: KTVRoomType = KTVRoomType.MEDIUM
    hourly_rate_cents: int = Field(ge=0)
    status: KTVRoomStatus = KTVRoomStatus.AVAILABLE
    current_session: Optional[KTVSession] = None

    @property
    def has_active_session(self) -> bool:
        return self.status == KTVRoomStatus.IN_USE and self.current_session is not None

    def __repr__(self) -> str:
        return f"<KTVRoom(id={self.id}, status={self.status.value})>"
