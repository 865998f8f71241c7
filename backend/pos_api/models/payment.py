"""
Payment record document, written at KTV checkout before the session is cleared.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pos_shared.config.constants import PaymentMethod

from .base import Document


def session_checkout_ids(room_id: str, start_time: datetime) -> tuple[str, str]:
    """
    ``(payment_record_id, order_id)`` for checking out one KTV session.

    Both are derived from the room and the session start, so checking out
    the same session again addresses the same two records.
    """
    key = uuid.uuid5(uuid.NAMESPACE_URL, f"ktv-session:{room_id}:{start_time.isoformat()}").hex[:12].upper()
    return f"PAY-{key}", f"ORD-{key}"


class PaymentRecord(Document):
    """Durable record of a KTV session bill and how it was paid."""

    room_id: str
    guest_name: str
    payment_method: PaymentMethod
    chargeable_hours: int
    hourly_rate_cents: int
    room_fee_cents: int
    items_fee_cents: int
    service_charge_cents: int = 0
    total_cents: int
    start_time: datetime
    checked_out_at: datetime
    order_id: Optional[str] = None
