"""
Billing Domain Service.

Flat order totals and KTV session bills. The calculations are pure
functions; ``BillingService`` only binds them to the configured policy
(service-charge rate, KTV minimum hours, KTV service-charge flag).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from pos_api.models import KTVRoom, OrderItem
from pos_shared.config.logging import billing_logger
from pos_shared.config.settings import Settings, get_settings
from pos_shared.utils.exceptions import SessionNotActiveError
from pos_shared.utils.money import apply_rate, surcharge

from .session_clock import chargeable_hours, elapsed


@dataclass(frozen=True)
class KTVBill:
    """Itemised bill for a KTV session at a given instant."""

    room_id: str
    guest_name: str
    start_time: datetime
    billed_at: datetime
    chargeable_hours: int
    hourly_rate_cents: int
    room_fee_cents: int
    items_fee_cents: int
    service_charge_cents: int
    total_cents: int

    @property
    def duration(self) -> timedelta:
        return elapsed(self.start_time, self.billed_at)

    @property
    def subtotal_cents(self) -> int:
        return self.room_fee_cents + self.items_fee_cents


def items_subtotal(items: Iterable[OrderItem]) -> int:
    return sum(item.subtotal_cents for item in items)


def calculate_order_total(items: Iterable[OrderItem], service_charge_rate: Decimal) -> int:
    """``Σ(price × qty) × (1 + rate)``, rounded half-up to the cent."""
    return apply_rate(items_subtotal(items), service_charge_rate)


def bill_ktv_session(
    room: KTVRoom,
    now: datetime,
    *,
    minimum_hours: int = 1,
    service_charge_rate: Decimal | None = None,
) -> KTVBill:
    """
    Bill the room's active session as of ``now``.

    room_fee = chargeable_hours × hourly_rate; items_fee = Σ(price × qty).
    A service charge is added only when ``service_charge_rate`` is given.

    Raises:
        SessionNotActiveError: the room has no active session
    """
    session = room.current_session
    if not room.has_active_session or session is None:
        raise SessionNotActiveError(room.id)

    hours = chargeable_hours(session.start_time, now, minimum_hours)
    room_fee = hours * room.hourly_rate_cents
    items_fee = session.items_fee_cents
    service_charge = surcharge(room_fee + items_fee, service_charge_rate) if service_charge_rate else 0

    return KTVBill(
        room_id=room.id,
        guest_name=session.guest_name,
        start_time=session.start_time,
        billed_at=now,
        chargeable_hours=hours,
        hourly_rate_cents=room.hourly_rate_cents,
        room_fee_cents=room_fee,
        items_fee_cents=items_fee,
        service_charge_cents=service_charge,
        total_cents=room_fee + items_fee + service_charge,
    )


class BillingService:
    """Billing calculations bound to the store's configured policy."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()

    @property
    def service_charge_rate(self) -> Decimal:
        return self._settings.service_charge_rate

    @property
    def ktv_service_charge_rate(self) -> Decimal:
        """Rate applied to KTV bills: zero unless enabled in settings."""
        if self._settings.ktv_apply_service_charge:
            return self._settings.service_charge_rate
        return Decimal("0")

    def order_total(self, items: Iterable[OrderItem], service_charge_rate: Decimal | None = None) -> int:
        rate = self.service_charge_rate if service_charge_rate is None else service_charge_rate
        return calculate_order_total(items, rate)

    def ktv_bill(self, room: KTVRoom, now: datetime) -> KTVBill:
        bill = bill_ktv_session(
            room,
            now,
            minimum_hours=self._settings.ktv_minimum_hours,
            service_charge_rate=self.ktv_service_charge_rate or None,
        )
        billing_logger.debug(
            "KTV bill computed",
            room_id=bill.room_id,
            hours=bill.chargeable_hours,
            total_cents=bill.total_cents,
        )
        return bill
