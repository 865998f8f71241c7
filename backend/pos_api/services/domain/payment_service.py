"""
Payment Reconciler.

Records payment against orders and decides the status that follows from the
order's source; performs KTV checkout and retail quick sales.

Writes are confirmed before anything else happens: the receipt is printed
and the audit entry emitted only after the store accepted the write, and
KTV checkout persists the payment record and the KTV order before the room
is released.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from pos_api.models import KTVRoom, Order, OrderItem, PaymentRecord, session_checkout_ids
from pos_api.repositories import KTVRoomRepository, OrderRepository, PaymentRecordRepository
from pos_shared.config.constants import (
    AuditAction,
    KTVRoomStatus,
    OrderEvent,
    OrderSource,
    OrderStatus,
    PaymentMethod,
    TableIdentifier,
)
from pos_shared.config.logging import billing_logger as logger, mask_guest_name
from pos_shared.utils.exceptions import (
    AlreadyPaidError,
    EmptyOrderError,
    NotReadyForPaymentError,
    SessionNotActiveError,
)

from .base_service import DomainService
from .billing_service import BillingService, KTVBill
from .order_service import OrderService
from .order_state_machine import transition


@dataclass(frozen=True)
class CheckoutResult:
    """Everything KTV checkout wrote, in write order."""

    bill: KTVBill
    payment_record: PaymentRecord
    order: Order
    room: KTVRoom


def ktv_room_line(room: KTVRoom, bill: KTVBill) -> OrderItem:
    """Order line representing the room time of a KTV bill."""
    return OrderItem(
        reference_id=f"ktv-room:{room.id}",
        name=f"KTV {room.name} ({bill.chargeable_hours}h)",
        unit_price_cents=room.hourly_rate_cents,
        quantity=bill.chargeable_hours,
    )


def _write_once(repository, document):
    """Insert ``document``, or overwrite the stored copy with the same id."""
    current = repository.find_by_id(document.id)
    if current is None:
        return repository.add(document)
    return repository.save(document.model_copy(update={"version": current.version}))


class PaymentReconciler(DomainService):
    """Domain service for payment, close-out and checkout."""

    def __init__(self, store, **collaborators):
        super().__init__(store, **collaborators)
        self._orders = OrderRepository(store)
        self._rooms = KTVRoomRepository(store)
        self._payments = PaymentRecordRepository(store)
        self._billing = BillingService(self.settings)
        self._order_service = OrderService(store, **collaborators)

    # =========================================================================
    # Orders
    # =========================================================================

    def pay(self, order_id: str, method: PaymentMethod) -> Order:
        """
        Record the payment method on a served order.

        TAKEOUT orders complete on payment; every other source stays SERVED
        until ``complete``. The receipt is printed once the write is confirmed.

        Raises:
            AlreadyPaidError: a payment method is already recorded
            NotReadyForPaymentError: the order is not SERVED
        """
        order = self._orders.get(order_id)
        if order.is_paid:
            raise AlreadyPaidError(order.id, order.payment_method, attempted=method.value)
        if order.status != OrderStatus.SERVED:
            raise NotReadyForPaymentError(order.id, order.status)

        now = self.now()
        paid = transition(order, OrderEvent.PAY, now).model_copy(
            update={"payment_method": method, "paid_at": now}
        )
        saved = self._orders.save(paid)

        logger.info(
            "Order paid",
            order_id=saved.id,
            method=method.value,
            total_cents=saved.total_cents,
            status=saved.status.value,
        )
        self.audit(
            AuditAction.ORDER_PAID,
            order_id=saved.id,
            method=method.value,
            total_cents=saved.total_cents,
            status=saved.status.value,
        )
        self.print_receipt(saved)
        return saved

    def complete(self, order_id: str) -> Order:
        """
        Close a served and paid order.

        Raises:
            InvalidTransitionError: the order is not served-and-paid
        """
        order = self._orders.get(order_id)
        saved = self._orders.save(transition(order, OrderEvent.COMPLETE, self.now()))

        logger.info("Order completed", order_id=saved.id, total_cents=saved.total_cents)
        self.audit(
            AuditAction.ORDER_COMPLETED,
            order_id=saved.id,
            method=saved.payment_method.value if saved.payment_method else None,
            total_cents=saved.total_cents,
        )
        return saved

    # =========================================================================
    # KTV checkout
    # =========================================================================

    def preview_checkout(self, room_id: str, now: datetime | None = None) -> KTVBill:
        return self._billing.ktv_bill(self._rooms.get(room_id), now or self.now())

    def confirm_checkout(
        self,
        room_id: str,
        method: PaymentMethod,
        now: datetime | None = None,
    ) -> CheckoutResult:
        """
        Bill and close a KTV session.

        Order of writes: payment record, KTV order, then the room
        (InUse -> Cleaning, session cleared). If an earlier write fails the
        room and its session are left untouched.

        The record and order ids are derived from the session, so retrying
        after a failed room write rewrites the same pair instead of adding a
        second one. A retry keeps the checkout time of the first attempt and
        bills the session as it stands now.

        Raises:
            SessionNotActiveError: the room has no active session
        """
        room = self._rooms.get(room_id)
        if not room.has_active_session or room.current_session is None:
            raise SessionNotActiveError(room.id)

        session = room.current_session
        record_id, order_id = session_checkout_ids(room.id, session.start_time)
        previous = self._payments.find_by_id(record_id)
        if previous is not None:
            now = previous.checked_out_at
            logger.warning("Resuming interrupted KTV checkout", room_id=room.id, payment_record_id=record_id)
        else:
            now = now or self.now()

        bill = self._billing.ktv_bill(room, now)
        rate = self._billing.ktv_service_charge_rate

        record = _write_once(
            self._payments,
            PaymentRecord(
                id=record_id,
                room_id=room.id,
                guest_name=session.guest_name,
                payment_method=method,
                chargeable_hours=bill.chargeable_hours,
                hourly_rate_cents=bill.hourly_rate_cents,
                room_fee_cents=bill.room_fee_cents,
                items_fee_cents=bill.items_fee_cents,
                service_charge_cents=bill.service_charge_cents,
                total_cents=bill.total_cents,
                start_time=session.start_time,
                checked_out_at=now,
                order_id=order_id,
            ),
        )

        order = _write_once(
            self._orders,
            Order(
                id=order_id,
                table_identifier=room.id,
                source=OrderSource.KTV,
                items=[ktv_room_line(room, bill), *session.items],
                status=OrderStatus.COMPLETED,
                service_charge_rate=rate,
                total_cents=bill.total_cents,
                payment_method=method,
                notes=f"KTV session of {session.guest_name}",
                created_at=session.start_time,
                paid_at=now,
                completed_at=now,
            ),
        )

        released = self._rooms.save(
            room.model_copy(update={"status": KTVRoomStatus.CLEANING, "current_session": None})
        )

        logger.info(
            "KTV checkout confirmed",
            room_id=room.id,
            guest=mask_guest_name(session.guest_name),
            hours=bill.chargeable_hours,
            total_cents=bill.total_cents,
            method=method.value,
        )
        self.audit(
            AuditAction.KTV_CHECKOUT,
            room_id=room.id,
            payment_record_id=record.id,
            order_id=order.id,
            total_cents=bill.total_cents,
            method=method.value,
        )
        self.print_receipt(order)
        return CheckoutResult(bill=bill, payment_record=record, order=order, room=released)

    # =========================================================================
    # Retail
    # =========================================================================

    def retail_sale(self, items: Sequence[OrderItem], method: PaymentMethod) -> Order:
        """
        Quick supermarket sale: one SUPERMARKET order on RETAIL, driven
        through accept, serve, pay and complete with no service charge.

        Raises:
            EmptyOrderError: no items
        """
        if not items:
            raise EmptyOrderError(table_identifier=TableIdentifier.RETAIL)

        order = self._order_service.create_order(
            TableIdentifier.RETAIL,
            OrderSource.SUPERMARKET,
            items,
            service_charge_rate=Decimal("0"),
        )
        self._order_service.accept(order.id)
        self._order_service.serve(order.id)
        self.pay(order.id, method)
        return self.complete(order.id)
