"""
Pydantic request/response schemas for the HTTP surface.

Output schemas are built from domain objects with their ``from_*``
constructors so routers stay free of mapping code.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from pos_shared.config.constants import (
    HotelRoomStatus,
    KTVRoomStatus,
    KTVRoomType,
    Limits,
    MenuTag,
    OrderSource,
    OrderStatus,
    PaymentMethod,
)

if TYPE_CHECKING:
    from pos_api.models import HotelRoom, KTVRoom, MenuItem, Order, OrderItem
    from pos_api.services.domain import (
        CheckoutResult,
        KitchenQueue,
        KitchenTicket,
        KTVBill,
        RevenueSummary,
        ShiftReport,
    )


# =============================================================================
# Order Schemas
# =============================================================================


class OrderItemInput(BaseModel):
    """A menu item and quantity to put on an order."""

    menu_item_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)

    def as_line(self) -> tuple[str, int]:
        return self.menu_item_id, self.quantity


class CreateOrderRequest(BaseModel):
    table_identifier: str = Field(min_length=1, max_length=64)
    source: OrderSource
    items: list[OrderItemInput]
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class AddItemsRequest(BaseModel):
    items: list[OrderItemInput] = Field(min_length=1)


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class PayRequest(BaseModel):
    payment_method: PaymentMethod


class OrderItemOutput(BaseModel):
    reference_id: str
    name: str
    unit_price_cents: int
    quantity: int
    subtotal_cents: int

    @classmethod
    def from_item(cls, item: OrderItem) -> OrderItemOutput:
        return cls(
            reference_id=item.reference_id,
            name=item.name,
            unit_price_cents=item.unit_price_cents,
            quantity=item.quantity,
            subtotal_cents=item.subtotal_cents,
        )


class OrderOutput(BaseModel):
    """Order as returned by the API, with derived amounts and the events it accepts."""

    id: str
    version: int
    table_identifier: str
    source: OrderSource
    status: OrderStatus
    items: list[OrderItemOutput]
    service_charge_rate: Decimal
    subtotal_cents: int
    service_charge_cents: int
    total_cents: int
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    created_at: datetime
    paid_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    allowed_events: list[str] = []

    @classmethod
    def from_order(cls, order: Order) -> OrderOutput:
        from pos_api.services.domain import allowed_events

        return cls(
            id=order.id,
            version=order.version,
            table_identifier=order.table_identifier,
            source=order.source,
            status=order.status,
            items=[OrderItemOutput.from_item(item) for item in order.items],
            service_charge_rate=order.service_charge_rate,
            subtotal_cents=order.subtotal_cents,
            service_charge_cents=order.service_charge_cents,
            total_cents=order.total_cents,
            payment_method=order.payment_method,
            notes=order.notes,
            created_at=order.created_at,
            paid_at=order.paid_at,
            completed_at=order.completed_at,
            cancelled_at=order.cancelled_at,
            allowed_events=[event.value for event in allowed_events(order)],
        )


class RetailSaleRequest(BaseModel):
    items: list[OrderItemInput]
    payment_method: PaymentMethod


# =============================================================================
# Kitchen Schemas
# =============================================================================


class KitchenTicketOutput(BaseModel):
    order: OrderOutput
    age_minutes: int
    is_overdue: bool

    @classmethod
    def from_ticket(cls, ticket: KitchenTicket) -> KitchenTicketOutput:
        return cls(
            order=OrderOutput.from_order(ticket.order),
            age_minutes=ticket.age_minutes,
            is_overdue=ticket.is_overdue,
        )


class KitchenQueueOutput(BaseModel):
    generated_at: datetime
    pending: list[KitchenTicketOutput]
    cooking: list[KitchenTicketOutput]
    overdue_count: int

    @classmethod
    def from_queue(cls, queue: KitchenQueue) -> KitchenQueueOutput:
        return cls(
            generated_at=queue.generated_at,
            pending=[KitchenTicketOutput.from_ticket(t) for t in queue.pending],
            cooking=[KitchenTicketOutput.from_ticket(t) for t in queue.cooking],
            overdue_count=queue.overdue_count,
        )


# =============================================================================
# KTV Schemas
# =============================================================================


class OpenSessionRequest(BaseModel):
    guest_name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)


class AddSessionItemRequest(BaseModel):
    menu_item_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)


class CheckoutRequest(BaseModel):
    payment_method: PaymentMethod


class KTVSessionOutput(BaseModel):
    guest_name: str
    start_time: datetime
    items: list[OrderItemOutput]
    items_fee_cents: int


class KTVRoomOutput(BaseModel):
    id: str
    version: int
    name: str
    room_type: KTVRoomType
    hourly_rate_cents: int
    status: KTVRoomStatus
    session: KTVSessionOutput | None = None

    @classmethod
    def from_room(cls, room: KTVRoom) -> KTVRoomOutput:
        session = room.current_session
        return cls(
            id=room.id,
            version=room.version,
            name=room.name,
            room_type=room.room_type,
            hourly_rate_cents=room.hourly_rate_cents,
            status=room.status,
            session=KTVSessionOutput(
                guest_name=session.guest_name,
                start_time=session.start_time,
                items=[OrderItemOutput.from_item(item) for item in session.items],
                items_fee_cents=session.items_fee_cents,
            )
            if session is not None
            else None,
        )


class KTVBillOutput(BaseModel):
    """KTV bill preview or the bill charged at checkout."""

    room_id: str
    guest_name: str
    start_time: datetime
    billed_at: datetime
    duration_minutes: int
    chargeable_hours: int
    hourly_rate_cents: int
    room_fee_cents: int
    items_fee_cents: int
    service_charge_cents: int
    total_cents: int

    @classmethod
    def from_bill(cls, bill: KTVBill) -> KTVBillOutput:
        return cls(
            room_id=bill.room_id,
            guest_name=bill.guest_name,
            start_time=bill.start_time,
            billed_at=bill.billed_at,
            duration_minutes=int(bill.duration.total_seconds() // 60),
            chargeable_hours=bill.chargeable_hours,
            hourly_rate_cents=bill.hourly_rate_cents,
            room_fee_cents=bill.room_fee_cents,
            items_fee_cents=bill.items_fee_cents,
            service_charge_cents=bill.service_charge_cents,
            total_cents=bill.total_cents,
        )


class CheckoutOutput(BaseModel):
    bill: KTVBillOutput
    payment_record_id: str
    order_id: str
    room: KTVRoomOutput

    @classmethod
    def from_result(cls, result: CheckoutResult) -> CheckoutOutput:
        return cls(
            bill=KTVBillOutput.from_bill(result.bill),
            payment_record_id=result.payment_record.id,
            order_id=result.order.id,
            room=KTVRoomOutput.from_room(result.room),
        )


# =============================================================================
# Hotel Schemas
# =============================================================================


class HotelRoomOutput(BaseModel):
    room_number: str
    floor: int
    status: HotelRoomStatus
    guest_name: str | None = None

    @classmethod
    def from_room(cls, room: HotelRoom) -> HotelRoomOutput:
        return cls(
            room_number=room.room_number,
            floor=room.floor,
            status=room.status,
            guest_name=room.guest_name,
        )


class UpdateHotelRoomRequest(BaseModel):
    status: HotelRoomStatus
    guest_name: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)


class RoomServiceOrderRequest(BaseModel):
    items: list[OrderItemInput]
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


# =============================================================================
# Menu Schemas
# =============================================================================


class MenuItemOutput(BaseModel):
    id: str
    name: str
    price_cents: int
    tags: list[MenuTag]
    available: bool
    description: str | None = None

    @classmethod
    def from_item(cls, item: MenuItem) -> MenuItemOutput:
        return cls(
            id=item.id,
            name=item.name,
            price_cents=item.price_cents,
            tags=sorted(item.tags, key=lambda tag: tag.value),
            available=item.available,
            description=item.description,
        )


class UpdateMenuAvailabilityRequest(BaseModel):
    available: bool


# =============================================================================
# Finance Schemas
# =============================================================================


class RevenueSummaryOutput(BaseModel):
    day: date | None = None
    total_cents: int
    order_count: int
    by_method: dict[str, int]
    by_source: dict[str, int]
    by_day: dict[str, int]

    @classmethod
    def from_summary(cls, summary: RevenueSummary, day: date | None = None) -> RevenueSummaryOutput:
        return cls(
            day=day,
            total_cents=summary.total_cents,
            order_count=summary.order_count,
            by_method=summary.by_method,
            by_source=summary.by_source,
            by_day=summary.by_day,
        )


class ShiftReportOutput(BaseModel):
    day: date
    total_cents: int
    order_count: int
    by_method: dict[str, int]
    order_ids: list[str]

    @classmethod
    def from_report(cls, report: ShiftReport) -> ShiftReportOutput:
        return cls(
            day=report.day,
            total_cents=report.total_cents,
            order_count=report.order_count,
            by_method=report.by_method,
            order_ids=report.order_ids,
        )
