"""
Order documents: Order, OrderItem.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pos_shared.config.constants import (
    Limits,
    OrderSource,
    OrderStatus,
    PaymentMethod,
)
from pos_shared.utils.money import apply_rate

from .base import Document


def new_order_id() -> str:
    """Generate a unique order id."""
    return f"ORD-{uuid.uuid4().hex[:12].upper()}"


class OrderItem(BaseModel):
    """
    A line on an order.
    Name and unit price are snapshots taken when the line was added, so later
    menu edits never change a placed order.
    """

    model_config = ConfigDict(frozen=True)

    reference_id: str
    name: str = Field(max_length=Limits.MAX_NAME_LENGTH)
    unit_price_cents: int = Field(ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    quantity: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)

    @property
    def subtotal_cents(self) -> int:
        return self.unit_price_cents * self.quantity


class Order(Document):
    """
    An order from any source.

    ``total_cents`` is derived from the items and the service-charge rate
    frozen at creation; it is recomputed by the service whenever the items
    change and never set directly by callers.
    """

    table_identifier: str
    source: OrderSource
    items: list[OrderItem]
    status: OrderStatus = OrderStatus.PENDING
    service_charge_rate: Decimal = Decimal("0")
    total_cents: int = 0
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)
    created_at: datetime
    paid_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @property
    def subtotal_cents(self) -> int:
        return sum(item.subtotal_cents for item in self.items)

    @property
    def service_charge_cents(self) -> int:
        return self.total_cents - self.subtotal_cents

    @property
    def is_paid(self) -> bool:
        return self.payment_method is not None

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def expected_total_cents(self) -> int:
        """Total implied by the items and the frozen service-charge rate."""
        return apply_rate(self.subtotal_cents, self.service_charge_rate)

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, source={self.source.value}, status={self.status.value})>"
