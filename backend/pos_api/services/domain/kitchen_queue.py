"""
Kitchen Queue Projector.

The kitchen display is a pure projection of the order set: PENDING and
COOKING orders, oldest first, each with its age and an overdue flag. It is
recomputed on every read; nothing is cached.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from pos_api.models import Order
from pos_api.repositories import OrderRepository
from pos_shared.config.constants import KITCHEN_VISIBLE_STATUSES, OrderStatus
from pos_shared.config.logging import kitchen_logger as logger

from .base_service import DomainService
from .session_clock import elapsed


@dataclass(frozen=True)
class KitchenTicket:
    order: Order
    age_minutes: int
    is_overdue: bool


@dataclass(frozen=True)
class KitchenQueue:
    generated_at: datetime
    pending: list[KitchenTicket] = field(default_factory=list)
    cooking: list[KitchenTicket] = field(default_factory=list)

    @property
    def overdue_count(self) -> int:
        return sum(1 for ticket in (*self.pending, *self.cooking) if ticket.is_overdue)


class KitchenQueueProjector:
    """Builds the two kitchen views from an arbitrary set of orders."""

    def __init__(self, overdue_minutes: int = 15):
        self.overdue_minutes = overdue_minutes

    def ticket(self, order: Order, now: datetime) -> KitchenTicket:
        age = int(elapsed(order.created_at, now).total_seconds() // 60)
        return KitchenTicket(order=order, age_minutes=age, is_overdue=age > self.overdue_minutes)

    def project(self, orders: Iterable[Order], now: datetime) -> KitchenQueue:
        visible = sorted(
            (order for order in orders if order.status in KITCHEN_VISIBLE_STATUSES),
            key=lambda order: (order.created_at, order.id),
        )
        return KitchenQueue(
            generated_at=now,
            pending=[self.ticket(o, now) for o in visible if o.status == OrderStatus.PENDING],
            cooking=[self.ticket(o, now) for o in visible if o.status == OrderStatus.COOKING],
        )


class KitchenService(DomainService):
    """Reads the kitchen queue from the store."""

    def __init__(self, store, **collaborators):
        super().__init__(store, **collaborators)
        self._orders = OrderRepository(store)
        self._projector = KitchenQueueProjector(self.settings.kitchen_overdue_minutes)

    def queue(self) -> KitchenQueue:
        queue = self._projector.project(self._orders.find_all(), self.now())
        if queue.overdue_count:
            logger.warning("Kitchen orders overdue", count=queue.overdue_count)
        return queue
