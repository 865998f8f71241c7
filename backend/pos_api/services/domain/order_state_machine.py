"""
Order state machine.

Decides the next status for an (order, event) pair from
``ORDER_TRANSITIONS`` and derives the transitioned copy of the order.
Nothing here touches the store; services persist the result.
"""

from datetime import datetime

from pos_api.models import Order
from pos_shared.config.constants import (
    COMPLETES_ON_PAYMENT,
    ORDER_TRANSITIONS,
    get_allowed_events,
    OrderEvent,
    OrderStatus,
)
from pos_shared.utils.exceptions import InvalidTransitionError


def next_status(order: Order, event: OrderEvent) -> OrderStatus:
    """
    Status the order moves to on ``event``.

    Raises:
        InvalidTransitionError: the pair is not in the transition table, or
            ``complete`` is requested on a served order that is not paid
    """
    target = ORDER_TRANSITIONS.get((order.status, event))
    if target is None:
        raise InvalidTransitionError("Order", order.status, event, order_id=order.id)

    if event == OrderEvent.COMPLETE and order.status == OrderStatus.SERVED and not order.is_paid:
        raise InvalidTransitionError(
            "Order", order.status, event, order_id=order.id, reason="not paid"
        )

    if event == OrderEvent.PAY and order.source in COMPLETES_ON_PAYMENT:
        return OrderStatus.COMPLETED

    return target


def can_transition(order: Order, event: OrderEvent) -> bool:
    """Same decision as next_status, without raising."""
    if (order.status, event) not in ORDER_TRANSITIONS:
        return False
    if event == OrderEvent.PAY:
        return not order.is_paid
    if event == OrderEvent.COMPLETE and order.status == OrderStatus.SERVED:
        return order.is_paid
    return True


def allowed_events(order: Order) -> list[OrderEvent]:
    """Events the order accepts right now, in transition-table order."""
    return [event for event in get_allowed_events(order.status) if can_transition(order, event)]


def transition(order: Order, event: OrderEvent, now: datetime) -> Order:
    """Transitioned copy of ``order``, with the status timestamps set."""
    status = next_status(order, event)
    changes: dict = {"status": status}
    if status == OrderStatus.CANCELLED:
        changes["cancelled_at"] = now
    if status == OrderStatus.COMPLETED:
        changes["completed_at"] = now
    return order.model_copy(update=changes)
