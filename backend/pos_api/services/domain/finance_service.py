"""
Finance Domain Service.

Revenue figures are re-derived from the order set on every read. Cancelled
orders never count as revenue; unpaid orders are grouped under ``UNKNOWN``
in the by-method breakdown.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timezone, tzinfo

from pos_api.models import Order
from pos_api.repositories import OrderRepository
from pos_shared.config.constants import OrderStatus

from .base_service import DomainService

UNKNOWN_METHOD = "UNKNOWN"


@dataclass(frozen=True)
class RevenueSummary:
    total_cents: int = 0
    order_count: int = 0
    by_method: dict[str, int] = field(default_factory=dict)
    by_source: dict[str, int] = field(default_factory=dict)
    by_day: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ShiftReport:
    """End-of-day handover: completed orders of one day, by payment method."""

    day: date
    total_cents: int
    order_count: int
    by_method: dict[str, int]
    order_ids: list[str]


def business_day(order: Order, tz: tzinfo = timezone.utc) -> date:
    """Calendar day of the order's creation as seen in the business time zone."""
    return order.created_at.astimezone(tz).date()


def summarize_revenue(
    orders: Iterable[Order],
    day: date | None = None,
    tz: tzinfo = timezone.utc,
) -> RevenueSummary:
    """
    Revenue of all non-cancelled orders, optionally restricted to one day.

    Days are counted in ``tz``, so a late-evening order in Manila belongs to
    the Manila date and not to the UTC one.
    """
    total = 0
    count = 0
    by_method: dict[str, int] = defaultdict(int)
    by_source: dict[str, int] = defaultdict(int)
    by_day: dict[str, int] = defaultdict(int)

    for order in orders:
        if order.status == OrderStatus.CANCELLED:
            continue
        order_day = business_day(order, tz)
        if day is not None and order_day != day:
            continue
        method = order.payment_method.value if order.payment_method else UNKNOWN_METHOD
        total += order.total_cents
        count += 1
        by_method[method] += order.total_cents
        by_source[order.source.value] += order.total_cents
        by_day[order_day.isoformat()] += order.total_cents

    return RevenueSummary(
        total_cents=total,
        order_count=count,
        by_method=dict(by_method),
        by_source=dict(by_source),
        by_day=dict(sorted(by_day.items())),
    )


def shift_handover(orders: Iterable[Order], day: date, tz: tzinfo = timezone.utc) -> ShiftReport:
    completed = [
        order
        for order in orders
        if order.status == OrderStatus.COMPLETED and business_day(order, tz) == day
    ]
    by_method: dict[str, int] = defaultdict(int)
    for order in completed:
        method = order.payment_method.value if order.payment_method else UNKNOWN_METHOD
        by_method[method] += order.total_cents

    return ShiftReport(
        day=day,
        total_cents=sum(order.total_cents for order in completed),
        order_count=len(completed),
        by_method=dict(by_method),
        order_ids=[order.id for order in completed],
    )


class FinanceService(DomainService):
    """Revenue summary and shift handover, counted in the business time zone."""

    def __init__(self, store, **collaborators):
        super().__init__(store, **collaborators)
        self._orders = OrderRepository(store)

    def summary(self, day: date | None = None) -> RevenueSummary:
        return summarize_revenue(self._orders.find_all(), day, self.settings.business_tz)

    def handover(self, day: date | None = None) -> ShiftReport:
        tz = self.settings.business_tz
        return shift_handover(self._orders.find_all(), day or self.now().astimezone(tz).date(), tz)
