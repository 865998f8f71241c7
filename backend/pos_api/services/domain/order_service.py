"""
Order Domain Service.

Creation, item editing and the kitchen-side transitions (accept, serve,
cancel). Payment and close-out live in the payment reconciler.

Every mutation derives a new Order, writes it with the version it was read
at, and only returns or audits once the store confirmed the write.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from pos_api.models import Order, OrderItem, new_order_id
from pos_api.repositories import OrderRepository
from pos_shared.config.constants import (
    EDITABLE_STATUSES,
    SERVICE_CHARGE_EXEMPT_SOURCES,
    AuditAction,
    OrderEvent,
    OrderSource,
    OrderStatus,
)
from pos_shared.config.logging import orders_logger as logger
from pos_shared.utils.exceptions import EmptyOrderError, InvalidTransitionError, ValidationError

from .base_service import DomainService
from .billing_service import calculate_order_total
from .menu_service import MenuService
from .order_state_machine import transition


class OrderService(DomainService):
    """Domain service for order lifecycle up to serving."""

    def __init__(self, store, **collaborators):
        super().__init__(store, **collaborators)
        self._orders = OrderRepository(store)
        self._menu = MenuService(store, **collaborators)

    @property
    def orders(self) -> OrderRepository:
        return self._orders

    # =========================================================================
    # Reads
    # =========================================================================

    def get_order(self, order_id: str) -> Order:
        return self._orders.get(order_id)

    def list_orders(
        self,
        status: OrderStatus | None = None,
        source: OrderSource | None = None,
        table_identifier: str | None = None,
    ) -> list[Order]:
        orders = self._orders.find_all()
        if status is not None:
            orders = [o for o in orders if o.status == status]
        if source is not None:
            orders = [o for o in orders if o.source == source]
        if table_identifier is not None:
            orders = [o for o in orders if o.table_identifier == table_identifier]
        return orders

    # =========================================================================
    # Creation and items
    # =========================================================================

    def default_rate_for(self, source: OrderSource) -> Decimal:
        if source in SERVICE_CHARGE_EXEMPT_SOURCES:
            return Decimal("0")
        return self.settings.service_charge_rate

    def create_order(
        self,
        table_identifier: str,
        source: OrderSource,
        items: Sequence[OrderItem],
        *,
        notes: str | None = None,
        service_charge_rate: Decimal | None = None,
    ) -> Order:
        """
        Create a PENDING order.

        The service-charge rate is frozen into the order so the total can be
        re-derived identically later, whatever the configuration becomes.

        Raises:
            EmptyOrderError: no items
            ValidationError: blank table identifier or negative rate
        """
        if not items:
            raise EmptyOrderError(table_identifier=table_identifier, source=source.value)
        if not table_identifier or not table_identifier.strip():
            raise ValidationError("Table identifier is required", field="table_identifier")

        rate = self.default_rate_for(source) if service_charge_rate is None else Decimal(service_charge_rate)
        if rate < 0:
            raise ValidationError("Service charge rate cannot be negative", value=str(rate))

        order = Order(
            id=new_order_id(),
            table_identifier=table_identifier.strip(),
            source=source,
            items=list(items),
            status=OrderStatus.PENDING,
            service_charge_rate=rate,
            total_cents=calculate_order_total(items, rate),
            notes=notes,
            created_at=self.now(),
        )
        created = self._orders.add(order)

        logger.info(
            "Order created",
            order_id=created.id,
            source=created.source.value,
            table=created.table_identifier,
            total_cents=created.total_cents,
        )
        self.audit(
            AuditAction.ORDER_CREATED,
            order_id=created.id,
            source=created.source.value,
            table=created.table_identifier,
            total_cents=created.total_cents,
        )
        return created

    def create_from_menu(
        self,
        table_identifier: str,
        source: OrderSource,
        lines: Iterable[tuple[str, int]],
        *,
        notes: str | None = None,
        service_charge_rate: Decimal | None = None,
    ) -> Order:
        """Create an order from ``(menu_item_id, quantity)`` lines."""
        items = self._menu.snapshot_lines(lines)
        return self.create_order(
            table_identifier,
            source,
            items,
            notes=notes,
            service_charge_rate=service_charge_rate,
        )

    def add_items(self, order_id: str, items: Sequence[OrderItem]) -> Order:
        """
        Append lines to an order that the kitchen has not finished.

        Raises:
            InvalidTransitionError: order is not PENDING or COOKING
        """
        order = self._orders.get(order_id)
        if order.status not in EDITABLE_STATUSES:
            raise InvalidTransitionError("Order", order.status, "add_items", order_id=order.id)
        if not items:
            return order

        new_items = [*order.items, *items]
        updated = order.model_copy(
            update={
                "items": new_items,
                "total_cents": calculate_order_total(new_items, order.service_charge_rate),
            }
        )
        saved = self._orders.save(updated)
        logger.info(
            "Order items added",
            order_id=saved.id,
            added=len(items),
            total_cents=saved.total_cents,
        )
        return saved

    def add_menu_items(self, order_id: str, lines: Iterable[tuple[str, int]]) -> Order:
        return self.add_items(order_id, self._menu.snapshot_lines(lines))

    # =========================================================================
    # Kitchen transitions
    # =========================================================================

    def _apply(self, order_id: str, event: OrderEvent) -> Order:
        order = self._orders.get(order_id)
        saved = self._orders.save(transition(order, event, self.now()))
        logger.info(
            "Order status changed",
            order_id=saved.id,
            event=event.value,
            old_status=order.status.value,
            new_status=saved.status.value,
        )
        return saved

    def accept(self, order_id: str) -> Order:
        return self._apply(order_id, OrderEvent.ACCEPT)

    def serve(self, order_id: str) -> Order:
        return self._apply(order_id, OrderEvent.SERVE)

    def cancel(self, order_id: str, reason: str | None = None) -> Order:
        saved = self._apply(order_id, OrderEvent.CANCEL)
        self.audit(
            AuditAction.ORDER_CANCELLED,
            level="warning",
            order_id=saved.id,
            total_cents=saved.total_cents,
            reason=reason,
        )
        return saved
