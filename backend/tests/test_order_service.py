"""
Tests for OrderService domain service.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from pos_api.models import OrderItem
from pos_api.services.domain import OrderService
from pos_shared.config.constants import AuditAction, OrderSource, OrderStatus
from pos_shared.utils.exceptions import (
    EmptyOrderError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
def service(store, collaborators):
    return OrderService(store, **collaborators)


class TestCreateOrder:
    """Tests for order creation."""

    def test_creates_pending_order_with_frozen_rate(self, service, menu, clock):
        order = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 2), ("dish-soup", 1)])

        assert order.id.startswith("ORD-")
        assert order.status == OrderStatus.PENDING
        assert order.service_charge_rate == Decimal("0.10")
        assert order.total_cents == 8_800
        assert order.created_at == clock.current
        assert order.version == 1

    def test_items_are_snapshots(self, service, menu):
        order = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])

        assert order.items == [
            OrderItem(reference_id="dish-rice", name="Fried Rice", unit_price_cents=3_000, quantity=1)
        ]

    def test_empty_order_rejected(self, service, store):
        with pytest.raises(EmptyOrderError):
            service.create_order("LOBBY", OrderSource.DINE_IN, [])

        assert service.list_orders() == []

    def test_unknown_menu_item_rejected(self, service, menu):
        with pytest.raises(NotFoundError):
            service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("no-such-dish", 1)])

    def test_quantity_below_one_rejected(self, service, menu):
        with pytest.raises(ValidationError):
            service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 0)])

    def test_supermarket_is_exempt_from_service_charge(self, service, menu):
        order = service.create_from_menu("RETAIL", OrderSource.SUPERMARKET, [("retail-water", 2)])

        assert order.service_charge_rate == Decimal("0")
        assert order.total_cents == 3_000

    def test_explicit_rate_overrides_default(self, service, menu):
        order = service.create_from_menu(
            "TAKEOUT",
            OrderSource.TAKEOUT,
            [("dish-rice", 1), ("dish-soup", 2)],
            service_charge_rate=Decimal("0"),
        )

        assert order.total_cents == 7_000

    def test_creation_is_audited(self, service, menu, audit_sink):
        order = service.create_from_menu("8201", OrderSource.ROOM_SERVICE, [("dish-rice", 1)])

        level, action, details = audit_sink.entries[-1]
        assert action == AuditAction.ORDER_CREATED
        assert details["order_id"] == order.id

    def test_rate_change_does_not_touch_existing_orders(self, store, collaborators, menu):
        """The rate is frozen at creation: a new configuration only affects new orders."""
        first = OrderService(store, **collaborators).create_from_menu(
            "LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)]
        )
        changed = collaborators["settings"].model_copy(update={"service_charge_rate": Decimal("0.20")})
        service = OrderService(store, **{**collaborators, "settings": changed})

        reloaded = service.add_menu_items(first.id, [("dish-soup", 1)])

        assert reloaded.service_charge_rate == Decimal("0.10")
        assert reloaded.total_cents == 5_500


class TestAddItems:
    def test_recomputes_total(self, service, menu):
        order = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])

        updated = service.add_menu_items(order.id, [("dish-soup", 1)])

        assert len(updated.items) == 2
        assert updated.total_cents == 5_500
        assert updated.version == order.version + 1

    def test_allowed_while_cooking(self, service, menu):
        order = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])
        service.accept(order.id)

        updated = service.add_menu_items(order.id, [("dish-rice", 1)])

        assert updated.status == OrderStatus.COOKING
        assert updated.item_count == 2

    def test_rejected_once_served(self, service, menu):
        order = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])
        service.accept(order.id)
        service.serve(order.id)

        with pytest.raises(InvalidTransitionError):
            service.add_menu_items(order.id, [("dish-soup", 1)])

        assert service.get_order(order.id).total_cents == order.total_cents


class TestKitchenTransitions:
    def test_accept_then_serve(self, service, menu):
        order = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])

        cooking = service.accept(order.id)
        served = service.serve(order.id)

        assert cooking.status == OrderStatus.COOKING
        assert served.status == OrderStatus.SERVED
        assert service.get_order(order.id).status == OrderStatus.SERVED

    def test_cancel_pending(self, service, menu, clock, audit_sink):
        order = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])
        clock.advance(minutes=3)

        cancelled = service.cancel(order.id, reason="guest left")

        assert cancelled.status == OrderStatus.CANCELLED
        assert cancelled.cancelled_at == clock.current
        assert audit_sink.actions[-1] == AuditAction.ORDER_CANCELLED
        assert audit_sink.entries[-1][0] == "warning"

    def test_cancel_served_leaves_order_unchanged(self, service, menu):
        order = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])
        service.accept(order.id)
        served = service.serve(order.id)

        with pytest.raises(InvalidTransitionError):
            service.cancel(order.id)

        assert service.get_order(order.id) == served

    def test_unknown_order(self, service):
        with pytest.raises(NotFoundError):
            service.accept("ORD-MISSING")


class TestListOrders:
    def test_filters(self, service, menu, clock):
        dine_in = service.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])
        clock.advance(minutes=1)
        room = service.create_from_menu("8201", OrderSource.ROOM_SERVICE, [("dish-soup", 1)])
        service.accept(room.id)

        assert [o.id for o in service.list_orders(status=OrderStatus.PENDING)] == [dine_in.id]
        assert [o.id for o in service.list_orders(source=OrderSource.ROOM_SERVICE)] == [room.id]
        assert [o.id for o in service.list_orders(table_identifier="LOBBY")] == [dine_in.id]
        assert clock.current - dine_in.created_at == timedelta(minutes=1)
