"""
Tests for PaymentReconciler: pay, complete, KTV checkout and retail sales.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from pos_api.repositories import (
    get_ktv_room_repository,
    get_order_repository,
    get_payment_record_repository,
)
from pos_api.services.domain import FinanceService, KTVService, OrderService, PaymentReconciler, snapshot_item
from pos_shared.config.constants import (
    AuditAction,
    Collections,
    KTVRoomStatus,
    OrderSource,
    OrderStatus,
    PaymentMethod,
)
from pos_shared.infrastructure.store import CollectionStore
from pos_shared.utils.exceptions import (
    AlreadyPaidError,
    EmptyOrderError,
    InvalidTransitionError,
    NotReadyForPaymentError,
    PersistenceFailureError,
    SessionNotActiveError,
)


@pytest.fixture
def orders(store, collaborators):
    return OrderService(store, **collaborators)


@pytest.fixture
def reconciler(store, collaborators):
    return PaymentReconciler(store, **collaborators)


def _served(orders: OrderService, source: OrderSource, lines, rate=None, table="LOBBY"):
    order = orders.create_from_menu(table, source, lines, service_charge_rate=rate)
    orders.accept(order.id)
    return orders.serve(order.id)


class FailingStore(CollectionStore):
    """Delegates to a real store but fails writes to chosen collections."""

    def __init__(self, inner: CollectionStore, fail_create: set[str] = frozenset(), fail_update: set[str] = frozenset()):
        self.inner = inner
        self.fail_create = fail_create
        self.fail_update = fail_update

    def create(self, collection, record):
        if collection in self.fail_create:
            raise PersistenceFailureError("create", collection)
        return self.inner.create(collection, record)

    def update(self, collection, record_id, partial, expected_version=None):
        if collection in self.fail_update:
            raise PersistenceFailureError("update", collection)
        return self.inner.update(collection, record_id, partial, expected_version)

    def delete(self, collection, record_id):
        return self.inner.delete(collection, record_id)

    def list(self, collection):
        return self.inner.list(collection)


class TestPay:
    """Tests for recording payment."""

    def test_takeout_completes_on_payment(self, orders, reconciler, menu, printer):
        """30 x1 + 20 x2 at rate 0 totals 70; paying CASH completes it."""
        served = _served(orders, OrderSource.TAKEOUT, [("dish-rice", 1), ("dish-soup", 2)], Decimal("0"), "TAKEOUT")
        assert served.total_cents == 7_000

        paid = reconciler.pay(served.id, PaymentMethod.CASH)

        assert paid.status == OrderStatus.COMPLETED
        assert paid.payment_method == PaymentMethod.CASH
        assert paid.completed_at is not None
        assert printer.order_ids == [paid.id]

    def test_dine_in_stays_served_until_complete(self, orders, reconciler, menu, audit_sink):
        served = _served(orders, OrderSource.DINE_IN, [("dish-rice", 1)])

        paid = reconciler.pay(served.id, PaymentMethod.CASH)
        completed = reconciler.complete(served.id)

        assert paid.status == OrderStatus.SERVED
        assert paid.paid_at is not None
        assert completed.status == OrderStatus.COMPLETED
        assert audit_sink.actions[-2:] == [AuditAction.ORDER_PAID, AuditAction.ORDER_COMPLETED]

    def test_second_payment_rejected(self, orders, reconciler, menu, printer):
        served = _served(orders, OrderSource.DINE_IN, [("dish-rice", 1)])
        reconciler.pay(served.id, PaymentMethod.CASH)

        with pytest.raises(AlreadyPaidError):
            reconciler.pay(served.id, PaymentMethod.GCASH)

        assert orders.get_order(served.id).payment_method == PaymentMethod.CASH
        assert len(printer.printed) == 1

    def test_pay_before_served_rejected(self, orders, reconciler, menu, printer):
        order = orders.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])

        with pytest.raises(NotReadyForPaymentError):
            reconciler.pay(order.id, PaymentMethod.CASH)

        assert orders.get_order(order.id).payment_method is None
        assert printer.printed == []

    def test_pay_cancelled_rejected(self, orders, reconciler, menu):
        order = orders.create_from_menu("LOBBY", OrderSource.DINE_IN, [("dish-rice", 1)])
        orders.cancel(order.id)

        with pytest.raises(NotReadyForPaymentError):
            reconciler.pay(order.id, PaymentMethod.CASH)

    def test_failed_write_prints_nothing(self, store, collaborators, orders, menu, printer):
        served = _served(orders, OrderSource.DINE_IN, [("dish-rice", 1)])
        failing = PaymentReconciler(FailingStore(store, fail_update={Collections.ORDERS}), **collaborators)

        with pytest.raises(PersistenceFailureError):
            failing.pay(served.id, PaymentMethod.CASH)

        assert printer.printed == []
        assert orders.get_order(served.id).payment_method is None

    def test_printer_failure_does_not_undo_payment(self, store, collaborators, orders, menu):
        def broken_printer(order):
            raise RuntimeError("paper jam")

        served = _served(orders, OrderSource.DINE_IN, [("dish-rice", 1)])
        reconciler = PaymentReconciler(store, **{**collaborators, "printer": broken_printer})

        paid = reconciler.pay(served.id, PaymentMethod.WECHAT)

        assert paid.payment_method == PaymentMethod.WECHAT


class TestComplete:
    def test_unpaid_served_cannot_complete(self, orders, reconciler, menu):
        served = _served(orders, OrderSource.DINE_IN, [("dish-rice", 1)])

        with pytest.raises(InvalidTransitionError):
            reconciler.complete(served.id)

        assert orders.get_order(served.id).status == OrderStatus.SERVED

    def test_completed_order_is_terminal(self, orders, reconciler, menu):
        served = _served(orders, OrderSource.DINE_IN, [("dish-rice", 1)])
        reconciler.pay(served.id, PaymentMethod.CASH)
        reconciler.complete(served.id)

        with pytest.raises(InvalidTransitionError):
            reconciler.complete(served.id)
        with pytest.raises(InvalidTransitionError):
            orders.cancel(served.id)


class TestKTVCheckout:
    """Tests for KTV checkout ordering and amounts."""

    @pytest.fixture
    def ktv(self, store, collaborators):
        return KTVService(store, **collaborators)

    def test_vip_checkout(self, store, ktv, reconciler, ktv_room, menu, clock, printer):
        """VIP01 at 88/h with beer 50 x2, checkout after 70 minutes: 276.00."""
        ktv.open_session("VIP01", "Li Na")
        ktv.add_session_item("VIP01", "drink-beer", 2)
        clock.advance(minutes=70)

        result = reconciler.confirm_checkout("VIP01", PaymentMethod.CASH)

        assert result.bill.total_cents == 27_600
        assert result.payment_record.total_cents == 27_600
        assert result.payment_record.room_fee_cents == 17_600
        assert result.order.source == OrderSource.KTV
        assert result.order.status == OrderStatus.COMPLETED
        assert result.order.total_cents == 27_600
        assert result.order.expected_total_cents() == 27_600
        assert result.room.status == KTVRoomStatus.CLEANING
        assert result.room.current_session is None
        assert printer.order_ids == [result.order.id]
        assert result.payment_record.order_id == result.order.id

        assert get_payment_record_repository(store).find_by_room("VIP01") == [result.payment_record]
        assert get_order_repository(store).get(result.order.id).payment_method == PaymentMethod.CASH

    def test_preview_matches_checkout(self, ktv, reconciler, ktv_room, menu, clock):
        ktv.open_session("VIP01", "Li Na")
        ktv.add_session_item("VIP01", "drink-beer", 1)
        now = clock.advance(minutes=61)

        preview = ktv.preview_bill("VIP01", now)
        result = reconciler.confirm_checkout("VIP01", PaymentMethod.ALIPAY, now)

        assert preview == result.bill

    def test_checkout_without_session_rejected(self, reconciler, ktv_room):
        with pytest.raises(SessionNotActiveError):
            reconciler.confirm_checkout("VIP01", PaymentMethod.CASH)

    @pytest.mark.parametrize("failing_collection", [Collections.PAYMENT_RECORDS, Collections.ORDERS])
    def test_write_failure_keeps_session(self, store, collaborators, ktv, ktv_room, menu, clock, failing_collection):
        """A failed record write must leave the room InUse with its session."""
        ktv.open_session("VIP01", "Li Na")
        ktv.add_session_item("VIP01", "drink-beer", 2)
        clock.advance(minutes=70)
        failing = PaymentReconciler(FailingStore(store, fail_create={failing_collection}), **collaborators)

        with pytest.raises(PersistenceFailureError):
            failing.confirm_checkout("VIP01", PaymentMethod.CASH)

        room = get_ktv_room_repository(store).get("VIP01")
        assert room.status == KTVRoomStatus.IN_USE
        assert room.current_session is not None
        assert room.current_session.items_fee_cents == 10_000

    def test_room_write_failure_after_records(self, store, collaborators, ktv, ktv_room, clock):
        """Records are durable before the room is released; a failed release leaves the session."""
        ktv.open_session("VIP01", "Li Na")
        clock.advance(minutes=30)
        failing = PaymentReconciler(FailingStore(store, fail_update={Collections.KTV_ROOMS}), **collaborators)

        with pytest.raises(PersistenceFailureError):
            failing.confirm_checkout("VIP01", PaymentMethod.CASH)

        assert len(get_payment_record_repository(store).find_all()) == 1
        assert get_ktv_room_repository(store).get("VIP01").has_active_session

    def test_retry_after_room_write_failure(self, store, collaborators, ktv, reconciler, ktv_room, clock):
        """Retrying an interrupted checkout reuses its records and its checkout time."""
        ktv.open_session("VIP01", "Li Na")
        first_attempt = clock.advance(minutes=70)
        failing = PaymentReconciler(FailingStore(store, fail_update={Collections.KTV_ROOMS}), **collaborators)
        with pytest.raises(PersistenceFailureError):
            failing.confirm_checkout("VIP01", PaymentMethod.CASH)
        clock.advance(minutes=60)

        result = reconciler.confirm_checkout("VIP01", PaymentMethod.CASH)

        assert result.bill.billed_at == first_attempt
        assert result.bill.total_cents == 17_600
        assert result.payment_record.order_id == result.order.id
        assert result.room.status == KTVRoomStatus.CLEANING
        assert len(get_payment_record_repository(store).find_all()) == 1
        assert len(get_order_repository(store).find_by_source(OrderSource.KTV)) == 1
        assert FinanceService(store, **collaborators).summary().by_source == {"KTV": 17_600}

    def test_retry_picks_up_new_items_and_method(self, store, collaborators, ktv, reconciler, ktv_room, menu, clock):
        ktv.open_session("VIP01", "Li Na")
        clock.advance(minutes=70)
        failing = PaymentReconciler(FailingStore(store, fail_update={Collections.KTV_ROOMS}), **collaborators)
        with pytest.raises(PersistenceFailureError):
            failing.confirm_checkout("VIP01", PaymentMethod.CASH)
        ktv.add_session_item("VIP01", "drink-beer", 1)

        result = reconciler.confirm_checkout("VIP01", PaymentMethod.GCASH)

        assert result.order.total_cents == 22_600
        assert get_order_repository(store).get(result.order.id).payment_method == PaymentMethod.GCASH
        assert get_payment_record_repository(store).find_by_room("VIP01") == [result.payment_record]
        assert result.payment_record.total_cents == 22_600


class TestRetailSale:
    def test_completed_supermarket_order(self, reconciler, menu, printer, audit_sink):
        order = reconciler.retail_sale([snapshot_item(menu["water"], 2)], PaymentMethod.GCASH)

        assert order.source == OrderSource.SUPERMARKET
        assert order.table_identifier == "RETAIL"
        assert order.status == OrderStatus.COMPLETED
        assert order.service_charge_rate == Decimal("0")
        assert order.total_cents == 3_000
        assert printer.order_ids == [order.id]
        assert AuditAction.ORDER_COMPLETED in audit_sink.actions

    def test_empty_sale_rejected(self, reconciler):
        with pytest.raises(EmptyOrderError):
            reconciler.retail_sale([], PaymentMethod.CASH)
