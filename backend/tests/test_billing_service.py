"""
Tests for billing calculations.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pos_api.models import KTVRoom, KTVSession, OrderItem
from pos_api.services.domain.billing_service import (
    BillingService,
    bill_ktv_session,
    calculate_order_total,
)
from pos_shared.config.constants import KTVRoomStatus
from pos_shared.config.settings import Settings
from pos_shared.utils.exceptions import SessionNotActiveError
from pos_shared.utils.money import apply_rate, format_cents

START = datetime(2024, 5, 1, 20, 0, tzinfo=timezone.utc)


def _item(price_cents: int, quantity: int = 1, ref: str = "x") -> OrderItem:
    return OrderItem(reference_id=ref, name=ref, unit_price_cents=price_cents, quantity=quantity)


def _room_in_use(items: list[OrderItem] | None = None, rate_cents: int = 8_800) -> KTVRoom:
    return KTVRoom(
        id="VIP01",
        name="VIP 01",
        hourly_rate_cents=rate_cents,
        status=KTVRoomStatus.IN_USE,
        current_session=KTVSession(guest_name="Li Na", start_time=START, items=items or []),
    )


class TestOrderTotal:
    """Tests for flat order billing."""

    def test_applies_service_charge(self):
        """100.00 of items at 10% should total 110.00."""
        total = calculate_order_total([_item(10_000)], Decimal("0.10"))

        assert total == 11_000

    def test_zero_rate_is_plain_sum(self):
        """TAKEOUT 30 x1 + 20 x2 at rate 0 totals 70."""
        items = [_item(3_000, 1, "a"), _item(2_000, 2, "b")]

        assert calculate_order_total(items, Decimal("0")) == 7_000

    def test_rounds_half_up_to_the_cent(self):
        """0.05 at 10% is 0.055, rounded half-up to 0.06."""
        assert calculate_order_total([_item(5)], Decimal("0.10")) == 6

    def test_empty_items_total_zero(self):
        assert calculate_order_total([], Decimal("0.10")) == 0


class TestKTVBill:
    """Tests for KTV session billing."""

    def test_vip_checkout_example(self):
        """VIP01 at 88/h, beer 50 x2, 70 minutes: 176 + 100 = 276."""
        room = _room_in_use([_item(5_000, 2, "beer")])

        bill = bill_ktv_session(room, START + timedelta(minutes=70))

        assert bill.chargeable_hours == 2
        assert bill.room_fee_cents == 17_600
        assert bill.items_fee_cents == 10_000
        assert bill.service_charge_cents == 0
        assert bill.total_cents == 27_600
        assert format_cents(bill.total_cents, "₱") == "₱276.00"

    def test_same_inputs_same_bill(self):
        """Preview and checkout at the same instant must agree."""
        room = _room_in_use([_item(1_234, 3)])
        now = START + timedelta(minutes=95)

        assert bill_ktv_session(room, now) == bill_ktv_session(room, now)

    def test_short_session_bills_one_hour(self):
        room = _room_in_use()

        bill = bill_ktv_session(room, START + timedelta(minutes=5))

        assert bill.chargeable_hours == 1
        assert bill.total_cents == 8_800

    def test_room_without_session_rejected(self):
        room = KTVRoom(id="K1", name="K1", hourly_rate_cents=5_000)

        with pytest.raises(SessionNotActiveError):
            bill_ktv_session(room, START)

    def test_optional_service_charge(self):
        room = _room_in_use([_item(5_000, 2)])

        bill = bill_ktv_session(room, START + timedelta(minutes=70), service_charge_rate=Decimal("0.10"))

        assert bill.service_charge_cents == 2_760
        assert bill.total_cents == apply_rate(27_600, Decimal("0.10"))


class TestBillingService:
    """Policy binding from settings."""

    def test_ktv_service_charge_off_by_default(self):
        service = BillingService(Settings(_env_file=None))
        room = _room_in_use([_item(5_000, 2)])

        bill = service.ktv_bill(room, START + timedelta(minutes=70))

        assert service.ktv_service_charge_rate == Decimal("0")
        assert bill.total_cents == 27_600

    def test_ktv_service_charge_when_enabled(self):
        service = BillingService(Settings(_env_file=None, ktv_apply_service_charge=True))
        room = _room_in_use([_item(5_000, 2)])

        bill = service.ktv_bill(room, START + timedelta(minutes=70))

        assert bill.total_cents == 30_360

    def test_minimum_hours_from_settings(self):
        service = BillingService(Settings(_env_file=None, ktv_minimum_hours=2))

        bill = service.ktv_bill(_room_in_use(), START + timedelta(minutes=10))

        assert bill.chargeable_hours == 2

    def test_order_total_uses_configured_rate(self):
        service = BillingService(Settings(_env_file=None, service_charge_rate=Decimal("0.05")))

        assert service.order_total([_item(10_000)]) == 10_500
