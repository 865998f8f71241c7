"""
Domain Services - application layer.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (typed collection access)
        ↓
    CollectionStore

Usage:
    from pos_api.services.domain import OrderService, PaymentReconciler

    orders = OrderService(store, audit=sink, printer=printer)
    order = orders.create_from_menu("8201", OrderSource.ROOM_SERVICE, [("dish-1", 2)])
"""

from .base_service import DomainService, Clock
from .session_clock import utc_now, elapsed, chargeable_hours, format_duration
from .billing_service import BillingService, KTVBill, bill_ktv_session, calculate_order_total
from .order_state_machine import next_status, can_transition, allowed_events, transition
from .menu_service import MenuService, filter_menu, snapshot_item
from .order_service import OrderService
from .kitchen_queue import KitchenQueue, KitchenQueueProjector, KitchenService, KitchenTicket
from .payment_service import CheckoutResult, PaymentReconciler
from .ktv_service import KTVService, merge_session_item
from .hotel_service import HotelService
from .finance_service import FinanceService, RevenueSummary, ShiftReport, summarize_revenue, shift_handover

__all__ = [
    # Base
    "DomainService",
    "Clock",
    # Session clock
    "utc_now",
    "elapsed",
    "chargeable_hours",
    "format_duration",
    # Billing
    "BillingService",
    "KTVBill",
    "bill_ktv_session",
    "calculate_order_total",
    # State machine
    "next_status",
    "can_transition",
    "allowed_events",
    "transition",
    # Menu
    "MenuService",
    "filter_menu",
    "snapshot_item",
    # Orders
    "OrderService",
    # Kitchen
    "KitchenQueue",
    "KitchenQueueProjector",
    "KitchenService",
    "KitchenTicket",
    # Payments
    "CheckoutResult",
    "PaymentReconciler",
    # KTV
    "KTVService",
    "merge_session_item",
    # Hotel
    "HotelService",
    # Finance
    "FinanceService",
    "RevenueSummary",
    "ShiftReport",
    "summarize_revenue",
    "shift_handover",
]
