"""
Centralized constants for the POS engine.

Each concept (order status, order source, payment method, room status, menu
tag) has exactly one authoritative definition here; every service, schema
and router imports it from this module.

Usage:
    from pos_shared.config.constants import OrderStatus, OrderSource, ORDER_TRANSITIONS

    if order.status == OrderStatus.PENDING:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# Orders
# =============================================================================


class OrderStatus(str, Enum):
    """Order lifecycle status."""

    PENDING = "PENDING"      # Placed, waiting for the kitchen to accept
    COOKING = "COOKING"      # Accepted by the kitchen
    SERVED = "SERVED"        # Delivered to the table/room
    PAID = "PAID"            # Legacy: served and paid, not yet closed
    COMPLETED = "COMPLETED"  # Closed
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: Final[frozenset[OrderStatus]] = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED}
)

# Statuses whose items may still be edited
EDITABLE_STATUSES: Final[frozenset[OrderStatus]] = frozenset(
    {OrderStatus.PENDING, OrderStatus.COOKING}
)

# Statuses shown on the kitchen display
KITCHEN_VISIBLE_STATUSES: Final[frozenset[OrderStatus]] = frozenset(
    {OrderStatus.PENDING, OrderStatus.COOKING}
)


class OrderEvent(str, Enum):
    """Commands that move an order between statuses."""

    ACCEPT = "accept"
    SERVE = "serve"
    CANCEL = "cancel"
    PAY = "pay"
    COMPLETE = "complete"


class OrderSource(str, Enum):
    """Channel an order originated from. Determines post-payment routing."""

    DINE_IN = "DINE_IN"
    ROOM_SERVICE = "ROOM_SERVICE"
    KTV = "KTV"
    TAKEOUT = "TAKEOUT"
    SUPERMARKET = "SUPERMARKET"


# Sources where payment is the final act (no separate close-out step)
COMPLETES_ON_PAYMENT: Final[frozenset[OrderSource]] = frozenset({OrderSource.TAKEOUT})

# Sources billed without the store service charge
SERVICE_CHARGE_EXEMPT_SOURCES: Final[frozenset[OrderSource]] = frozenset({OrderSource.SUPERMARKET})


class PaymentMethod(str, Enum):
    """Accepted payment methods."""

    CASH = "CASH"
    WECHAT = "WECHAT"
    ALIPAY = "ALIPAY"
    USDT = "USDT"
    GCASH = "GCASH"
    MAYA = "MAYA"
    UNIONPAY = "UNIONPAY"
    CREDIT_CARD = "CREDIT_CARD"
    SIGN_BILL = "SIGN_BILL"


class TableIdentifier:
    """Well-known table identifiers for sources without a physical room."""

    LOBBY: Final[str] = "LOBBY"
    RETAIL: Final[str] = "RETAIL"
    TAKEOUT: Final[str] = "TAKEOUT"


# =============================================================================
# Status Transitions
# =============================================================================

# (from_status, event) -> to_status
# PAY keeps the order SERVED here; the payment reconciler routes TAKEOUT
# straight to COMPLETED.
ORDER_TRANSITIONS: Final[dict[tuple[OrderStatus, OrderEvent], OrderStatus]] = {
    (OrderStatus.PENDING, OrderEvent.ACCEPT): OrderStatus.COOKING,
    (OrderStatus.PENDING, OrderEvent.CANCEL): OrderStatus.CANCELLED,
    (OrderStatus.COOKING, OrderEvent.CANCEL): OrderStatus.CANCELLED,
    (OrderStatus.COOKING, OrderEvent.SERVE): OrderStatus.SERVED,
    (OrderStatus.SERVED, OrderEvent.PAY): OrderStatus.SERVED,
    (OrderStatus.SERVED, OrderEvent.COMPLETE): OrderStatus.COMPLETED,
    (OrderStatus.PAID, OrderEvent.COMPLETE): OrderStatus.COMPLETED,
}


def get_allowed_events(current_status: OrderStatus) -> list[OrderEvent]:
    """Events that are legal from the given status, in declaration order."""
    return [event for (status, event) in ORDER_TRANSITIONS if status == current_status]


# =============================================================================
# Rooms
# =============================================================================


class KTVRoomStatus(str, Enum):
    """KTV room status."""

    AVAILABLE = "Available"
    IN_USE = "InUse"
    CLEANING = "Cleaning"
    MAINTENANCE = "Maintenance"


class KTVRoomType(str, Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    VIP = "VIP"


class HotelRoomStatus(str, Enum):
    """Hotel room occupancy. Independent of room-service orders."""

    VACANT = "Vacant"
    OCCUPIED = "Occupied"


# =============================================================================
# Menu
# =============================================================================


class MenuTag(str, Enum):
    """Explicit capability tags on menu items."""

    FOOD = "FOOD"
    DRINK = "DRINK"
    COLD_DISH = "COLD_DISH"
    SIGNATURE = "SIGNATURE"
    RETAIL = "RETAIL"
    KTV_SERVABLE = "KTV_SERVABLE"


# =============================================================================
# Store Collections
# =============================================================================


class Collections:
    """Collection names in the key/value collection store."""

    ORDERS: Final[str] = "orders"
    KTV_ROOMS: Final[str] = "ktv_rooms"
    HOTEL_ROOMS: Final[str] = "hotel_rooms"
    MENU_ITEMS: Final[str] = "menu_items"
    PAYMENT_RECORDS: Final[str] = "payment_records"
    AUDIT_LOGS: Final[str] = "audit_logs"


# =============================================================================
# Audit Actions
# =============================================================================


class AuditAction:
    """Action names emitted to the audit sink."""

    ORDER_CREATED: Final[str] = "ORDER_CREATED"
    ORDER_CANCELLED: Final[str] = "ORDER_CANCELLED"
    ORDER_PAID: Final[str] = "ORDER_PAID"
    ORDER_COMPLETED: Final[str] = "ORDER_COMPLETED"
    KTV_OPENED: Final[str] = "KTV_OPENED"
    KTV_CHECKOUT: Final[str] = "KTV_CHECKOUT"
    KTV_CLEANED: Final[str] = "KTV_CLEANED"


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 999

    MIN_PRICE_CENTS: Final[int] = 0
    MAX_PRICE_CENTS: Final[int] = 100_000_00

    MAX_NAME_LENGTH: Final[int] = 200
    MAX_NOTES_LENGTH: Final[int] = 500
