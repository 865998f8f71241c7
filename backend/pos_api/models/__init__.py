"""
Models Package.

- base: SQLAlchemy Base, TimestampMixin, and the Pydantic Document base
- record: CollectionRecord (the single table behind the collection store)
- order: Order, OrderItem
- ktv: KTVRoom, KTVSession
- hotel: HotelRoom
- menu: MenuItem
- payment: PaymentRecord
"""

from .base import Base, TimestampMixin, Document
from .record import CollectionRecord
from .order import Order, OrderItem, new_order_id
from .ktv import KTVRoom, KTVSession
from .hotel import HotelRoom
from .menu import MenuItem
from .payment import PaymentRecord, session_checkout_ids

__all__ = [
    "Base",
    "TimestampMixin",
    "Document",
    "CollectionRecord",
    "Order",
    "OrderItem",
    "new_order_id",
    "KTVRoom",
    "KTVSession",
    "HotelRoom",
    "MenuItem",
    "PaymentRecord",
    "session_checkout_ids",
]
